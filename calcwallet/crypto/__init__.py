"""calcwallet cryptographic primitives and key custody"""

from calcwallet.crypto.encoding import (
    B58_ALPHABET,
    b58encode,
    b58decode,
    b64encode,
    encode_shortvec,
    decode_shortvec,
)
from calcwallet.crypto.secure import SecretBuffer, secure_zero
from calcwallet.crypto.provider import CryptoProvider, PBKDF2_ITERATIONS
from calcwallet.crypto.custody import KeyCustody, KeyPair
