"""
Solana address helpers: base58 public keys.
"""

from calcwallet.crypto.encoding import b58encode, b58decode
from calcwallet.errors import ValidationError
from calcwallet.hardware.constants import PUBLIC_KEY_LEN


def encode_public_key(public_key: bytes) -> str:
    return b58encode(public_key)


def decode_public_key(text: str) -> bytes:
    """Decode a base58 address to exactly 32 bytes"""
    try:
        raw = b58decode(text.strip())
    except ValidationError:
        raise ValidationError("Invalid base58 public key")
    if len(raw) != PUBLIC_KEY_LEN:
        raise ValidationError("Invalid base58 public key")
    return raw
