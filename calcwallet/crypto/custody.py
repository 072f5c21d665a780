"""
Key custody: generate a keypair, seal its private key under a password into a
fixed 125-byte blob, and unseal it again for a single signing operation.

Blob layout: version(1) | salt(16) | nonce(12) | ciphertext(64) | mac(32)
"""

import logging
from typing import Optional

from calcwallet.errors import CryptoError, InvalidArgument
from calcwallet.crypto.provider import CryptoProvider
from calcwallet.crypto.secure import SecretBuffer
from calcwallet.hardware.constants import (
    BLOB_VERSION, BLOB_LEN, SALT_LEN, NONCE_LEN, PRIVATE_KEY_LEN, SEED_LEN,
)

logger = logging.getLogger(__name__)

_SALT_END = 1 + SALT_LEN
_NONCE_END = _SALT_END + NONCE_LEN


class KeyPair:
    """A freshly generated keypair; the private half is wiped on exit"""

    __slots__ = ("public_key", "private_key")

    def __init__(self, public_key: bytes, private_key: SecretBuffer):
        self.public_key = public_key
        self.private_key = private_key

    def wipe(self):
        self.private_key.wipe()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.wipe()
        return False


class KeyCustody:
    """Seal/unseal contract around a CryptoProvider"""

    def __init__(self, provider: Optional[CryptoProvider] = None):
        self.provider = provider or CryptoProvider()

    def generate_keypair(self) -> KeyPair:
        with SecretBuffer(self.provider.random_bytes(SEED_LEN)) as seed:
            public_key, private_key = self.provider.generate_keypair(seed.data)
        logger.debug("Generated keypair")
        return KeyPair(public_key, private_key)

    def seal(self, password: str, private_key) -> bytes:
        """Encrypt a 64-byte private key into a 125-byte blob"""
        if len(private_key) != PRIVATE_KEY_LEN:
            raise InvalidArgument("Private key must be 64 bytes")
        if not password:
            raise CryptoError("Password cannot be empty")

        salt = bytes(self.provider.random_bytes(SALT_LEN))
        nonce = bytes(self.provider.random_bytes(NONCE_LEN))
        with self.provider.derive_key(password, salt) as master:
            sealed = self.provider.authenticated_encrypt(master, nonce, private_key)

        blob = bytes([BLOB_VERSION]) + salt + nonce + sealed
        if len(blob) != BLOB_LEN:
            raise CryptoError()
        return blob

    def unseal(self, password: str, blob: bytes) -> SecretBuffer:
        """
        Decrypt a blob. The caller owns the returned buffer and must wipe it
        (use it as a context manager).

        Wrong password and tampered blob raise the same CryptoError.
        """
        if not password or len(blob) != BLOB_LEN or blob[0] != BLOB_VERSION:
            raise CryptoError()

        salt = bytes(blob[1:_SALT_END])
        nonce = bytes(blob[_SALT_END:_NONCE_END])
        with self.provider.derive_key(password, salt) as master:
            return self.provider.authenticated_decrypt(master, nonce, bytes(blob[_NONCE_END:]))
