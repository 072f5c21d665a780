"""
CryptoProvider - randomness, password KDF, authenticated cipher and Ed25519.

The sealing cipher is encrypt-then-MAC over HMAC-SHA512:

    master    = PBKDF2-HMAC-SHA512(password, salt, iterations, 64)
    keystream = HMAC-SHA512(master, "ENC" | nonce)[:64]
    mac_key   = HMAC-SHA512(master, "MAC" | nonce)
    tag       = HMAC-SHA512(mac_key, nonce | ciphertext)[:32]

Ed25519 private keys are 64 bytes: seed(32) | public key(32).
"""

import hmac as _hmac
import secrets
from typing import Tuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac, serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from calcwallet.errors import CryptoError
from calcwallet.crypto.secure import SecretBuffer, secure_zero
from calcwallet.hardware.constants import (
    PUBLIC_KEY_LEN, PRIVATE_KEY_LEN, SEED_LEN, MAC_LEN,
)

PBKDF2_ITERATIONS = 200000
MASTER_KEY_LEN = 64


def _hmac_sha512(key, data) -> bytes:
    h = hmac.HMAC(bytes(key), hashes.SHA512())
    h.update(bytes(data))
    return h.finalize()


class CryptoProvider:
    """Cryptographic primitives backed by the ``cryptography`` package"""

    def __init__(self, iterations: int = PBKDF2_ITERATIONS):
        self.iterations = iterations

    def random_bytes(self, length: int) -> bytearray:
        try:
            return bytearray(secrets.token_bytes(length))
        except (OSError, NotImplementedError) as e:
            raise CryptoError(f"Random source failed: {type(e).__name__}")

    def derive_key(self, password: str, salt: bytes) -> SecretBuffer:
        """Stretch a password into a 64-byte master key"""
        try:
            kdf = PBKDF2HMAC(
                algorithm=hashes.SHA512(),
                length=MASTER_KEY_LEN,
                salt=bytes(salt),
                iterations=self.iterations,
            )
            return SecretBuffer(kdf.derive(password.encode('utf-8')))
        except (TypeError, ValueError, UnicodeError):
            raise CryptoError()

    def _stream_key(self, master: SecretBuffer, nonce: bytes, label: bytes, length: int) -> SecretBuffer:
        return SecretBuffer(_hmac_sha512(master.data, label + bytes(nonce))[:length])

    def authenticated_encrypt(self, master: SecretBuffer, nonce: bytes, plaintext) -> bytes:
        """Returns ciphertext | tag"""
        with self._stream_key(master, nonce, b"ENC", len(plaintext)) as keystream:
            ciphertext = bytes(p ^ k for p, k in zip(plaintext, keystream.data))
        with self._stream_key(master, nonce, b"MAC", MASTER_KEY_LEN) as mac_key:
            tag = _hmac_sha512(mac_key.data, bytes(nonce) + ciphertext)[:MAC_LEN]
        return ciphertext + tag

    def authenticated_decrypt(self, master: SecretBuffer, nonce: bytes, data: bytes) -> SecretBuffer:
        """Verify the trailing tag, then decrypt. Any mismatch is a CryptoError."""
        if len(data) < MAC_LEN:
            raise CryptoError()
        ciphertext, tag = bytes(data[:-MAC_LEN]), bytes(data[-MAC_LEN:])
        with self._stream_key(master, nonce, b"MAC", MASTER_KEY_LEN) as mac_key:
            expected = _hmac_sha512(mac_key.data, bytes(nonce) + ciphertext)[:MAC_LEN]
        if not _hmac.compare_digest(expected, tag):
            raise CryptoError()
        plaintext = SecretBuffer(len(ciphertext))
        with self._stream_key(master, nonce, b"ENC", len(ciphertext)) as keystream:
            for i, (c, k) in enumerate(zip(ciphertext, keystream.data)):
                plaintext.data[i] = c ^ k
        return plaintext

    def generate_keypair(self, seed) -> Tuple[bytes, SecretBuffer]:
        """Derive (public key, private key) from a 32-byte seed"""
        if len(seed) != SEED_LEN:
            raise CryptoError("Seed must be 32 bytes")
        try:
            signing_key = Ed25519PrivateKey.from_private_bytes(bytes(seed))
            public_key = signing_key.public_key().public_bytes(
                serialization.Encoding.Raw, serialization.PublicFormat.Raw
            )
        except ValueError:
            raise CryptoError()
        private_key = SecretBuffer(PRIVATE_KEY_LEN)
        private_key.data[:SEED_LEN] = seed
        private_key.data[SEED_LEN:] = public_key
        return public_key, private_key

    def sign(self, message: bytes, public_key: bytes, private_key) -> bytes:
        """Ed25519 signature over ``message``; the private key must match ``public_key``"""
        if len(private_key) != PRIVATE_KEY_LEN or len(public_key) != PUBLIC_KEY_LEN:
            raise CryptoError("Malformed signing key")
        seed = bytearray(private_key[:SEED_LEN])
        try:
            signing_key = Ed25519PrivateKey.from_private_bytes(bytes(seed))
            derived = signing_key.public_key().public_bytes(
                serialization.Encoding.Raw, serialization.PublicFormat.Raw
            )
            if not _hmac.compare_digest(derived, bytes(public_key)):
                raise CryptoError("Private key does not match public key")
            return signing_key.sign(bytes(message))
        except ValueError:
            raise CryptoError()
        finally:
            secure_zero(seed)

    def verify(self, message: bytes, signature: bytes, public_key: bytes) -> bool:
        try:
            Ed25519PublicKey.from_public_bytes(bytes(public_key)).verify(bytes(signature), bytes(message))
            return True
        except (InvalidSignature, ValueError):
            return False
