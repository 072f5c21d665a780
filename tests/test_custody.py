"""
Tests for key custody: keypair generation, sealing and unsealing.
"""

import pytest

from calcwallet.crypto.custody import KeyCustody
from calcwallet.crypto.secure import SecretBuffer, secure_zero
from calcwallet.errors import CryptoError, InvalidArgument
from calcwallet.hardware.constants import BLOB_LEN, BLOB_VERSION


class TestKeyGeneration:
    """Keypair generation"""

    def test_lengths(self, keypair):
        assert len(keypair.public_key) == 32
        assert len(keypair.private_key) == 64

    def test_private_key_embeds_public_key(self, keypair):
        assert bytes(keypair.private_key.data[32:]) == keypair.public_key

    def test_keys_are_unique(self, custody):
        keys = {custody.generate_keypair().public_key for _ in range(5)}
        assert len(keys) == 5

    def test_wipe_on_context_exit(self, custody):
        with custody.generate_keypair() as kp:
            buf = kp.private_key.data
        assert buf == bytearray(64)


class TestSealUnseal:
    """Seal/unseal contract"""

    def test_roundtrip(self, custody, keypair):
        blob = custody.seal("hunter2", keypair.private_key.data)
        with custody.unseal("hunter2", blob) as recovered:
            assert recovered.data == keypair.private_key.data

    def test_blob_layout(self, custody, keypair):
        blob = custody.seal("hunter2", keypair.private_key.data)
        assert len(blob) == BLOB_LEN == 125
        assert blob[0] == BLOB_VERSION

    def test_fresh_salt_and_nonce(self, custody, keypair):
        a = custody.seal("pw", keypair.private_key.data)
        b = custody.seal("pw", keypair.private_key.data)
        assert a[1:29] != b[1:29]
        assert a != b

    def test_wrong_password(self, custody, keypair):
        blob = custody.seal("correct", keypair.private_key.data)
        with pytest.raises(CryptoError):
            custody.unseal("incorrect", blob)

    @pytest.mark.parametrize("index", [0, 1, 16, 17, 28, 29, 60, 92, 93, 124])
    def test_single_byte_flip_rejected(self, custody, keypair, index):
        blob = bytearray(custody.seal("pw", keypair.private_key.data))
        blob[index] ^= 0x01
        with pytest.raises(CryptoError):
            custody.unseal("pw", bytes(blob))

    def test_wrong_password_and_tamper_look_the_same(self, custody, keypair):
        blob = custody.seal("pw", keypair.private_key.data)
        tampered = blob[:-1] + bytes([blob[-1] ^ 0xFF])
        with pytest.raises(CryptoError) as wrong_pw:
            custody.unseal("other", blob)
        with pytest.raises(CryptoError) as bad_blob:
            custody.unseal("pw", tampered)
        assert wrong_pw.value.message == bad_blob.value.message

    def test_truncated_blob(self, custody, keypair):
        blob = custody.seal("pw", keypair.private_key.data)
        with pytest.raises(CryptoError):
            custody.unseal("pw", blob[:100])

    def test_empty_password_rejected(self, custody, keypair):
        with pytest.raises(CryptoError):
            custody.seal("", keypair.private_key.data)
        blob = custody.seal("pw", keypair.private_key.data)
        with pytest.raises(CryptoError):
            custody.unseal("", blob)

    def test_seal_rejects_wrong_key_length(self, custody):
        with pytest.raises(InvalidArgument):
            custody.seal("pw", bytes(32))

    def test_unicode_password(self, custody, keypair):
        blob = custody.seal("pässwörd ✓", keypair.private_key.data)
        with custody.unseal("pässwörd ✓", blob) as recovered:
            assert recovered.data == keypair.private_key.data

    def test_default_provider(self):
        assert KeyCustody().provider.iterations == 200000


class TestSigning:
    """Ed25519 signing through the provider"""

    def test_sign_verify(self, provider, keypair):
        sig = provider.sign(b"msg", keypair.public_key, keypair.private_key.data)
        assert len(sig) == 64
        assert provider.verify(b"msg", sig, keypair.public_key)
        assert not provider.verify(b"other", sig, keypair.public_key)

    def test_mismatched_public_key(self, provider, custody, keypair):
        other = custody.generate_keypair()
        with pytest.raises(CryptoError):
            provider.sign(b"msg", other.public_key, keypair.private_key.data)

    def test_deterministic_from_seed(self, provider):
        seed = bytes(range(32))
        pub1, priv1 = provider.generate_keypair(seed)
        pub2, priv2 = provider.generate_keypair(seed)
        assert pub1 == pub2
        assert priv1.data == priv2.data


class TestSecureErasure:
    """Zeroing of plaintext buffers"""

    def test_secure_zero(self):
        buf = bytearray(b"secret")
        secure_zero(buf)
        assert buf == bytearray(6)

    def test_secret_buffer_wiped_on_exception(self):
        buf = SecretBuffer(b"\x01" * 8)
        with pytest.raises(RuntimeError):
            with buf:
                raise RuntimeError("boom")
        assert buf.data == bytearray(8)

    def test_repr_hides_contents(self):
        assert "01" not in repr(SecretBuffer(b"\x01\x01"))
