"""
Solana transfer transaction building and signing.

Produces the exact legacy-message wire format:

    message     = header(3) | shortvec(n) keys(32 * n) | blockhash(32)
                  | shortvec(m) instructions
    transaction = shortvec(1) | signature(64) | message
"""

import logging
import struct
from typing import Optional

from calcwallet.crypto.encoding import b58encode, b58decode, b64encode, encode_shortvec
from calcwallet.crypto.provider import CryptoProvider
from calcwallet.errors import ValidationError
from calcwallet.hardware.constants import PUBLIC_KEY_LEN

logger = logging.getLogger(__name__)

SYSTEM_PROGRAM_ID = bytes(32)
MEMO_PROGRAM_ID = b58decode("MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr")

SYSTEM_TRANSFER = 2
SYSTEM_PROGRAM_INDEX = 2
MAX_MEMO_LENGTH = 120
BLOCKHASH_LEN = 32


class SignedTransaction:
    """Signed wire bytes plus their network and display encodings"""

    __slots__ = ("wire_bytes", "signature")

    def __init__(self, wire_bytes: bytes, signature: bytes):
        self.wire_bytes = wire_bytes
        self.signature = signature

    @property
    def base64(self) -> str:
        """Encoding used for sendTransaction"""
        return b64encode(self.wire_bytes)

    @property
    def signature_base58(self) -> str:
        return b58encode(self.signature)

    @property
    def message(self) -> bytes:
        # shortvec(1) is a single byte
        return self.wire_bytes[1 + 64:]


def validate_memo(memo: Optional[str]) -> Optional[bytes]:
    """Empty memos are dropped; others are UTF-8 encoded, at most 120 bytes"""
    if not memo:
        return None
    memo_bytes = memo.encode('utf-8')
    if len(memo_bytes) > MAX_MEMO_LENGTH:
        raise ValidationError(f"Memo too long: {len(memo_bytes)} > {MAX_MEMO_LENGTH}")
    return memo_bytes


def decode_blockhash(recent_blockhash: str) -> bytes:
    try:
        blockhash = b58decode(recent_blockhash)
    except ValidationError:
        raise ValidationError("Invalid recent blockhash")
    if len(blockhash) != BLOCKHASH_LEN:
        raise ValidationError("Invalid blockhash length")
    return blockhash


def compile_transfer_message(
    from_pub: bytes,
    to_pub: bytes,
    lamports: int,
    blockhash: bytes,
    memo: Optional[bytes] = None,
) -> bytes:
    """Serialize the transfer message (the bytes that get signed)"""
    if len(from_pub) != PUBLIC_KEY_LEN or len(to_pub) != PUBLIC_KEY_LEN:
        raise ValidationError("Public keys must be 32 bytes")
    if not 0 <= lamports < 2 ** 64:
        raise ValidationError("Lamports out of range")

    account_keys = [bytes(from_pub), bytes(to_pub), SYSTEM_PROGRAM_ID]
    if memo is not None:
        account_keys.append(MEMO_PROGRAM_ID)

    msg = b''
    # Header: required signatures, readonly signed, readonly unsigned
    msg += bytes([1, 0, 2 if memo is not None else 1])

    msg += encode_shortvec(len(account_keys))
    for key in account_keys:
        msg += key

    msg += blockhash

    msg += encode_shortvec(2 if memo is not None else 1)

    # System transfer: accounts [from, to], data = u32 LE type | u64 LE lamports
    data = struct.pack('<IQ', SYSTEM_TRANSFER, lamports)
    msg += bytes([SYSTEM_PROGRAM_INDEX])
    msg += encode_shortvec(2) + bytes([0, 1])
    msg += encode_shortvec(len(data)) + data

    if memo is not None:
        msg += bytes([len(account_keys) - 1])
        msg += encode_shortvec(0)
        msg += encode_shortvec(len(memo)) + memo

    return msg


def build_transfer(
    from_pub: bytes,
    to_pub: bytes,
    lamports: int,
    recent_blockhash: str,
    private_key,
    memo: Optional[str] = None,
    provider: Optional[CryptoProvider] = None,
) -> SignedTransaction:
    """
    Build and sign a SOL transfer with an optional memo.

    Validation happens before any bytes are produced. The private key is only
    read here; wiping it stays the caller's responsibility.
    """
    memo_bytes = validate_memo(memo)
    blockhash = decode_blockhash(recent_blockhash)

    message = compile_transfer_message(from_pub, to_pub, lamports, blockhash, memo_bytes)

    provider = provider or CryptoProvider()
    signature = provider.sign(message, from_pub, private_key)

    tx = encode_shortvec(1) + signature + message
    logger.debug("Built transfer of %d lamports (%d bytes, memo=%s)", lamports, len(tx), memo_bytes is not None)
    return SignedTransaction(tx, signature)
