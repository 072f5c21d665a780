"""
Byte encodings used on the Solana wire and in the UI: base58 (no checksum),
base64, and the compact-length "shortvec" integer.
"""

import base64
from typing import Tuple

from calcwallet.errors import ValidationError


B58_ALPHABET = '123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz'
_B58_INDEX = {c: i for i, c in enumerate(B58_ALPHABET)}


def b58encode(data: bytes) -> str:
    """Base58 encode (no checksum)"""
    n = int.from_bytes(data, 'big')
    result = ''
    while n > 0:
        n, r = divmod(n, 58)
        result = B58_ALPHABET[r] + result
    for byte in data:
        if byte == 0:
            result = '1' + result
        else:
            break
    return result


def b58decode(text: str) -> bytes:
    """Base58 decode (no checksum); leading '1's become leading zero bytes"""
    if not text:
        raise ValidationError("Empty base58 string")
    n = 0
    for c in text:
        try:
            n = n * 58 + _B58_INDEX[c]
        except KeyError:
            raise ValidationError(f"Invalid base58 character {c!r}")
    body = n.to_bytes((n.bit_length() + 7) // 8, 'big') if n else b''
    pad = len(text) - len(text.lstrip('1'))
    return b'\x00' * pad + body


def b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode('ascii')


def encode_shortvec(value: int) -> bytes:
    """
    Encode a non-negative integer as a compact-length prefix.

    Little-endian base-128: each byte carries seven value bits, and bit 7 is
    set while more bytes follow.
    """
    if value < 0:
        raise ValueError("shortvec value must be non-negative")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def decode_shortvec(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """Decode a compact-length prefix, returns (value, next_offset)"""
    value = 0
    shift = 0
    while True:
        if offset >= len(data):
            raise ValueError("Truncated shortvec")
        byte = data[offset]
        offset += 1
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, offset
        shift += 7
