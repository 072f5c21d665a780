"""
Calculator key slot management.

Each slot (Str0..Str9) holds one 157-byte record:
public_key(32) | sealed blob(125). Nothing is allocated or freed implicitly;
the caller picks the slot and a store overwrites it.
"""

import logging
from typing import Dict, List, Tuple

from calcwallet.errors import InvalidArgument, PayloadLengthMismatch
from calcwallet.crypto.encoding import b58encode
from calcwallet.hardware.constants import (
    SLOT_NAMES, PUBLIC_KEY_LEN, BLOB_LEN, STORED_KEY_PAYLOAD_LEN,
)
from calcwallet.hardware.link import CalculatorLink
from calcwallet.hardware.session import validate_slot

logger = logging.getLogger(__name__)


class KeyStore:
    """Slot-addressed storage of (public key, sealed blob) records"""

    def __init__(self, link: CalculatorLink):
        self.link = link

    def store(self, slot: str, public_key: bytes, blob: bytes):
        """Write the record for ``slot``, replacing anything already there"""
        validate_slot(slot)
        if len(public_key) != PUBLIC_KEY_LEN:
            raise InvalidArgument("Public key must be 32 bytes")
        if len(blob) != BLOB_LEN:
            raise InvalidArgument(f"Sealed blob must be {BLOB_LEN} bytes")
        payload = bytes(public_key) + bytes(blob)
        self.link.store_bytes(slot, payload)
        logger.info("Stored key record in %s", slot)

    def fetch(self, slot: str) -> Tuple[bytes, bytes]:
        """Read (public_key, blob) from ``slot``; any other length is rejected"""
        validate_slot(slot)
        payload = self.link.fetch_bytes(slot)
        if len(payload) != STORED_KEY_PAYLOAD_LEN:
            raise PayloadLengthMismatch(STORED_KEY_PAYLOAD_LEN, len(payload))
        return bytes(payload[:PUBLIC_KEY_LEN]), bytes(payload[PUBLIC_KEY_LEN:])

    def scan(self) -> List[Dict]:
        """
        Report every slot as 'key', 'empty' or 'malformed'.

        Device errors abort the scan; only per-slot format problems are
        reported inline.
        """
        slots = []
        for num, name in enumerate(SLOT_NAMES):
            slot_info = {'slot': name, 'num': num, 'status': 'empty',
                         'status_label': 'Empty', 'address': None}
            try:
                public_key, _blob = self.fetch(name)
                slot_info.update({'status': 'key', 'status_label': 'Key',
                                  'address': b58encode(public_key)})
            except PayloadLengthMismatch as e:
                if e.actual:
                    slot_info.update({'status': 'malformed',
                                      'status_label': f'Malformed ({e.actual} bytes)'})
            slots.append(slot_info)
        return slots
