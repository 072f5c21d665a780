"""
calcwallet.hardware - calculator link and resource guards.
"""

from calcwallet.hardware.constants import (
    SLOT_NAMES,
    PUBLIC_KEY_LEN,
    PRIVATE_KEY_LEN,
    BLOB_LEN,
    STORED_KEY_PAYLOAD_LEN,
)
from calcwallet.hardware.link import CalculatorLink
from calcwallet.hardware.session import CalcSession, open_link, validate_slot
from calcwallet.hardware.emulator import EmulatorLink
from calcwallet.hardware.locking import ExclusiveResource, LinkGuard, ClientGuard

__all__ = [
    "SLOT_NAMES",
    "PUBLIC_KEY_LEN",
    "PRIVATE_KEY_LEN",
    "BLOB_LEN",
    "STORED_KEY_PAYLOAD_LEN",
    "CalculatorLink",
    "CalcSession",
    "open_link",
    "validate_slot",
    "EmulatorLink",
    "ExclusiveResource",
    "LinkGuard",
    "ClientGuard",
]
