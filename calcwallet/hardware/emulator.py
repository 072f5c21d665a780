"""
File-backed calculator emulator.

Keeps slot contents hex-encoded in a JSON file so the wallet can be developed
and exercised without a cable attached.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Dict

from calcwallet.errors import NoCalculator, WalletIOError
from calcwallet.hardware.link import CalculatorLink
from calcwallet.hardware.session import validate_slot

logger = logging.getLogger(__name__)


class EmulatorLink(CalculatorLink):
    """Slot storage in a local JSON file"""

    def __init__(self, path: Path):
        self._path = Path(path)
        self._slots: Dict[str, str] = {}
        self._opened = False
        self._write_lock = threading.Lock()

    def open(self):
        if self._opened:
            return
        if self._path.exists():
            try:
                slots = json.loads(self._path.read_text())
            except (OSError, ValueError) as e:
                raise WalletIOError(f"emulator state unreadable: {e}")
            if not isinstance(slots, dict):
                raise WalletIOError("emulator state is not a slot mapping")
            self._slots = slots
        else:
            self._slots = {}
        self._opened = True
        logger.info("Emulator link opened (%s)", self._path)

    def close(self):
        self._opened = False
        self._slots = {}

    def _require_open(self):
        if not self._opened:
            raise NoCalculator()

    def store_bytes(self, slot: str, data: bytes):
        validate_slot(slot)
        self._require_open()
        with self._write_lock:
            self._slots[slot] = bytes(data).hex()
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                self._path.write_text(json.dumps(self._slots, indent=2))
            except OSError as e:
                raise WalletIOError(f"emulator write failed: {e}")

    def fetch_bytes(self, slot: str) -> bytes:
        validate_slot(slot)
        self._require_open()
        try:
            return bytes.fromhex(self._slots.get(slot, ""))
        except (ValueError, TypeError):
            raise WalletIOError(f"emulator slot {slot} is corrupt")
