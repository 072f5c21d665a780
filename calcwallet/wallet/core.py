"""
Wallet state management.
"""

from typing import Optional

from calcwallet.crypto.encoding import b58encode

DISCONNECTED = "disconnected"
CONNECTED = "connected"


class LoadedKeypair:
    """Public half and sealed blob of the active key; never plaintext"""

    __slots__ = ("slot", "public_key", "address", "blob")

    def __init__(self, slot: str, public_key: bytes, blob: bytes):
        self.slot = slot
        self.public_key = bytes(public_key)
        self.address = b58encode(public_key)
        self.blob = bytes(blob)

    def __repr__(self):
        return f"LoadedKeypair({self.slot}, {self.address})"


class WalletState:
    """
    Wallet state shared by the coordinator and its callers.

    Only the coordinator mutates it. A failed operation records
    ``last_error`` and leaves every other field untouched.
    """

    def __init__(self):
        self.connection = DISCONNECTED
        self.keypair: Optional[LoadedKeypair] = None
        self.balance_lamports: Optional[int] = None
        self.last_error: Optional[str] = None
        self.pending: Optional[str] = None
        self.last_signature: Optional[str] = None

    @property
    def connected(self) -> bool:
        return self.connection == CONNECTED

    @property
    def address(self) -> Optional[str]:
        return self.keypair.address if self.keypair else None

    def to_dict(self) -> dict:
        return {
            'connection': self.connection,
            'slot': self.keypair.slot if self.keypair else None,
            'address': self.address,
            'balance_lamports': self.balance_lamports,
            'last_error': self.last_error,
            'pending': self.pending,
            'last_signature': self.last_signature,
        }
