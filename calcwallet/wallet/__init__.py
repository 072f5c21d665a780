"""
calcwallet.wallet - Wallet state, key slots and the operation coordinator.

Re-exports the public API from submodules.
"""

from calcwallet.wallet.core import WalletState, LoadedKeypair, CONNECTED, DISCONNECTED
from calcwallet.wallet.slots import KeyStore
from calcwallet.wallet.qr import generate_qr_ascii
from calcwallet.wallet.service import WalletService

__all__ = [
    "WalletState",
    "LoadedKeypair",
    "CONNECTED",
    "DISCONNECTED",
    "KeyStore",
    "generate_qr_ascii",
    "WalletService",
]
