"""
Wallet configuration for the calcwallet Solana wallet.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class Config:
    """Wallet configuration"""
    # Data directory for wallet files
    WALLET_DIR = Path.home() / ".calcwallet"

    # RPC endpoint (env SOLANA_RPC_URL overrides; https only)
    DEFAULT_RPC_URL = "https://api.devnet.solana.com"
    RPC_URL = DEFAULT_RPC_URL

    # Network timeout, fixed when the RPC client is constructed
    RPC_TIMEOUT = 10.0

    # Confirmation polling
    POLL_INTERVAL = 1.0
    AIRDROP_CONFIRM_ATTEMPTS = 30
    TRANSFER_CONFIRM_ATTEMPTS = 60

    DEFAULT_MEMO = "sent from my ti83+"

    # Key sealing work factor
    PBKDF2_ITERATIONS = 200000

    # ==========================================================================
    # PRIVACY SETTINGS
    # ==========================================================================

    # Set TOR_ENABLED=True to route all RPC requests through Tor
    TOR_ENABLED = False
    TOR_PROXY = "socks5h://127.0.0.1:9050"  # Standard Tor SOCKS proxy

    # ==========================================================================

    # Calculator connection settings
    # Connection type: "usb" for the cable shim, "emulator" for file-backed slots
    CONNECTION_TYPE = "usb"
    CONNECTION_PORT = 1
    EMULATOR_PATH: Optional[Path] = None

    @classmethod
    def settings_path(cls) -> Path:
        return cls.WALLET_DIR / "settings.json"

    @classmethod
    def emulator_path(cls) -> Path:
        return cls.EMULATOR_PATH or cls.WALLET_DIR / "emulator_slots.json"

    @classmethod
    def resolve_rpc_url(cls, url: Optional[str] = None) -> str:
        """Pick the RPC URL, refusing anything that is not https"""
        url = url or os.environ.get("SOLANA_RPC_URL") or cls.RPC_URL
        if not url.startswith("https://"):
            logger.warning("Insecure RPC URL %r rejected; falling back to %s", url, cls.DEFAULT_RPC_URL)
            return cls.DEFAULT_RPC_URL
        return url

    @classmethod
    def proxies(cls) -> Optional[dict]:
        if not cls.TOR_ENABLED:
            return None
        return {'http': cls.TOR_PROXY, 'https': cls.TOR_PROXY}

    @classmethod
    def cluster(cls, rpc_url: Optional[str] = None) -> str:
        url = rpc_url or cls.RPC_URL
        for name in ("devnet", "testnet", "mainnet"):
            if name in url:
                return name
        return "custom"

    @classmethod
    def explorer_url(cls, signature: str, rpc_url: Optional[str] = None) -> str:
        """Solscan link for a transaction signature"""
        cluster = cls.cluster(rpc_url)
        link = f"https://solscan.io/tx/{signature}"
        if cluster != "mainnet":
            link += f"?cluster={cluster}"
        return link

    @classmethod
    def load_saved_settings(cls):
        """Load settings from the wallet directory if the file exists"""
        path = cls.settings_path()
        if not path.exists():
            return
        try:
            settings = json.loads(path.read_text())
            if 'rpc_url' in settings:
                cls.RPC_URL = settings['rpc_url']
            if 'rpc_timeout' in settings:
                cls.RPC_TIMEOUT = float(settings['rpc_timeout'])
            if 'airdrop_confirm_attempts' in settings:
                cls.AIRDROP_CONFIRM_ATTEMPTS = int(settings['airdrop_confirm_attempts'])
            if 'transfer_confirm_attempts' in settings:
                cls.TRANSFER_CONFIRM_ATTEMPTS = int(settings['transfer_confirm_attempts'])
            if 'default_memo' in settings:
                cls.DEFAULT_MEMO = settings['default_memo']
            if 'tor_enabled' in settings:
                cls.TOR_ENABLED = bool(settings['tor_enabled'])
            if 'tor_proxy' in settings:
                cls.TOR_PROXY = settings['tor_proxy']
            if 'connection_type' in settings:
                cls.CONNECTION_TYPE = settings['connection_type']
            if 'connection_port' in settings:
                cls.CONNECTION_PORT = int(settings['connection_port'])
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", path, e)


# Load saved settings on import
Config.load_saved_settings()
