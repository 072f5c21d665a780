"""
Tests for wallet configuration.
"""

import json

from calcwallet.solana.config import Config


class TestRpcUrl:

    def test_explicit_url(self, monkeypatch):
        monkeypatch.delenv("SOLANA_RPC_URL", raising=False)
        assert Config.resolve_rpc_url("https://rpc.example.org") == "https://rpc.example.org"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("SOLANA_RPC_URL", "https://api.testnet.solana.com")
        assert Config.resolve_rpc_url() == "https://api.testnet.solana.com"

    def test_plain_http_refused(self, monkeypatch):
        monkeypatch.delenv("SOLANA_RPC_URL", raising=False)
        assert Config.resolve_rpc_url("http://rpc.example.org") == Config.DEFAULT_RPC_URL


class TestExplorer:

    def test_cluster(self):
        assert Config.cluster("https://api.devnet.solana.com") == "devnet"
        assert Config.cluster("https://api.mainnet-beta.solana.com") == "mainnet"
        assert Config.cluster("https://rpc.example.org") == "custom"

    def test_devnet_link(self):
        url = Config.explorer_url("abc", "https://api.devnet.solana.com")
        assert url == "https://solscan.io/tx/abc?cluster=devnet"

    def test_mainnet_link(self):
        url = Config.explorer_url("abc", "https://api.mainnet-beta.solana.com")
        assert url == "https://solscan.io/tx/abc"


class TestProxies:

    def test_disabled(self, monkeypatch):
        monkeypatch.setattr(Config, "TOR_ENABLED", False)
        assert Config.proxies() is None

    def test_enabled(self, monkeypatch):
        monkeypatch.setattr(Config, "TOR_ENABLED", True)
        assert Config.proxies() == {'http': Config.TOR_PROXY, 'https': Config.TOR_PROXY}


class TestSavedSettings:

    def test_loads_values(self, tmp_path, monkeypatch):
        for name in ("WALLET_DIR", "RPC_URL", "AIRDROP_CONFIRM_ATTEMPTS",
                     "TRANSFER_CONFIRM_ATTEMPTS", "DEFAULT_MEMO", "CONNECTION_TYPE"):
            monkeypatch.setattr(Config, name, getattr(Config, name))
        monkeypatch.setattr(Config, "WALLET_DIR", tmp_path)
        (tmp_path / "settings.json").write_text(json.dumps({
            "rpc_url": "https://rpc.example.org",
            "airdrop_confirm_attempts": 10,
            "transfer_confirm_attempts": "90",
            "default_memo": "",
            "connection_type": "emulator",
        }))
        Config.load_saved_settings()
        assert Config.RPC_URL == "https://rpc.example.org"
        assert Config.AIRDROP_CONFIRM_ATTEMPTS == 10
        assert Config.TRANSFER_CONFIRM_ATTEMPTS == 90
        assert Config.DEFAULT_MEMO == ""
        assert Config.CONNECTION_TYPE == "emulator"

    def test_corrupt_file_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Config, "WALLET_DIR", tmp_path)
        monkeypatch.setattr(Config, "RPC_TIMEOUT", 10.0)
        (tmp_path / "settings.json").write_text('{"rpc_timeout": "soon"')
        Config.load_saved_settings()
        assert Config.RPC_TIMEOUT == 10.0

    def test_bad_value_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Config, "WALLET_DIR", tmp_path)
        monkeypatch.setattr(Config, "RPC_TIMEOUT", 10.0)
        (tmp_path / "settings.json").write_text('{"rpc_timeout": "soon"}')
        Config.load_saved_settings()
        assert Config.RPC_TIMEOUT == 10.0

    def test_attempt_bounds_are_independent(self):
        assert Config.AIRDROP_CONFIRM_ATTEMPTS == 30
        assert Config.TRANSFER_CONFIRM_ATTEMPTS == 60
