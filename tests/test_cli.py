"""
Tests for the command-line interface, run against the file-backed emulator.
"""

import pytest

from calcwallet.cli import commands
from calcwallet.cli.main import build_parser, main
from calcwallet.solana.config import Config


@pytest.fixture
def emulator(tmp_path, monkeypatch):
    monkeypatch.setattr(Config, "CONNECTION_TYPE", Config.CONNECTION_TYPE)
    monkeypatch.setattr(Config, "EMULATOR_PATH", tmp_path / "slots.json")
    monkeypatch.setattr(Config, "PBKDF2_ITERATIONS", 1000)
    return tmp_path / "slots.json"


class TestParser:

    def test_send_arguments(self):
        args = build_parser().parse_args(
            ["--emulator", "send", "Addr", "0.5", "--memo", "hi", "-s", "Str3", "-y"]
        )
        assert args.emulator
        assert (args.address, args.amount, args.memo, args.slot, args.yes) == \
            ("Addr", "0.5", "hi", "Str3", True)

    def test_default_slot(self):
        assert build_parser().parse_args(["balance"]).slot == "Str1"

    def test_invalid_slot(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["load", "-s", "Str10"])

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out


class TestEmulatorCommands:

    def test_create_then_slots_and_address(self, emulator, monkeypatch, capsys):
        monkeypatch.setattr(commands.getpass, "getpass", lambda prompt="": "pw")
        assert main(["--emulator", "create", "-s", "Str2", "-y"]) == 0
        out = capsys.readouterr().out
        assert "[OK] Keypair stored in Str2" in out
        assert emulator.exists()

        assert main(["--emulator", "slots"]) == 0
        out = capsys.readouterr().out
        assert "Str2" in out and "Key" in out

        assert main(["--emulator", "address", "-s", "Str2"]) == 0
        assert "Address:" in capsys.readouterr().out

    def test_mismatched_password_confirmation(self, emulator, monkeypatch, capsys):
        answers = iter(["one", "two"])
        monkeypatch.setattr(commands.getpass, "getpass", lambda prompt="": next(answers))
        assert main(["--emulator", "create", "-y"]) == 1
        assert "[FAIL] Passwords do not match" in capsys.readouterr().out
        assert not emulator.exists()

    def test_load_empty_slot_fails(self, emulator, capsys):
        assert main(["--emulator", "load", "-s", "Str5"]) == 1
        assert "Unexpected payload length: 0" in capsys.readouterr().out

    def test_bad_amount(self, emulator, capsys):
        assert main(["--emulator", "airdrop", "zero"]) == 1
        assert "[FAIL]" in capsys.readouterr().out

    @pytest.mark.parametrize("memo", ["café", "line\nbreak"])
    def test_send_rejects_non_printable_memo(self, emulator, monkeypatch, capsys, memo):
        def no_prompt(prompt=""):
            raise AssertionError("password prompt reached")
        monkeypatch.setattr(commands.getpass, "getpass", no_prompt)
        assert main(["--emulator", "send", "11111111111111111111111111111111", "1000",
                     "--memo", memo, "-y"]) == 1
        out = capsys.readouterr().out
        assert "[FAIL] Memo must contain printable ASCII characters only" in out
        assert "SEND SOL" not in out
        assert not emulator.exists()
