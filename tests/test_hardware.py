"""
Tests for the calculator link layer: native error mapping, slot validation,
link selection and the file-backed emulator.
"""

import json

import pytest

from calcwallet.errors import (
    AllocationFailed, CryptoError, InvalidArgument, NoCable, NoCalculator, NotReady,
    ThreadError, WalletIOError,
)
from calcwallet.hardware.constants import APP_OK, SLOT_NAMES
from calcwallet.hardware.emulator import EmulatorLink
from calcwallet.hardware.errors import error_for_code, raise_for_code
from calcwallet.hardware.session import CalcSession, open_link, validate_slot


class TestErrorMapping:

    @pytest.mark.parametrize("code,cls", [
        (1, NoCalculator),
        (2, NoCable),
        (3, AllocationFailed),
        (4, NotReady),
        (5, WalletIOError),
        (6, ThreadError),
        (7, CryptoError),
    ])
    def test_known_codes(self, code, cls):
        assert type(error_for_code(code)) is cls

    def test_unknown_code_is_io_error(self):
        err = error_for_code(99, "Store Str1")
        assert isinstance(err, WalletIOError)
        assert "99" in err.message

    def test_ok_does_not_raise(self):
        raise_for_code(APP_OK)

    def test_raise_for_code(self):
        with pytest.raises(NoCable):
            raise_for_code(2)


class TestSlots:

    def test_ten_string_slots(self):
        assert SLOT_NAMES == tuple(f"Str{i}" for i in range(10))

    def test_validate(self):
        assert validate_slot("Str9") == "Str9"
        with pytest.raises(InvalidArgument):
            validate_slot("Str10")


class TestOpenLink:

    def test_emulator(self, tmp_path):
        link = open_link("emulator", emulator_path=tmp_path / "slots.json")
        assert isinstance(link, EmulatorLink)

    def test_usb_is_lazy(self):
        link = open_link("usb", port=2)
        assert isinstance(link, CalcSession)

    def test_unknown_type(self):
        with pytest.raises(InvalidArgument):
            open_link("serial")

    def test_missing_shim_library(self, tmp_path):
        session = CalcSession(library=str(tmp_path / "missing.so"))
        with pytest.raises(NoCalculator):
            session.open()

    def test_io_before_open(self):
        with pytest.raises(NoCalculator):
            CalcSession().fetch_bytes("Str1")


class TestEmulatorLink:

    def test_persists_between_opens(self, tmp_path):
        path = tmp_path / "slots.json"
        link = EmulatorLink(path)
        link.open()
        link.store_bytes("Str1", b"\x01\x02")
        link.close()

        again = EmulatorLink(path)
        again.open()
        assert again.fetch_bytes("Str1") == b"\x01\x02"
        assert json.loads(path.read_text()) == {"Str1": "0102"}

    def test_empty_slot(self, tmp_path):
        link = EmulatorLink(tmp_path / "slots.json")
        link.open()
        assert link.fetch_bytes("Str4") == b""

    def test_not_open(self, tmp_path):
        with pytest.raises(NoCalculator):
            EmulatorLink(tmp_path / "slots.json").fetch_bytes("Str1")

    def test_corrupt_state_file(self, tmp_path):
        path = tmp_path / "slots.json"
        path.write_text("{not json")
        with pytest.raises(WalletIOError):
            EmulatorLink(path).open()

    def test_invalid_slot(self, tmp_path):
        link = EmulatorLink(tmp_path / "slots.json")
        link.open()
        with pytest.raises(InvalidArgument):
            link.store_bytes("Y1", b"")

    def test_state_file_not_a_mapping(self, tmp_path):
        path = tmp_path / "slots.json"
        path.write_text("[]")
        link = EmulatorLink(path)
        with pytest.raises(WalletIOError):
            link.open()
        with pytest.raises(NoCalculator):
            link.fetch_bytes("Str1")

    def test_non_string_slot_value(self, tmp_path):
        path = tmp_path / "slots.json"
        path.write_text(json.dumps({"Str1": 5}))
        link = EmulatorLink(path)
        link.open()
        with pytest.raises(WalletIOError):
            link.fetch_bytes("Str1")
