"""
Calculator session - ctypes bindings for the cable/calculator shim library.

The shim (libcwallet.so) wraps libticables/libticalcs and exposes session
open/cleanup plus binary string-variable transfer. Every native status code
is converted to a tagged wallet error at this boundary.
"""

import ctypes
from ctypes import c_int, c_uint8, c_size_t, c_char_p, c_void_p, c_ulong, POINTER, byref
import logging
import os
from pathlib import Path

from calcwallet.errors import NoCalculator, InvalidArgument
from calcwallet.hardware.constants import SLOT_NAMES, MAX_FETCH_LEN
from calcwallet.hardware.errors import raise_for_code
from calcwallet.hardware.link import CalculatorLink
from calcwallet.hardware.locking import ProcessLock

logger = logging.getLogger(__name__)


class _CalcSessionStruct(ctypes.Structure):
    """Mirror of the CalcSession struct (must match calc_session.h)"""
    _fields_ = [
        ("cable", c_void_p),
        ("calc", c_void_p),
        ("cable_model", c_int),
        ("calc_model", c_int),
        ("port_number", c_int),
        ("poll_interval_ms", c_int),
        ("poll_active", c_int),
        ("poll_thread_started", c_int),
        ("poll_thread", c_ulong),
    ]


def validate_slot(slot: str) -> str:
    """Slots are the ten string variables Str0..Str9"""
    if slot not in SLOT_NAMES:
        raise InvalidArgument(f"Unsupported string slot '{slot}'")
    return slot


class CalcSession(CalculatorLink):
    """
    USB link to a TI calculator through the native shim.

    Example:
        session = CalcSession(port=1)
        session.open()
        try:
            session.store_bytes("Str1", payload)
        finally:
            session.close()
    """

    _ti_initialized = False

    def __init__(self, port: int = 1, library: str = None):
        self._port = port
        self._library = library
        self._lib = None
        self._session = None
        self._opened = False
        self._process_lock = ProcessLock()

    def _load_library(self):
        """Load the native shim"""
        if self._lib is not None:
            return

        lib_paths = [self._library] if self._library else [
            Path(__file__).parent / "libcwallet.so",
            Path.cwd() / "libcwallet.so",
            "libcwallet.so",
            "/usr/local/lib/libcwallet.so",
        ]

        for path in lib_paths:
            try:
                self._lib = ctypes.CDLL(str(path))
                logger.debug("Loaded calculator shim from %s", path)
                break
            except OSError:
                continue

        if self._lib is None:
            raise NoCalculator("Could not load libcwallet.so")

        self._define_functions()

        if not CalcSession._ti_initialized:
            # Library init entry points come from libticables/tifiles/ticalcs
            for name in ("ticables_library_init", "tifiles_library_init", "ticalcs_library_init"):
                if hasattr(self._lib, name):
                    getattr(self._lib, name)()
            CalcSession._ti_initialized = True

    def _define_functions(self):
        """Define ctypes function signatures"""
        lib = self._lib
        session_p = POINTER(_CalcSessionStruct)

        # int calc_session_open(CalcSession*)
        lib.calc_session_open.argtypes = [session_p]
        lib.calc_session_open.restype = c_int

        # void calc_session_cleanup(CalcSession*)
        lib.calc_session_cleanup.argtypes = [session_p]
        lib.calc_session_cleanup.restype = None

        # int calc_store_binary_string(session*, var_name, payload, payload_len)
        lib.calc_store_binary_string.argtypes = [session_p, c_char_p, POINTER(c_uint8), c_size_t]
        lib.calc_store_binary_string.restype = c_int

        # int calc_fetch_binary_string(session*, var_name, out, out_size, out_len*)
        lib.calc_fetch_binary_string.argtypes = [
            session_p, c_char_p, POINTER(c_uint8), c_size_t, POINTER(c_size_t)
        ]
        lib.calc_fetch_binary_string.restype = c_int

        # int ticalcs_calc_isready(CalcHandle*) - optional in older shims
        self._has_isready = hasattr(lib, "ticalcs_calc_isready")
        if self._has_isready:
            lib.ticalcs_calc_isready.argtypes = [c_void_p]
            lib.ticalcs_calc_isready.restype = c_int

    def open(self):
        """Detect the calculator and attach the cable"""
        if self._opened:
            return

        self._load_library()
        self._process_lock.acquire()
        try:
            self._session = _CalcSessionStruct()
            self._session.port_number = self._port
            raise_for_code(self._lib.calc_session_open(byref(self._session)), "Open session")
            self._opened = True
            logger.info("Calculator session opened on port %d", self._port)
        except Exception:
            self._session = None
            self._process_lock.release()
            raise

    def close(self):
        """Release cable and calculator handles"""
        if self._session is not None and self._opened:
            self._lib.calc_session_cleanup(byref(self._session))
        self._session = None
        self._opened = False
        self._process_lock.release()

    def _require_open(self):
        if not self._opened:
            raise NoCalculator()

    def is_ready(self) -> bool:
        self._require_open()
        if not self._has_isready:
            return True
        return self._lib.ticalcs_calc_isready(self._session.calc) == 0

    def store_bytes(self, slot: str, data: bytes):
        validate_slot(slot)
        self._require_open()
        buf = (c_uint8 * len(data)).from_buffer_copy(data)
        try:
            ret = self._lib.calc_store_binary_string(
                byref(self._session), slot.encode('ascii'), buf, len(data)
            )
        finally:
            ctypes.memset(buf, 0, len(data))
        raise_for_code(ret, f"Store {slot}")

    def fetch_bytes(self, slot: str) -> bytes:
        validate_slot(slot)
        self._require_open()
        buf = (c_uint8 * MAX_FETCH_LEN)()
        out_len = c_size_t(0)
        try:
            ret = self._lib.calc_fetch_binary_string(
                byref(self._session), slot.encode('ascii'), buf, MAX_FETCH_LEN, byref(out_len)
            )
            raise_for_code(ret, f"Fetch {slot}")
            return bytes(buf[:min(out_len.value, MAX_FETCH_LEN)])
        finally:
            ctypes.memset(buf, 0, MAX_FETCH_LEN)


def open_link(connection_type: str = "usb", port: int = 1, emulator_path: Path = None) -> CalculatorLink:
    """Build (but do not open) the configured link"""
    if connection_type == "emulator":
        from calcwallet.hardware.emulator import EmulatorLink
        return EmulatorLink(emulator_path)
    if connection_type != "usb":
        raise InvalidArgument(f"Unknown connection type '{connection_type}'")
    return CalcSession(port=port, library=os.environ.get("CALCWALLET_SHIM"))
