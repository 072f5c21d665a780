"""
Wallet error taxonomy.

Every failure surfaces as exactly one WalletError subclass. Native status
codes are mapped to these classes once, at the ctypes boundary
(see calcwallet.hardware.errors), and never re-interpreted downstream.
"""

from typing import Optional


# Error codes (device codes match the calculator shim library)
ERR_NO_CALC = 1
ERR_NO_CABLE = 2
ERR_ALLOC = 3
ERR_NOT_READY = 4
ERR_IO = 5
ERR_THREAD = 6
ERR_CRYPTO = 7

ERR_INVALID_ARGUMENT = 20
ERR_NETWORK = 21
ERR_HTTP = 22

ERR_PAYLOAD_LENGTH = 30
ERR_JSON_PARSE = 31
ERR_VALIDATION = 32

ERR_TIMEOUT = 40


class WalletError(Exception):
    """Base class for all wallet errors"""
    code = ERR_IO
    default_message = "Wallet error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NoCalculator(WalletError):
    code = ERR_NO_CALC
    default_message = "No calculator detected"


class NoCable(WalletError):
    code = ERR_NO_CABLE
    default_message = "No cable detected"


class AllocationFailed(WalletError):
    code = ERR_ALLOC
    default_message = "Memory allocation failed"


class NotReady(WalletError):
    code = ERR_NOT_READY
    default_message = "Calculator not ready"


class WalletIOError(WalletError):
    """Transport-level failure, or an error message returned by the RPC node"""
    code = ERR_IO
    default_message = "I/O error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(f"I/O error: {message}" if message else None)


class ThreadError(WalletError):
    code = ERR_THREAD
    default_message = "Thread error"


class CryptoError(WalletError):
    """
    Cryptographic failure.

    Wrong password and corrupted blob deliberately produce the same error so
    that unseal cannot be used as a password-guessing oracle.
    """
    code = ERR_CRYPTO
    default_message = "Cryptographic error"


class InvalidArgument(WalletError):
    code = ERR_INVALID_ARGUMENT
    default_message = "Invalid argument"


class NetworkError(WalletError):
    code = ERR_NETWORK
    default_message = "Network error"


class HttpError(WalletError):
    code = ERR_HTTP
    default_message = "HTTP error"

    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(f"HTTP error {status}")


class PayloadLengthMismatch(WalletError):
    code = ERR_PAYLOAD_LENGTH

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Unexpected payload length: {actual} (expected {expected})")


class JsonParseError(WalletError):
    code = ERR_JSON_PARSE
    default_message = "JSON parse error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(f"JSON parse error: {message}" if message else None)


class ValidationError(WalletError):
    code = ERR_VALIDATION
    default_message = "Validation error"


class ConfirmationTimeout(WalletError):
    code = ERR_TIMEOUT
    default_message = "Transaction confirmation timed out"
