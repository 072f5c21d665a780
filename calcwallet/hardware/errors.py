"""
Calculator link error mapping.

Native status codes are translated into the wallet error taxonomy here and
nowhere else.
"""

from calcwallet.errors import (
    WalletError, NoCalculator, NoCable, AllocationFailed, NotReady,
    WalletIOError, ThreadError, CryptoError,
)
from calcwallet.hardware.constants import (
    APP_OK, APP_ERR_NO_CALC, APP_ERR_NO_CABLE, APP_ERR_ALLOC,
    APP_ERR_NOT_READY, APP_ERR_IO, APP_ERR_THREAD, APP_ERR_CRYPTO,
)

_ERROR_CLASSES = {
    APP_ERR_NO_CALC: NoCalculator,
    APP_ERR_NO_CABLE: NoCable,
    APP_ERR_ALLOC: AllocationFailed,
    APP_ERR_NOT_READY: NotReady,
    APP_ERR_THREAD: ThreadError,
    APP_ERR_CRYPTO: CryptoError,
}


def error_for_code(code: int, operation: str = "operation") -> WalletError:
    """Build the tagged error for a non-zero native status code"""
    cls = _ERROR_CLASSES.get(code)
    if cls is not None:
        return cls()
    if code == APP_ERR_IO:
        return WalletIOError(f"{operation} failed")
    return WalletIOError(f"{operation} failed with app error code {code}")


def raise_for_code(code: int, operation: str = "operation"):
    """Raise the tagged error for a native status code, if it is not APP_OK"""
    if code != APP_OK:
        raise error_for_code(code, operation)
