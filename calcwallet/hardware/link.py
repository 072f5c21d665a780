"""
CalculatorLink - the physical connection primitives the KeyStore is built on.
"""


class CalculatorLink:
    """
    Interface to a slot-addressed storage device.

    Implementations block on device I/O and raise calcwallet.errors
    subclasses (NoCalculator, NoCable, NotReady, WalletIOError) on failure.
    """

    def open(self):
        raise NotImplementedError

    def close(self):
        raise NotImplementedError

    def store_bytes(self, slot: str, data: bytes):
        """Write ``data`` to ``slot``, replacing whatever it held"""
        raise NotImplementedError

    def fetch_bytes(self, slot: str) -> bytes:
        """Read the raw contents of ``slot``"""
        raise NotImplementedError

    def is_ready(self) -> bool:
        """Ping the device; True if it answered"""
        return True
