"""
Secure erasure of key material.

Plaintext keys live in bytearrays so they can be overwritten in place. A
SecretBuffer zeroes itself when its scope exits, whether normally or by an
exception.
"""

import ctypes


def secure_zero(buf: bytearray):
    """Overwrite a mutable buffer with zeros"""
    if not buf:
        return
    view = (ctypes.c_char * len(buf)).from_buffer(buf)
    ctypes.memset(ctypes.addressof(view), 0, len(buf))
    del view


class SecretBuffer:
    """
    Owned plaintext key material.

    Example:
        with custody.unseal(password, blob) as private_key:
            signature = provider.sign(message, public_key, private_key.data)
        # private_key is zeroed here
    """

    __slots__ = ("_buf",)

    def __init__(self, data):
        self._buf = bytearray(data)

    @property
    def data(self) -> bytearray:
        return self._buf

    def __len__(self):
        return len(self._buf)

    def wipe(self):
        secure_zero(self._buf)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.wipe()
        return False

    def __repr__(self):
        return f"SecretBuffer(<{len(self._buf)} bytes>)"
