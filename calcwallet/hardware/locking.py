"""
Exclusive access to the wallet's two stateful external handles.

The calculator link and the RPC client are guarded by two independent locks:
a storage operation and a network operation may run concurrently, while
operations on the same resource serialize. No lock ever spans both.

A cross-process file lock additionally keeps a second wallet process from
opening the same cable.
"""

import os
import time
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Generic, Iterator, Optional, TypeVar

from calcwallet.errors import NoCalculator, NotReady

try:
    import fcntl
    _HAS_FCNTL = True
except ImportError:
    _HAS_FCNTL = False  # Windows

logger = logging.getLogger(__name__)

T = TypeVar("T")

_LINK_LOCK_FILE = Path("/tmp/calcwallet-link.lock")
_LINK_LOCK_STALE_TIMEOUT = 120  # seconds before considering lock stale


class ExclusiveResource(Generic[T]):
    """
    A singleton handle behind a lock.

    If a factory is given the handle is built lazily on first acquire and may
    be rebuilt at any time; without one the handle must be connected
    explicitly and acquiring while it is absent raises ``missing_error``.
    """

    def __init__(self, name: str, factory: Optional[Callable[[], T]] = None,
                 missing_error: Callable[[], Exception] = NoCalculator):
        self.name = name
        self._factory = factory
        self._missing_error = missing_error
        self._handle: Optional[T] = None
        self._lock = threading.Lock()

    @property
    def present(self) -> bool:
        return self._handle is not None

    @contextmanager
    def acquire(self) -> Iterator[T]:
        with self._lock:
            if self._handle is None:
                if self._factory is None:
                    raise self._missing_error()
                logger.debug("Constructing %s handle", self.name)
                self._handle = self._factory()
            yield self._handle

    def remove(self) -> Optional[T]:
        """Detach and return the current handle, if any"""
        with self._lock:
            handle, self._handle = self._handle, None
            return handle


class LinkGuard(ExclusiveResource):
    """
    Guard for the calculator link.

    The link is never constructed implicitly: ``connect`` opens it on a user
    request and ``disconnect`` tears it down. Operations issued while it is
    absent fail with NoCalculator.
    """

    def __init__(self, opener: Callable[[], object]):
        super().__init__("calculator link", factory=None, missing_error=NoCalculator)
        self._opener = opener

    def connect(self):
        with self._lock:
            if self._handle is not None:
                return self._handle
            link = self._opener()
            link.open()
            self._handle = link
            logger.info("Calculator link connected")
            return link

    def disconnect(self):
        link = self.remove()
        if link is not None:
            link.close()
            logger.info("Calculator link disconnected")


class ClientGuard(ExclusiveResource):
    """Guard for the RPC client, rebuilt on demand from its URL and timeout"""

    def __init__(self, factory: Callable[[], object]):
        super().__init__("RPC client", factory=factory)

    def reset(self):
        """Drop the client; the next acquire rebuilds it"""
        self.remove()


def _check_stale_lock(path: Path = _LINK_LOCK_FILE) -> bool:
    """
    Check if the link lock file belongs to a dead process.
    Returns True if the lock was stale and cleaned up.
    """
    if not path.exists():
        return False

    try:
        content = path.read_text().strip()
        if not content:
            return False
        pid = int(content.split()[0])
    except (OSError, ValueError):
        return False

    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        logger.warning("Cleaning stale link lock from dead PID %d", pid)
        path.unlink(missing_ok=True)
        return True
    except PermissionError:
        return False

    age = time.time() - path.stat().st_mtime
    if age > _LINK_LOCK_STALE_TIMEOUT:
        logger.warning("Link lock held by PID %d for %.0fs - considering stale", pid, age)
        path.unlink(missing_ok=True)
        return True
    return False


class ProcessLock:
    """Non-blocking cross-process lock on the cable"""

    def __init__(self, path: Path = _LINK_LOCK_FILE):
        self._path = path
        self._fd = None

    def acquire(self):
        if not _HAS_FCNTL:
            return
        _check_stale_lock(self._path)
        fd = open(self._path, 'w')
        try:
            fcntl.flock(fd.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError:
            fd.close()
            raise NotReady("Calculator link is in use by another process")
        fd.write(f"{os.getpid()} {time.time()}\n")
        fd.flush()
        self._fd = fd

    def release(self):
        if self._fd is None:
            return
        try:
            fcntl.flock(self._fd.fileno(), fcntl.LOCK_UN)
        finally:
            self._fd.close()
            self._fd = None
