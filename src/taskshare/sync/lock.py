"""Exclusive file locks backed by OS advisory locking.

A lock is identified by a filesystem path. The lock state lives in the
kernel, attached to an open file descriptor, so a crashed holder releases
it automatically. The existence or content of the file never means
"locked".

Example:
    lock = ExclusiveFileLock("barrier1.lock")
    if lock.try_acquire():
        try:
            do_critical_work()
        finally:
            lock.release()

    # Or blocking, as a context manager
    with ExclusiveFileLock("share.lock"):
        do_critical_work()
"""

from __future__ import annotations

import fcntl
import logging
import os
from pathlib import Path
from types import TracebackType

from filelock import FileLock, Timeout

from taskshare.errors import SyncIOError

logger = logging.getLogger(__name__)


class ExclusiveFileLock:
    """Non-reentrant mutual exclusion over one filesystem path.

    The backing file is created on construction. Separate instances on the
    same path exclude each other, whether they live in different processes,
    different threads, or the same thread.

    Args:
        path: Lock file path (content irrelevant)
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        try:
            self.path.touch(exist_ok=True)
        except OSError as e:
            raise SyncIOError(f"fail to create lock: {self.path}", self.path) from e
        self._lock = FileLock(str(self.path), thread_local=False)

    @property
    def is_held(self) -> bool:
        """Whether this instance currently holds the lock."""
        return self._lock.is_locked

    def acquire(self) -> None:
        """Block until the lock is free, then hold it."""
        if self.is_held:
            raise RuntimeError(f"lock already held by this instance: {self.path}")
        try:
            self._lock.acquire()
        except OSError as e:
            raise SyncIOError(f"fail to lock: {self.path}", self.path) from e

    def try_acquire(self) -> bool:
        """Attempt to take the lock without blocking.

        Returns:
            True if the lock is now held by this instance
        """
        if self.is_held:
            return False
        try:
            self._lock.acquire(blocking=False)
        except Timeout:
            return False
        except OSError as e:
            raise SyncIOError(f"fail to lock: {self.path}", self.path) from e
        return True

    def release(self) -> None:
        """Release the lock if held."""
        if self.is_held:
            self._lock.release(force=True)

    def __enter__(self) -> ExclusiveFileLock:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "held" if self.is_held else "free"
        return f"ExclusiveFileLock({str(self.path)!r}, {state})"


def is_locked(path: str | Path) -> bool:
    """Probe whether some other descriptor holds a lock on ``path``.

    A missing file is unlocked. A file that exists but cannot be opened is
    reported as locked, since its state cannot be proven free.
    """
    path = Path(path)
    if not path.exists():
        return False
    try:
        fd = os.open(path, os.O_RDONLY)
    except OSError:
        logger.debug(f"Cannot open {path} for lock probe, assuming locked")
        return True
    try:
        fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
    except BlockingIOError:
        return True
    else:
        fcntl.flock(fd, fcntl.LOCK_UN)
        return False
    finally:
        os.close(fd)
