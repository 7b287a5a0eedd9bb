"""Polling wait/notify over a single exclusive file lock.

There is no wait queue: waiting means acquiring the lock and notifying
means releasing it. A notify therefore unblocks at most one waiter, and
which one wins is up to the operating system.
"""

from __future__ import annotations

import logging
import time

from taskshare.errors import WaitTimeoutError
from taskshare.sync.lock import ExclusiveFileLock

logger = logging.getLogger(__name__)

DEFAULT_POLL_PERIOD = 0.1  # Seconds


class PollingCondition:
    """Condition-variable style waiting built on lock polling."""

    def __init__(self, poll_period: float = DEFAULT_POLL_PERIOD) -> None:
        self.poll_period = DEFAULT_POLL_PERIOD
        self._lock: ExclusiveFileLock | None = None
        self.configure(poll_period)

    @property
    def lock(self) -> ExclusiveFileLock | None:
        """The lock bound by the last wait."""
        return self._lock

    def configure(self, poll_period: float) -> None:
        """Set the polling interval in seconds."""
        if poll_period <= 0:
            raise ValueError(f"poll period must be positive, got {poll_period}")
        self.poll_period = poll_period

    def wait(self, lock: ExclusiveFileLock) -> None:
        """Bind ``lock`` and block until it is acquired."""
        self._lock = lock
        lock.acquire()

    def wait_until(self, lock: ExclusiveFileLock, timeout: float) -> int:
        """Bind ``lock`` and poll for it until ``timeout`` seconds pass.

        The deadline is read from a monotonic clock, so load on the host
        cannot stretch the wait. The last sleep is cut short at the
        deadline and one final attempt is made there, so a lock released
        before the deadline is always picked up.

        Args:
            lock: Lock to acquire
            timeout: Deadline in seconds

        Returns:
            Number of polling iterations consumed; 0 means the first
            attempt succeeded

        Raises:
            WaitTimeoutError: If the deadline passes first
        """
        self._lock = lock
        deadline = time.monotonic() + timeout
        iterations = 0
        while not lock.try_acquire():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise WaitTimeoutError(timeout, iterations)
            time.sleep(min(self.poll_period, remaining))
            iterations += 1
        return iterations

    def notify_all(self) -> None:
        """Release the bound lock, letting the next poller in."""
        if self._lock is not None:
            self._lock.release()
