"""Tests for polling wait/notify."""

from __future__ import annotations

import threading
import time
from pathlib import Path

import pytest

from taskshare.errors import WaitTimeoutError
from taskshare.sync.condition import DEFAULT_POLL_PERIOD, PollingCondition
from taskshare.sync.lock import ExclusiveFileLock, is_locked


class TestConfigure:
    """Tests for poll period configuration."""

    def test_default_period(self) -> None:
        """Default poll period is 100ms."""
        assert PollingCondition().poll_period == DEFAULT_POLL_PERIOD == 0.1

    def test_configure(self) -> None:
        """Poll period can be changed."""
        condition = PollingCondition()

        condition.configure(0.02)

        assert condition.poll_period == 0.02

    @pytest.mark.parametrize("period", [0, -0.1])
    def test_rejects_non_positive(self, period: float) -> None:
        """Poll period must be positive."""
        with pytest.raises(ValueError):
            PollingCondition(period)


class TestWaitUntil:
    """Tests for deadline-bounded waiting."""

    def test_free_lock_first_attempt(self, tmp_path: Path) -> None:
        """A free lock is acquired with zero iterations."""
        lock = ExclusiveFileLock(tmp_path / "a.lock")
        condition = PollingCondition(0.01)

        assert condition.wait_until(lock, 1.0) == 0
        assert lock.is_held
        assert condition.lock is lock

        condition.notify_all()

    def test_times_out_on_held_lock(self, tmp_path: Path) -> None:
        """A lock held past the deadline raises a timeout."""
        holder = ExclusiveFileLock(tmp_path / "a.lock")
        holder.acquire()
        waiter = ExclusiveFileLock(tmp_path / "a.lock")
        condition = PollingCondition(0.02)

        started = time.monotonic()
        try:
            with pytest.raises(WaitTimeoutError) as exc_info:
                condition.wait_until(waiter, 0.2)
        finally:
            holder.release()

        assert time.monotonic() - started >= 0.2
        assert isinstance(exc_info.value, TimeoutError)
        assert exc_info.value.timeout == 0.2
        assert not waiter.is_held

    def test_acquires_after_release(self, tmp_path: Path) -> None:
        """A lock released before the deadline is acquired after polling."""
        holder = ExclusiveFileLock(tmp_path / "a.lock")
        holder.acquire()
        waiter = ExclusiveFileLock(tmp_path / "a.lock")
        condition = PollingCondition(0.05)
        timeout = 2.0

        timer = threading.Timer(0.2, holder.release)
        timer.start()
        try:
            iterations = condition.wait_until(waiter, timeout)
        finally:
            timer.join()

        assert 1 <= iterations <= timeout / 0.05 + 1
        assert waiter.is_held
        condition.notify_all()

    def test_release_within_single_poll_period(self, tmp_path: Path) -> None:
        """A timeout equal to the poll period still sees an early release."""
        holder = ExclusiveFileLock(tmp_path / "a.lock")
        holder.acquire()
        waiter = ExclusiveFileLock(tmp_path / "a.lock")
        condition = PollingCondition()
        timeout = condition.poll_period

        timer = threading.Timer(timeout / 2, holder.release)
        timer.start()
        try:
            iterations = condition.wait_until(waiter, timeout)
        finally:
            timer.join()

        assert 1 <= iterations <= 2
        assert waiter.is_held
        condition.notify_all()

    def test_last_sleep_stops_at_deadline(self, tmp_path: Path) -> None:
        """A poll period longer than the timeout does not overshoot it."""
        holder = ExclusiveFileLock(tmp_path / "a.lock")
        holder.acquire()
        waiter = ExclusiveFileLock(tmp_path / "a.lock")
        condition = PollingCondition(1.0)

        started = time.monotonic()
        try:
            with pytest.raises(WaitTimeoutError):
                condition.wait_until(waiter, 0.1)
        finally:
            holder.release()

        assert 0.1 <= time.monotonic() - started < 0.5

    def test_zero_timeout_tries_once(self, tmp_path: Path) -> None:
        """A zero timeout makes a single attempt."""
        holder = ExclusiveFileLock(tmp_path / "a.lock")
        holder.acquire()
        condition = PollingCondition()

        try:
            with pytest.raises(WaitTimeoutError) as exc_info:
                condition.wait_until(ExclusiveFileLock(tmp_path / "a.lock"), 0)
        finally:
            holder.release()

        assert exc_info.value.iterations == 0


class TestWaitAndNotify:
    """Tests for blocking wait and notify."""

    def test_wait_acquires(self, tmp_path: Path) -> None:
        """Blocking wait takes the lock."""
        path = tmp_path / "a.lock"
        condition = PollingCondition()

        condition.wait(ExclusiveFileLock(path))

        assert is_locked(path)
        condition.notify_all()
        assert not is_locked(path)

    def test_notify_without_lock(self) -> None:
        """Notify before any wait does nothing."""
        PollingCondition().notify_all()

    def test_notify_unblocks_waiter(self, tmp_path: Path) -> None:
        """Notify lets a blocked waiter in."""
        path = tmp_path / "a.lock"
        first = PollingCondition()
        first.wait(ExclusiveFileLock(path))
        acquired = threading.Event()

        def waiter() -> None:
            second = PollingCondition()
            second.wait(ExclusiveFileLock(path))
            acquired.set()
            second.notify_all()

        thread = threading.Thread(target=waiter)
        thread.start()

        assert not acquired.wait(0.2)
        first.notify_all()
        thread.join(timeout=5)

        assert acquired.is_set()
