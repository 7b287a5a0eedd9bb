"""Error kinds raised by the coordination layers.

Lower layers (locks, queue, registry) raise these and never swallow them.
Only the distributor catches broadly, because it must hand back a usable
(possibly partial) result when a peer misbehaves.
"""

from __future__ import annotations

from pathlib import Path


class TaskShareError(Exception):
    """Base exception for task sharing errors."""

    pass


class SyncIOError(TaskShareError, OSError):
    """A shared file could not be opened, created, read, written or renamed."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = str(path) if path is not None else None


class TaskListInUseError(SyncIOError):
    """The task list exists and was written too recently to be overwritten."""

    def __init__(self, path: str | Path, age: float) -> None:
        super().__init__(f"file is just used for {int(age)}s: {path}", path)
        self.age = age


class WaitTimeoutError(TaskShareError, TimeoutError):
    """A polling wait ran past its deadline without acquiring the lock."""

    def __init__(self, timeout: float, iterations: int) -> None:
        super().__init__(f"lock not acquired within {timeout}s ({iterations} polls)")
        self.timeout = timeout
        self.iterations = iterations


class BadInitialStateError(TaskShareError):
    """Lock state left behind by a round that did not terminate cleanly."""

    def __init__(self, paths: list[str]) -> None:
        super().__init__(f"bad initial state: {', '.join(paths)} still locked")
        self.paths = paths
