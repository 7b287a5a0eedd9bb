"""Append-only membership log for the participants of a round.

Each participant appends one identity line under an exclusive lock. The
number of lines, read under a shared lock, is the participant count.
"""

from __future__ import annotations

import fcntl
import logging
import os
import socket
from pathlib import Path

from taskshare.errors import SyncIOError

logger = logging.getLogger(__name__)


def default_identity() -> str:
    """Identity for this process: ``<hostname>-<pid>``."""
    return f"{socket.gethostname()}-{os.getpid()}"


class ProcessRegistry:
    """Lock-protected membership log stored in one file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def register(self, identity: str) -> None:
        """Append ``identity`` as one line, creating the log if needed."""
        if "\n" in identity:
            raise ValueError(f"identity must be a single line: {identity!r}")
        try:
            with open(self.path, "a", encoding="utf-8") as f:
                fcntl.flock(f, fcntl.LOCK_EX)
                f.write(f"{identity}\n")
                f.flush()
        except OSError as e:
            raise SyncIOError(f"fail to open file: {self.path}", self.path) from e
        logger.debug(f"Registered {identity} in {self.path}")

    def members(self) -> list[str]:
        """Registered identities in registration order."""
        try:
            with open(self.path, encoding="utf-8") as f:
                fcntl.flock(f, fcntl.LOCK_SH)
                return [line.strip() for line in f if line.strip()]
        except FileNotFoundError:
            return []
        except OSError as e:
            raise SyncIOError(f"fail to open file: {self.path}", self.path) from e

    def count(self) -> int:
        """Number of registered participants, never less than 1."""
        return max(len(self.members()), 1)

    def clear(self) -> None:
        """Delete the log at the end of a round."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise SyncIOError(f"fail to remove file: {self.path}", self.path) from e
