"""Line-oriented shared task list with atomic partial drains.

The task list is one file holding one task identifier per line. It is
never edited in place: a drain copies the unclaimed lines to a scratch
sibling and renames it over the original, all while holding a separate
drain lock, so readers only ever see a complete remainder and two drains
cannot interleave.

Example:
    queue = TaskQueue("task.txt", "share.lock")
    queue.publish(["task1", "task2", "task3"])

    mine = queue.drain(2)     # ["task1", "task2"]
    rest = queue.drain_all()  # ["task3"], file is now empty
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterable
from pathlib import Path

from taskshare.errors import SyncIOError
from taskshare.observability.metrics import get_metrics
from taskshare.sync.lock import ExclusiveFileLock

logger = logging.getLogger(__name__)

DRAIN_ALL = -1


class TaskQueue:
    """Shared task list backed by a text file.

    Args:
        path: Task list file
        lock_path: Auxiliary lock serializing drains (distinct from ``path``)
    """

    def __init__(self, path: str | Path, lock_path: str | Path) -> None:
        self.path = Path(path)
        self.lock_path = Path(lock_path)
        if self.path == self.lock_path:
            raise ValueError("drain lock must not be the task list itself")

    @property
    def scratch_path(self) -> Path:
        """Scratch file a drain writes the remainder to before renaming."""
        return self.path.with_name(self.path.name + ".tmp")

    def publish(self, tasks: Iterable[str]) -> int:
        """Write ``tasks`` as the new task list, one per line.

        Returns:
            Number of tasks written
        """
        lines = []
        for task in tasks:
            task = str(task)
            if "\n" in task:
                raise ValueError(f"task identifier must be a single line: {task!r}")
            lines.append(f"{task}\n")
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                f.writelines(lines)
        except OSError as e:
            raise SyncIOError(f"fail to open file: {self.path}", self.path) from e
        logger.debug(f"Published {len(lines)} tasks to {self.path}")
        return len(lines)

    def drain(self, count: int = DRAIN_ALL) -> list[str]:
        """Claim the first ``count`` tasks.

        A positive count claims up to that many lines, zero claims nothing
        and a negative count claims every line. Unclaimed lines keep their
        order and are made visible through a single rename.

        Returns:
            Claimed task identifiers, stripped, in list order

        Raises:
            SyncIOError: If the list, scratch file or lock cannot be used
        """
        metrics = get_metrics()
        claimed: list[str] = []
        remaining = count
        scratch = self.scratch_path

        with ExclusiveFileLock(self.lock_path):
            started = time.monotonic()
            try:
                with (
                    open(self.path, encoding="utf-8") as src,
                    open(scratch, "w", encoding="utf-8") as dst,
                ):
                    for line in src:
                        if remaining:
                            claimed.append(line.strip())
                            if remaining > 0:
                                remaining -= 1
                        else:
                            dst.write(line)
                os.replace(scratch, self.path)
            except OSError as e:
                raise SyncIOError(f"fail to drain tasks: {self.path}", self.path) from e
            metrics.drain_duration_seconds.observe(time.monotonic() - started)

        logger.debug(f"Drained {len(claimed)} tasks from {self.path} (requested {count})")
        return claimed

    def drain_all(self) -> list[str]:
        """Claim every remaining task."""
        return self.drain(DRAIN_ALL)

    def peek(self) -> list[str]:
        """Unclaimed tasks, without claiming them."""
        try:
            with open(self.path, encoding="utf-8") as f:
                return [line.strip() for line in f]
        except FileNotFoundError:
            return []
        except OSError as e:
            raise SyncIOError(f"fail to open file: {self.path}", self.path) from e

    def age(self) -> float | None:
        """Seconds since the task list was last written, or None if absent."""
        try:
            mtime = self.path.stat().st_mtime
        except FileNotFoundError:
            return None
        except OSError as e:
            raise SyncIOError(f"fail to stat file: {self.path}", self.path) from e
        return max(0.0, time.time() - mtime)

    def __len__(self) -> int:
        return len(self.peek())
