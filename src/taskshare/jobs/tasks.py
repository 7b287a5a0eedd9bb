"""Synthetic task generation and consumption for demo rounds."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

TaskHandler = Callable[[str], T]


def generate_tasks(count: int, shuffle: bool = True, seed: int | None = None) -> list[str]:
    """Build ``task1`` .. ``task<count>``, shuffled unless told otherwise."""
    if count < 0:
        raise ValueError(f"task count must not be negative, got {count}")
    tasks = [f"task{i}" for i in range(1, count + 1)]
    if shuffle:
        random.Random(seed).shuffle(tasks)
    return tasks


def consume_tasks(
    tasks: Sequence[str],
    handler: TaskHandler[T],
    num_threads: int = 1,
) -> list[T]:
    """Run ``handler`` over each claimed task.

    Results come back in task order even when handlers run on several
    threads.
    """
    if num_threads < 1:
        raise ValueError(f"need at least one thread, got {num_threads}")
    if num_threads == 1 or len(tasks) <= 1:
        return [handler(task) for task in tasks]

    logger.debug(f"Consuming {len(tasks)} tasks on {num_threads} threads")
    with ThreadPoolExecutor(max_workers=num_threads, thread_name_prefix="taskshare") as pool:
        return list(pool.map(handler, tasks))
