"""Leaderless task distribution across processes sharing a filesystem."""

from taskshare.errors import (
    BadInitialStateError,
    SyncIOError,
    TaskListInUseError,
    TaskShareError,
    WaitTimeoutError,
)
from taskshare.jobs import DistributorConfig, ProcessRegistry, TaskDistributor, TaskQueue
from taskshare.sync import ExclusiveFileLock, PollingCondition, rendezvous

__version__ = "0.1.0"

__all__ = [
    "TaskDistributor",
    "DistributorConfig",
    "TaskQueue",
    "ProcessRegistry",
    "ExclusiveFileLock",
    "PollingCondition",
    "rendezvous",
    "TaskShareError",
    "SyncIOError",
    "TaskListInUseError",
    "WaitTimeoutError",
    "BadInitialStateError",
]
