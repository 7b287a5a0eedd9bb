"""Filesystem synchronization primitives.

Provides the building blocks participants coordinate with:
- Exclusive file locks that die with their holder
- Polling wait/notify on top of a lock
- Rendezvous with implicit leader election

Example:
    from taskshare.sync import rendezvous

    result = rendezvous("barrier1.lock", timeout=0.5, leader_action=setup)
"""

from taskshare.sync.barrier import LeaderAction, RendezvousResult, Role, rendezvous
from taskshare.sync.condition import PollingCondition
from taskshare.sync.lock import ExclusiveFileLock, is_locked

__all__ = [
    "ExclusiveFileLock",
    "is_locked",
    "PollingCondition",
    "rendezvous",
    "RendezvousResult",
    "Role",
    "LeaderAction",
]
