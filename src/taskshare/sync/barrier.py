"""Rendezvous with implicit leader election.

Every participant polls the same lock file. Whoever finds it free on the
first attempt is the leader: it runs the setup action, then keeps holding
the lock until the full window has elapsed. Followers keep polling; each
one that gets in releases immediately, passing the signal on to the next.

Because a follower can only get in after the leader lets go, the leader's
setup happens before any follower proceeds. Followers poll for one extra
poll period past the window so that a leader releasing right at the end
of its hold is still seen.

Example:
    result = rendezvous("barrier1.lock", 0.5, write_tasks, (path, tasks))
    if result.is_leader:
        logger.info("initialized the round")
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from taskshare.errors import WaitTimeoutError
from taskshare.observability.metrics import get_metrics
from taskshare.observability.timing import Stopwatch
from taskshare.sync.condition import DEFAULT_POLL_PERIOD, PollingCondition
from taskshare.sync.lock import ExclusiveFileLock

logger = logging.getLogger(__name__)

LeaderAction = Callable[..., Any]


class Role(str, Enum):
    """Which side of the election a participant landed on."""

    LEADER = "leader"
    FOLLOWER = "follower"


@dataclass(frozen=True)
class RendezvousResult:
    """Outcome of passing a rendezvous."""

    role: Role
    iterations: int
    held_for: float

    @property
    def is_leader(self) -> bool:
        return self.role is Role.LEADER


def rendezvous(
    lock_path: str | Path,
    timeout: float,
    leader_action: LeaderAction | None = None,
    action_args: Any = None,
    poll_period: float = DEFAULT_POLL_PERIOD,
) -> RendezvousResult:
    """Pass a synchronization point, electing a leader on the way.

    Args:
        lock_path: Lock file shared by all participants
        timeout: Window width in seconds; the leader holds the lock this long
        leader_action: Callable run by the leader only
        action_args: Single argument passed to ``leader_action`` when given
        poll_period: Polling interval for followers

    Returns:
        The role taken and how long the lock was held

    Raises:
        WaitTimeoutError: If the lock could not be acquired within
            ``timeout`` plus one poll period
        Exception: Anything raised by ``leader_action``; the lock is
            released before it propagates
    """
    barrier = Path(lock_path).name
    metrics = get_metrics()
    lock = ExclusiveFileLock(lock_path)
    condition = PollingCondition(poll_period)

    try:
        waited = condition.wait_until(lock, timeout + poll_period)
    except WaitTimeoutError:
        metrics.rendezvous_timeouts_total.labels(barrier=barrier).inc()
        raise

    stopwatch = Stopwatch()
    try:
        if waited == 0:
            role = Role.LEADER
            logger.debug(f"Elected leader at {barrier}")
            if leader_action is not None:
                if action_args is not None:
                    leader_action(action_args)
                else:
                    leader_action()
            pad = max(0.0, timeout - stopwatch.stop())
            time.sleep(pad)
        else:
            role = Role.FOLLOWER
            logger.debug(f"Passed {barrier} as follower after {waited} polls")
    finally:
        condition.notify_all()

    metrics.rendezvous_total.labels(barrier=barrier, role=role.value).inc()
    return RendezvousResult(role=role, iterations=waited, held_for=stopwatch.stop())
