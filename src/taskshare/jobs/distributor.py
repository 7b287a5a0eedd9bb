"""Split one task list across every process that shows up for the round.

A round runs in two rendezvous phases over shared files:

1. Each participant registers, then meets at the first barrier. The
   barrier's leader checks for leftovers of a crashed round and publishes
   the task list.
2. Each participant counts the registry and claims an even quota
   (``len(tasks) // participants``).
3. The second barrier waits out everyone's quota drain.
4. Each participant sweeps whatever is left; the integer-division
   remainder goes to whoever gets there first.

The registry is deleted when the round ends, whatever the outcome.

Example:
    distributor = TaskDistributor(DistributorConfig(workdir=Path("/mnt/shared")))
    mine = distributor.distribute(generate_tasks(100))
"""

from __future__ import annotations

import logging
import socket
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from taskshare.config import Settings, settings
from taskshare.errors import (
    BadInitialStateError,
    SyncIOError,
    TaskListInUseError,
    WaitTimeoutError,
)
from taskshare.jobs.queue import TaskQueue
from taskshare.jobs.registry import ProcessRegistry, default_identity
from taskshare.observability.logging import LogContext
from taskshare.observability.metrics import get_metrics
from taskshare.sync.barrier import RendezvousResult, rendezvous
from taskshare.sync.lock import is_locked

logger = logging.getLogger(__name__)


@dataclass
class DistributorConfig:
    """Distributor configuration."""

    # Shared directory and the files inside it
    workdir: Path = Path(".")
    task_file: str = "task.txt"
    process_file: str = "process.txt"
    barrier1_file: str = "barrier1.lock"
    barrier2_file: str = "barrier2.lock"
    share_lock_file: str = "share.lock"

    # Extra lock checked for stale state; defaults to the drain lock
    stale_lock_file: str | None = None

    # Rendezvous timing (seconds)
    barrier1_wait: float = 0.5
    barrier2_wait: float = 0.1
    poll_period: float = 0.1

    # Freshness guard on an existing task list
    freshness_floor: float = 30.0
    debug: bool = False

    def path(self, name: str) -> Path:
        """Resolve a shared file name against the working directory."""
        return Path(self.workdir) / name

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> DistributorConfig:
        """Build a config from environment-backed settings."""
        s = source if source is not None else settings
        return cls(
            workdir=s.workdir,
            task_file=s.task_file,
            process_file=s.process_file,
            barrier1_file=s.barrier1_file,
            barrier2_file=s.barrier2_file,
            share_lock_file=s.share_lock_file,
            barrier1_wait=s.barrier1_wait,
            barrier2_wait=s.barrier2_wait,
            poll_period=s.poll_period,
            freshness_floor=s.freshness_floor,
            debug=s.debug,
        )


class TaskDistributor:
    """Runs distribution rounds for one participant.

    Args:
        config: Shared paths and timing; read from settings when omitted
        identity: Line registered for this participant (``<host>-<pid>``)
    """

    def __init__(
        self,
        config: DistributorConfig | None = None,
        identity: str | None = None,
    ) -> None:
        self.config = config or DistributorConfig.from_settings()
        self.identity = identity or default_identity()
        self.registry = ProcessRegistry(self.config.path(self.config.process_file))
        self.queue = TaskQueue(
            self.config.path(self.config.task_file),
            self.config.path(self.config.share_lock_file),
        )

    @property
    def stale_check_paths(self) -> list[Path]:
        """Files that must be unlocked before a leader starts a round."""
        extra = self.config.stale_lock_file or self.config.share_lock_file
        return [
            self.registry.path,
            self.config.path(extra),
            self.config.path(self.config.barrier2_file),
        ]

    def _diag(self, message: str) -> None:
        logger.log(logging.INFO if self.config.debug else logging.DEBUG, message)

    def prepare_round(self, tasks: list[str]) -> None:
        """Leader action: publish ``tasks`` after checking for stale state.

        Raises:
            BadInitialStateError: A round file is still locked by someone
            TaskListInUseError: The task list was written too recently
        """
        stale = [str(path) for path in self.stale_check_paths if is_locked(path)]
        if stale:
            raise BadInitialStateError(stale)

        age = self.queue.age()
        if age is not None and not self.config.debug and age < self.config.freshness_floor:
            raise TaskListInUseError(self.queue.path, age)

        count = self.queue.publish(tasks)
        logger.info(f"Published {count} tasks to {self.queue.path}")

    def _first_rendezvous(self, tasks: list[str]) -> RendezvousResult | None:
        try:
            return rendezvous(
                self.config.path(self.config.barrier1_file),
                self.config.barrier1_wait,
                self.prepare_round,
                tasks,
                poll_period=self.config.poll_period,
            )
        except WaitTimeoutError:
            self._diag("miss first barrier")
        except BadInitialStateError as e:
            logger.warning(f"Skipping round setup: {e}")
        return None

    def distribute(self, tasks: Iterable[str]) -> list[str]:
        """Run one round and return the tasks this participant claimed.

        Failures never propagate: a round that breaks part-way returns
        whatever was claimed before the failure, possibly nothing.
        """
        tasks = list(tasks)
        metrics = get_metrics()
        claimed: list[str] = []
        status = "failed"

        with LogContext(participant=self.identity):
            try:
                self._diag(f"hostname: {socket.gethostname()}")
                self._diag(f"identity: {self.identity}")
                self.registry.register(self.identity)

                with LogContext(phase="setup"):
                    first = self._first_rendezvous(tasks)
                    if first is not None and first.is_leader:
                        self._diag("initialized round as leader")

                participants = self.registry.count()
                metrics.participants.set(participants)
                self._diag(f"#processes: {participants}")
                quota = len(tasks) // participants

                with LogContext(phase="quota"):
                    batch = self.queue.drain(quota)
                    claimed.extend(batch)
                    metrics.tasks_drained_total.labels(phase="quota").inc(len(batch))

                rendezvous(
                    self.config.path(self.config.barrier2_file),
                    self.config.barrier2_wait,
                    poll_period=self.config.poll_period,
                )

                with LogContext(phase="sweep"):
                    batch = self.queue.drain_all()
                    claimed.extend(batch)
                    metrics.tasks_drained_total.labels(phase="sweep").inc(len(batch))

                status = "completed"
                logger.info(f"Claimed {len(claimed)} of {len(tasks)} tasks")
            except WaitTimeoutError as e:
                status = "timeout"
                logger.debug(f"Round ended early: {e}")
            except SyncIOError as e:
                status = "io_error"
                logger.warning(str(e))
            except Exception:
                logger.exception("Distribution round failed")
            finally:
                try:
                    self.registry.clear()
                except SyncIOError as e:
                    logger.warning(str(e))

        metrics.rounds_total.labels(status=status).inc()
        return claimed
