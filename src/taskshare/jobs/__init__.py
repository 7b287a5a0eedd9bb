"""Task distribution over shared files.

Provides:
- Membership registry counting the participants of a round
- Shared task list with atomic partial drains
- The two-phase distribution round
- Synthetic task generation and consumption

Example:
    from taskshare.jobs import TaskDistributor, generate_tasks

    distributor = TaskDistributor()
    mine = distributor.distribute(generate_tasks(10))
"""

from taskshare.jobs.distributor import DistributorConfig, TaskDistributor
from taskshare.jobs.queue import DRAIN_ALL, TaskQueue
from taskshare.jobs.registry import ProcessRegistry, default_identity
from taskshare.jobs.tasks import consume_tasks, generate_tasks

__all__ = [
    # Distribution
    "TaskDistributor",
    "DistributorConfig",
    # Queue
    "TaskQueue",
    "DRAIN_ALL",
    # Registry
    "ProcessRegistry",
    "default_identity",
    # Tasks
    "generate_tasks",
    "consume_tasks",
]
