"""Tasks domain types and pure business logic.

Ordering rules, completion hours and reorder batch validation. No IO.
"""

from collections import Counter
from typing import Iterable, Optional, Protocol, Sequence
from uuid import UUID

from workledger.core.shared_models import TaskPriority
from workledger.domains.tasks.exceptions import ReorderIntegrityError

PRIORITY_RANK: dict[str, int] = {
    TaskPriority.HIGH.value: 3,
    TaskPriority.MEDIUM.value: 2,
    TaskPriority.LOW.value: 1,
}


class Sortable(Protocol):
    """Anything with the fields the display order reads."""

    id: UUID
    priority: str
    position: int


class Completable(Protocol):
    """Anything with the fields completion hours are derived from."""

    hours_spent: Optional[float]
    est_hours: Optional[int]


class ReorderEntry(Protocol):
    """One requested ``(task, position)`` pair."""

    id: UUID
    position: int


def priority_rank(priority: Optional[str]) -> int:
    """Rank of a priority; anything unrecognized ranks as medium."""
    return PRIORITY_RANK.get(priority, PRIORITY_RANK[TaskPriority.MEDIUM.value])


def display_sort_key(task: Sortable) -> tuple[int, int, str]:
    """Sort key: higher priority first, then position, then ID."""
    return (-priority_rank(task.priority), task.position, str(task.id))


def sort_for_display(tasks: Iterable[Sortable]) -> list:
    """Return *tasks* in display order. Does not mutate the input."""
    return sorted(tasks, key=display_sort_key)


def completion_hours(task: Completable, default_hours: float) -> float:
    """Hours charged to the ledger when a task is completed.

    The first of ``hours_spent``, ``est_hours`` and *default_hours* that is
    not None. Zero is a real value and is not skipped.
    """
    if task.hours_spent is not None:
        return float(task.hours_spent)
    if task.est_hours is not None:
        return float(task.est_hours)
    return float(default_hours)


def validate_reorder_batch(partition: Sequence[Sortable], order: Sequence[ReorderEntry]) -> None:
    """Check a reorder batch against the current members of its partition.

    Raises ReorderIntegrityError when a task is outside the partition, when a
    task or position repeats, or when a new position collides with a task
    that is not part of the batch.
    """
    members = {task.id: task for task in partition}

    foreign = [entry.id for entry in order if entry.id not in members]
    if foreign:
        raise ReorderIntegrityError(
            "Some tasks do not exist, belong to another client or have another status",
            task_ids=foreign,
        )

    repeated_ids = [task_id for task_id, n in Counter(e.id for e in order).items() if n > 1]
    if repeated_ids:
        raise ReorderIntegrityError("A task appears more than once", task_ids=repeated_ids)

    positions = Counter(entry.position for entry in order)
    if any(n > 1 for n in positions.values()):
        raise ReorderIntegrityError("Two tasks cannot share a position")

    moved = {entry.id for entry in order}
    collisions = [
        task.id for task in partition if task.id not in moved and task.position in positions
    ]
    if collisions:
        raise ReorderIntegrityError(
            "New positions collide with tasks outside the batch", task_ids=collisions
        )


def next_position_after(max_position: Optional[int]) -> int:
    """Position appended after the current maximum of a partition."""
    return 0 if max_position is None else max_position + 1
