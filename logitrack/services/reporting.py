"""
Dashboard statistics - point-in-time snapshot of the task workload.

Pure function of its inputs: the caller loads tasks (already narrowed to what
the requester may see) and users, and gets back counts, rates and short task
lists for display. Nothing is mutated and nothing is cached.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from logitrack.models.task import TaskPriority, TaskStatus, TaskType
from logitrack.utils.helpers import EPOCH, utcnow

LIST_LIMIT = 5


@dataclass
class TaskCounts:
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    overdue: int = 0


@dataclass
class AssigneeSummary:
    assignee_id: int
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    user: Optional[Any] = None


@dataclass
class DashboardStats:
    counts: TaskCounts
    completion_rate: float
    on_time_percentage: float
    priorities: Dict[str, int]
    types: Dict[str, int]
    assignees: List[AssigneeSummary] = field(default_factory=list)
    recent_tasks: List[Any] = field(default_factory=list)
    pending_tasks: List[Any] = field(default_factory=list)
    upcoming_deadlines: List[Any] = field(default_factory=list)


def is_overdue(task, now: datetime) -> bool:
    """Open task whose due date has already passed"""
    if task.due_date is None:
        return False
    if task.status in (TaskStatus.COMPLETED, TaskStatus.CANCELLED):
        return False
    return task.due_date < now


def _last_activity(task) -> datetime:
    return task.updated_at or task.created_at or EPOCH


def _key(value) -> str:
    # Enum members and raw strings both count under the plain value
    return getattr(value, "value", value)


def compute_dashboard_stats(
    tasks: Iterable,
    users: Iterable,
    now: Optional[datetime] = None,
    limit: int = LIST_LIMIT,
) -> DashboardStats:
    """Build the dashboard snapshot for the given tasks and users.

    ``now`` defaults to the current UTC time and only affects the overdue
    count, so two calls straddling a due date can differ.
    """
    tasks = list(tasks)
    now = now or utcnow()
    users_by_id = {u.id: u for u in users}

    counts = TaskCounts(total=len(tasks))
    priorities = {p.value: 0 for p in (TaskPriority.URGENT, TaskPriority.HIGH, TaskPriority.MEDIUM, TaskPriority.LOW)}
    types = {t.value: 0 for t in TaskType}
    assignees: Dict[int, AssigneeSummary] = {}
    pending: List[Any] = []
    timed_completions = 0
    on_time = 0

    for task in tasks:
        status = task.status
        if status == TaskStatus.PENDING:
            counts.pending += 1
            pending.append(task)
        elif status == TaskStatus.IN_PROGRESS:
            counts.in_progress += 1
        elif status == TaskStatus.COMPLETED:
            counts.completed += 1
            if task.due_date is not None and task.completed_at is not None:
                timed_completions += 1
                if task.completed_at <= task.due_date:
                    on_time += 1

        if is_overdue(task, now):
            counts.overdue += 1

        priority = _key(task.priority)
        if priority in priorities:
            priorities[priority] += 1
        task_type = _key(task.type)
        if task_type in types:
            types[task_type] += 1

        if task.assigned_to is not None:
            summary = assignees.get(task.assigned_to)
            if summary is None:
                summary = AssigneeSummary(
                    assignee_id=task.assigned_to,
                    user=users_by_id.get(task.assigned_to),
                )
                assignees[task.assigned_to] = summary
            summary.total += 1
            if status == TaskStatus.PENDING:
                summary.pending += 1
            elif status == TaskStatus.IN_PROGRESS:
                summary.in_progress += 1
            elif status == TaskStatus.COMPLETED:
                summary.completed += 1

    completion_rate = counts.completed / counts.total * 100 if counts.total else 0
    # No qualifying completions means no evidence of lateness
    on_time_percentage = on_time / timed_completions * 100 if timed_completions else 100

    recent = sorted(tasks, key=_last_activity, reverse=True)[:limit]
    # Undated pending tasks sort as if due at the epoch, so they lead the list
    pending_by_due = sorted(pending, key=lambda t: t.due_date or EPOCH)[:limit]
    upcoming = sorted((t for t in pending if t.due_date is not None), key=lambda t: t.due_date)[:limit]

    return DashboardStats(
        counts=counts,
        completion_rate=completion_rate,
        on_time_percentage=on_time_percentage,
        priorities=priorities,
        types=types,
        assignees=list(assignees.values()),
        recent_tasks=recent,
        pending_tasks=pending_by_due,
        upcoming_deadlines=upcoming,
    )
