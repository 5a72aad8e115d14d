import math
from datetime import datetime, timezone

from gestor.db.models import Task, TaskStatus
from gestor.services.validation import parse_iso


DUE_SOON_DAYS = 7
SECONDS_PER_DAY = 60 * 60 * 24


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def days_until_due(due_date: str, now: datetime | None = None) -> int | None:
    due = parse_iso(due_date)
    if due is None:
        return None
    if due.tzinfo is None:
        due = due.replace(tzinfo=timezone.utc)
    delta = due - (now or utcnow())
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def is_overdue(task: Task, days: int | None) -> bool:
    return days is not None and days < 0 and task.status != TaskStatus.COMPLETADO


def is_due_soon(task: Task, days: int | None) -> bool:
    return days is not None and 0 <= days <= DUE_SOON_DAYS and task.status != TaskStatus.COMPLETADO


def count_status(tasks: list[Task], status: TaskStatus) -> int:
    return sum(1 for task in tasks if task.status == status)


def progress_percentage(tasks: list[Task]) -> int:
    if not tasks:
        return 0
    completed = count_status(tasks, TaskStatus.COMPLETADO)
    # half-up, not banker's rounding
    return math.floor(completed * 100 / len(tasks) + 0.5)
