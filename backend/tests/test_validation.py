from datetime import date, datetime, timezone

from gestor.db.models import Priority, Task, TaskStatus
from gestor.services.stats import days_until_due, is_due_soon, is_overdue, progress_percentage
from gestor.services.validation import (
    PROJECT_DEADLINE,
    PROJECT_NAME,
    ValidationResult,
    check_choice,
    check_date,
    check_text,
)


def make_task(task_id: int, status: TaskStatus) -> Task:
    return Task(
        id=task_id,
        title="Tarea",
        description="Descripción de prueba",
        status=status,
        priority=Priority.MEDIA,
        project_id=1,
        assigned_to=2,
        created_at="2026-01-01T00:00:00+00:00",
        due_date="2026-01-10",
    )


def test_check_text_trims_and_bounds():
    result = ValidationResult()

    assert check_text(result, "  Portal  ", PROJECT_NAME) == "Portal"
    assert check_text(result, 42, PROJECT_NAME) is None
    assert check_text(result, "x" * 101, PROJECT_NAME) is None
    assert result.errors == [
        "El nombre del proyecto es requerido",
        "El nombre del proyecto no puede exceder 100 caracteres",
    ]
    assert not result.forbidden


def test_check_date_compares_against_midnight():
    result = ValidationResult()
    today = date(2026, 3, 15)

    assert check_date(result, "2026-03-15T00:00:00Z", PROJECT_DEADLINE, today=today) == "2026-03-15T00:00:00Z"
    assert check_date(result, "2026-03-14T23:59:59", PROJECT_DEADLINE, today=today) is None
    assert check_date(result, "mañana", PROJECT_DEADLINE, today=today) is None
    assert result.errors == [
        "La fecha límite no puede ser anterior a hoy",
        "La fecha límite debe estar en formato ISO8601 (YYYY-MM-DD)",
    ]


def test_check_choice_lists_allowed_values():
    result = ValidationResult()

    assert check_choice(result, "alta", Priority, "La prioridad debe ser una de:") is Priority.ALTA
    assert check_choice(result, "ALTA", Priority, "La prioridad debe ser una de:") is None
    assert result.errors == ["La prioridad debe ser una de: baja, media, alta"]


def test_deny_marks_result_forbidden():
    result = ValidationResult()
    result.add("uno")
    result.deny("dos")

    assert not result.ok
    assert result.forbidden


def test_days_until_due_rounds_up():
    morning = datetime(2026, 1, 9, 12, 0, tzinfo=timezone.utc)
    after = datetime(2026, 1, 10, 6, 0, tzinfo=timezone.utc)

    assert days_until_due("2026-01-10", morning) == 1
    assert days_until_due("2026-01-10", after) == 0
    assert days_until_due("2026-01-01T00:00:00Z", after) == -9
    assert days_until_due("sin fecha", after) is None


def test_overdue_and_due_soon_ignore_completed_tasks():
    open_task = make_task(1, TaskStatus.EN_PROGRESO)
    done_task = make_task(2, TaskStatus.COMPLETADO)

    assert is_overdue(open_task, -1)
    assert not is_overdue(done_task, -1)
    assert is_due_soon(open_task, 7)
    assert not is_due_soon(open_task, 8)
    assert not is_due_soon(done_task, 3)


def test_progress_percentage_rounds_half_up():
    done, pending = TaskStatus.COMPLETADO, TaskStatus.PENDIENTE

    assert progress_percentage([]) == 0
    assert progress_percentage([make_task(1, done), make_task(2, pending), make_task(3, pending)]) == 33
    assert progress_percentage([make_task(1, done), make_task(2, done), make_task(3, pending)]) == 67
    tasks = [make_task(1, done)] + [make_task(i, pending) for i in range(2, 9)]
    assert progress_percentage(tasks) == 13
