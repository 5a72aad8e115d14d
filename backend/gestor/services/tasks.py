import logging
from dataclasses import replace
from typing import Any

from gestor.core.errors import Forbidden, NotFound
from gestor.db.models import Priority, Task, TaskStatus, User
from gestor.db.schemas import TaskDeleted, dump
from gestor.db.store import Store
from gestor.services.access import can_update_task, can_view_task, get_visible_tasks
from gestor.services.enrich import task_out
from gestor.services.validation import (
    TASK_DESCRIPTION,
    TASK_DUE_DATE,
    TASK_TITLE,
    ValidationResult,
    check_choice,
    check_date,
    check_requester,
    check_text,
    is_id,
)


logger = logging.getLogger(__name__)

STATUS_MESSAGE = "El estado debe ser uno de:"
PRIORITY_MESSAGE = "La prioridad debe ser una de:"


def _get_or_404(store: Store, task_id: int) -> Task:
    task = store.get_task(task_id)
    if task is None:
        raise NotFound("Tarea no encontrada")
    return task


def _check_project_ref(result: ValidationResult, store: Store, value: Any, type_message: str) -> None:
    if not is_id(value) or value == 0:
        result.add(type_message)
    elif store.get_project(value) is None:
        result.add("El proyecto especificado no existe")


def _check_assignee_ref(result: ValidationResult, store: Store, value: Any, type_message: str) -> None:
    if not is_id(value) or value == 0:
        result.add(type_message)
    elif store.get_user(value) is None:
        result.add("El usuario asignado no existe")


def list_tasks(store: Store, requester: User) -> list[dict[str, Any]]:
    with store.lock:
        return [dump(task_out(store, task)) for task in get_visible_tasks(store, requester)]


def get_task(store: Store, task_id: int, requester: User) -> dict[str, Any]:
    with store.lock:
        task = store.get_task(task_id)
        # members get the same answer for a missing task as for someone else's
        if not can_view_task(requester, task):
            raise Forbidden("No tienes permisos para ver esta tarea")
        if task is None:
            raise NotFound("Tarea no encontrada")
        return dump(task_out(store, task))


def validate_new_task(store: Store, payload: dict[str, Any]) -> tuple[ValidationResult, dict[str, Any]]:
    result = ValidationResult()

    check_requester(
        result,
        store,
        payload.get("requestedBy"),
        manager_only="Solo los usuarios con rol de gerente pueden crear tareas",
    )

    title = check_text(result, payload.get("title"), TASK_TITLE)
    description = check_text(result, payload.get("description"), TASK_DESCRIPTION)
    _check_project_ref(
        result, store, payload.get("projectId"), "El ID del proyecto es requerido y debe ser un número"
    )
    _check_assignee_ref(
        result, store, payload.get("assignedTo"), "El ID del usuario asignado es requerido y debe ser un número"
    )
    due_date = check_date(result, payload.get("dueDate"), TASK_DUE_DATE)

    priority = Priority.MEDIA
    if payload.get("priority") not in (None, ""):
        priority = check_choice(result, payload["priority"], Priority, PRIORITY_MESSAGE)

    status = TaskStatus.PENDIENTE
    if payload.get("status") not in (None, ""):
        status = check_choice(result, payload["status"], TaskStatus, STATUS_MESSAGE)

    values = {
        "title": title,
        "description": description,
        "project_id": payload.get("projectId"),
        "assigned_to": payload.get("assignedTo"),
        "due_date": due_date,
        "status": status,
        "priority": priority,
    }
    return result, values


def create_task(store: Store, payload: dict[str, Any]) -> dict[str, Any]:
    with store.lock:
        result, values = validate_new_task(store, payload)
        result.raise_if_invalid()
        task = store.create_task(**values)
        logger.info("Task %s created in project %s for user %s", task.id, task.project_id, task.assigned_to)
        return dump(task_out(store, task))


def validate_task_update(
    store: Store, task: Task, payload: dict[str, Any]
) -> tuple[ValidationResult, dict[str, Any]]:
    result = ValidationResult()
    changes: dict[str, Any] = {}

    requester = check_requester(result, store, payload.get("requestedBy"))
    if requester and not can_update_task(requester, task, payload):
        if task.assigned_to != requester.id:
            result.deny("Solo puedes actualizar tareas que te han sido asignadas")
        else:
            result.add("Solo puedes actualizar el estado de tus tareas asignadas")

    if "title" in payload:
        changes["title"] = check_text(result, payload["title"], TASK_TITLE)

    if "description" in payload:
        changes["description"] = check_text(result, payload["description"], TASK_DESCRIPTION)

    if "projectId" in payload:
        _check_project_ref(result, store, payload["projectId"], "El ID del proyecto debe ser un número")
        changes["project_id"] = payload["projectId"]

    if "assignedTo" in payload:
        _check_assignee_ref(result, store, payload["assignedTo"], "El ID del usuario asignado debe ser un número")
        changes["assigned_to"] = payload["assignedTo"]

    if "dueDate" in payload:
        changes["due_date"] = check_date(result, payload["dueDate"], TASK_DUE_DATE)

    if "priority" in payload:
        changes["priority"] = check_choice(result, payload["priority"], Priority, PRIORITY_MESSAGE)

    if "status" in payload:
        changes["status"] = check_choice(result, payload["status"], TaskStatus, STATUS_MESSAGE)

    return result, changes


def update_task(store: Store, task_id: int, payload: dict[str, Any]) -> dict[str, Any]:
    with store.lock:
        task = _get_or_404(store, task_id)
        result, changes = validate_task_update(store, task, payload)
        result.raise_if_invalid()
        updated = store.save_task(replace(task, **changes))
        logger.info("Task %s updated fields %s", updated.id, sorted(changes))
        return dump(task_out(store, updated))


def delete_task(store: Store, task_id: int, requested_by: Any) -> dict[str, Any]:
    with store.lock:
        task = _get_or_404(store, task_id)

        result = ValidationResult()
        check_requester(
            result,
            store,
            requested_by,
            manager_only="Solo los usuarios con rol de gerente pueden eliminar tareas",
        )
        result.raise_if_invalid()

        store.delete_task(task.id)

    logger.info("Task %s deleted from project %s", task.id, task.project_id)
    return dump(TaskDeleted(id=task.id, title=task.title, status=task.status, project_id=task.project_id))
