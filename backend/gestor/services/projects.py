import logging
from dataclasses import asdict, replace
from typing import Any

from gestor.core.errors import Conflict, Forbidden, NotFound
from gestor.db.models import Project, ProjectStatus, TaskStatus, User
from gestor.db.schemas import ProjectDeleted, ProjectTaskOut, TaskBrief, dump
from gestor.db.store import Store
from gestor.services.access import (
    can_access_project,
    check_project_deletion,
    get_visible_projects,
    is_manager,
)
from gestor.services.enrich import project_detail, project_out, user_brief
from gestor.services.stats import (
    count_status,
    days_until_due,
    is_due_soon,
    is_overdue,
    progress_percentage,
    utcnow,
)
from gestor.services.validation import (
    PROJECT_DEADLINE,
    PROJECT_DESCRIPTION,
    PROJECT_NAME,
    ValidationResult,
    check_choice,
    check_date,
    check_requester,
    check_text,
    is_blank,
    is_id,
)


logger = logging.getLogger(__name__)

STATUS_MESSAGE = "El estado debe ser uno de:"


def _get_or_404(store: Store, project_id: int) -> Project:
    project = store.get_project(project_id)
    if project is None:
        raise NotFound("Proyecto no encontrado")
    return project


def list_projects(store: Store, requester: User) -> list[dict[str, Any]]:
    with store.lock:
        return [dump(project_out(store, project)) for project in get_visible_projects(store, requester)]


def get_project(store: Store, project_id: int, requester: User) -> dict[str, Any]:
    with store.lock:
        project = _get_or_404(store, project_id)
        if not can_access_project(store, requester, project.id):
            raise Forbidden("No tienes permisos para ver este proyecto")
        return dump(project_detail(store, project))


def validate_new_project(store: Store, payload: dict[str, Any]) -> tuple[ValidationResult, dict[str, Any]]:
    result = ValidationResult()
    denied = "Solo los usuarios con rol de gerente pueden crear proyectos"

    requester = None
    if "requestedBy" in payload:
        requester = check_requester(result, store, payload["requestedBy"], manager_only=denied)

    raw_name = payload.get("name")
    name = check_text(result, raw_name, PROJECT_NAME)
    description = check_text(result, payload.get("description"), PROJECT_DESCRIPTION)
    deadline = check_date(result, payload.get("deadline"), PROJECT_DEADLINE)

    # createdBy names the gerente owning the project; it defaults to the requester,
    # which check_requester has already vetted
    if "createdBy" in payload or "requestedBy" not in payload:
        raw_creator = payload.get("createdBy")
        if not is_id(raw_creator) or raw_creator == 0:
            result.add("El ID del usuario creador es requerido y debe ser un número")
        else:
            creator = store.get_user(raw_creator)
            if creator is None:
                result.add("El usuario creador no existe")
            elif not is_manager(creator) and not (requester and requester.id == creator.id):
                result.deny(denied)
    else:
        raw_creator = requester.id if requester else None

    raw_status = payload.get("status")
    status = ProjectStatus.PENDIENTE
    if raw_status not in (None, ""):
        status = check_choice(result, raw_status, ProjectStatus, STATUS_MESSAGE)

    if not is_blank(raw_name) and store.find_project_by_name(raw_name):
        result.add("Ya existe un proyecto con ese nombre")

    values = {
        "name": name,
        "description": description,
        "deadline": deadline,
        "created_by": raw_creator,
        "status": status,
    }
    return result, values


def create_project(store: Store, payload: dict[str, Any]) -> dict[str, Any]:
    with store.lock:
        result, values = validate_new_project(store, payload)
        result.raise_if_invalid()
        project = store.create_project(**values)
        logger.info("Project %s created by user %s", project.id, project.created_by)
        return dump(project_out(store, project))


def validate_project_update(
    store: Store, project: Project, payload: dict[str, Any]
) -> tuple[ValidationResult, dict[str, Any]]:
    result = ValidationResult()
    changes: dict[str, Any] = {}

    check_requester(
        result,
        store,
        payload.get("requestedBy"),
        manager_only="Solo los usuarios con rol de gerente pueden actualizar proyectos",
    )

    if "name" in payload:
        name = check_text(result, payload["name"], PROJECT_NAME)
        if name and store.find_project_by_name(name, exclude_id=project.id):
            result.add("Ya existe otro proyecto con ese nombre")
        changes["name"] = name

    if "description" in payload:
        changes["description"] = check_text(result, payload["description"], PROJECT_DESCRIPTION)

    if "deadline" in payload:
        changes["deadline"] = check_date(result, payload["deadline"], PROJECT_DEADLINE)

    if "status" in payload:
        changes["status"] = check_choice(result, payload["status"], ProjectStatus, STATUS_MESSAGE)

    if "createdBy" in payload:
        raw_creator = payload["createdBy"]
        if not is_id(raw_creator) or raw_creator == 0:
            result.add("El ID del usuario creador debe ser un número")
        else:
            creator = store.get_user(raw_creator)
            if creator is None:
                result.add("El usuario creador no existe")
            elif not is_manager(creator):
                result.add("Solo los usuarios con rol de gerente pueden ser asignados como creadores")
        changes["created_by"] = raw_creator

    return result, changes


def update_project(store: Store, project_id: int, payload: dict[str, Any]) -> dict[str, Any]:
    with store.lock:
        project = _get_or_404(store, project_id)
        result, changes = validate_project_update(store, project, payload)
        result.raise_if_invalid()
        updated = store.save_project(replace(project, **changes))
        logger.info("Project %s updated fields %s", updated.id, sorted(changes))
        return dump(project_detail(store, updated))


def delete_project(store: Store, project_id: int, requested_by: Any) -> dict[str, Any]:
    with store.lock:
        project = _get_or_404(store, project_id)

        result = ValidationResult()
        check_requester(
            result,
            store,
            requested_by,
            manager_only="Solo los usuarios con rol de gerente pueden eliminar proyectos",
        )
        result.raise_if_invalid()

        tasks = store.tasks_for_project(project.id)
        check = check_project_deletion(project, tasks)
        if not check.allowed:
            logger.warning("Refused to delete project %s (%s, %s tasks)", project.id, project.status.value, len(tasks))
            raise Conflict(
                check.message,
                data={
                    "projectStatus": project.status.value,
                    "tasksCount": len(tasks),
                    "completedTasksCount": count_status(tasks, TaskStatus.COMPLETADO),
                    "associatedTasks": [
                        dump(TaskBrief(id=task.id, title=task.title, status=task.status, assigned_to=task.assigned_to))
                        for task in tasks
                    ],
                    "details": check.details,
                },
            )

        store.delete_project(project.id)

    logger.info("Project %s deleted", project.id)
    return dump(
        ProjectDeleted(id=project.id, name=project.name, description=project.description, status=project.status)
    )


def list_project_tasks(
    store: Store,
    project_id: int,
    requester: User,
    status: str | None = None,
    priority: str | None = None,
    assigned_to: str | None = None,
) -> dict[str, Any]:
    with store.lock:
        return _collect_project_tasks(store, project_id, requester, status, priority, assigned_to)


def _collect_project_tasks(
    store: Store,
    project_id: int,
    requester: User,
    status: str | None,
    priority: str | None,
    assigned_to: str | None,
) -> dict[str, Any]:
    project = _get_or_404(store, project_id)
    if not can_access_project(store, requester, project.id):
        raise Forbidden("No tienes permisos para ver las tareas de este proyecto")

    tasks = store.tasks_for_project(project.id)
    if not is_manager(requester):
        tasks = [task for task in tasks if task.assigned_to == requester.id]

    if status:
        tasks = [task for task in tasks if task.status.value == status]
    if priority:
        tasks = [task for task in tasks if task.priority.value == priority]

    assigned_filter = None
    if assigned_to:
        try:
            assigned_filter = int(assigned_to)
        except ValueError:
            assigned_filter = None
    if assigned_filter is not None:
        tasks = [task for task in tasks if task.assigned_to == assigned_filter]

    now = utcnow()
    rows: list[ProjectTaskOut] = []
    for task in tasks:
        days = days_until_due(task.due_date, now)
        rows.append(
            ProjectTaskOut(
                **asdict(task),
                assigned_to_user=user_brief(store, task.assigned_to),
                days_until_due=days,
                is_overdue=is_overdue(task, days),
                is_due_soon=is_due_soon(task, days),
            )
        )

    statistics = {
        "total": len(tasks),
        "pending": count_status(tasks, TaskStatus.PENDIENTE),
        "inProgress": count_status(tasks, TaskStatus.EN_PROGRESO),
        "completed": count_status(tasks, TaskStatus.COMPLETADO),
        "overdue": sum(1 for row in rows if row.is_overdue),
        "dueSoon": sum(1 for row in rows if row.is_due_soon),
        "progressPercentage": progress_percentage(tasks),
    }

    return {
        "project": dump(project_out(store, project)),
        "tasks": [dump(row) for row in rows],
        "statistics": statistics,
        "filters": {
            "status": status or None,
            "priority": priority or None,
            "assignedTo": assigned_filter,
        },
    }
