from dataclasses import dataclass, field

from gestor.db.models import Project, ProjectStatus, Role, Task, TaskStatus, User
from gestor.db.store import Store


MEMBER_EDITABLE_TASK_FIELDS = {"status", "requestedBy"}


def is_manager(user: User) -> bool:
    return user.role == Role.GERENTE


def get_visible_projects(store: Store, user: User) -> list[Project]:
    if is_manager(user):
        return store.list_projects()

    project_ids = {task.project_id for task in store.tasks_assigned_to(user.id)}
    return [project for project in store.list_projects() if project.id in project_ids]


def can_access_project(store: Store, user: User, project_id: int) -> bool:
    if is_manager(user):
        return store.get_project(project_id) is not None

    return any(task.project_id == project_id for task in store.tasks_assigned_to(user.id))


def get_visible_tasks(store: Store, user: User) -> list[Task]:
    if is_manager(user):
        return store.list_tasks()

    return store.tasks_assigned_to(user.id)


def can_view_task(user: User, task: Task | None) -> bool:
    if is_manager(user):
        return True

    return task is not None and task.assigned_to == user.id


def can_update_task(user: User, task: Task, payload: dict) -> bool:
    if is_manager(user):
        return True

    is_own_task = task.assigned_to == user.id
    return set(payload.keys()).issubset(MEMBER_EDITABLE_TASK_FIELDS) and is_own_task


def can_manage_account(actor: User, target: User) -> bool:
    return is_manager(actor) or actor.id == target.id


@dataclass
class DeletionCheck:
    allowed: bool
    message: str = ""
    details: list[str] = field(default_factory=list)


def check_project_deletion(project: Project, tasks: list[Task]) -> DeletionCheck:
    """A project with tasks may only go once it and all its tasks are completed."""
    if not tasks:
        return DeletionCheck(allowed=True)

    total = len(tasks)
    completed = sum(1 for task in tasks if task.status == TaskStatus.COMPLETADO)

    if project.status == ProjectStatus.COMPLETADO and completed == total:
        return DeletionCheck(allowed=True)

    if project.status == ProjectStatus.CANCELADO:
        return DeletionCheck(
            allowed=False,
            message="No se puede eliminar el proyecto cancelado porque tiene tareas asociadas",
            details=[
                f"El proyecto tiene {total} tareas asociadas",
                "Elimine o reasigne las tareas antes de eliminar el proyecto cancelado",
            ],
        )

    if project.status == ProjectStatus.COMPLETADO:
        return DeletionCheck(
            allowed=False,
            message="No se puede eliminar el proyecto completado porque tiene tareas sin completar",
            details=[
                f"El proyecto tiene {total - completed} tareas sin completar",
                "Complete o reasigne las tareas pendientes antes de eliminar el proyecto",
            ],
        )

    return DeletionCheck(
        allowed=False,
        message="No se puede eliminar el proyecto porque tiene tareas asociadas",
        details=[
            f"El proyecto tiene {total} tareas asociadas",
            "Elimine o reasigne las tareas antes de eliminar el proyecto",
        ],
    )
