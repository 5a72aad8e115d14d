from dataclasses import asdict

from gestor.db.models import Project, Task, TaskStatus
from gestor.db.schemas import (
    ProjectDetailOut,
    ProjectOut,
    TaskOut,
    TaskProjectBrief,
    UserBrief,
)
from gestor.db.store import Store
from gestor.services.stats import count_status, progress_percentage


def user_brief(store: Store, user_id: int) -> UserBrief | None:
    user = store.get_user(user_id)
    if user is None:
        return None
    return UserBrief(id=user.id, name=user.name, email=user.email)


def project_out(store: Store, project: Project) -> ProjectOut:
    return ProjectOut(**asdict(project), created_by_user=user_brief(store, project.created_by))


def project_detail(store: Store, project: Project) -> ProjectDetailOut:
    tasks = store.tasks_for_project(project.id)
    return ProjectDetailOut(
        **asdict(project),
        created_by_user=user_brief(store, project.created_by),
        total_tasks=len(tasks),
        completed_tasks=count_status(tasks, TaskStatus.COMPLETADO),
        progress_percentage=progress_percentage(tasks),
        team_size=len({task.assigned_to for task in tasks}),
    )


def task_project_brief(store: Store, project_id: int) -> TaskProjectBrief | None:
    project = store.get_project(project_id)
    if project is None:
        return None
    return TaskProjectBrief(
        id=project.id,
        name=project.name,
        status=project.status,
        created_by=user_brief(store, project.created_by),
    )


def task_out(store: Store, task: Task) -> TaskOut:
    return TaskOut(
        **asdict(task),
        assigned_to_user=user_brief(store, task.assigned_to),
        project=task_project_brief(store, task.project_id),
    )
