"""
Role-specific aggregate figures for the landing dashboard.

Members get counts over their own tasks and the projects those tasks
belong to.  Managers get system-wide counts, per-project progress, the
tasks that need attention and a per-member workload summary.
"""

from collections import Counter
from datetime import datetime
from typing import Any

from gestor.db.models import ProjectStatus, Task, TaskStatus, User
from gestor.db.store import Store
from gestor.services.access import get_visible_projects, is_manager
from gestor.services.stats import (
    count_status,
    days_until_due,
    is_due_soon,
    is_overdue,
    progress_percentage,
    utcnow,
)
from gestor.services.validation import parse_iso


MISSING_PROJECT = "Proyecto no encontrado"


def _user_info(user: User) -> dict[str, Any]:
    return {"id": user.id, "name": user.name, "role": user.role.value}


def _project_name(store: Store, task: Task) -> str:
    project = store.get_project(task.project_id)
    return project.name if project else MISSING_PROJECT


def _deadline_key(deadline: str) -> datetime:
    parsed = parse_iso(deadline)
    if parsed is None:
        return datetime.max
    # compare naive with naive
    return parsed.replace(tzinfo=None)


def build_dashboard(store: Store, requester: User, now: datetime | None = None) -> dict[str, Any]:
    now = now or utcnow()
    with store.lock:
        if is_manager(requester):
            return _manager_dashboard(store, requester, now)
        return _member_dashboard(store, requester, now)


def _member_dashboard(store: Store, user: User, now: datetime) -> dict[str, Any]:
    tasks = store.tasks_assigned_to(user.id)
    projects = get_visible_projects(store, user)
    days = {task.id: days_until_due(task.due_date, now) for task in tasks}

    overdue = [task for task in tasks if is_overdue(task, days[task.id])]
    due_soon = [task for task in tasks if is_due_soon(task, days[task.id])]

    upcoming = [
        {
            "taskId": task.id,
            "taskTitle": task.title,
            "projectName": _project_name(store, task),
            "dueDate": task.due_date,
            "priority": task.priority.value,
            "daysUntilDue": days[task.id],
        }
        for task in due_soon
    ]
    upcoming.sort(key=lambda item: item["daysUntilDue"])

    return {
        "userInfo": _user_info(user),
        "myTasks": {
            "total": len(tasks),
            "pending": count_status(tasks, TaskStatus.PENDIENTE),
            "inProgress": count_status(tasks, TaskStatus.EN_PROGRESO),
            "completed": count_status(tasks, TaskStatus.COMPLETADO),
            "overdue": len(overdue),
            "dueSoon": len(due_soon),
        },
        "myProjects": {
            "total": len(projects),
            "withTasksAssigned": len(projects),
            "projectsBreakdown": dict(Counter(project.status.value for project in projects)),
        },
        "upcomingDeadlines": upcoming,
    }


def _manager_dashboard(store: Store, user: User, now: datetime) -> dict[str, Any]:
    projects = store.list_projects()
    tasks = store.list_tasks()
    days = {task.id: days_until_due(task.due_date, now) for task in tasks}

    overdue = [task for task in tasks if is_overdue(task, days[task.id])]
    due_soon = [task for task in tasks if is_due_soon(task, days[task.id])]
    unassigned = [task for task in tasks if store.get_user(task.assigned_to) is None]

    progress = []
    for project in sorted(projects, key=lambda item: _deadline_key(item.deadline)):
        project_tasks = store.tasks_for_project(project.id)
        progress.append(
            {
                "id": project.id,
                "name": project.name,
                "status": project.status.value,
                "totalTasks": len(project_tasks),
                "completedTasks": count_status(project_tasks, TaskStatus.COMPLETADO),
                "progressPercentage": progress_percentage(project_tasks),
                "deadline": project.deadline,
            }
        )

    critical = []
    for task in due_soon + overdue:
        assignee = store.get_user(task.assigned_to)
        critical.append(
            {
                "taskId": task.id,
                "taskTitle": task.title,
                "projectName": _project_name(store, task),
                "assignedTo": assignee.name if assignee else "Sin asignar",
                "dueDate": task.due_date,
                "priority": task.priority.value,
                "status": task.status.value,
                "daysUntilDue": days[task.id],
                "isOverdue": days[task.id] < 0,
            }
        )
    critical.sort(key=lambda item: item["daysUntilDue"])

    team = []
    for member in store.list_users():
        if is_manager(member):
            continue
        member_tasks = store.tasks_assigned_to(member.id)
        completed = count_status(member_tasks, TaskStatus.COMPLETADO)
        team.append(
            {
                "userId": member.id,
                "userName": member.name,
                "totalTasks": len(member_tasks),
                "completedTasks": completed,
                "pendingTasks": len(member_tasks) - completed,
            }
        )

    project_statuses = Counter(project.status for project in projects)
    return {
        "userInfo": _user_info(user),
        "allProjects": {
            "total": len(projects),
            "pending": project_statuses[ProjectStatus.PENDIENTE],
            "inProgress": project_statuses[ProjectStatus.EN_PROGRESO],
            "completed": project_statuses[ProjectStatus.COMPLETADO],
            "canceled": project_statuses[ProjectStatus.CANCELADO],
        },
        "allTasks": {
            "total": len(tasks),
            "pending": count_status(tasks, TaskStatus.PENDIENTE),
            "inProgress": count_status(tasks, TaskStatus.EN_PROGRESO),
            "completed": count_status(tasks, TaskStatus.COMPLETADO),
            "unassigned": len(unassigned),
            "overdue": len(overdue),
            "dueSoon": len(due_soon),
        },
        "projectsProgress": progress,
        "criticalDeadlines": critical,
        "teamOverview": team,
    }
