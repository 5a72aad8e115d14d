from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from gestor.db.models import Priority, ProjectStatus, Role, TaskStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


def dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


class UserBrief(CamelModel):
    id: int
    name: str
    email: str


class UserOut(CamelModel):
    id: int
    name: str
    email: str
    role: Role


class SessionOut(CamelModel):
    user: UserOut
    session_token: str


class ProjectOut(CamelModel):
    id: int
    name: str
    description: str
    status: ProjectStatus
    deadline: str
    created_by: int
    created_at: str
    created_by_user: UserBrief | None = None


class ProjectDetailOut(ProjectOut):
    total_tasks: int
    completed_tasks: int
    progress_percentage: int
    team_size: int


class ProjectDeleted(CamelModel):
    id: int
    name: str
    description: str
    status: ProjectStatus


class TaskProjectBrief(CamelModel):
    id: int
    name: str
    status: ProjectStatus
    created_by: UserBrief | None = None


class TaskBase(CamelModel):
    id: int
    title: str
    description: str
    status: TaskStatus
    priority: Priority
    project_id: int
    assigned_to: int
    created_at: str
    due_date: str
    assigned_to_user: UserBrief | None = None


class TaskOut(TaskBase):
    project: TaskProjectBrief | None = None


class ProjectTaskOut(TaskBase):
    days_until_due: int | None
    is_overdue: bool
    is_due_soon: bool


class TaskBrief(CamelModel):
    id: int
    title: str
    status: TaskStatus
    assigned_to: int


class TaskDeleted(CamelModel):
    id: int
    title: str
    status: TaskStatus
    project_id: int
