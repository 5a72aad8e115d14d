from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    GERENTE = "gerente"
    USUARIO = "usuario"


class ProjectStatus(str, Enum):
    PENDIENTE = "pendiente"
    EN_PROGRESO = "en progreso"
    COMPLETADO = "completado"
    CANCELADO = "cancelado"


class TaskStatus(str, Enum):
    PENDIENTE = "pendiente"
    EN_PROGRESO = "en progreso"
    COMPLETADO = "completado"


class Priority(str, Enum):
    BAJA = "baja"
    MEDIA = "media"
    ALTA = "alta"


@dataclass
class User:
    id: int
    name: str
    email: str
    password: str
    role: Role


@dataclass
class Project:
    id: int
    name: str
    description: str
    status: ProjectStatus
    deadline: str
    created_by: int
    created_at: str


@dataclass
class Task:
    id: int
    title: str
    description: str
    status: TaskStatus
    priority: Priority
    project_id: int
    assigned_to: int
    created_at: str
    due_date: str
