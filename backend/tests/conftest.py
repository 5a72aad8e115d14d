from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from gestor.core.deps import get_store
from gestor.db.models import Priority, Project, ProjectStatus, Role, Task, TaskStatus, User
from gestor.db.store import Store
from gestor.main import app


def days_from_today(days: int) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


def make_store() -> Store:
    store = Store()
    store.load(
        users=[
            User(id=1, name="Ana Torres", email="ana@empresa.com", password="secreto1", role=Role.GERENTE),
            User(id=2, name="Luis Romero", email="luis@empresa.com", password="secreto2", role=Role.USUARIO),
            User(id=3, name="Carla Núñez", email="carla@empresa.com", password="secreto3", role=Role.USUARIO),
        ],
        projects=[
            Project(
                id=1,
                name="Portal de Clientes",
                description="Nuevo portal de autoservicio para clientes",
                status=ProjectStatus.EN_PROGRESO,
                deadline=days_from_today(60),
                created_by=1,
                created_at="2026-01-05T10:00:00+00:00",
            ),
            Project(
                id=2,
                name="Migración de Datos",
                description="Mover el histórico de ventas al nuevo almacén",
                status=ProjectStatus.PENDIENTE,
                deadline=days_from_today(90),
                created_by=1,
                created_at="2026-01-06T10:00:00+00:00",
            ),
        ],
        tasks=[
            Task(
                id=1,
                title="Diseñar pantallas",
                description="Bocetos de alta fidelidad del portal",
                status=TaskStatus.PENDIENTE,
                priority=Priority.ALTA,
                project_id=1,
                assigned_to=2,
                created_at="2026-01-07T09:00:00+00:00",
                due_date=days_from_today(30),
            ),
        ],
    )
    return store


@pytest.fixture
def store() -> Store:
    return make_store()


@pytest.fixture
def client(store: Store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
