from gestor.db.models import Priority, Project, ProjectStatus, Role, Task, TaskStatus, User
from gestor.db.store import Store


def demo_users() -> list[User]:
    return [
        User(id=1, name="Juan Pérez", email="juan@proyecto.com", password="password123", role=Role.GERENTE),
        User(id=2, name="María García", email="maria@proyecto.com", password="password123", role=Role.USUARIO),
    ]


def demo_projects() -> list[Project]:
    return [
        Project(
            id=1,
            name="Desarrollo de Sitio Web",
            description="Creación de un sitio web corporativo responsive",
            status=ProjectStatus.EN_PROGRESO,
            deadline="2023-12-15",
            created_by=1,
            created_at="2023-10-10T10:00:00Z",
        ),
        Project(
            id=2,
            name="App Móvil",
            description="Desarrollo de aplicación móvil para iOS y Android",
            status=ProjectStatus.PENDIENTE,
            deadline="2024-02-20",
            created_by=1,
            created_at="2023-11-05T14:30:00Z",
        ),
    ]


def demo_tasks() -> list[Task]:
    return [
        Task(
            id=1,
            title="Diseñar interfaz",
            description="Crear diseños de alta fidelidad en Figma",
            status=TaskStatus.COMPLETADO,
            priority=Priority.ALTA,
            project_id=1,
            assigned_to=2,
            created_at="2023-10-11T09:00:00Z",
            due_date="2023-10-18T17:00:00Z",
        ),
        Task(
            id=2,
            title="Implementar frontend",
            description="Desarrollar componentes React para la interfaz",
            status=TaskStatus.EN_PROGRESO,
            priority=Priority.ALTA,
            project_id=1,
            assigned_to=2,
            created_at="2023-10-15T14:00:00Z",
            due_date="2023-11-05T17:00:00Z",
        ),
    ]


def seed_store(store: Store) -> None:
    store.reset()
    store.load(users=demo_users(), projects=demo_projects(), tasks=demo_tasks())
