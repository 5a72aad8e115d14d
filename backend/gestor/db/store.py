import threading
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timezone

from gestor.db.models import Priority, Project, ProjectStatus, Role, Task, TaskStatus, User


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class Store:
    """In-memory users, projects and tasks keyed by id.

    Every method takes ``lock``; reads return snapshots. Callers also hold
    ``lock`` across a validate-then-mutate sequence so that reads, id
    assignment and writes of one request never interleave with another's.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.reset()

    def reset(self) -> None:
        with self.lock:
            self._users: dict[int, User] = {}
            self._projects: dict[int, Project] = {}
            self._tasks: dict[int, Task] = {}
            self._next_ids = {"users": 1, "projects": 1, "tasks": 1}

    def next_id(self, collection: str) -> int:
        with self.lock:
            value = self._next_ids[collection]
            self._next_ids[collection] = value + 1
            return value

    def load(self, users: Iterable[User] = (), projects: Iterable[Project] = (), tasks: Iterable[Task] = ()) -> None:
        with self.lock:
            for collection, records, target in (
                ("users", users, self._users),
                ("projects", projects, self._projects),
                ("tasks", tasks, self._tasks),
            ):
                for record in records:
                    target[record.id] = record
                if target:
                    self._next_ids[collection] = max(self._next_ids[collection], max(target) + 1)

    # users

    def list_users(self) -> list[User]:
        with self.lock:
            return sorted(self._users.values(), key=lambda item: item.id)

    def get_user(self, user_id: int) -> User | None:
        with self.lock:
            return self._users.get(user_id)

    def find_user_by_email(self, email: str) -> User | None:
        needle = email.strip().lower()
        with self.lock:
            for user in self._users.values():
                if user.email.lower() == needle:
                    return user
        return None

    def create_user(self, name: str, email: str, password: str, role: Role) -> User:
        with self.lock:
            user = User(id=self.next_id("users"), name=name, email=email, password=password, role=role)
            self._users[user.id] = user
            return user

    def save_user(self, user: User) -> User:
        with self.lock:
            self._users[user.id] = replace(user)
            return self._users[user.id]

    def delete_user(self, user_id: int) -> User | None:
        with self.lock:
            return self._users.pop(user_id, None)

    # projects

    def list_projects(self) -> list[Project]:
        with self.lock:
            return sorted(self._projects.values(), key=lambda item: item.id)

    def get_project(self, project_id: int) -> Project | None:
        with self.lock:
            return self._projects.get(project_id)

    def find_project_by_name(self, name: str, exclude_id: int | None = None) -> Project | None:
        needle = name.strip().lower()
        with self.lock:
            for project in self._projects.values():
                if project.id != exclude_id and project.name.strip().lower() == needle:
                    return project
        return None

    def projects_created_by(self, user_id: int) -> list[Project]:
        return [item for item in self.list_projects() if item.created_by == user_id]

    def create_project(
        self,
        name: str,
        description: str,
        deadline: str,
        created_by: int,
        status: ProjectStatus = ProjectStatus.PENDIENTE,
    ) -> Project:
        with self.lock:
            project = Project(
                id=self.next_id("projects"),
                name=name,
                description=description,
                status=status,
                deadline=deadline,
                created_by=created_by,
                created_at=utc_timestamp(),
            )
            self._projects[project.id] = project
            return project

    def save_project(self, project: Project) -> Project:
        with self.lock:
            self._projects[project.id] = replace(project)
            return self._projects[project.id]

    def delete_project(self, project_id: int) -> Project | None:
        with self.lock:
            return self._projects.pop(project_id, None)

    # tasks

    def list_tasks(self) -> list[Task]:
        with self.lock:
            return sorted(self._tasks.values(), key=lambda item: item.id)

    def get_task(self, task_id: int) -> Task | None:
        with self.lock:
            return self._tasks.get(task_id)

    def tasks_for_project(self, project_id: int) -> list[Task]:
        return [item for item in self.list_tasks() if item.project_id == project_id]

    def tasks_assigned_to(self, user_id: int) -> list[Task]:
        return [item for item in self.list_tasks() if item.assigned_to == user_id]

    def create_task(
        self,
        title: str,
        description: str,
        project_id: int,
        assigned_to: int,
        due_date: str,
        status: TaskStatus = TaskStatus.PENDIENTE,
        priority: Priority = Priority.MEDIA,
    ) -> Task:
        with self.lock:
            task = Task(
                id=self.next_id("tasks"),
                title=title,
                description=description,
                status=status,
                priority=priority,
                project_id=project_id,
                assigned_to=assigned_to,
                created_at=utc_timestamp(),
                due_date=due_date,
            )
            self._tasks[task.id] = task
            return task

    def save_task(self, task: Task) -> Task:
        with self.lock:
            self._tasks[task.id] = replace(task)
            return self._tasks[task.id]

    def delete_task(self, task_id: int) -> Task | None:
        with self.lock:
            return self._tasks.pop(task_id, None)


store = Store()
