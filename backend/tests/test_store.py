import sys
import threading

from gestor.db.models import Role, User
from gestor.db.seed import seed_store
from gestor.db.store import Store


def test_ids_start_at_one_and_increase():
    store = Store()

    first = store.create_user("Ana Torres", "ana@empresa.com", "secreto1", Role.GERENTE)
    second = store.create_user("Luis Romero", "luis@empresa.com", "secreto2", Role.USUARIO)

    assert (first.id, second.id) == (1, 2)


def test_load_moves_counter_past_seeded_ids():
    store = Store()
    store.load(users=[User(id=7, name="Ana Torres", email="ana@empresa.com", password="secreto1", role=Role.GERENTE)])

    created = store.create_user("Luis Romero", "luis@empresa.com", "secreto2", Role.USUARIO)

    assert created.id == 8


def test_deleted_ids_are_not_reused():
    store = Store()
    owner = store.create_user("Ana Torres", "ana@empresa.com", "secreto1", Role.GERENTE)
    project = store.create_project("Portal", "Descripción suficiente", "2099-01-01", owner.id)

    store.delete_project(project.id)
    replacement = store.create_project("Portal", "Descripción suficiente", "2099-01-01", owner.id)

    assert replacement.id == project.id + 1


def test_lookups_ignore_case_and_surrounding_whitespace(store):
    assert store.find_user_by_email("  ANA@Empresa.com ").id == 1
    assert store.find_project_by_name("  portal de clientes ").id == 1
    assert store.find_project_by_name("Portal de Clientes", exclude_id=1) is None


def test_reset_clears_collections_and_counters(store):
    store.reset()

    assert store.list_users() == []
    assert store.list_tasks() == []
    assert store.create_user("Ana Torres", "ana@empresa.com", "secreto1", Role.GERENTE).id == 1


def test_demo_seed_keeps_projects_owned_by_managers():
    store = Store()
    seed_store(store)

    managers = {user.id for user in store.list_users() if user.role == Role.GERENTE}
    assert all(project.created_by in managers for project in store.list_projects())
    assert store.next_id("tasks") == 3


def test_reads_stay_consistent_while_another_thread_writes():
    store = Store()
    errors: list[BaseException] = []
    done = threading.Event()

    def register_many():
        try:
            for index in range(2000):
                store.create_user("Usuario Carga", f"carga{index}@empresa.com", "secreto1", Role.USUARIO)
        finally:
            done.set()

    previous = sys.getswitchinterval()
    sys.setswitchinterval(1e-6)
    writer = threading.Thread(target=register_many)
    try:
        writer.start()
        while not done.is_set():
            try:
                store.find_user_by_email("nadie@empresa.com")
                store.list_users()
                store.tasks_assigned_to(1)
            except RuntimeError as exc:
                errors.append(exc)
                break
        writer.join()
    finally:
        sys.setswitchinterval(previous)

    assert errors == []
    assert len(store.list_users()) == 2000
