from conftest import days_from_today


def new_task(**overrides):
    payload = {
        "requestedBy": 1,
        "title": "Integrar pasarela de pago",
        "description": "Conectar el portal con el proveedor de pagos",
        "projectId": 1,
        "assignedTo": 3,
        "dueDate": days_from_today(14),
    }
    payload.update(overrides)
    return payload


def test_create_task_applies_defaults_and_enriches(client):
    response = client.post("/api/tasks", json=new_task())

    assert response.status_code == 201
    task = response.json()["data"]
    assert task["id"] == 2
    assert task["status"] == "pendiente"
    assert task["priority"] == "media"
    assert task["projectId"] == 1
    assert task["assignedToUser"] == {"id": 3, "name": "Carla Núñez", "email": "carla@empresa.com"}
    assert task["project"]["name"] == "Portal de Clientes"
    assert task["project"]["status"] == "en progreso"


def test_create_task_reports_every_violation(client, store):
    response = client.post(
        "/api/tasks",
        json={
            "requestedBy": 1,
            "title": " ",
            "description": "x" * 501,
            "projectId": 50,
            "assignedTo": "3",
            "dueDate": "2020-05-01",
            "priority": "urgente",
            "status": "bloqueada",
        },
    )

    assert response.status_code == 400
    assert response.json()["errors"] == [
        "El título de la tarea es requerido",
        "La descripción no puede exceder 500 caracteres",
        "El proyecto especificado no existe",
        "El ID del usuario asignado es requerido y debe ser un número",
        "La fecha de vencimiento no puede ser anterior a hoy",
        "La prioridad debe ser una de: baja, media, alta",
        "El estado debe ser uno de: pendiente, en progreso, completado",
    ]
    assert len(store.list_tasks()) == 1


def test_list_tasks_is_filtered_by_role(client):
    manager = client.get("/api/tasks", params={"requestedBy": 1}).json()["data"]
    member = client.get("/api/tasks", params={"requestedBy": 2}).json()["data"]
    idle = client.get("/api/tasks", params={"requestedBy": 3}).json()["data"]

    assert [item["id"] for item in manager] == [1]
    assert [item["id"] for item in member] == [1]
    assert idle == []
    assert member[0]["project"]["createdBy"] == {"id": 1, "name": "Ana Torres", "email": "ana@empresa.com"}


def test_member_cannot_read_foreign_or_missing_task(client):
    assert client.get("/api/tasks/1", params={"requestedBy": 3}).status_code == 403
    assert client.get("/api/tasks/999", params={"requestedBy": 3}).status_code == 403
    assert client.get("/api/tasks/999", params={"requestedBy": 1}).status_code == 404
    assert client.get("/api/tasks/uno", params={"requestedBy": 1}).status_code == 400

    own = client.get("/api/tasks/1", params={"requestedBy": 2})
    assert own.status_code == 200
    assert own.json()["data"]["title"] == "Diseñar pantallas"


def test_member_status_update_keeps_other_fields(client, store):
    before = store.get_task(1)

    response = client.put("/api/tasks/1", json={"requestedBy": 2, "status": "completado"})

    assert response.status_code == 200
    after = store.get_task(1)
    assert after.status.value == "completado"
    assert (after.title, after.description, after.priority, after.due_date, after.assigned_to) == (
        before.title,
        before.description,
        before.priority,
        before.due_date,
        before.assigned_to,
    )


def test_member_cannot_sneak_other_fields_with_status(client, store):
    response = client.put("/api/tasks/1", json={"requestedBy": 2, "title": "x", "status": "completado"})

    assert response.status_code == 400
    assert "Solo puedes actualizar el estado de tus tareas asignadas" in response.json()["errors"]
    assert store.get_task(1).status.value == "pendiente"


def test_manager_full_update(client):
    response = client.put(
        "/api/tasks/1",
        json={"requestedBy": 1, "title": "Diseñar el portal", "priority": "baja", "assignedTo": 3, "projectId": 2},
    )

    assert response.status_code == 200
    task = response.json()["data"]
    assert task["title"] == "Diseñar el portal"
    assert task["priority"] == "baja"
    assert task["assignedToUser"]["id"] == 3
    assert task["project"]["id"] == 2


def test_update_task_reference_checks(client):
    response = client.put("/api/tasks/1", json={"requestedBy": 1, "projectId": "2", "assignedTo": 40})

    assert response.status_code == 400
    assert response.json()["errors"] == [
        "El ID del proyecto debe ser un número",
        "El usuario asignado no existe",
    ]


def test_update_missing_task(client):
    assert client.put("/api/tasks/9", json={"requestedBy": 1, "status": "completado"}).status_code == 404


def test_delete_task(client, store):
    response = client.request("DELETE", "/api/tasks/1", json={"requestedBy": 1})

    assert response.status_code == 200
    assert response.json()["data"] == {
        "id": 1,
        "title": "Diseñar pantallas",
        "status": "pendiente",
        "projectId": 1,
    }
    assert store.get_task(1) is None
    assert client.delete("/api/tasks/1", params={"requestedBy": 1}).status_code == 404


def test_task_ids_must_be_plain_digits(client):
    for raw in ("0_1", "1_0", "١", "12abc"):
        response = client.get(f"/api/tasks/{raw}", params={"requestedBy": 1})

        assert response.status_code == 400
        assert response.json()["message"] == "ID de tarea inválido"


def test_requester_query_must_be_plain_digits(client):
    response = client.get("/api/tasks", params={"requestedBy": "0_1"})

    assert response.status_code == 400
    assert response.json()["message"] == "El ID del usuario que realiza la petición es requerido"
