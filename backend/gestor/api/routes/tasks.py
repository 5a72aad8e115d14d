from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from gestor.core.deps import (
    body_or_query_requester,
    get_current_user,
    get_store,
    parse_id,
)
from gestor.core.errors import success_response
from gestor.db.models import User
from gestor.db.store import Store
from gestor.services import tasks as task_service


router = APIRouter(prefix="/tasks", tags=["tasks"])

INVALID_ID = "ID de tarea inválido"


@router.get("")
def list_tasks(
    db: Store = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return success_response(task_service.list_tasks(db, current_user), "Tareas obtenidas exitosamente")


@router.post("", status_code=201)
def create_task(payload: dict[str, Any] = Body(...), db: Store = Depends(get_store)):
    return success_response(task_service.create_task(db, payload), "Tarea creada exitosamente", 201)


@router.get("/{task_id}")
def get_task(
    task_id: str,
    db: Store = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    task = task_service.get_task(db, parse_id(task_id, INVALID_ID), current_user)
    return success_response(task, "Tarea obtenida exitosamente")


@router.put("/{task_id}")
def update_task(
    task_id: str,
    payload: dict[str, Any] = Body(...),
    db: Store = Depends(get_store),
):
    task = task_service.update_task(db, parse_id(task_id, INVALID_ID), payload)
    return success_response(task, "Tarea actualizada exitosamente")


@router.delete("/{task_id}")
def delete_task(
    task_id: str,
    request: Request,
    payload: dict[str, Any] | None = Body(None),
    db: Store = Depends(get_store),
):
    pk = parse_id(task_id, INVALID_ID)
    deleted = task_service.delete_task(db, pk, body_or_query_requester(payload, request))
    return success_response(deleted, "Tarea eliminada exitosamente")
