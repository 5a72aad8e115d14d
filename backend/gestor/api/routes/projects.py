from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request

from gestor.core.deps import (
    body_or_query_requester,
    get_current_user,
    get_store,
    parse_id,
)
from gestor.core.errors import success_response
from gestor.db.models import User
from gestor.db.store import Store
from gestor.services import projects as project_service


router = APIRouter(prefix="/projects", tags=["projects"])

INVALID_ID = "ID de proyecto inválido"


@router.get("")
def list_projects(
    db: Store = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    projects = project_service.list_projects(db, current_user)
    suffix = "" if len(projects) == 1 else "s"
    return success_response(projects, f"Proyectos obtenidos exitosamente ({len(projects)} proyecto{suffix})")


@router.post("", status_code=201)
def create_project(payload: dict[str, Any] = Body(...), db: Store = Depends(get_store)):
    return success_response(project_service.create_project(db, payload), "Proyecto creado exitosamente", 201)


@router.get("/{project_id}")
def get_project(
    project_id: str,
    db: Store = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    project = project_service.get_project(db, parse_id(project_id, INVALID_ID), current_user)
    return success_response(project, "Proyecto obtenido exitosamente")


@router.put("/{project_id}")
def update_project(
    project_id: str,
    payload: dict[str, Any] = Body(...),
    db: Store = Depends(get_store),
):
    project = project_service.update_project(db, parse_id(project_id, INVALID_ID), payload)
    return success_response(project, "Proyecto actualizado exitosamente")


@router.delete("/{project_id}")
def delete_project(
    project_id: str,
    request: Request,
    payload: dict[str, Any] | None = Body(None),
    db: Store = Depends(get_store),
):
    pk = parse_id(project_id, INVALID_ID)
    deleted = project_service.delete_project(db, pk, body_or_query_requester(payload, request))
    return success_response(deleted, "Proyecto eliminado exitosamente")


@router.get("/{project_id}/tasks")
def list_project_tasks(
    project_id: str,
    status: str | None = Query(None),
    priority: str | None = Query(None),
    assigned_to: str | None = Query(None, alias="assignedTo"),
    db: Store = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    board = project_service.list_project_tasks(
        db,
        parse_id(project_id, INVALID_ID),
        current_user,
        status=status,
        priority=priority,
        assigned_to=assigned_to,
    )
    return success_response(board, "Tareas del proyecto obtenidas exitosamente")
