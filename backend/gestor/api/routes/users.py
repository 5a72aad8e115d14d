from typing import Any

from fastapi import APIRouter, Body, Depends

from gestor.core.deps import get_optional_user, get_store, parse_id
from gestor.core.errors import success_response
from gestor.db.models import User
from gestor.db.store import Store
from gestor.services import users as user_service


router = APIRouter(prefix="/users", tags=["users"])

INVALID_ID = "ID de usuario inválido"


@router.get("")
def list_users(
    db: Store = Depends(get_store),
    _: User | None = Depends(get_optional_user),
):
    return success_response(user_service.list_users(db), "Usuarios obtenidos exitosamente")


@router.post("", status_code=201)
def register_user(payload: dict[str, Any] = Body(...), db: Store = Depends(get_store)):
    return success_response(user_service.create_user(db, payload), "Usuario creado exitosamente", 201)


@router.get("/{user_id}")
def get_user(
    user_id: str,
    db: Store = Depends(get_store),
    _: User | None = Depends(get_optional_user),
):
    user = user_service.get_user(db, parse_id(user_id, INVALID_ID))
    return success_response(user, "Usuario obtenido exitosamente")


@router.put("/{user_id}")
def update_user(
    user_id: str,
    payload: dict[str, Any] = Body(...),
    db: Store = Depends(get_store),
):
    user = user_service.update_user(db, parse_id(user_id, INVALID_ID), payload)
    return success_response(user, "Usuario actualizado exitosamente")


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    db: Store = Depends(get_store),
    current_user: User | None = Depends(get_optional_user),
):
    deleted = user_service.delete_user(db, parse_id(user_id, INVALID_ID), current_user)
    return success_response(deleted, "Usuario eliminado exitosamente")
