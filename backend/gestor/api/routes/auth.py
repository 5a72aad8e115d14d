from typing import Any

from fastapi import APIRouter, Body, Depends

from gestor.core.deps import get_store
from gestor.core.errors import success_response
from gestor.db.store import Store
from gestor.services import auth as auth_service


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
def login(payload: dict[str, Any] = Body(...), db: Store = Depends(get_store)):
    return success_response(auth_service.login(db, payload), "Autenticación exitosa")
