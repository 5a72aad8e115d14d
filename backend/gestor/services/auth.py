import logging
import time
from typing import Any

from gestor.core.errors import Unauthorized
from gestor.db.models import User
from gestor.db.schemas import SessionOut, UserOut, dump
from gestor.db.store import Store
from gestor.services.validation import ValidationResult, check_email_format, is_blank


logger = logging.getLogger(__name__)


def create_session_token(user: User) -> str:
    # Opaque marker for the client, not a credential.
    return f"session_{user.id}_{int(time.time() * 1000)}"


def login(store: Store, payload: dict[str, Any]) -> dict[str, Any]:
    result = ValidationResult()
    email = check_email_format(result, payload.get("email"))
    password = payload.get("password")
    if is_blank(password):
        result.add("La contraseña es requerida")
    result.raise_if_invalid()

    user = store.find_user_by_email(email)
    if user is None or user.password != password:
        logger.info("Failed login for %s", email)
        raise Unauthorized("Credenciales inválidas")

    logger.info("User %s logged in", user.id)
    return dump(SessionOut(user=UserOut.model_validate(user), session_token=create_session_token(user)))
