import logging
from dataclasses import replace
from typing import Any

from gestor.core.errors import Conflict, Forbidden, NotFound
from gestor.db.models import Role, User
from gestor.db.schemas import UserBrief, UserOut, dump
from gestor.db.store import Store
from gestor.services.access import can_manage_account, is_manager
from gestor.services.validation import (
    ValidationResult,
    check_email_format,
    check_password,
    check_person_name,
    check_requester,
    check_role,
)


logger = logging.getLogger(__name__)

EMAIL_TAKEN = "El email ya está en uso"


def user_out(user: User) -> dict[str, Any]:
    return dump(UserOut.model_validate(user))


def _get_or_404(store: Store, user_id: int) -> User:
    user = store.get_user(user_id)
    if user is None:
        raise NotFound("Usuario no encontrado")
    return user


def list_users(store: Store) -> list[dict[str, Any]]:
    return [user_out(user) for user in store.list_users()]


def get_user(store: Store, user_id: int) -> dict[str, Any]:
    return user_out(_get_or_404(store, user_id))


def validate_new_user(store: Store, payload: dict[str, Any]) -> tuple[ValidationResult, dict[str, Any]]:
    result = ValidationResult()
    values = {
        "name": check_person_name(result, payload.get("name")),
        "email": check_email_format(result, payload.get("email")),
        "password": check_password(result, payload.get("password")),
        "role": check_role(result, payload.get("role")),
    }
    if values["email"] and store.find_user_by_email(values["email"]):
        result.add(EMAIL_TAKEN)
    return result, values


def create_user(store: Store, payload: dict[str, Any]) -> dict[str, Any]:
    with store.lock:
        result, values = validate_new_user(store, payload)
        result.raise_if_invalid()
        user = store.create_user(**values)

    logger.info("User %s registered with role %s", user.id, user.role.value)
    return user_out(user)


def validate_user_update(
    store: Store, user: User, payload: dict[str, Any]
) -> tuple[ValidationResult, dict[str, Any]]:
    result = ValidationResult()
    changes: dict[str, Any] = {}

    requester = None
    if "requestedBy" in payload:
        requester = check_requester(result, store, payload["requestedBy"])
        if requester and not can_manage_account(requester, user):
            result.deny("No tienes permisos para modificar este usuario")

    if "name" in payload:
        changes["name"] = check_person_name(result, payload["name"])

    if "email" in payload:
        email = check_email_format(result, payload["email"])
        existing = store.find_user_by_email(email) if email else None
        if existing and existing.id != user.id:
            result.add(EMAIL_TAKEN)
        changes["email"] = email

    if "password" in payload:
        changes["password"] = check_password(result, payload["password"])

    if "role" in payload:
        role = check_role(result, payload["role"])
        if role and role != user.role:
            if requester and not is_manager(requester):
                result.deny("Solo los usuarios con rol de gerente pueden cambiar roles")
            if role == Role.USUARIO and store.projects_created_by(user.id):
                result.add("No se puede cambiar el rol de un gerente con proyectos creados")
        changes["role"] = role

    return result, changes


def update_user(store: Store, user_id: int, payload: dict[str, Any]) -> dict[str, Any]:
    with store.lock:
        user = _get_or_404(store, user_id)
        result, changes = validate_user_update(store, user, payload)
        result.raise_if_invalid()
        updated = store.save_user(replace(user, **changes))

    logger.info("User %s updated fields %s", updated.id, sorted(changes))
    return user_out(updated)


def delete_user(store: Store, user_id: int, requester: User | None = None) -> dict[str, Any]:
    with store.lock:
        user = _get_or_404(store, user_id)
        if requester and not can_manage_account(requester, user):
            raise Forbidden("No tienes permisos para eliminar este usuario")

        projects_count = len(store.projects_created_by(user.id))
        tasks_count = len(store.tasks_assigned_to(user.id))
        if projects_count or tasks_count:
            logger.warning(
                "Refused to delete user %s: %s projects, %s tasks", user.id, projects_count, tasks_count
            )
            raise Conflict(
                "No se puede eliminar el usuario",
                data={
                    "reason": "El usuario tiene proyectos creados o tareas asignadas",
                    "projectsCount": projects_count,
                    "tasksCount": tasks_count,
                },
            )

        store.delete_user(user.id)

    logger.info("User %s deleted", user.id)
    return dump(UserBrief.model_validate(user))
