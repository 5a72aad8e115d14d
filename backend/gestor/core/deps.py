from typing import Any

from fastapi import Depends, Query, Request

from gestor.core.errors import BadRequest, NotFound
from gestor.db.models import User
from gestor.db.store import Store, store
from gestor.services.validation import REQUESTER_MISSING, REQUESTER_REQUIRED


def get_store() -> Store:
    return store


def _to_int(raw: Any) -> int | None:
    # plain ASCII digits with an optional sign; int() alone also takes "1_0" and other scripts
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    digits = text[1:] if text[:1] in ("-", "+") else text
    if not digits.isascii() or not digits.isdigit():
        return None
    return int(text)


def parse_id(raw: str, message: str) -> int:
    value = _to_int(raw)
    if value is None:
        raise BadRequest(message)
    return value


def parse_requester_id(raw: str | None) -> int | None:
    return _to_int(raw) or None


def resolve_requester(store: Store, user_id: int | None) -> User:
    if user_id is None:
        raise BadRequest(REQUESTER_REQUIRED)
    user = store.get_user(user_id)
    if user is None:
        raise NotFound(REQUESTER_MISSING)
    return user


def get_current_user(
    requested_by: str | None = Query(None, alias="requestedBy"),
    db: Store = Depends(get_store),
) -> User:
    return resolve_requester(db, parse_requester_id(requested_by))


def get_optional_user(
    requested_by: str | None = Query(None, alias="requestedBy"),
    db: Store = Depends(get_store),
) -> User | None:
    if requested_by is None:
        return None
    return resolve_requester(db, parse_requester_id(requested_by))


def body_or_query_requester(payload: dict[str, Any] | None, request: Request) -> Any:
    if payload and "requestedBy" in payload:
        return payload["requestedBy"]
    return parse_requester_id(request.query_params.get("requestedBy"))
