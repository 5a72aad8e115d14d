"""
Field rules shared by the entity services.

Every check appends to a ``ValidationResult`` instead of raising, so a
request reports all of its violations at once.  Services collect the
whole result first and only touch the store once ``raise_if_invalid``
has passed.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, TypeVar

from email_validator import EmailNotValidError, validate_email

from gestor.core.errors import ValidationFailed
from gestor.db.models import Role, User
from gestor.db.store import Store


E = TypeVar("E", bound=Enum)

NAME_PATTERN = re.compile(r"^[A-Za-zÀ-ÖØ-öø-ÿ' -]+$")

REQUESTER_REQUIRED = "El ID del usuario que realiza la petición es requerido"
REQUESTER_MISSING = "El usuario que realiza la petición no existe"


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    forbidden: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors

    def add(self, message: str) -> None:
        self.errors.append(message)

    def deny(self, message: str) -> None:
        self.errors.append(message)
        self.forbidden = True

    def raise_if_invalid(self) -> None:
        if self.errors:
            raise ValidationFailed(self.errors, forbidden=self.forbidden)


@dataclass(frozen=True)
class TextRule:
    required: str
    too_short: str
    too_long: str
    min_length: int
    max_length: int


@dataclass(frozen=True)
class DateRule:
    required: str
    bad_format: str
    in_past: str


PROJECT_NAME = TextRule(
    required="El nombre del proyecto es requerido",
    too_short="El nombre del proyecto debe tener al menos 3 caracteres",
    too_long="El nombre del proyecto no puede exceder 100 caracteres",
    min_length=3,
    max_length=100,
)
PROJECT_DESCRIPTION = TextRule(
    required="La descripción del proyecto es requerida",
    too_short="La descripción debe tener al menos 10 caracteres",
    too_long="La descripción no puede exceder 500 caracteres",
    min_length=10,
    max_length=500,
)
TASK_TITLE = TextRule(
    required="El título de la tarea es requerido",
    too_short="El título de la tarea debe tener al menos 3 caracteres",
    too_long="El título de la tarea no puede exceder 100 caracteres",
    min_length=3,
    max_length=100,
)
TASK_DESCRIPTION = TextRule(
    required="La descripción de la tarea es requerida",
    too_short="La descripción debe tener al menos 10 caracteres",
    too_long="La descripción no puede exceder 500 caracteres",
    min_length=10,
    max_length=500,
)

PROJECT_DEADLINE = DateRule(
    required="La fecha límite es requerida",
    bad_format="La fecha límite debe estar en formato ISO8601 (YYYY-MM-DD)",
    in_past="La fecha límite no puede ser anterior a hoy",
)
TASK_DUE_DATE = DateRule(
    required="La fecha de vencimiento es requerida",
    bad_format="La fecha de vencimiento debe estar en formato ISO8601",
    in_past="La fecha de vencimiento no puede ser anterior a hoy",
)


def is_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def parse_iso(value: str) -> datetime | None:
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None


def check_text(result: ValidationResult, value: Any, rule: TextRule) -> str | None:
    if is_blank(value):
        result.add(rule.required)
        return None

    cleaned = value.strip()
    if len(cleaned) < rule.min_length:
        result.add(rule.too_short)
        return None
    if len(cleaned) > rule.max_length:
        result.add(rule.too_long)
        return None
    return cleaned


def check_date(result: ValidationResult, value: Any, rule: DateRule, today: date | None = None) -> str | None:
    if is_blank(value):
        result.add(rule.required)
        return None

    parsed = parse_iso(value)
    if parsed is None:
        result.add(rule.bad_format)
        return None

    if parsed.date() < (today or date.today()):
        result.add(rule.in_past)
        return None
    return value.strip()


def check_choice(result: ValidationResult, value: Any, choices: type[E], message: str) -> E | None:
    allowed = [item.value for item in choices]
    if value not in allowed:
        result.add(f"{message} {', '.join(allowed)}")
        return None
    return choices(value)


def check_person_name(result: ValidationResult, value: Any) -> str | None:
    if is_blank(value):
        result.add("El nombre es requerido")
        return None

    cleaned = value.strip()
    valid = True
    if not 2 <= len(cleaned) <= 50:
        result.add("El nombre completo debe tener entre 2 y 50 caracteres")
        valid = False
    if not NAME_PATTERN.match(cleaned):
        result.add("El nombre solo puede contener letras, espacios, guiones y apóstrofos")
        valid = False
    return cleaned if valid else None


def check_email_format(result: ValidationResult, value: Any) -> str | None:
    if is_blank(value):
        result.add("El email es requerido")
        return None

    cleaned = value.strip()
    try:
        validate_email(cleaned, check_deliverability=False)
    except EmailNotValidError:
        result.add("El formato del email es inválido")
        return None
    return cleaned.lower()


def check_password(result: ValidationResult, value: Any) -> str | None:
    if is_blank(value):
        result.add("La contraseña es requerida")
        return None
    if len(value) < 6:
        result.add("La contraseña debe tener al menos 6 caracteres")
        return None
    return value


def check_role(result: ValidationResult, value: Any) -> Role | None:
    if is_blank(value):
        result.add("El rol es requerido")
        return None

    cleaned = value.strip().lower()
    if cleaned not in {item.value for item in Role}:
        result.add("Rol inválido")
        return None
    return Role(cleaned)


def check_requester(
    result: ValidationResult,
    store: Store,
    value: Any,
    manager_only: str | None = None,
) -> User | None:
    """Resolve ``requestedBy`` from a body.

    With ``manager_only`` set, a resolved non-gerente is recorded as a
    denial carrying that message.
    """
    if not is_id(value) or value == 0:
        result.add(REQUESTER_REQUIRED)
        return None

    user = store.get_user(value)
    if user is None:
        result.add(REQUESTER_MISSING)
        return None

    if manager_only and user.role != Role.GERENTE:
        result.deny(manager_only)
    return user
