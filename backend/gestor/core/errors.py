import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)

INVALID_JSON = "Formato JSON inválido"

# pydantic error types raised when the body is not a JSON object at all
BODY_SHAPE_ERRORS = {"json_invalid", "dict_type", "missing"}


class ApiError(Exception):
    """Business-rule failure rendered as a ``success: false`` envelope."""

    status_code = 400

    def __init__(
        self,
        message: str,
        *,
        errors: list[str] | None = None,
        data: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors
        self.data = data
        if status_code is not None:
            self.status_code = status_code


class BadRequest(ApiError):
    status_code = 400


class Unauthorized(ApiError):
    status_code = 401


class Forbidden(ApiError):
    status_code = 403


class NotFound(ApiError):
    status_code = 404


class Conflict(ApiError):
    status_code = 409


class ValidationFailed(ApiError):
    def __init__(self, errors: list[str], *, forbidden: bool = False) -> None:
        super().__init__(
            "Errores de validación",
            errors=list(errors),
            status_code=403 if forbidden else 400,
        )


def error_body(message: str, errors: list[str] | None = None, data: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if errors is not None:
        body["errors"] = errors
    if data is not None:
        body["data"] = jsonable_encoder(data)
    return body


def success_response(data: Any, message: str, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": jsonable_encoder(data), "message": message},
    )


async def api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.errors, exc.data))


def _is_body_shape_error(error: dict[str, Any]) -> bool:
    loc = tuple(error.get("loc", ()))
    return bool(loc) and loc[0] == "body" and len(loc) <= 2 and error.get("type") in BODY_SHAPE_ERRORS


async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    if any(_is_body_shape_error(item) for item in exc.errors()):
        return JSONResponse(status_code=400, content=error_body(INVALID_JSON))
    errors = [str(item.get("msg", "")) for item in exc.errors()]
    return JSONResponse(status_code=400, content=error_body("Errores de validación", errors))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=error_body("Error interno del servidor"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
