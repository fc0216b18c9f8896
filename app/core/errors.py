"""Domain exceptions and the handlers that map them (and request validation) to responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

VALIDATION_TITLE = "One or more validation errors occurred."

# Request locations that are stripped from error keys ("body.title" -> "title").
_LOCATION_PREFIXES = frozenset({"body", "query", "path", "header", "cookie"})


class ValidationFailed(Exception):
    """Raised when input breaks one or more rules; carries field -> messages."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{k}: {', '.join(v)}" for k, v in errors.items()))


class ConflictError(Exception):
    """Raised when a create would duplicate a unique value (e.g. a registered email)."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(Exception):
    """Raised when a referenced record does not exist."""


class UnknownRoleError(Exception):
    """Raised when assigning a role that has not been seeded."""

    def __init__(self, role_name: str) -> None:
        self.role_name = role_name
        super().__init__(f"Role {role_name!r} does not exist")


def validation_problem(errors: dict[str, list[str]]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "title": VALIDATION_TITLE,
            "status": status.HTTP_400_BAD_REQUEST,
            "errors": errors,
        },
    )


def request_errors_to_dict(exc: RequestValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by field name, keeping their order."""
    grouped: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        if len(loc) > 1 and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        key = ".".join(loc) or "request"
        message = str(err.get("msg", "Invalid value."))
        grouped.setdefault(key, []).append(message)
    return grouped


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return validation_problem(request_errors_to_dict(exc))


async def _validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
    return validation_problem(exc.errors)


async def _conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": exc.message})


async def _unknown_role_handler(request: Request, exc: UnknownRoleError) -> JSONResponse:
    logger.error(
        "Role %r is not seeded; cannot complete %s %s",
        exc.role_name,
        request.method,
        request.url.path,
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": str(exc)})


async def _not_found_handler(request: Request, exc: NotFoundError) -> Response:
    return Response(status_code=status.HTTP_404_NOT_FOUND)


async def _database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(
        "Database error while handling %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(ValidationFailed, _validation_failed_handler)
    app.add_exception_handler(ConflictError, _conflict_handler)
    app.add_exception_handler(NotFoundError, _not_found_handler)
    app.add_exception_handler(UnknownRoleError, _unknown_role_handler)
    app.add_exception_handler(SQLAlchemyError, _database_error_handler)
