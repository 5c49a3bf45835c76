"""
Application error taxonomy and the mapping to the API error envelope.

Services and stores raise the typed errors below where a failure is
detected. Translation into ``{type, message, details, status}`` happens in
exactly one place, :func:`normalize_error`, called by the FastAPI exception
handlers.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError

VALIDATION_ERROR = "ValidationError"
NOT_FOUND_ERROR = "NotFoundError"
DUPLICATE_ERROR = "DuplicateError"
BAD_REQUEST_ERROR = "BadRequestError"
SERVER_ERROR = "ServerError"


class AppError(Exception):
    """Base class for errors with a known API category."""

    type: str = SERVER_ERROR
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    """One or more field violations; ``details`` is the ordered message list."""

    type = VALIDATION_ERROR
    status_code = 400
    default_message = "Validation error"

    def __init__(self, message: str | None = None, details: list[str] | None = None):
        super().__init__(message, list(details or []))


class BadRequestError(AppError):
    type = BAD_REQUEST_ERROR
    status_code = 400
    default_message = "Bad request"


class NotFoundError(AppError):
    type = NOT_FOUND_ERROR
    status_code = 404
    default_message = "Resource not found"


class DuplicateError(AppError):
    """Unique constraint collision; ``details`` maps the field to the colliding value."""

    type = DUPLICATE_ERROR
    status_code = 409
    default_message = "Duplicate record"

    def __init__(self, field: str, value: Any, message: str | None = None):
        super().__init__(message, {field: value})
        self.field = field
        self.value = value


@dataclass
class ApiError:
    type: str
    message: str
    details: Any
    status: int

    def envelope(self) -> dict:
        return {
            "success": False,
            "error": {"type": self.type, "message": self.message, "details": self.details},
        }


def schema_messages(errors: list[dict]) -> list[str]:
    messages = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = ".".join(loc)
        msg = err.get("msg", "invalid value")
        messages.append(f"{field}: {msg}" if field else msg)
    return messages


def _duplicate_details(exc: IntegrityError) -> dict:
    text = str(getattr(exc, "orig", exc)).lower()
    if "email" in text:
        params = exc.params if isinstance(exc.params, dict) else {}
        return {"email": params.get("email")}
    return {}


def normalize_error(exc: BaseException) -> ApiError:
    """Map any raised error to exactly one API error category."""
    if isinstance(exc, AppError):
        return ApiError(exc.type, exc.message, exc.details, exc.status_code)
    if isinstance(exc, (RequestValidationError, SchemaValidationError)):
        errors = list(exc.errors())
        if any(err.get("type") == "json_invalid" for err in errors):
            return ApiError(BAD_REQUEST_ERROR, "Malformed JSON body", None, 400)
        return ApiError(VALIDATION_ERROR, "Validation error", schema_messages(errors), 400)
    if isinstance(exc, json.JSONDecodeError):
        return ApiError(BAD_REQUEST_ERROR, "Malformed JSON body", exc.msg, 400)
    if isinstance(exc, IntegrityError):
        return ApiError(DUPLICATE_ERROR, "Duplicate record", _duplicate_details(exc), 409)
    return ApiError(SERVER_ERROR, "Internal server error", str(exc), 500)
