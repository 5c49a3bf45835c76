"""
Payload validation for Users and Tasks.

User payloads go through hand-written rules so that every violation is
collected before failing. Task payloads are checked by pydantic schemas.
"""
from __future__ import annotations

import re
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator
from pydantic import ValidationError as SchemaValidationError

from taskapi.core.errors import BadRequestError, ValidationError, schema_messages
from taskapi.domain.entities import ROLE_VALUES, TASK_STATUS_VALUES, TaskStatus

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
ID_PATTERN = re.compile(r"[0-9a-f]{24}")
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
AGE_MIN = 0
AGE_MAX = 120

USER_FIELDS = ("name", "email", "age", "role", "active")


def is_valid_email(value: str | None) -> bool:
    if not value:
        return False
    return bool(EMAIL_PATTERN.fullmatch(value))


def is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and bool(ID_PATTERN.fullmatch(value))


def ensure_valid_id(value: Any) -> str:
    """Reject ids that could never name a record: 24 lowercase hex characters."""
    if not is_valid_id(value):
        raise BadRequestError(f"Invalid ID '{value}'")
    return value


def _check_name(value: Any, errors: list[str]) -> None:
    if value is None or value == "":
        errors.append("Name is required")
    elif not isinstance(value, str):
        errors.append("Name must be a string")
    else:
        length = len(value.strip())
        if length < NAME_MIN_LENGTH:
            errors.append(f"Name must be at least {NAME_MIN_LENGTH} characters long")
        if length > NAME_MAX_LENGTH:
            errors.append(f"Name cannot be longer than {NAME_MAX_LENGTH} characters")


def _check_email(value: Any, errors: list[str]) -> None:
    if value is None or value == "":
        errors.append("Email is required")
    elif not isinstance(value, str):
        errors.append("Email must be a string")
    elif not is_valid_email(value.strip()):
        errors.append("Email format is not valid")


def _check_age(value: Any, errors: list[str]) -> None:
    if value is None:
        return
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        errors.append("Age must be a number")
        return
    if isinstance(value, float) and not value.is_integer():
        errors.append("Age must be an integer")
    if value < AGE_MIN:
        errors.append("Age cannot be negative")
    if value > AGE_MAX:
        errors.append(f"Age cannot be greater than {AGE_MAX}")


def _check_role(value: Any, errors: list[str]) -> None:
    if not isinstance(value, str):
        errors.append("Role must be a string")
    elif value not in ROLE_VALUES:
        errors.append(f"Role '{value}' is not valid. Valid roles: {', '.join(ROLE_VALUES)}")


def _check_active(value: Any, errors: list[str]) -> None:
    if not isinstance(value, bool):
        errors.append("Active must be a boolean")


def _collect(data: Mapping[str, Any], *, partial: bool) -> list[str]:
    errors: list[str] = []
    if not partial or "name" in data:
        _check_name(data.get("name"), errors)
    if not partial or "email" in data:
        _check_email(data.get("email"), errors)
    if "age" in data:
        _check_age(data["age"], errors)
    if "role" in data:
        _check_role(data["role"], errors)
    if "active" in data:
        _check_active(data["active"], errors)
    return errors


def validate_user_payload(data: Mapping[str, Any]) -> None:
    """Validate a full User payload, raising ValidationError with every violation found."""
    errors = _collect(data, partial=False)
    if errors:
        raise ValidationError("Validation error", errors)


def validate_user_patch(data: Mapping[str, Any]) -> None:
    """Validate only the User fields present in ``data``. Empty payloads are not checked."""
    if not any(key in data for key in USER_FIELDS):
        return
    errors = _collect(data, partial=True)
    if errors:
        raise ValidationError("Validation error", errors)


def normalize_user_fields(data: Mapping[str, Any]) -> dict:
    """Keep known fields and apply storage normalisation (trim, lowercase email, int age)."""
    clean = {key: data[key] for key in USER_FIELDS if key in data}
    if isinstance(clean.get("name"), str):
        clean["name"] = clean["name"].strip()
    if isinstance(clean.get("email"), str):
        clean["email"] = clean["email"].strip().lower()
    if isinstance(clean.get("age"), float):
        clean["age"] = int(clean["age"])
    return clean


def parse_task_status(value: Any) -> TaskStatus:
    if isinstance(value, str) and value in TASK_STATUS_VALUES:
        return TaskStatus(value)
    raise BadRequestError(f"Status '{value}' is not valid")


# --------------------------------------------------------------------------- tasks
class TaskCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: StrictStr
    description: StrictStr = ""
    status: TaskStatus = TaskStatus.PENDING
    user: StrictStr

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value

    @field_validator("description")
    @classmethod
    def _strip_description(cls, value: str) -> str:
        return value.strip()


class TaskUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    status: Optional[TaskStatus] = None
    user: Optional[StrictStr] = None

    # Validators only run for fields present in the payload.
    @field_validator("title", "description", "status", "user", mode="before")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value

    @field_validator("description")
    @classmethod
    def _strip_description(cls, value: str) -> str:
        return value.strip()


def parse_task_create(data: Mapping[str, Any]) -> TaskCreate:
    try:
        return TaskCreate.model_validate(dict(data))
    except SchemaValidationError as exc:
        raise ValidationError("Validation error", schema_messages(exc.errors())) from exc


def parse_task_update(data: Mapping[str, Any]) -> TaskUpdate:
    try:
        return TaskUpdate.model_validate(dict(data))
    except SchemaValidationError as exc:
        raise ValidationError("Validation error", schema_messages(exc.errors())) from exc
