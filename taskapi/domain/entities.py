"""Entity records, enums and partial-update structures for Users and Tasks."""
from __future__ import annotations

import secrets
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"
    EDITOR = "editor"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


ROLE_VALUES = tuple(r.value for r in Role)
TASK_STATUS_VALUES = tuple(s.value for s in TaskStatus)


def new_id() -> str:
    """Opaque 24 hex char identifier."""
    return secrets.token_hex(12)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


@dataclass
class User:
    id: str
    name: str
    email: str
    role: str = Role.USER.value
    active: bool = True
    age: Optional[int] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "name": self.name,
            "email": self.email,
            "age": self.age,
            "role": self.role,
            "active": self.active,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass(frozen=True)
class UserRef:
    """Populated view of a task's owner (name and email only)."""

    id: str
    name: str
    email: str

    def to_dict(self) -> dict:
        return {"_id": self.id, "name": self.name, "email": self.email}


@dataclass
class Task:
    id: str
    title: str
    user_id: str
    description: str = ""
    status: str = TaskStatus.PENDING.value
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    # Resolved owner; None when the reference dangles.
    owner: Optional[UserRef] = None

    @property
    def user(self) -> Union[UserRef, str]:
        return self.owner if self.owner is not None else self.user_id

    def to_dict(self) -> dict:
        user = self.user
        return {
            "_id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "user": user.to_dict() if isinstance(user, UserRef) else user,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


# Sentinel distinguishing "field absent from patch" from an explicit None.
class _Unset:
    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class UserPatch:
    name: Any = UNSET
    email: Any = UNSET
    age: Any = UNSET
    role: Any = UNSET
    active: Any = UNSET

    @classmethod
    def from_payload(cls, data: dict) -> "UserPatch":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def changes(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}

    def is_empty(self) -> bool:
        return not self.changes()


@dataclass(frozen=True)
class TaskPatch:
    title: Any = UNSET
    description: Any = UNSET
    status: Any = UNSET
    user_id: Any = UNSET

    def changes(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}

    def is_empty(self) -> bool:
        return not self.changes()


def apply_user_patch(user: User, patch: UserPatch, now: datetime | None = None) -> User:
    """Return a copy of ``user`` with the patch merged and ``updated_at`` refreshed."""
    return replace(user, **patch.changes(), updated_at=now or utcnow())


def apply_task_patch(task: Task, patch: TaskPatch, now: datetime | None = None) -> Task:
    changes = patch.changes()
    if "user_id" in changes and changes["user_id"] != task.user_id:
        changes["owner"] = None
    return replace(task, **changes, updated_at=now or utcnow())
