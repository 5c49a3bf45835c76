"""
Process-local store used when the database is unreachable at startup.

Records live in two dicts keyed by id and are lost on restart. Reads iterate
over a snapshot of the values so a concurrent insert or delete cannot break
them. Writes take no lock: two concurrent writers may both pass the email
uniqueness scan before either inserts.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Optional

from taskapi.core.errors import DuplicateError
from taskapi.domain.entities import (
    Role,
    Task,
    TaskPatch,
    TaskStatus,
    User,
    UserPatch,
    UserRef,
    apply_task_patch,
    apply_user_patch,
    new_id,
    utcnow,
)
from taskapi.repositories.base import MODE_MEMORY, Store, task_not_found, user_not_found


class MemoryStore(Store):
    mode = MODE_MEMORY

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._tasks: dict[str, Task] = {}

    # -------------------------- helpers --------------------------
    def _populate(self, task: Task) -> Task:
        user = self._users.get(task.user_id)
        owner = UserRef(user.id, user.name, user.email) if user else None
        return replace(task, owner=owner)

    def _email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        return self.find_user_by_email(email, exclude_id) is not None

    # -------------------------- users --------------------------
    def list_users(self) -> list[User]:
        return [replace(u) for u in list(self._users.values())]

    def get_user(self, user_id: str) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise user_not_found(user_id)
        return replace(user)

    def user_exists(self, user_id: str) -> bool:
        return user_id in self._users

    def find_user_by_email(self, email: str, exclude_id: Optional[str] = None) -> Optional[User]:
        needle = (email or "").strip().lower()
        for user in list(self._users.values()):
            if user.email == needle and user.id != exclude_id:
                return replace(user)
        return None

    def create_user(self, data: dict) -> User:
        if self._email_taken(data["email"]):
            raise DuplicateError("email", data["email"], "Email already registered")
        now = utcnow()
        user = User(
            id=new_id(),
            name=data["name"],
            email=data["email"],
            age=data.get("age"),
            role=data.get("role") or Role.USER.value,
            active=data.get("active", True),
            created_at=now,
            updated_at=now,
        )
        self._users[user.id] = user
        return replace(user)

    def update_user(self, user_id: str, patch: UserPatch) -> User:
        current = self._users.get(user_id)
        if current is None:
            raise user_not_found(user_id)
        if patch.email and self._email_taken(patch.email, exclude_id=user_id):
            raise DuplicateError("email", patch.email, "Email already registered")
        updated = apply_user_patch(current, patch)
        self._users[user_id] = updated
        return replace(updated)

    def delete_user(self, user_id: str) -> None:
        if self._users.pop(user_id, None) is None:
            raise user_not_found(user_id)

    # -------------------------- tasks --------------------------
    def list_tasks(self) -> list[Task]:
        return [self._populate(t) for t in list(self._tasks.values())]

    def get_task(self, task_id: str) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise task_not_found(task_id)
        return self._populate(task)

    def task_exists(self, task_id: str) -> bool:
        return task_id in self._tasks

    def create_task(self, data: dict) -> Task:
        now = utcnow()
        task = Task(
            id=new_id(),
            title=data["title"],
            description=data.get("description") or "",
            status=data.get("status") or TaskStatus.PENDING.value,
            user_id=data["user_id"],
            created_at=now,
            updated_at=now,
        )
        self._tasks[task.id] = task
        return self._populate(task)

    def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        current = self._tasks.get(task_id)
        if current is None:
            raise task_not_found(task_id)
        updated = apply_task_patch(current, patch)
        self._tasks[task_id] = replace(updated, owner=None)
        return self._populate(updated)

    def delete_task(self, task_id: str) -> None:
        if self._tasks.pop(task_id, None) is None:
            raise task_not_found(task_id)
