"""Store contract shared by the durable and in-memory backends."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from taskapi.core.errors import NotFoundError
from taskapi.domain.entities import Task, TaskPatch, User, UserPatch

MODE_DURABLE = "durable"
MODE_MEMORY = "memory"


def user_not_found(user_id: str) -> NotFoundError:
    return NotFoundError(f"User with ID {user_id} not found")


def task_not_found(task_id: str) -> NotFoundError:
    return NotFoundError(f"Task with ID {task_id} not found")


class Store(ABC):
    """CRUD operations over Users and Tasks.

    Tasks are always returned populated: ``task.owner`` holds the referenced
    user's id, name and email, or None when the reference no longer resolves.
    Lookups by an unknown id raise NotFoundError; a colliding email raises
    DuplicateError.
    """

    mode: str

    # -------------------------- users --------------------------
    @abstractmethod
    def list_users(self) -> list[User]: ...

    @abstractmethod
    def get_user(self, user_id: str) -> User: ...

    @abstractmethod
    def user_exists(self, user_id: str) -> bool: ...

    @abstractmethod
    def find_user_by_email(self, email: str, exclude_id: Optional[str] = None) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, data: dict) -> User: ...

    @abstractmethod
    def update_user(self, user_id: str, patch: UserPatch) -> User: ...

    @abstractmethod
    def delete_user(self, user_id: str) -> None: ...

    # -------------------------- tasks --------------------------
    @abstractmethod
    def list_tasks(self) -> list[Task]: ...

    @abstractmethod
    def get_task(self, task_id: str) -> Task: ...

    @abstractmethod
    def task_exists(self, task_id: str) -> bool: ...

    @abstractmethod
    def create_task(self, data: dict) -> Task: ...

    @abstractmethod
    def update_task(self, task_id: str, patch: TaskPatch) -> Task: ...

    @abstractmethod
    def delete_task(self, task_id: str) -> None: ...

    def update_task_status(self, task_id: str, status: str) -> Task:
        return self.update_task(task_id, TaskPatch(status=status))

    def reassign_task(self, task_id: str, user_id: str) -> Task:
        return self.update_task(task_id, TaskPatch(user_id=user_id))
