"""Task use cases: schema checks, owner existence probes and CRUD delegation."""

from __future__ import annotations

from typing import Any, Mapping

from loguru import logger

from taskapi.core.errors import BadRequestError
from taskapi.domain.entities import Task, TaskPatch
from taskapi.domain.validation import (
    ensure_valid_id,
    parse_task_create,
    parse_task_status,
    parse_task_update,
)
from taskapi.repositories.base import Store, task_not_found


class TaskService:
    """Create, read, update and delete tasks, keeping owner references valid on write."""

    def __init__(self, store: Store) -> None:
        self.store = store

    # -------------------------------------- helpers --------------------------------------
    def _ensure_user(self, user_id: str) -> None:
        ensure_valid_id(user_id)
        if not self.store.user_exists(user_id):
            raise BadRequestError(f"User with ID {user_id} does not exist")

    def _ensure_task(self, task_id: str) -> None:
        if not self.store.task_exists(task_id):
            raise task_not_found(task_id)

    # -------------------------------------- reads --------------------------------------
    def list_tasks(self) -> list[Task]:
        return self.store.list_tasks()

    def get_task(self, task_id: str) -> Task:
        ensure_valid_id(task_id)
        return self.store.get_task(task_id)

    # -------------------------------------- writes --------------------------------------
    def create_task(self, payload: Mapping[str, Any]) -> Task:
        schema = parse_task_create(payload)
        self._ensure_user(schema.user)
        task = self.store.create_task(
            {
                "title": schema.title,
                "description": schema.description,
                "status": schema.status.value,
                "user_id": schema.user,
            }
        )
        logger.info("Created task {} for user {}", task.id, task.user_id)
        return task

    def update_task(self, task_id: str, payload: Mapping[str, Any]) -> Task:
        """Apply a partial update; an empty payload returns the task unchanged."""
        ensure_valid_id(task_id)
        schema = parse_task_update(payload)
        changes = {}
        for key in schema.model_fields_set:
            value = getattr(schema, key)
            if key == "status":
                value = value.value
            changes["user_id" if key == "user" else key] = value
        patch = TaskPatch(**changes)
        if patch.is_empty():
            return self.store.get_task(task_id)
        self._ensure_task(task_id)
        if "user_id" in changes:
            self._ensure_user(changes["user_id"])
        task = self.store.update_task(task_id, patch)
        logger.info("Updated task {} fields={}", task_id, sorted(changes))
        return task

    def update_task_status(self, task_id: str, status: Any) -> Task:
        ensure_valid_id(task_id)
        new_status = parse_task_status(status)
        self._ensure_task(task_id)
        task = self.store.update_task_status(task_id, new_status.value)
        logger.info("Task {} status -> {}", task_id, new_status.value)
        return task

    def reassign_task(self, task_id: str, user_id: Any) -> Task:
        ensure_valid_id(task_id)
        if not isinstance(user_id, str) or not user_id.strip():
            raise BadRequestError("userId is required")
        self._ensure_user(user_id)
        self._ensure_task(task_id)
        task = self.store.reassign_task(task_id, user_id)
        logger.info("Task {} moved to user {}", task_id, user_id)
        return task

    def delete_task(self, task_id: str) -> None:
        ensure_valid_id(task_id)
        self._ensure_task(task_id)
        self.store.delete_task(task_id)
        logger.info("Deleted task {}", task_id)
