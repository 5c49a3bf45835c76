"""User use cases: validation, email uniqueness and CRUD delegation."""

from __future__ import annotations

from typing import Any, Mapping

from loguru import logger

from taskapi.core.errors import DuplicateError
from taskapi.domain.entities import Role, User, UserPatch
from taskapi.domain.validation import (
    ensure_valid_id,
    normalize_user_fields,
    validate_user_patch,
    validate_user_payload,
)
from taskapi.repositories.base import Store, user_not_found


class UserService:
    """Create, read, update and delete users against the injected store."""

    def __init__(self, store: Store) -> None:
        self.store = store

    def list_users(self) -> list[User]:
        return self.store.list_users()

    def get_user(self, user_id: str) -> User:
        ensure_valid_id(user_id)
        return self.store.get_user(user_id)

    def create_user(self, payload: Mapping[str, Any]) -> User:
        validate_user_payload(payload)
        data = normalize_user_fields(payload)
        if self.store.find_user_by_email(data["email"]):
            raise DuplicateError("email", data["email"], "Email already registered")
        data.setdefault("role", Role.USER.value)
        data.setdefault("active", True)
        user = self.store.create_user(data)
        logger.info("Created user {} <{}>", user.id, user.email)
        return user

    def update_user(self, user_id: str, payload: Mapping[str, Any]) -> User:
        """Apply a partial update.

        An empty payload is a no-op: nothing is validated or written and the
        current record comes back with ``updated_at`` untouched.
        """
        ensure_valid_id(user_id)
        patch = UserPatch.from_payload(normalize_user_fields(payload))
        if patch.is_empty():
            return self.store.get_user(user_id)
        validate_user_patch(payload)
        if not self.store.user_exists(user_id):
            raise user_not_found(user_id)
        if patch.email and self.store.find_user_by_email(patch.email, exclude_id=user_id):
            raise DuplicateError("email", patch.email, "Email already registered")
        user = self.store.update_user(user_id, patch)
        logger.info("Updated user {} fields={}", user_id, sorted(patch.changes()))
        return user

    def delete_user(self, user_id: str) -> None:
        ensure_valid_id(user_id)
        if not self.store.user_exists(user_id):
            raise user_not_found(user_id)
        self.store.delete_user(user_id)
        logger.info("Deleted user {}", user_id)
