"""Durable store backed by SQLAlchemy."""
from __future__ import annotations

from contextlib import AbstractContextManager
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from taskapi.core.errors import DuplicateError
from taskapi.db.models import TaskRow, UserRow
from taskapi.db.session import get_session
from taskapi.domain.entities import (
    Role,
    Task,
    TaskPatch,
    TaskStatus,
    User,
    UserPatch,
    UserRef,
    new_id,
    utcnow,
)
from taskapi.repositories.base import MODE_DURABLE, Store, task_not_found, user_not_found

SessionFactory = Callable[[], AbstractContextManager[Session]]


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        age=row.age,
        role=row.role,
        active=bool(row.active),
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _to_task(row: TaskRow) -> Task:
    owner = row.owner
    return Task(
        id=row.id,
        title=row.title,
        description=row.description or "",
        status=row.status,
        user_id=row.user_id,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
        owner=UserRef(owner.id, owner.name, owner.email) if owner is not None else None,
    )


def _with_owner():
    return selectinload(TaskRow.owner).load_only(UserRow.name, UserRow.email)


class SQLStore(Store):
    """CRUD helpers wrapping the SQLAlchemy session."""

    mode = MODE_DURABLE

    def __init__(self, session_factory: SessionFactory = get_session) -> None:
        self._session = session_factory

    def _duplicate_email(self, email: str) -> DuplicateError:
        return DuplicateError("email", email, "Email already registered")

    def _load_task(self, session: Session, task_id: str) -> Optional[TaskRow]:
        stmt = select(TaskRow).where(TaskRow.id == task_id).options(_with_owner())
        return session.execute(stmt).scalar_one_or_none()

    # -------------------------- users --------------------------
    def list_users(self) -> list[User]:
        with self._session() as session:
            rows = session.execute(select(UserRow).order_by(UserRow.created_at)).scalars().all()
            return [_to_user(r) for r in rows]

    def get_user(self, user_id: str) -> User:
        with self._session() as session:
            row = session.get(UserRow, user_id)
            if row is None:
                raise user_not_found(user_id)
            return _to_user(row)

    def user_exists(self, user_id: str) -> bool:
        with self._session() as session:
            stmt = select(UserRow.id).where(UserRow.id == user_id).limit(1)
            return session.execute(stmt).first() is not None

    def find_user_by_email(self, email: str, exclude_id: Optional[str] = None) -> Optional[User]:
        needle = (email or "").strip().lower()
        with self._session() as session:
            stmt = select(UserRow).where(UserRow.email == needle)
            if exclude_id:
                stmt = stmt.where(UserRow.id != exclude_id)
            row = session.execute(stmt.limit(1)).scalar_one_or_none()
            return _to_user(row) if row else None

    def create_user(self, data: dict) -> User:
        now = utcnow()
        row = UserRow(
            id=new_id(),
            name=data["name"],
            email=data["email"],
            age=data.get("age"),
            role=data.get("role") or Role.USER.value,
            active=data.get("active", True),
            created_at=now,
            updated_at=now,
        )
        with self._session() as session:
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise self._duplicate_email(data["email"]) from exc
            session.refresh(row)
            return _to_user(row)

    def update_user(self, user_id: str, patch: UserPatch) -> User:
        with self._session() as session:
            row = session.get(UserRow, user_id)
            if row is None:
                raise user_not_found(user_id)
            for key, value in patch.changes().items():
                setattr(row, key, value)
            row.updated_at = utcnow()
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise self._duplicate_email(patch.email) from exc
            session.refresh(row)
            return _to_user(row)

    def delete_user(self, user_id: str) -> None:
        with self._session() as session:
            result = session.execute(delete(UserRow).where(UserRow.id == user_id))
            session.commit()
            if not result.rowcount:
                raise user_not_found(user_id)

    # -------------------------- tasks --------------------------
    def list_tasks(self) -> list[Task]:
        with self._session() as session:
            stmt = select(TaskRow).options(_with_owner()).order_by(TaskRow.created_at)
            return [_to_task(r) for r in session.execute(stmt).scalars().all()]

    def get_task(self, task_id: str) -> Task:
        with self._session() as session:
            row = self._load_task(session, task_id)
            if row is None:
                raise task_not_found(task_id)
            return _to_task(row)

    def task_exists(self, task_id: str) -> bool:
        with self._session() as session:
            stmt = select(TaskRow.id).where(TaskRow.id == task_id).limit(1)
            return session.execute(stmt).first() is not None

    def create_task(self, data: dict) -> Task:
        now = utcnow()
        task_id = new_id()
        with self._session() as session:
            session.add(
                TaskRow(
                    id=task_id,
                    title=data["title"],
                    description=data.get("description") or "",
                    status=data.get("status") or TaskStatus.PENDING.value,
                    user_id=data["user_id"],
                    created_at=now,
                    updated_at=now,
                )
            )
            session.commit()
        return self.get_task(task_id)

    def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        with self._session() as session:
            row = session.get(TaskRow, task_id)
            if row is None:
                raise task_not_found(task_id)
            for key, value in patch.changes().items():
                setattr(row, key, value)
            row.updated_at = utcnow()
            session.commit()
        return self.get_task(task_id)

    def delete_task(self, task_id: str) -> None:
        with self._session() as session:
            result = session.execute(delete(TaskRow).where(TaskRow.id == task_id))
            session.commit()
            if not result.rowcount:
                raise task_not_found(task_id)
