"""SQLAlchemy models for the durable store."""
from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import foreign, relationship

from .session import Base


class UserRow(Base):
    __tablename__ = "users"

    id = Column(String(24), primary_key=True)
    name = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    age = Column(Integer, nullable=True)
    role = Column(String(16), default="user", nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class TaskRow(Base):
    __tablename__ = "tasks"

    id = Column(String(24), primary_key=True)
    title = Column(Text, nullable=False)
    description = Column(Text, default="", nullable=False)
    status = Column(String(16), default="pending", nullable=False)
    # No foreign key: deleting a user leaves its tasks with a dangling reference.
    user_id = Column(String(24), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    owner = relationship(
        UserRow,
        primaryjoin=lambda: foreign(TaskRow.user_id) == UserRow.id,
        viewonly=True,
        uselist=False,
    )
