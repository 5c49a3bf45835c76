"""
Use cases for the task management API.

Services are the only callers of a Store. They validate payloads, enforce
cross-entity rules (a task must reference an existing user) and raise the
typed errors from ``taskapi.core.errors``. Routers call services and never
touch a store directly.
"""

from .task_service import TaskService
from .user_service import UserService

__all__ = ["TaskService", "UserService"]
