"""
Persistence adapters.

Two interchangeable stores implement :class:`Store`: ``SQLStore`` for the
durable database and ``MemoryStore`` as the fallback when the database
cannot be reached at startup. :func:`open_store` picks one, once.
"""
from __future__ import annotations

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from taskapi.core.config import Settings
from taskapi.db.create_tables import create_all
from taskapi.db.session import get_engine, ping
from taskapi.repositories.base import MODE_DURABLE, MODE_MEMORY, Store
from taskapi.repositories.memory_store import MemoryStore
from taskapi.repositories.sql_repository import SQLStore

__all__ = ["MODE_DURABLE", "MODE_MEMORY", "MemoryStore", "SQLStore", "Store", "open_store"]


def open_store(settings: Settings) -> Store:
    """Connect to the durable database, falling back to memory when it is unreachable."""
    if settings.force_memory_store:
        logger.info("FORCE_MEMORY_STORE set; using in-memory store")
        return MemoryStore()

    try:
        engine = get_engine()
        ping(engine)
        create_all(engine)
    except SQLAlchemyError as exc:
        logger.warning("Could not connect to the database ({}); using in-memory store", exc.__class__.__name__)
        return MemoryStore()
    logger.info("Connected to the database at {}", engine.url.render_as_string(hide_password=True))
    return SQLStore()
