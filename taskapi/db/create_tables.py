"""
Create the ``users`` and ``tasks`` tables.

Run as ``python -m taskapi.db.create_tables``. :func:`taskapi.repositories.open_store`
calls :func:`create_all` on every durable startup, so running it by hand is
only needed to prepare a database ahead of the first boot.
"""
from __future__ import annotations

from typing import Optional

from loguru import logger
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from taskapi.db import models  # noqa: F401  # register tables on Base.metadata
from taskapi.db.session import Base, get_engine


def create_all(engine: Optional[Engine] = None) -> list[str]:
    """Create missing tables (existing ones are left alone) and return the table names."""
    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine)
    names = sorted(Base.metadata.tables)
    logger.debug("Schema ready: {}", ", ".join(names))
    return names


if __name__ == "__main__":
    from taskapi.core.config import get_settings
    from taskapi.core.logging import configure_logging

    configure_logging(get_settings().log_level)
    try:
        tables = create_all()
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
    logger.info("Created tables: {}", ", ".join(tables))
