from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the taskapi package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from taskapi.core import config as core_config  # noqa: E402
from taskapi.db import models  # noqa: E402
from taskapi.db import session as db_session  # noqa: E402
from taskapi.repositories import MemoryStore, SQLStore  # noqa: E402


def _clear_caches() -> None:
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Point DATABASE_URL at a temporary SQLite file and reset settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.delenv("FORCE_MEMORY_STORE", raising=False)
    _clear_caches()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    try:
        models.Base.metadata.drop_all(bind=engine)
    except Exception:
        pass
    try:
        engine.dispose()
    except Exception:
        pass
    _clear_caches()


@pytest.fixture()
def sql_store(temp_db):
    return SQLStore()


@pytest.fixture()
def memory_store():
    return MemoryStore()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Run the test once per store variant."""
    if request.param == "memory":
        return MemoryStore()
    request.getfixturevalue("temp_db")
    return SQLStore()
