from __future__ import annotations

from taskapi.core import config as core_config
from taskapi.db import session as db_session
from taskapi.repositories import MemoryStore, SQLStore, open_store


def _reset():
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


def test_reachable_database_selects_durable_store(temp_db):
    store = open_store(core_config.get_settings())
    assert isinstance(store, SQLStore)
    assert store.mode == "durable"


def test_unreachable_database_falls_back_to_memory(tmp_path, monkeypatch):
    missing = tmp_path / "no-such-dir" / "tasks.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{missing}")
    monkeypatch.delenv("FORCE_MEMORY_STORE", raising=False)
    _reset()
    try:
        store = open_store(core_config.get_settings())
    finally:
        _reset()
    assert isinstance(store, MemoryStore)
    assert store.mode == "memory"


def test_force_memory_store(monkeypatch):
    monkeypatch.setenv("FORCE_MEMORY_STORE", "true")
    _reset()
    try:
        store = open_store(core_config.get_settings())
    finally:
        _reset()
    assert isinstance(store, MemoryStore)


def test_settings_defaults(monkeypatch):
    for name in ("DATABASE_URL", "PORT", "HOST", "LOG_LEVEL", "CORS_ORIGINS", "APP_ENV", "FORCE_MEMORY_STORE"):
        monkeypatch.delenv(name, raising=False)
    _reset()
    try:
        settings = core_config.get_settings()
    finally:
        _reset()
    assert settings.database_url == core_config.DEFAULT_DATABASE_URL
    assert settings.port == 3000
    assert settings.cors_origins == ("*",)
    assert settings.force_memory_store is False
