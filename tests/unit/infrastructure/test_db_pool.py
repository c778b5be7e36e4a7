"""
Name: Connection Pool Lifecycle Tests

Responsibilities:
  - Ensure the pool opens once, fails fast when misused, and closes idempotently
"""

from unittest.mock import MagicMock

import pytest

from journal_auth.crosscutting.config import Settings
from journal_auth.infrastructure.db import pool as db_pool
from journal_auth.infrastructure.db.errors import (
    PoolAlreadyInitializedError,
    PoolNotInitializedError,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def fake_pool_cls(monkeypatch):
    cls = MagicMock()
    monkeypatch.setattr(db_pool, "ConnectionPool", cls)
    db_pool.close_pool()
    yield cls
    db_pool.close_pool()


def test_open_pool_uses_settings(fake_pool_cls):
    settings = Settings(
        app_env="test",
        storage_backend="postgres",
        database_url="postgresql://u:p@db/journal",
        db_pool_min_size=2,
        db_pool_max_size=4,
    )

    pool = db_pool.open_pool(settings)

    assert db_pool.get_pool() is pool
    kwargs = fake_pool_cls.call_args.kwargs
    assert kwargs["conninfo"] == "postgresql://u:p@db/journal"
    assert kwargs["min_size"] == 2
    assert kwargs["max_size"] == 4
    assert kwargs["configure"] is not None


def test_double_init_fails(fake_pool_cls):
    db_pool.init_pool("postgresql://x/y", 1, 1)
    with pytest.raises(PoolAlreadyInitializedError):
        db_pool.init_pool("postgresql://x/y", 1, 1)


def test_get_without_init_fails(fake_pool_cls):
    with pytest.raises(PoolNotInitializedError):
        db_pool.get_pool()


def test_close_is_idempotent(fake_pool_cls):
    pool = db_pool.init_pool("postgresql://x/y", 1, 1)

    db_pool.close_pool()
    db_pool.close_pool()

    pool.close.assert_called_once()


def test_statement_timeout_hook():
    assert db_pool._statement_timeout_hook(0) is None

    conn = MagicMock()
    db_pool._statement_timeout_hook(2500)(conn)

    conn.execute.assert_called_once()
    assert conn.execute.call_args.args[1] == ("2500",)
