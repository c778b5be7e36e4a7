"""
===============================================================================
CRC CARD — infrastructure/db/pool.py
===============================================================================

Componente:
  Pool de conexiones del row store PostgreSQL (uno por proceso)

Responsabilidades:
  - Abrir el pool desde Settings (open_pool) o con parámetros explícitos.
  - Fijar statement_timeout en cada conexión nueva.
  - Entregar el pool abierto y cerrarlo de forma idempotente.

Colaboradores:
  - psycopg_pool.ConnectionPool
  - api/main.py (lifespan), scripts/renew_passwords.py
  - infrastructure/row_store/postgres.py
===============================================================================
"""

from __future__ import annotations

import threading
from typing import Optional

from psycopg import Connection
from psycopg_pool import ConnectionPool

from ...crosscutting.config import Settings
from ...crosscutting.logger import logger
from .errors import PoolAlreadyInitializedError, PoolNotInitializedError

_pool: Optional[ConnectionPool] = None
_pool_lock = threading.Lock()


def _statement_timeout_hook(timeout_ms: int):
    def configure(conn: Connection) -> None:
        conn.execute(
            "SELECT set_config('statement_timeout', %s, false)", (str(timeout_ms),)
        )
        conn.commit()

    return configure if timeout_ms > 0 else None


def init_pool(
    database_url: str,
    min_size: int,
    max_size: int,
    *,
    statement_timeout_ms: int = 0,
) -> ConnectionPool:
    """Abre el pool. Un segundo init sin close_pool() es un error."""
    global _pool

    with _pool_lock:
        if _pool is not None:
            raise PoolAlreadyInitializedError("init_pool() called twice")

        _pool = ConnectionPool(
            conninfo=database_url,
            min_size=min_size,
            max_size=max_size,
            configure=_statement_timeout_hook(statement_timeout_ms),
            open=True,
        )
        logger.info(
            "Pool DB abierto",
            extra={
                "min_size": min_size,
                "max_size": max_size,
                "statement_timeout_ms": statement_timeout_ms,
            },
        )
        return _pool


def open_pool(settings: Settings) -> ConnectionPool:
    return init_pool(
        settings.database_url,
        settings.db_pool_min_size,
        settings.db_pool_max_size,
        statement_timeout_ms=settings.db_statement_timeout_ms,
    )


def get_pool() -> ConnectionPool:
    pool = _pool
    if pool is None:
        raise PoolNotInitializedError("call init_pool() before using the store")
    return pool


def close_pool() -> None:
    global _pool

    with _pool_lock:
        pool, _pool = _pool, None
    if pool is None:
        return
    pool.close()
    logger.info("Pool DB cerrado")
