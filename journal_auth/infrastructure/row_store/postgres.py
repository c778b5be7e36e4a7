"""
============================================================
TARJETA CRC — infrastructure/row_store/postgres.py
============================================================
Class: PostgresRowStore

Responsibilities:
  - Implementar el contrato RowStore sobre tablas PostgreSQL.
  - Preservar la semántica de planilla: orden de inserción (row_id),
    "primera coincidencia" en update/delete y sin constraints de unicidad.
  - Exponer fallos consistentes vía StorageError con logging estructurado.

Collaborators:
  - psycopg_pool.ConnectionPool (inyectado o infrastructure.db.pool.get_pool)
  - psycopg.sql (identificadores de tabla/columna citados)
  - crosscutting.exceptions.StorageError
  - crosscutting.logger.logger

Constraints / Notes:
  - SQL parametrizado siempre; nombres de tabla/columna vía sql.Identifier.
  - row_id es una columna técnica (BIGSERIAL) que nunca sale en las filas.
  - Igualdad "como string" (btrim(col::text)) para alinear con el store in-memory.
  - Nunca se loguean valores de filas (pueden traer hashes o tokens).
============================================================
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from ...crosscutting.exceptions import StorageError
from ...crosscutting.logger import logger
from ...domain.repositories import Row
from ..db.errors import DatabasePoolError

# R: Columna técnica de orden de inserción (definida en la migración).
ROW_ID_COLUMN = "row_id"


def _match_clause(column: str) -> sql.Composed:
    return sql.SQL("btrim({col}::text) = %s").format(col=sql.Identifier(column))


def _as_param(value: Any) -> str:
    return "" if value is None else str(value).strip()


class PostgresRowStore:
    def __init__(self, pool: Optional[ConnectionPool] = None):
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool
        from ..db.pool import get_pool

        return get_pool()

    # ============================================================
    # Helper de ejecución (centraliza logging + StorageError)
    # ============================================================
    def _run(
        self,
        query: sql.Composable,
        params: tuple = (),
        *,
        fetch: str,
        log_msg: str,
        log_extra: dict[str, object],
    ):
        try:
            with self._get_pool().connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(query, params)
                    if fetch == "all":
                        return cur.fetchall()
                    if fetch == "one":
                        return cur.fetchone()
                    return None
        except (psycopg.Error, DatabasePoolError) as exc:
            logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
            raise StorageError(log_msg, original_error=exc) from exc

    # ============================================================
    # API RowStore
    # ============================================================
    def scan(self, table: str) -> list[Row]:
        rows = self._run(
            sql.SQL("SELECT * FROM {table} ORDER BY {row_id}").format(
                table=sql.Identifier(table), row_id=sql.Identifier(ROW_ID_COLUMN)
            ),
            fetch="all",
            log_msg="PostgresRowStore: scan failed",
            log_extra={"table": table},
        )
        out: list[Row] = []
        for row in rows or []:
            item = dict(row)
            item.pop(ROW_ID_COLUMN, None)
            out.append(item)
        return out

    def append(self, table: str, row: Mapping[str, Any]) -> None:
        columns = list(row.keys())
        if not columns:
            raise ValueError("append requires at least one column")

        query = sql.SQL("INSERT INTO {table} ({cols}) VALUES ({vals})").format(
            table=sql.Identifier(table),
            cols=sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            vals=sql.SQL(", ").join(sql.Placeholder() for _ in columns),
        )
        self._run(
            query,
            tuple(row[c] for c in columns),
            fetch="none",
            log_msg="PostgresRowStore: append failed",
            log_extra={"table": table, "columns": columns},
        )

    def update_where(
        self, table: str, column: str, value: Any, changes: Mapping[str, Any]
    ) -> bool:
        if not changes:
            raise ValueError("update_where requires at least one change")

        names = list(changes.keys())
        query = sql.SQL(
            "UPDATE {table} SET {assignments} WHERE {row_id} = ("
            "SELECT {row_id} FROM {table} WHERE {match} ORDER BY {row_id} LIMIT 1"
            ") RETURNING {row_id}"
        ).format(
            table=sql.Identifier(table),
            assignments=sql.SQL(", ").join(
                sql.SQL("{} = %s").format(sql.Identifier(n)) for n in names
            ),
            row_id=sql.Identifier(ROW_ID_COLUMN),
            match=_match_clause(column),
        )
        found = self._run(
            query,
            (*(changes[n] for n in names), _as_param(value)),
            fetch="one",
            log_msg="PostgresRowStore: update_where failed",
            log_extra={"table": table, "column": column, "changed": names},
        )
        return found is not None

    def delete_where(self, table: str, column: str, value: Any) -> bool:
        query = sql.SQL(
            "DELETE FROM {table} WHERE {row_id} = ("
            "SELECT {row_id} FROM {table} WHERE {match} ORDER BY {row_id} LIMIT 1"
            ") RETURNING {row_id}"
        ).format(
            table=sql.Identifier(table),
            row_id=sql.Identifier(ROW_ID_COLUMN),
            match=_match_clause(column),
        )
        found = self._run(
            query,
            (_as_param(value),),
            fetch="one",
            log_msg="PostgresRowStore: delete_where failed",
            log_extra={"table": table, "column": column},
        )
        return found is not None

    def ping(self) -> bool:
        try:
            self._run(
                sql.SQL("SELECT 1"),
                fetch="one",
                log_msg="PostgresRowStore: ping failed",
                log_extra={},
            )
        except StorageError:
            return False
        return True
