"""
============================================================
TARJETA CRC — infrastructure/row_store/in_memory.py
============================================================
Class: InMemoryRowStore

Responsibilities:
  - Guardar tablas como listas de filas (dict) en memoria.
  - Implementar el contrato RowStore: scan / append / update_where /
    delete_where / ping.
  - Servir a tests y desarrollo local (STORAGE_BACKEND=memory).

Collaborators:
  - domain.repositories.RowStore (contrato a implementar)

Constraints / Notes:
  - Thread-safe: cada operación individual corre bajo Lock. Las secuencias
    de operaciones NO son atómicas (igual que el store real).
  - Copias defensivas: nunca se comparten dicts mutables con los callers.
  - Orden de inserción estable: "primera coincidencia" = primera fila agregada.
============================================================
"""

from __future__ import annotations

from threading import Lock
from typing import Any, Iterable, Mapping

from ...domain.repositories import Row


def _cell_text(value: Any) -> str:
    """R: Igualdad "como string", igual que una planilla."""
    return "" if value is None else str(value).strip()


class InMemoryRowStore:
    """
    Row store in-memory, thread-safe.

    Modelo mental:
    - _tables es el "libro": nombre de tabla -> lista de filas.
    - Una tabla inexistente se comporta como vacía.
    """

    def __init__(
        self, seed: Mapping[str, Iterable[Mapping[str, Any]]] | None = None
    ):
        self._lock = Lock()
        self._tables: dict[str, list[Row]] = {}
        for table, rows in (seed or {}).items():
            self._tables[table] = [dict(row) for row in rows]

    def scan(self, table: str) -> list[Row]:
        with self._lock:
            return [dict(row) for row in self._tables.get(table, [])]

    def append(self, table: str, row: Mapping[str, Any]) -> None:
        with self._lock:
            self._tables.setdefault(table, []).append(dict(row))

    def update_where(
        self, table: str, column: str, value: Any, changes: Mapping[str, Any]
    ) -> bool:
        needle = _cell_text(value)
        with self._lock:
            for row in self._tables.get(table, []):
                if _cell_text(row.get(column)) == needle:
                    row.update(changes)
                    return True
        return False

    def delete_where(self, table: str, column: str, value: Any) -> bool:
        needle = _cell_text(value)
        with self._lock:
            rows = self._tables.get(table, [])
            for index, row in enumerate(rows):
                if _cell_text(row.get(column)) == needle:
                    del rows[index]
                    return True
        return False

    def ping(self) -> bool:
        return True

    def count(self, table: str, column: str | None = None, value: Any = None) -> int:
        """Cantidad de filas (opcionalmente filtradas). Útil en tests."""
        with self._lock:
            rows = self._tables.get(table, [])
            if column is None:
                return len(rows)
            needle = _cell_text(value)
            return sum(1 for row in rows if _cell_text(row.get(column)) == needle)
