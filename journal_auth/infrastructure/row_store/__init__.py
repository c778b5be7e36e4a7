"""
============================================================
TARJETA CRC
============================================================
Module: journal_auth.infrastructure.row_store (Package exports)

Responsibilities:
- Exponer las implementaciones de RowStore en un único punto de importación.

Collaborators:
- InMemoryRowStore (tests / desarrollo local)
- PostgresRowStore (runtime con persistencia real)
============================================================
"""

from .in_memory import InMemoryRowStore
from .postgres import PostgresRowStore

__all__ = ["InMemoryRowStore", "PostgresRowStore"]
