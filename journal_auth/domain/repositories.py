"""
CRC — domain/repositories.py

Name
- RowStore (tabular persistence port)

Responsibilities
- Define the generic row-oriented contract used by every store of the auth core.
- Keep identity/application independent from infrastructure (PostgreSQL, in-memory).
- Enable dependency inversion and straightforward unit testing.

Collaborators
- identity.credential_store, identity.token_store (consumers)
- infrastructure.row_store: InMemoryRowStore, PostgresRowStore (implementations)

Constraints
- Pure interface: no side effects, no infrastructure imports, no SQL.
- No uniqueness and no atomic check-and-set are promised. Callers that need
  single-writer semantics serialize themselves.

Notes
- Rows are plain dicts keyed by column name.
- scan() returns rows in insertion order; "first match" is defined by it.
- update_where / delete_where act on the FIRST matching row only, mirroring a
  sheet-style store that looks rows up by linear scan.
- Matching compares the text form of the cell and the value (1001 == "1001").
"""

from typing import Any, Mapping, Protocol

Row = dict[str, Any]


class RowStore(Protocol):
    """
    R: Interface for table-shaped persistence.

    Implementations must provide:
      - full scans in stable insertion order
      - append of a full row
      - update / delete of the first row whose column equals a value
      - a cheap connectivity check
    """

    def scan(self, table: str) -> list[Row]:
        """R: Return copies of every row of the table (empty if the table is empty)."""
        ...

    def append(self, table: str, row: Mapping[str, Any]) -> None:
        """R: Append one row at the end of the table."""
        ...

    def update_where(
        self, table: str, column: str, value: Any, changes: Mapping[str, Any]
    ) -> bool:
        """R: Apply changes to the first row with row[column] == value. True if found."""
        ...

    def delete_where(self, table: str, column: str, value: Any) -> bool:
        """R: Delete the first row with row[column] == value. True if found."""
        ...

    def ping(self) -> bool:
        """R: True when the backing store is reachable."""
        ...
