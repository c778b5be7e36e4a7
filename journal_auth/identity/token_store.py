"""
============================================================
TARJETA CRC — identity/token_store.py
============================================================
Class: TokenStore

Responsibilities:
  - Emitir tokens de sesión opacos (uuid4 + "-" + user_id).
  - Mantener "un token vivo por usuario": borrar los previos y agregar el nuevo
    bajo el lock del usuario.
  - Verificar, resolver y revocar tokens.

Collaborators:
  - domain.repositories.RowStore (tabla "tokens")
  - domain.entities.TokenRecord
  - crosscutting.locks.KeyedLock
  - crosscutting.logger.logger

Constraints / Notes:
  - Sin expiración: un token vive hasta logout o hasta el próximo login.
  - El lock es in-process. Entre procesos puede quedar más de un token para
    el mismo usuario; el próximo issue() borra TODAS las filas del usuario.
  - Nunca se loguea el valor del token.
============================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Mapping
from uuid import uuid4

from ..crosscutting.locks import KeyedLock
from ..crosscutting.logger import logger
from ..domain.entities import TokenRecord
from ..domain.repositories import RowStore

COL_USER_ID = "user_id"
COL_TOKEN = "token"
COL_ISSUED_AT = "issued_at"


def _default_token_factory(user_id: str) -> str:
    return f"{uuid4().hex}-{user_id}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def row_to_token(row: Mapping[str, Any]) -> TokenRecord:
    return TokenRecord(
        user_id=str(row.get(COL_USER_ID) or "").strip(),
        token=str(row.get(COL_TOKEN) or ""),
        issued_at=_as_datetime(row.get(COL_ISSUED_AT)),
    )


class TokenStore:
    """Tokens de sesión sobre la tabla de tokens del RowStore."""

    def __init__(
        self,
        rows: RowStore,
        *,
        table: str = "tokens",
        locks: KeyedLock | None = None,
        token_factory: Callable[[str], str] = _default_token_factory,
        clock: Callable[[], datetime] = _now,
    ):
        self._rows = rows
        self._table = table
        self._locks = locks or KeyedLock()
        self._token_factory = token_factory
        self._clock = clock

    def issue(self, user_id: str) -> str:
        """Emite un token nuevo y deja exactamente una fila viva para user_id."""
        key = str(user_id).strip()
        if not key:
            raise ValueError("user_id is required to issue a token")

        with self._locks.hold(key):
            token = self._token_factory(key)
            removed = self._delete_all_for(key)
            self._rows.append(
                self._table,
                {COL_USER_ID: key, COL_TOKEN: token, COL_ISSUED_AT: self._clock()},
            )

        logger.info("Token emitido", extra={"user_id": key, "superseded": removed})
        return token

    def lookup(self, token: str) -> TokenRecord | None:
        if not token:
            return None
        for row in self._rows.scan(self._table):
            if str(row.get(COL_TOKEN) or "") == token:
                return row_to_token(row)
        return None

    def verify(self, token: str) -> bool:
        return self.lookup(token) is not None

    def revoke(self, token: str) -> bool:
        """Borra la fila del token. Idempotente: la segunda llamada devuelve False."""
        if not token:
            return False
        removed = self._rows.delete_where(self._table, COL_TOKEN, token)
        if removed:
            logger.info("Token revocado")
        return removed

    def revoke_by_user(self, user_id: str) -> bool:
        key = str(user_id).strip()
        if not key:
            return False
        with self._locks.hold(key):
            removed = self._delete_all_for(key)
        if removed:
            logger.info(
                "Tokens de usuario revocados",
                extra={"user_id": key, "count": removed},
            )
        return removed > 0

    def _delete_all_for(self, user_id: str) -> int:
        # R: delete_where borra la primera coincidencia; iteramos hasta vaciar.
        removed = 0
        while self._rows.delete_where(self._table, COL_USER_ID, user_id):
            removed += 1
        return removed
