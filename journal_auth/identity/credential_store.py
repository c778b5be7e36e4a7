"""
============================================================
TARJETA CRC — identity/credential_store.py
============================================================
Class: CredentialStore

Responsibilities:
  - Buscar registros de credenciales por employee_id o email sobre el RowStore.
  - Mapear filas crudas -> UserRecord normalizando flags y status.
  - Reemplazar hash de password + flags de rotación (set_password).
  - Serializar escrituras por employee_id con KeyedLock.

Collaborators:
  - domain.repositories.RowStore (tabla "user")
  - domain.entities.UserRecord / UserStatus
  - crosscutting.locks.KeyedLock
  - crosscutting.exceptions.UserNotFound
  - crosscutting.logger.logger

Constraints / Notes:
  - Repositorio puro: no verifica passwords ni decide políticas.
  - Retorna None cuando no existe el registro (no exception por "not found"),
    salvo set_password, que exige que exista.
  - employee_id se asume único pero no se impone: gana la primera fila.
  - Errores del row store (StorageError) se propagan sin envolver.
============================================================
"""

from __future__ import annotations

from typing import Any, Mapping

from ..crosscutting.exceptions import UserNotFound
from ..crosscutting.locks import KeyedLock
from ..crosscutting.logger import logger
from ..domain.entities import UserRecord, UserStatus
from ..domain.repositories import RowStore

# ============================================================
# Contrato de columnas (alineado con la migración)
# ============================================================
COL_EMPLOYEE_ID = "employee_id"
COL_FULL_NAME = "full_name"
COL_EMAIL = "email"
COL_ROLE = "role"
COL_STATUS = "status"
COL_PASSWORD_HASH = "password_hash"
COL_REQUIRE_CHANGE = "require_password_change"
COL_IS_TEMPORARY = "is_temporary_password"

_TRUE_STRINGS = {"true", "1", "yes", "y"}
_ACTIVE_STRINGS = {"1", "active", "true"}


# ============================================================
# Helpers internos: normalización + mapping
# ============================================================
def _as_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _as_bool(value: Any) -> bool:
    """R: Los flags llegan como bool, 1/0 o texto ("true"/"TRUE")."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return _as_text(value).lower() in _TRUE_STRINGS


def _as_status(value: Any) -> UserStatus:
    if isinstance(value, bool):
        return UserStatus.ACTIVE if value else UserStatus.INACTIVE
    if isinstance(value, (int, float)):
        return UserStatus.ACTIVE if value == 1 else UserStatus.INACTIVE
    if _as_text(value).lower() in _ACTIVE_STRINGS:
        return UserStatus.ACTIVE
    return UserStatus.INACTIVE


def row_to_user(row: Mapping[str, Any]) -> UserRecord:
    return UserRecord(
        employee_id=_as_text(row.get(COL_EMPLOYEE_ID)),
        full_name=_as_text(row.get(COL_FULL_NAME)),
        email=_as_text(row.get(COL_EMAIL)),
        role=_as_text(row.get(COL_ROLE)),
        status=_as_status(row.get(COL_STATUS)),
        password_hash=_as_text(row.get(COL_PASSWORD_HASH)),
        require_password_change=_as_bool(row.get(COL_REQUIRE_CHANGE)),
        is_temporary_password=_as_bool(row.get(COL_IS_TEMPORARY)),
    )


class CredentialStore:
    """Acceso a credenciales sobre la tabla de usuarios del RowStore."""

    def __init__(
        self,
        rows: RowStore,
        *,
        table: str = "user",
        locks: KeyedLock | None = None,
    ):
        self._rows = rows
        self._table = table
        self._locks = locks or KeyedLock()

    # =========================================================
    # Lecturas
    # =========================================================
    def list_users(self) -> list[UserRecord]:
        return [row_to_user(row) for row in self._rows.scan(self._table)]

    def find_by_identifier(self, identifier: str) -> UserRecord | None:
        """
        Busca un usuario ACTIVO cuyo employee_id o email coincida (como string).

        Escaneo lineal. Con duplicados, gana la primera fila.
        """
        needle = _as_text(identifier)
        if not needle:
            return None

        for user in self.list_users():
            if not user.is_active:
                continue
            if user.employee_id == needle or user.email == needle:
                return user
        return None

    def find_by_employee_id(self, employee_id: str) -> UserRecord | None:
        """Cualquier status. Primera fila que coincida."""
        needle = _as_text(employee_id)
        if not needle:
            return None

        for user in self.list_users():
            if user.employee_id == needle:
                return user
        return None

    def find_by_email(self, email: str) -> UserRecord | None:
        """Case-insensitive y sin filtrar status (flujo de reset)."""
        needle = _as_text(email).lower()
        if not needle:
            return None

        for user in self.list_users():
            if user.email.lower() == needle:
                return user
        return None

    # =========================================================
    # Escrituras
    # =========================================================
    def set_password(
        self,
        employee_id: str,
        new_hash: str,
        require_change: bool,
        is_temporary: bool,
    ) -> UserRecord:
        """
        Reemplaza hash y flags del usuario.

        Raises:
            UserNotFound: si no hay fila para employee_id.
        """
        key = _as_text(employee_id)
        with self._locks.hold(key):
            current = self.find_by_employee_id(key)
            if current is None:
                raise UserNotFound(f"No user row for employee_id '{key}'")

            updated = current.with_password(
                new_hash, require_change=require_change, is_temporary=is_temporary
            )
            found = self._rows.update_where(
                self._table,
                COL_EMPLOYEE_ID,
                current.employee_id,
                {
                    COL_PASSWORD_HASH: updated.password_hash,
                    COL_REQUIRE_CHANGE: updated.require_password_change,
                    COL_IS_TEMPORARY: updated.is_temporary_password,
                },
            )
            if not found:
                raise UserNotFound(f"No user row for employee_id '{key}'")

        logger.info(
            "Credenciales actualizadas",
            extra={
                "employee_id": key,
                "require_password_change": require_change,
                "is_temporary_password": is_temporary,
            },
        )
        return updated
