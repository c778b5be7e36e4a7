"""
===============================================================================
AUTH RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Auth Results

Business Goal:
    Proveer un envelope uniforme para todas las operaciones de autenticación:
    {status, message, code?, user?, token?, data?}

Why (Context / Intención):
    - Las operaciones devuelven resultados tipados en lugar de lanzar
      excepciones hacia afuera, facilitando:
        * integración con HTTP (mapeo status/code -> status HTTP)
        * tests unitarios de flujos
        * mensajes consistentes (sin filtrar si un usuario existe)

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    auth_results models (module)

Responsibilities:
    - Definir AuthStatus y AuthErrorCode estables.
    - Representar AuthResult y su forma serializable (to_dict).
    - Proveer factories para los resultados frecuentes.

Collaborators:
    - domain.entities.UserRecord (payload público)
    - application.auth_service / password_maintenance (productores)
    - api.auth_routes (consumidor)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..domain.entities import UserRecord

ACTION_CHANGE_PASSWORD = "change_password"


class AuthStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    VALIDATION_ERROR = "validation_error"
    PASSWORD_CHANGE_REQUIRED = "password_change_required"
    WARNING = "warning"


class AuthErrorCode(str, Enum):
    """
    Códigos estables (no mensajes).

      - VALIDATION_ERROR: inputs faltantes o mal formados.
      - INVALID_CREDENTIALS: identificador/password incorrectos o cuenta inactiva.
      - UNAUTHORIZED: token ausente o inválido.
      - FORBIDDEN: autenticado pero sin acceso a la cuenta.
      - STORAGE_ERROR: el row store falló; mensaje genérico.
      - NOTIFICATION_FAILED: la credencial cambió pero el aviso no salió.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    STORAGE_ERROR = "STORAGE_ERROR"
    NOTIFICATION_FAILED = "NOTIFICATION_FAILED"


@dataclass(frozen=True)
class AuthResult:
    """
    Resultado de una operación de auth.

    Contrato:
      - status SUCCESS => code es None (WARNING puede llevar code)
      - status ERROR / VALIDATION_ERROR => code presente
      - user nunca expone hash ni flags (ver UserRecord.public_payload)
    """

    status: AuthStatus
    message: str
    code: AuthErrorCode | None = None
    user: UserRecord | None = None
    token: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status in (
            AuthStatus.SUCCESS,
            AuthStatus.PASSWORD_CHANGE_REQUIRED,
            AuthStatus.WARNING,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"status": self.status.value, "message": self.message}
        if self.code is not None:
            out["code"] = self.code.value
        if self.user is not None:
            out["user"] = self.user.public_payload()
        if self.token is not None:
            out["token"] = self.token
        if self.status is AuthStatus.PASSWORD_CHANGE_REQUIRED:
            out["action"] = ACTION_CHANGE_PASSWORD
        if self.data:
            out["data"] = dict(self.data)
        return out


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
def success(
    message: str,
    *,
    user: UserRecord | None = None,
    token: str | None = None,
    data: dict[str, Any] | None = None,
) -> AuthResult:
    return AuthResult(
        AuthStatus.SUCCESS, message, user=user, token=token, data=data or {}
    )


def failure(code: AuthErrorCode, message: str) -> AuthResult:
    return AuthResult(AuthStatus.ERROR, message, code=code)


def invalid(message: str) -> AuthResult:
    return AuthResult(
        AuthStatus.VALIDATION_ERROR, message, code=AuthErrorCode.VALIDATION_ERROR
    )


def warning(
    message: str,
    *,
    code: AuthErrorCode | None = None,
    data: dict[str, Any] | None = None,
) -> AuthResult:
    return AuthResult(AuthStatus.WARNING, message, code=code, data=data or {})


def password_change_required(user: UserRecord) -> AuthResult:
    return AuthResult(
        AuthStatus.PASSWORD_CHANGE_REQUIRED,
        "Password change required",
        user=user,
    )
