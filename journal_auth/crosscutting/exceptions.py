# journal_auth/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del core de autenticación
===============================================================================

Cada error lleva:
  - error_code: código estable por clase (para logs y mapeo HTTP)
  - error_id: uuid por instancia, para cruzar la respuesta genérica con el log
  - message: texto apto para el cliente (sin secretos ni detalle interno)
  - original_error: causa de bajo nivel, solo para logs

Quién lanza / quién captura:
  - identity.access_gate lanza Unauthorized / Forbidden / ValidationError.
  - identity.credential_store lanza UserNotFound (nunca sale del servicio).
  - infrastructure.row_store lanza StorageError.
  - application.auth_service captura en el borde y devuelve AuthResult.
  - api.exception_handlers renderiza lo que llegue a HTTP.
  - InvalidCredentials / AccountInactive no los lanza el servicio (login
    devuelve AuthResult); existen para que un adaptador que prefiera lanzar
    tenga su mapeo HTTP en api.exception_handlers.
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class AuthCoreError(Exception):
    error_code: str = "AUTH_CORE_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_id = error_id or uuid4().hex
        self.original_error = original_error

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.error_code}, error_id={self.error_id})"


class InvalidCredentials(AuthCoreError):
    """No distingue usuario inexistente de password incorrecto."""

    error_code = "INVALID_CREDENTIALS"


class AccountInactive(AuthCoreError):
    """Hacia afuera se presenta como INVALID_CREDENTIALS."""

    error_code = "ACCOUNT_INACTIVE"


class ValidationError(AuthCoreError):
    error_code = "VALIDATION_ERROR"


class Unauthorized(AuthCoreError):
    error_code = "UNAUTHORIZED"


class Forbidden(AuthCoreError):
    error_code = "FORBIDDEN"


class UserNotFound(AuthCoreError):
    error_code = "USER_NOT_FOUND"


class StorageError(AuthCoreError):
    """Row store inalcanzable o query fallida. Fatal para el request."""

    error_code = "STORAGE_ERROR"
