# journal_auth/crosscutting/error_responses.py
"""
===============================================================================
MÓDULO: Respuestas de error estándar (envelope de auth)
===============================================================================

Objetivo
--------
Uniformar TODOS los errores HTTP con el mismo envelope que devuelven las
operaciones de auth:
    {status, message, code, request_id?, errors?}
- El frontend maneja por "code"
- El backend correlaciona por request_id / error_id

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  AppHTTPException + handlers + mapeo status/code -> HTTP

Responsabilidades:
  - Definir catálogo de códigos de error (ErrorCode)
  - Construir el cuerpo de error (ErrorBody)
  - Renderizar AppHTTPException con ese cuerpo
  - Traducir AuthResult -> status HTTP

Colaboradores:
  - crosscutting/middleware.py (request_id)
  - api/exception_handlers.py (mapea errores internos)
  - api/auth_routes.py (envelope_response)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..application.auth_results import AuthErrorCode, AuthResult, AuthStatus
from ..context import current_request_id


class ErrorCode(str, Enum):
    # 4xx
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"


class ErrorBody(BaseModel):
    """Cuerpo de error con la misma forma que el envelope de auth."""

    status: str = AuthStatus.ERROR.value
    message: str
    code: ErrorCode
    request_id: str | None = None
    errors: list[dict[str, Any]] | None = None


OPENAPI_ERROR_RESPONSES = {
    "401": {"description": "Unauthorized", "model": ErrorBody},
    "403": {"description": "Forbidden", "model": ErrorBody},
    "422": {"description": "Validation Error", "model": ErrorBody},
    "503": {"description": "Storage unavailable", "model": ErrorBody},
}

_STATUS_BY_CODE: dict[AuthErrorCode, int] = {
    AuthErrorCode.VALIDATION_ERROR: 422,
    AuthErrorCode.INVALID_CREDENTIALS: 401,
    AuthErrorCode.UNAUTHORIZED: 401,
    AuthErrorCode.FORBIDDEN: 403,
    AuthErrorCode.STORAGE_ERROR: 503,
}


def http_status_for(result: AuthResult) -> int:
    """
    success / password_change_required / warning -> 200
    validation_error -> 422
    error -> según code (401/403/503), 500 si no hay mapeo
    """
    if result.ok:
        return 200
    if result.status is AuthStatus.VALIDATION_ERROR:
        return 422
    if result.code is None:
        return 500
    return _STATUS_BY_CODE.get(result.code, 500)


def envelope_response(result: AuthResult) -> JSONResponse:
    return JSONResponse(status_code=http_status_for(result), content=result.to_dict())


class AppHTTPException(HTTPException):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      AppHTTPException

    Responsabilidades:
      - Adjuntar un ErrorCode estable
      - Transportar errores de validación (errors[])

    Colaboradores:
      - app_exception_handler()
    ----------------------------------------------------------------------------
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.errors = errors


# ---------------------------------------------------------------------------
# Handlers FastAPI
# ---------------------------------------------------------------------------
def request_id_from(request: Request) -> str | None:
    state_id = getattr(getattr(request, "state", None), "request_id", None)
    return state_id or current_request_id() or None


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    status = (
        AuthStatus.VALIDATION_ERROR
        if exc.code is ErrorCode.VALIDATION_ERROR
        else AuthStatus.ERROR
    )
    body = ErrorBody(
        status=status.value,
        message=str(exc.detail),
        code=exc.code,
        request_id=request_id_from(request),
        errors=exc.errors or None,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=getattr(exc, "headers", None),
    )
