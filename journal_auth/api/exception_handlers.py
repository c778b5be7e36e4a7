"""
===============================================================================
TARJETA CRC — api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir excepciones del core (AuthCoreError) a respuestas HTTP con envelope.
  - Renderizar errores de validación de FastAPI con el mismo envelope.
  - Centralizar logging de errores con request_id + error_id.
  - Evitar filtrar detalles internos en errores no controlados.

Colaboradores:
  - crosscutting.error_responses: AppHTTPException, ErrorCode, handlers base
  - crosscutting.exceptions: AuthCoreError y derivadas
  - crosscutting.config.Settings (nivel de detalle según entorno)
===============================================================================
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.config import Settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    request_id_from,
)
from ..crosscutting.exceptions import (
    AccountInactive,
    AuthCoreError,
    Forbidden,
    InvalidCredentials,
    StorageError,
    Unauthorized,
    ValidationError,
)
from ..crosscutting.logger import logger

# R: (código HTTP, ErrorCode) por tipo de error del core. El orden importa:
#    se toma la primera clase que matchee con isinstance.
_CORE_ERROR_MAP: tuple[tuple[type[AuthCoreError], int, ErrorCode], ...] = (
    (Unauthorized, 401, ErrorCode.UNAUTHORIZED),
    (InvalidCredentials, 401, ErrorCode.INVALID_CREDENTIALS),
    (AccountInactive, 401, ErrorCode.INVALID_CREDENTIALS),
    (Forbidden, 403, ErrorCode.FORBIDDEN),
    (ValidationError, 422, ErrorCode.VALIDATION_ERROR),
    (StorageError, 503, ErrorCode.STORAGE_ERROR),
)


async def auth_core_error_handler(
    request: Request, exc: AuthCoreError
) -> JSONResponse:
    status_code, code = 500, ErrorCode.INTERNAL_ERROR
    for error_type, mapped_status, mapped_code in _CORE_ERROR_MAP:
        if isinstance(exc, error_type):
            status_code, code = mapped_status, mapped_code
            break

    detail = exc.message
    if status_code >= 500:
        logger.error(
            "Error del core de auth",
            extra={
                "error_code": exc.error_code,
                "error_id": exc.error_id,
                "request_id": request_id_from(request),
            },
        )
        # R: StorageError no expone detalle interno.
        detail = (
            "Service temporarily unavailable. Please try again later."
            if code is ErrorCode.STORAGE_ERROR
            else "Unexpected error"
        )

    app_exc = AppHTTPException(
        status_code=status_code,
        code=code,
        detail=detail,
        errors=[{"error_id": exc.error_id}] if status_code >= 500 else None,
    )
    return await app_exception_handler(request, app_exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ())), "msg": err.get("msg")}
        for err in exc.errors()
    ]
    app_exc = AppHTTPException(
        status_code=422,
        code=ErrorCode.VALIDATION_ERROR,
        detail="Invalid request payload",
        errors=errors,
    )
    return await app_exception_handler(request, app_exc)


def _unhandled_exception_handler(settings: Settings):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Excepción no controlada",
            exc_info=True,
            extra={"request_id": request_id_from(request)},
        )
        # R: En desarrollo ayudamos un poco más; en producción no filtramos detalles.
        detail = "Unexpected error" if settings.is_production() else str(exc)
        app_exc = AppHTTPException(
            status_code=500, code=ErrorCode.INTERNAL_ERROR, detail=detail
        )
        return await app_exception_handler(request, app_exc)

    return handler


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """
    Registra handlers en la app FastAPI.

    Exception genérica se registra al final como fallback.
    """
    app.add_exception_handler(AuthCoreError, auth_core_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler(settings))


__all__ = ["register_exception_handlers"]
