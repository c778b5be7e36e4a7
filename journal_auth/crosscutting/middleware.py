# journal_auth/crosscutting/middleware.py
"""
===============================================================================
MÓDULO: Middleware de contexto de request
===============================================================================

RequestContextMiddleware:
  - Acepta un X-Request-Id entrante solo si es corto y "seguro" (sin
    espacios ni caracteres de control); si no, genera un uuid4.
  - Publica request_id / method / path en journal_auth.context y en
    request.state (lo leen los exception handlers).
  - Loguea una línea por request con status y duración, salvo /healthz.
  - Devuelve siempre el X-Request-Id en la respuesta.
  - Limpia el contexto al terminar, haya o no excepción.
===============================================================================
"""

from __future__ import annotations

import re
import time
import uuid
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..context import clear_context, set_request_context
from .logger import logger

REQUEST_ID_HEADER = "X-Request-Id"
_SAFE_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,128}")
_UNLOGGED_PATHS = frozenset({"/healthz"})


def resolve_request_id(incoming: str | None) -> str:
    candidate = (incoming or "").strip()
    if _SAFE_REQUEST_ID.fullmatch(candidate):
        return candidate
    return str(uuid.uuid4())


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        set_request_context(
            request_id=request_id, method=request.method, path=request.url.path
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request sin respuesta", extra={"duration_ms": _elapsed_ms(started)}
            )
            raise
        finally:
            duration = _elapsed_ms(started)
            path = request.url.path
            clear_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        if path not in _UNLOGGED_PATHS:
            logger.info(
                "request atendido",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": path,
                    "status_code": response.status_code,
                    "duration_ms": duration,
                },
            )
        return response
