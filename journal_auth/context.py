"""
===============================================================================
TARJETA CRC — journal_auth/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Guardar request_id / method / path del request (o corrida) en curso.
  - Exponerlos al logger sin pasarlos por parámetro.

Colaboradores:
  - crosscutting.middleware: setea el contexto al entrar y lo limpia al salir.
  - crosscutting.logger: lee get_context_dict() en cada record.
  - scripts/renew_passwords.py: un request_id por corrida.

Restricciones:
  - Un único ContextVar con un snapshot inmutable; cada set reemplaza todo.
  - Campos vacíos no se exportan.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class RequestContext:
    request_id: str = ""
    method: str = ""
    path: str = ""


_EMPTY = RequestContext()
_current: ContextVar[RequestContext] = ContextVar("request_context", default=_EMPTY)


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    _current.set(
        RequestContext(
            request_id=request_id or "", method=method or "", path=path or ""
        )
    )


def current_request_id() -> str:
    return _current.get().request_id


def get_context_dict() -> dict[str, str]:
    """Contexto actual para logs, omitiendo claves vacías."""
    return {key: value for key, value in asdict(_current.get()).items() if value}


def clear_context() -> None:
    _current.set(_EMPTY)
