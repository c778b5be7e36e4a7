# journal_auth/crosscutting/logger.py
"""
===============================================================================
MÓDULO: Logger estructurado (JSON) del core de auth
===============================================================================

Objetivo
--------
Un único logger "journal_auth" para todo el paquete:
- JSON por línea (o texto plano si LOG_JSON=false)
- request_id / method / path tomados de journal_auth.context
- Ninguna credencial en la salida: passwords, hashes, tokens y la URL de la
  base se reemplazan por REDACTED, a cualquier profundidad de los extras

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  JSONFormatter + redact() + setup_logger()

Colaboradores:
  - journal_auth/context.py
  - crosscutting/config.py (LOG_LEVEL, LOG_JSON)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from ..context import get_context_dict

LOGGER_NAME = "journal_auth"
REDACTED = "***REDACTADO***"

SENSITIVE_KEYS = frozenset(
    {
        "password",
        "current_password",
        "new_password",
        "confirm_password",
        "password_hash",
        "bootstrap_password",
        "token",
        "authorization",
        "database_url",
    }
)

_MAX_STR = 2_000
_MAX_DEPTH = 4

# R: Atributos propios de LogRecord; todo lo demás vino por extra={...}.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


def redact(value: Any, key: str | None = None, depth: int = 0) -> Any:
    """Copia JSON-friendly de value con claves sensibles enmascaradas."""
    if key is not None and key.lower() in SENSITIVE_KEYS:
        return REDACTED
    if depth > _MAX_DEPTH:
        return "…"
    if isinstance(value, dict):
        return {str(k): redact(v, str(k), depth + 1) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [redact(item, key, depth + 1) for item in value]
    if isinstance(value, str) and len(value) > _MAX_STR:
        return value[:_MAX_STR] + "…"
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        payload.update(get_context_dict())

        extras = {
            k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS
        }
        payload.update(redact(extras))

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, tb = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc),
                "stacktrace": traceback.format_exception(exc_type, exc, tb),
            }

        return json.dumps(payload, ensure_ascii=False, default=str)


def _configured_output() -> tuple[str, bool]:
    from .config import get_settings

    # R: Settings inválidas se reportan en el arranque de la app, no acá.
    try:
        settings = get_settings()
    except ValidationError:
        return "INFO", True
    return (settings.log_level or "INFO").upper(), settings.log_json


def setup_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Configura el logger una sola vez por proceso (reimport seguro)."""
    log = logging.getLogger(name)
    level, use_json = _configured_output()
    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if use_json
            else logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        log.addHandler(handler)
    return log


logger = setup_logger()
