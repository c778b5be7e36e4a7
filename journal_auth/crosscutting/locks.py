# journal_auth/crosscutting/locks.py
"""
===============================================================================
MÓDULO: Mutex por clave (single-writer por usuario)
===============================================================================

Objetivo
--------
Serializar escrituras de un mismo usuario (emisión de token, rotación de
password) dentro del proceso, sin bloquear a los demás usuarios.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  KeyedLock

Responsabilidades:
  - Entregar un threading.Lock por clave bajo demanda
  - Liberar la entrada cuando nadie la usa (sin crecimiento ilimitado)

Colaboradores:
  - identity/token_store.py (issue)
  - identity/credential_store.py (set_password)

Restricciones:
  - Solo cubre hilos del mismo proceso. Dos procesos que comparten el
    mismo row store pueden seguir compitiendo.
===============================================================================
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator


@dataclass
class _Entry:
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0


class KeyedLock:
    """Un lock por clave, con conteo de referencias para limpiar entradas ociosas."""

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry()
                self._entries[key] = entry
            entry.holders += 1

        entry.lock.acquire()
        try:
            yield
        finally:
            entry.lock.release()
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    self._entries.pop(key, None)

    def active_keys(self) -> int:
        """Cantidad de claves con al menos un holder (útil en tests)."""
        with self._guard:
            return len(self._entries)
