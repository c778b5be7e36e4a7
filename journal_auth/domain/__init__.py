"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio

Responsabilidades:
    - Centralizar exports para imports limpios en identity/application.

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .entities import Session, TokenRecord, UserRecord, UserRole, UserStatus
from .repositories import Row, RowStore
from .services import PasswordResetNotifier

__all__ = [
    "UserRecord",
    "UserRole",
    "UserStatus",
    "TokenRecord",
    "Session",
    "Row",
    "RowStore",
    "PasswordResetNotifier",
]
