"""
===============================================================================
TARJETA CRC — journal_auth/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer row store, stores, servicios y gate a partir de un Settings inmutable.
  - Exponer factories para FastAPI (Depends) y para scripts.
  - Mantener singletons con caching (lru_cache).
  - Centralizar la decisión runtime memory vs postgres.

Colaboradores:
  - journal_auth.crosscutting.config.get_settings
  - journal_auth.domain.* (puertos)
  - journal_auth.infrastructure.* (implementaciones)
  - journal_auth.identity.* / journal_auth.application.*

Patrones aplicados:
  - Composition Root
  - Dependency Inversion (servicios dependen de puertos)
  - Lazy singletons con lru_cache

Notas:
  - Este archivo NO contiene lógica de negocio.
  - build_components() no lee configuración global: recibe Settings y row store
    explícitos (lo usan tests y scripts).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from .application.auth_service import AuthService
from .application.password_maintenance import PasswordMaintenance
from .crosscutting.config import Settings, get_settings
from .crosscutting.locks import KeyedLock
from .domain.repositories import RowStore
from .domain.services import PasswordResetNotifier
from .identity.access_gate import AccessGate
from .identity.credential_hasher import CredentialHasher
from .identity.credential_store import CredentialStore
from .identity.token_store import TokenStore
from .infrastructure.notifications import LoggingResetNotifier
from .infrastructure.row_store import InMemoryRowStore, PostgresRowStore


@dataclass(frozen=True)
class AuthComponents:
    settings: Settings
    rows: RowStore
    hasher: CredentialHasher
    credentials: CredentialStore
    tokens: TokenStore
    auth_service: AuthService
    access_gate: AccessGate
    maintenance: PasswordMaintenance


def build_components(
    settings: Settings,
    rows: RowStore,
    *,
    notifier: PasswordResetNotifier | None = None,
) -> AuthComponents:
    """Arma el grafo completo de componentes sobre un row store dado."""
    notifier = notifier or LoggingResetNotifier()
    hasher = CredentialHasher(settings.bootstrap_password)
    credentials = CredentialStore(
        rows, table=settings.users_table, locks=KeyedLock()
    )
    tokens = TokenStore(rows, table=settings.tokens_table, locks=KeyedLock())

    return AuthComponents(
        settings=settings,
        rows=rows,
        hasher=hasher,
        credentials=credentials,
        tokens=tokens,
        auth_service=AuthService(
            settings=settings,
            hasher=hasher,
            credentials=credentials,
            tokens=tokens,
            notifier=notifier,
        ),
        access_gate=AccessGate(
            settings=settings, tokens=tokens, credentials=credentials
        ),
        maintenance=PasswordMaintenance(
            hasher=hasher,
            credentials=credentials,
            tokens=tokens,
            notifier=notifier,
        ),
    )


# =============================================================================
# Singletons de runtime
# =============================================================================


@lru_cache(maxsize=1)
def get_row_store() -> RowStore:
    """
    Row store según configuración.

    Regla:
      - app_env de test o STORAGE_BACKEND=memory => InMemoryRowStore.
      - STORAGE_BACKEND=postgres => PostgresRowStore (requiere init_pool()).
    """
    settings = get_settings()
    if settings.is_test_env() or settings.storage_backend == "memory":
        return InMemoryRowStore()
    return PostgresRowStore()


@lru_cache(maxsize=1)
def get_components() -> AuthComponents:
    return build_components(get_settings(), get_row_store())


def get_auth_service() -> AuthService:
    return get_components().auth_service


def get_access_gate() -> AccessGate:
    return get_components().access_gate


def get_password_maintenance() -> PasswordMaintenance:
    return get_components().maintenance


def reset_container() -> None:
    """Limpia los singletons (tests)."""
    get_components.cache_clear()
    get_row_store.cache_clear()
