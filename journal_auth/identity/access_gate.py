"""
===============================================================================
TARJETA CRC — identity/access_gate.py
===============================================================================

Módulo:
    Gate de autorización por request (token + dueño/admin)

Responsabilidades:
    - authenticate_request: token -> Session (o Unauthorized).
    - verify_account_access: admin pasa siempre; el resto solo su propia cuenta.
    - guard: aplica la allow-list de acciones públicas antes de exigir token.
    - check_*: variantes que devuelven AuthResult en lugar de lanzar.

Colaboradores:
    - identity.token_store.TokenStore
    - identity.credential_store.CredentialStore
    - crosscutting.config.Settings (admin_role, public_actions)
    - crosscutting.exceptions: Unauthorized / Forbidden / StorageError

Decisiones de diseño:
    - Fail-safe: ante cualquier duda se deniega.
    - Comparación dueño/cuenta como strings.
    - Solo el literal de rol admin configurado otorga bypass.
===============================================================================
"""

from __future__ import annotations

from ..application.auth_results import (
    AuthErrorCode,
    AuthResult,
    failure,
    invalid,
    success,
)
from ..crosscutting.config import Settings
from ..crosscutting.exceptions import (
    AuthCoreError,
    Forbidden,
    StorageError,
    Unauthorized,
    ValidationError,
)
from ..crosscutting.logger import logger
from ..domain.entities import Session
from .credential_store import CredentialStore
from .token_store import TokenStore

MSG_TOKEN_REQUIRED = "Token is required for this operation"
MSG_INVALID_TOKEN = "Invalid or expired token"
MSG_ACCESS_DENIED = "Access denied to this account"


class AccessGate:
    def __init__(
        self,
        *,
        settings: Settings,
        tokens: TokenStore,
        credentials: CredentialStore,
    ):
        self._admin_role = settings.admin_role
        self._public_actions = settings.get_public_actions()
        self._tokens = tokens
        self._credentials = credentials

    def is_public(self, action: str) -> bool:
        return action in self._public_actions

    def is_admin(self, session: Session) -> bool:
        return session.user.role == self._admin_role

    def authenticate_request(self, token: str | None) -> Session:
        """
        Resuelve la sesión detrás del token.

        Raises:
            Unauthorized: token ausente, desconocido, o usuario inexistente/inactivo.
        """
        if not token:
            raise Unauthorized(MSG_TOKEN_REQUIRED)

        record = self._tokens.lookup(token)
        if record is None:
            raise Unauthorized(MSG_INVALID_TOKEN)

        user = self._credentials.find_by_employee_id(record.user_id)
        if user is None or not user.is_active:
            logger.warning(
                "Token sin usuario activo",
                extra={"user_id": record.user_id},
            )
            raise Unauthorized(MSG_INVALID_TOKEN)

        return Session(token=record, user=user)

    def verify_account_access(
        self, token: str | None, account_id: str | None
    ) -> Session:
        """
        Admin o dueño de la cuenta.

        Raises:
            Unauthorized: token o usuario no resolubles.
            ValidationError: account_id ausente.
            Forbidden: usuario común accediendo a una cuenta ajena.
        """
        return self.authorize_account(self.authenticate_request(token), account_id)

    def authorize_account(self, session: Session, account_id: str | None) -> Session:
        """Política dueño/admin sobre una sesión ya autenticada."""
        account = "" if account_id is None else str(account_id).strip()
        if not account:
            raise ValidationError("Account ID is required for this operation")

        if self.is_admin(session):
            return session
        if session.user_id == account:
            return session

        logger.warning(
            "Acceso a cuenta denegado",
            extra={"user_id": session.user_id, "account_id": account},
        )
        raise Forbidden(MSG_ACCESS_DENIED)

    def guard(
        self, action: str, token: str | None, account_id: str | None = None
    ) -> Session | None:
        """
        Punto único para el router de acciones.

        - Acción pública -> None (sin sesión).
        - Con account_id -> verify_account_access.
        - Sin account_id -> authenticate_request.
        """
        if self.is_public(action):
            return None
        if account_id is not None:
            return self.verify_account_access(token, account_id)
        return self.authenticate_request(token)

    # ---------------------------------------------------------------------
    # Variantes que devuelven envelope
    # ---------------------------------------------------------------------
    def check_request(self, token: str | None) -> AuthResult:
        try:
            session = self.authenticate_request(token)
        except (Unauthorized, StorageError) as exc:
            return _as_failure(exc)
        return success("Access granted", user=session.user)

    def check_account_access(
        self, token: str | None, account_id: str | None
    ) -> AuthResult:
        try:
            session = self.verify_account_access(token, account_id)
        except (Unauthorized, Forbidden, ValidationError, StorageError) as exc:
            return _as_failure(exc)
        if self.is_admin(session):
            return success("Admin access granted", user=session.user)
        return success("User access granted", user=session.user)


def _as_failure(exc: AuthCoreError) -> AuthResult:
    if isinstance(exc, Forbidden):
        return failure(AuthErrorCode.FORBIDDEN, exc.message)
    if isinstance(exc, ValidationError):
        return invalid(exc.message)
    if isinstance(exc, StorageError):
        logger.exception(
            "Gate: fallo de almacenamiento", extra={"error_id": exc.error_id}
        )
        return failure(
            AuthErrorCode.STORAGE_ERROR,
            "Service temporarily unavailable. Please try again later.",
        )
    return failure(AuthErrorCode.UNAUTHORIZED, exc.message)
