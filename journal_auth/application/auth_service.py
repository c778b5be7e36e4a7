"""
===============================================================================
USE CASES: Auth Service (login / logout / reset / forced rotation)
===============================================================================

Name:
    AuthService

Business Goal:
    Autenticar empleados contra el row store, emitir un token de sesión por
    usuario y conducir la rotación obligatoria de passwords temporales.

Flujo de login:
    ANONYMOUS -> CREDENTIAL_CHECK -> {REJECTED | PASSWORD_ROTATION_REQUIRED | AUTHENTICATED}

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    AuthService

Responsibilities:
    - Validar inputs y devolver AuthResult (no lanzar hacia afuera).
    - No distinguir "usuario inexistente" de "password incorrecto".
    - No revelar si un email existe en el flujo de reset.
    - Revocar la sesión viva cuando cambia la credencial.
    - Capturar StorageError en el borde: log con error_id + mensaje genérico.

Collaborators:
    - identity.CredentialHasher / CredentialStore / TokenStore
    - domain.services.PasswordResetNotifier
    - crosscutting.config.Settings (bootstrap, largo mínimo)
    - crosscutting.logger
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Callable

from ..crosscutting.config import Settings
from ..crosscutting.exceptions import StorageError, UserNotFound
from ..crosscutting.logger import logger
from ..domain.services import PasswordResetNotifier
from ..identity.credential_hasher import CredentialHasher
from ..identity.credential_store import CredentialStore
from ..identity.token_store import TokenStore
from .auth_results import (
    AuthErrorCode,
    AuthResult,
    failure,
    invalid,
    password_change_required,
    success,
    warning,
)

MSG_INVALID_CREDENTIALS = "Invalid credentials"
MSG_INVALID_TOKEN = "Invalid or expired token"
MSG_STORAGE_UNAVAILABLE = "Service temporarily unavailable. Please try again later."
MSG_RESET_ISSUED = (
    "If an account exists for this email, a password reset has been issued."
)


@dataclass(frozen=True)
class ChangePasswordInput:
    """Input para la rotación de password (forzada o voluntaria)."""

    employee_id: str
    current_password: str
    new_password: str
    confirm_password: str


def _storage_guarded(operation: str) -> Callable:
    """R: Convierte StorageError en un envelope genérico, logueando el detalle."""

    def decorator(fn: Callable[..., AuthResult]) -> Callable[..., AuthResult]:
        @wraps(fn)
        def wrapper(*args, **kwargs) -> AuthResult:
            try:
                return fn(*args, **kwargs)
            except StorageError as exc:
                logger.exception(
                    "Auth: fallo de almacenamiento",
                    extra={"operation": operation, "error_id": exc.error_id},
                )
                return failure(AuthErrorCode.STORAGE_ERROR, MSG_STORAGE_UNAVAILABLE)

        return wrapper

    return decorator


class AuthService:
    def __init__(
        self,
        *,
        settings: Settings,
        hasher: CredentialHasher,
        credentials: CredentialStore,
        tokens: TokenStore,
        notifier: PasswordResetNotifier,
    ):
        self._settings = settings
        self._hasher = hasher
        self._credentials = credentials
        self._tokens = tokens
        self._notifier = notifier

    # =========================================================
    # Login / logout
    # =========================================================
    @_storage_guarded("login")
    def login(self, identifier: str, password: str) -> AuthResult:
        identifier = (identifier or "").strip()
        if not identifier or not password:
            return failure(
                AuthErrorCode.VALIDATION_ERROR, "Identifier and password are required"
            )

        user = self._credentials.find_by_identifier(identifier)
        if user is None:
            logger.warning(
                "Login rechazado: usuario inexistente o inactivo",
                extra={"identifier": identifier},
            )
            return failure(AuthErrorCode.INVALID_CREDENTIALS, MSG_INVALID_CREDENTIALS)

        if not self._hasher.verify(
            password,
            user.email,
            user.employee_id,
            stored_hash=user.password_hash,
            allow_temporary=True,
        ):
            logger.warning(
                "Login rechazado: password incorrecto",
                extra={"identifier": identifier},
            )
            return failure(AuthErrorCode.INVALID_CREDENTIALS, MSG_INVALID_CREDENTIALS)

        if user.require_password_change:
            logger.info(
                "Login requiere rotación de password",
                extra={"employee_id": user.employee_id},
            )
            return password_change_required(user)

        token = self._tokens.issue(user.employee_id)
        return success("Login successful", user=user, token=token)

    @_storage_guarded("logout")
    def logout(self, token: str) -> AuthResult:
        if not token:
            return failure(AuthErrorCode.VALIDATION_ERROR, "Token is required")
        if not self._tokens.revoke(token):
            return failure(AuthErrorCode.UNAUTHORIZED, MSG_INVALID_TOKEN)
        return success("Logged out")

    @_storage_guarded("current_user")
    def current_user(self, token: str) -> AuthResult:
        record = self._tokens.lookup(token) if token else None
        if record is None:
            return failure(AuthErrorCode.UNAUTHORIZED, MSG_INVALID_TOKEN)

        user = self._credentials.find_by_employee_id(record.user_id)
        if user is None or not user.is_active:
            return failure(AuthErrorCode.UNAUTHORIZED, MSG_INVALID_TOKEN)
        return success("Authenticated", user=user)

    # =========================================================
    # Rotación de password
    # =========================================================
    @_storage_guarded("change_password")
    def change_password(self, data: ChangePasswordInput) -> AuthResult:
        employee_id = (data.employee_id or "").strip()
        if not (
            employee_id
            and data.current_password
            and data.new_password
            and data.confirm_password
        ):
            return invalid("All fields are required")

        if data.new_password != data.confirm_password:
            return invalid("New password and confirmation do not match")

        min_len = self._settings.min_password_length
        if len(data.new_password) < min_len:
            return invalid(f"New password must be at least {min_len} characters long")

        if data.new_password == data.current_password:
            return invalid("New password must be different from the current password")

        user = self._credentials.find_by_employee_id(employee_id)
        if user is None or not user.is_active:
            logger.warning(
                "Cambio de password rechazado: usuario inexistente o inactivo",
                extra={"employee_id": employee_id},
            )
            return failure(AuthErrorCode.INVALID_CREDENTIALS, MSG_INVALID_CREDENTIALS)

        if not self._hasher.verify(
            data.current_password,
            user.email,
            user.employee_id,
            stored_hash=user.password_hash,
            allow_temporary=True,
        ):
            logger.warning(
                "Cambio de password rechazado: password actual incorrecto",
                extra={"employee_id": employee_id},
            )
            return failure(AuthErrorCode.INVALID_CREDENTIALS, MSG_INVALID_CREDENTIALS)

        try:
            self._credentials.set_password(
                user.employee_id,
                self._hasher.hash(data.new_password),
                require_change=False,
                is_temporary=False,
            )
        except UserNotFound:
            # R: la fila desapareció entre lectura y escritura.
            return failure(AuthErrorCode.INVALID_CREDENTIALS, MSG_INVALID_CREDENTIALS)

        if not self._revoke_sessions(user.employee_id, "change_password"):
            return warning(
                "Password was changed but existing sessions could not be revoked",
                code=AuthErrorCode.STORAGE_ERROR,
                data={"sessions_revoked": False},
            )
        return success("Password changed successfully")

    @_storage_guarded("reset_password")
    def reset_password(self, email: str) -> AuthResult:
        email = (email or "").strip()
        if not email or "@" not in email:
            return failure(
                AuthErrorCode.VALIDATION_ERROR, "A valid email address is required"
            )

        user = self._credentials.find_by_email(email)
        if user is None:
            logger.info("Reset solicitado para email desconocido")
            return success(MSG_RESET_ISSUED)

        try:
            updated = self._credentials.set_password(
                user.employee_id,
                self._hasher.bootstrap_hash,
                require_change=True,
                is_temporary=True,
            )
        except UserNotFound:
            return success(MSG_RESET_ISSUED)

        revoked = self._revoke_sessions(user.employee_id, "reset_password")

        # R: La notificación se intenta aunque la revocación haya fallado.
        notified = True
        try:
            self._notifier.notify_reset(updated)
        except Exception:
            logger.exception(
                "Reset aplicado pero la notificación falló",
                extra={"employee_id": user.employee_id},
            )
            notified = False

        outcome = {"sessions_revoked": revoked, "notified": notified}
        if not revoked:
            return warning(
                "Password was reset but existing sessions could not be revoked",
                code=AuthErrorCode.STORAGE_ERROR,
                data=outcome,
            )
        if not notified:
            return warning(
                "Password was reset but the notification could not be delivered",
                code=AuthErrorCode.NOTIFICATION_FAILED,
                data=outcome,
            )
        return success(MSG_RESET_ISSUED)

    def _revoke_sessions(self, employee_id: str, operation: str) -> bool:
        """Revoca la sesión viva tras el cambio; False si el store falló."""
        try:
            self._tokens.revoke_by_user(employee_id)
        except StorageError as exc:
            logger.exception(
                "Credencial cambiada pero la sesión no se pudo revocar",
                extra={
                    "operation": operation,
                    "employee_id": employee_id,
                    "error_id": exc.error_id,
                },
            )
            return False
        return True

    # =========================================================
    # Diagnóstico
    # =========================================================
    @_storage_guarded("password_status")
    def password_status(self, employee_id: str) -> AuthResult:
        user = self._credentials.find_by_employee_id(employee_id)
        if user is None:
            return success("User not found", data={"found": False})

        using_temp = self._hasher.is_bootstrap_hash(user.password_hash)
        using_derived = self._hasher.verify_hash(
            self._hasher.derive_password(user.email, user.employee_id),
            user.email,
            user.employee_id,
            stored_hash=user.password_hash,
        )
        return success(
            "Password status",
            data={
                "found": True,
                "using_temporary_password": using_temp,
                "using_derived_password": using_derived,
                "password_status": "temporary" if using_temp else "regular",
                "require_password_change": user.require_password_change,
                "is_temporary_password": user.is_temporary_password,
            },
        )
