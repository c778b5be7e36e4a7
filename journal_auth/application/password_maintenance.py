"""
===============================================================================
USE CASES: Password Maintenance (admin bulk operations)
===============================================================================

Name:
    PasswordMaintenance

Business Goal:
    Operaciones masivas para administradores:
      - renew_all_passwords: volver cada usuario a su password derivado
        (hash(local_part(email) + employee_id)) y limpiar flags de rotación.
      - bulk_password_reset: pasar a todos los usuarios activos al password
        temporal de bootstrap, forzando la rotación, y notificarlos.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    PasswordMaintenance

Responsibilities:
    - Recorrer la tabla de usuarios y aplicar la mutación por fila.
    - Contar procesados / omitidos / notificados / fallas de notificación.
    - Devolver un AuthResult con success | warning | error y los conteos.

Collaborators:
    - identity.CredentialHasher / CredentialStore / TokenStore
    - domain.services.PasswordResetNotifier
    - scripts/renew_passwords.py (CLI)
===============================================================================
"""

from __future__ import annotations

from ..crosscutting.exceptions import StorageError, UserNotFound
from ..crosscutting.logger import logger
from ..domain.services import PasswordResetNotifier
from ..identity.credential_hasher import CredentialHasher
from ..identity.credential_store import CredentialStore
from ..identity.token_store import TokenStore
from .auth_results import AuthErrorCode, AuthResult, failure, success, warning


class PasswordMaintenance:
    def __init__(
        self,
        *,
        hasher: CredentialHasher,
        credentials: CredentialStore,
        tokens: TokenStore,
        notifier: PasswordResetNotifier,
    ):
        self._hasher = hasher
        self._credentials = credentials
        self._tokens = tokens
        self._notifier = notifier

    def renew_all_passwords(self) -> AuthResult:
        """Re-deriva el hash regular de cada usuario. Filas sin email o id se omiten."""
        try:
            users = self._credentials.list_users()
        except StorageError as exc:
            logger.exception(
                "Renovación masiva: no se pudo leer usuarios",
                extra={"error_id": exc.error_id},
            )
            return failure(AuthErrorCode.STORAGE_ERROR, "Could not read users")

        processed = 0
        skipped = 0
        for user in users:
            if not user.employee_id or not user.email:
                skipped += 1
                continue
            try:
                self._credentials.set_password(
                    user.employee_id,
                    self._hasher.derive_password(user.email, user.employee_id),
                    require_change=False,
                    is_temporary=False,
                )
            except (StorageError, UserNotFound):
                logger.exception(
                    "Renovación masiva: fila no actualizada",
                    extra={"employee_id": user.employee_id},
                )
                skipped += 1
                continue
            processed += 1

        counts = {"processed": processed, "errors": skipped, "total": len(users)}
        logger.info("Renovación masiva finalizada", extra=counts)

        if processed == 0 and skipped > 0:
            return failure(AuthErrorCode.VALIDATION_ERROR, "No passwords were renewed")
        if skipped:
            return warning(
                f"Renewed {processed} passwords, {skipped} rows skipped", data=counts
            )
        return success(f"Renewed {processed} passwords", data=counts)

    def bulk_password_reset(self) -> AuthResult:
        """Aplica el reset de bootstrap a cada usuario activo y lo notifica."""
        try:
            users = [u for u in self._credentials.list_users() if u.is_active]
        except StorageError as exc:
            logger.exception(
                "Reset masivo: no se pudo leer usuarios",
                extra={"error_id": exc.error_id},
            )
            return failure(AuthErrorCode.STORAGE_ERROR, "Could not read users")

        reset = 0
        errors = 0
        notified = 0
        notify_failures = 0
        for user in users:
            if not user.employee_id or not user.email:
                errors += 1
                continue
            try:
                updated = self._credentials.set_password(
                    user.employee_id,
                    self._hasher.bootstrap_hash,
                    require_change=True,
                    is_temporary=True,
                )
                self._tokens.revoke_by_user(user.employee_id)
            except (StorageError, UserNotFound):
                logger.exception(
                    "Reset masivo: fila no actualizada",
                    extra={"employee_id": user.employee_id},
                )
                errors += 1
                continue
            reset += 1

            try:
                self._notifier.notify_reset(updated)
            except Exception:
                logger.exception(
                    "Reset masivo: notificación fallida",
                    extra={"employee_id": user.employee_id},
                )
                notify_failures += 1
                continue
            notified += 1

        counts = {
            "reset": reset,
            "errors": errors,
            "notified": notified,
            "notification_failures": notify_failures,
            "total": len(users),
        }
        logger.info("Reset masivo finalizado", extra=counts)

        if reset == 0 and errors > 0:
            return failure(AuthErrorCode.VALIDATION_ERROR, "No passwords were reset")
        if errors or notify_failures:
            return warning(
                f"Reset {reset} passwords with {errors + notify_failures} issues",
                data=counts,
            )
        return success(f"Reset {reset} passwords", data=counts)
