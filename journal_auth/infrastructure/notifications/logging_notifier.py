"""
Name: Logging Password Reset Notifier

Responsibilities:
  - Default PasswordResetNotifier: records that a reset notice is due
  - Keep delivery concerns (mail, chat) outside the auth core

Collaborators:
  - domain.services.PasswordResetNotifier (contract)
  - crosscutting.logger

Notes:
  - Never logs the temporary password; only who was reset
  - A real mail adapter can replace this in container.get_reset_notifier()
"""

from __future__ import annotations

from ...crosscutting.logger import logger
from ...domain.entities import UserRecord


class LoggingResetNotifier:
    def notify_reset(self, user: UserRecord) -> None:
        logger.info(
            "Aviso de reset de password pendiente de entrega",
            extra={"employee_id": user.employee_id, "recipient": user.email},
        )
