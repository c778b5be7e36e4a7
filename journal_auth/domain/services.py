"""
CRC — domain/services.py

Name
- Outbound service ports of the auth core

Responsibilities
- Declare the notification contract used after a password reset.

Collaborators
- application.auth_service / application.password_maintenance (callers)
- infrastructure.notifications (implementations)

Constraints
- Implementations must never receive or log the plain temporary password.
  They only learn that a reset happened for a user.
"""

from typing import Protocol

from .entities import UserRecord


class PasswordResetNotifier(Protocol):
    """R: Delivers "your password was reset" notices. May raise on delivery failure."""

    def notify_reset(self, user: UserRecord) -> None: ...
