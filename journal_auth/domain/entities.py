"""
Name: Domain Entities (auth core)

Responsibilities:
  - Define the credential record (UserRecord) and its role/status enums
  - Define the persisted session token (TokenRecord)
  - Define the request-scoped Session (verified token + user)
  - Provide the public user payload (never carries the hash or flags)

Collaborators:
  - identity.credential_store: maps rows -> UserRecord
  - identity.token_store: maps rows -> TokenRecord
  - identity.access_gate: builds Session
  - application.auth_results: serializes the public payload

Constraints:
  - Pure data: no I/O, no hashing
  - Unknown role strings are preserved as-is; only the configured admin
    literal grants the ownership bypass
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    """Known roles. Stored values outside this set are kept as plain strings."""

    ADMIN = "admin"
    USER = "user"


class UserStatus(int, Enum):
    INACTIVE = 0
    ACTIVE = 1


@dataclass(frozen=True, slots=True)
class UserRecord:
    """Credential row for one employee."""

    employee_id: str
    full_name: str
    email: str
    role: str
    status: UserStatus
    password_hash: str
    require_password_change: bool = False
    is_temporary_password: bool = False

    @property
    def is_active(self) -> bool:
        return self.status is UserStatus.ACTIVE

    def with_password(
        self, password_hash: str, *, require_change: bool, is_temporary: bool
    ) -> UserRecord:
        return replace(
            self,
            password_hash=password_hash,
            require_password_change=require_change,
            is_temporary_password=is_temporary,
        )

    def public_payload(self) -> dict[str, object]:
        """R: Shape returned to callers: {id, full_name, email, role, status}."""
        return {
            "id": self.employee_id,
            "full_name": self.full_name,
            "email": self.email,
            "role": self.role,
            "status": int(self.status),
        }


@dataclass(frozen=True, slots=True)
class TokenRecord:
    """Live session token. At most one per user_id."""

    user_id: str
    token: str
    issued_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class Session:
    """Verified token paired with its user, valid for one request."""

    token: TokenRecord
    user: UserRecord

    @property
    def user_id(self) -> str:
        return self.user.employee_id
