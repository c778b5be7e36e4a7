"""
Name: FastAPI Dependencies (auth core)

Responsibilities:
  - Extract the session token from `Authorization: Bearer <token>`
  - Resolve the current Session through the AccessGate
  - Hand services from the container to routes (overridable in tests)

Collaborators:
  - container: get_auth_service, get_access_gate
  - identity.access_gate.AccessGate
"""

from __future__ import annotations

from fastapi import Depends, Header

from ..application.auth_service import AuthService
from ..container import get_access_gate, get_auth_service
from ..domain.entities import Session
from ..identity.access_gate import AccessGate


def extract_bearer_token(authorization: str | None) -> str | None:
    """Extrae token desde `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def bearer_token(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> str | None:
    return extract_bearer_token(authorization)


def auth_service() -> AuthService:
    return get_auth_service()


def access_gate() -> AccessGate:
    return get_access_gate()


def require_session(
    token: str | None = Depends(bearer_token),
    gate: AccessGate = Depends(access_gate),
) -> Session:
    """Raises Unauthorized (-> 401) when the token is missing or unknown."""
    return gate.authenticate_request(token)
