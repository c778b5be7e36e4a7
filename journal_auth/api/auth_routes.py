"""
===============================================================================
TARJETA CRC — api/auth_routes.py (Endpoints de autenticación)
===============================================================================

Responsabilidades:
  - Exponer login / change-password / reset-password / logout / me.
  - Exponer la verificación de acceso a una cuenta (dueño o admin).
  - Traducir AuthResult -> JSON + status HTTP sin agregar lógica.

Patrones aplicados:
  - Adapter / Presentation Layer: traduce HTTP <-> AuthService / AccessGate.
  - Fail-safe security: si la autenticación falla, se deniega por defecto.

Colaboradores:
  - application.auth_service.AuthService
  - identity.access_gate.AccessGate
  - api.dependencies: bearer_token, require_session, auth_service, access_gate
  - crosscutting.error_responses.envelope_response
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..application.auth_results import success
from ..application.auth_service import AuthService, ChangePasswordInput
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES, envelope_response
from ..domain.entities import Session
from ..identity.access_gate import AccessGate
from .dependencies import access_gate, auth_service, bearer_token, require_session

router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)

# R: Campos opcionales a nivel HTTP: los faltantes los reporta el servicio
#    como validation_error con el mensaje del dominio.
_MAX_FIELD = 512


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------
class LoginRequest(BaseModel):
    identifier: str = Field(default="", max_length=320)
    password: str = Field(default="", max_length=_MAX_FIELD)


class ChangePasswordRequest(BaseModel):
    employee_id: str = Field(default="", max_length=128)
    current_password: str = Field(default="", max_length=_MAX_FIELD)
    new_password: str = Field(default="", max_length=_MAX_FIELD)
    confirm_password: str = Field(default="", max_length=_MAX_FIELD)


class ResetPasswordRequest(BaseModel):
    email: str = Field(default="", max_length=320)


class LogoutRequest(BaseModel):
    token: str = Field(default="", max_length=_MAX_FIELD)


# -----------------------------------------------------------------------------
# Endpoints públicos
# -----------------------------------------------------------------------------
@router.post("/auth/login", tags=["auth"])
def login(
    req: LoginRequest, service: AuthService = Depends(auth_service)
) -> JSONResponse:
    return envelope_response(service.login(req.identifier, req.password))


@router.post("/auth/change-password", tags=["auth"])
def change_password(
    req: ChangePasswordRequest, service: AuthService = Depends(auth_service)
) -> JSONResponse:
    result = service.change_password(
        ChangePasswordInput(
            employee_id=req.employee_id,
            current_password=req.current_password,
            new_password=req.new_password,
            confirm_password=req.confirm_password,
        )
    )
    return envelope_response(result)


@router.post("/auth/reset-password", tags=["auth"])
def reset_password(
    req: ResetPasswordRequest, service: AuthService = Depends(auth_service)
) -> JSONResponse:
    return envelope_response(service.reset_password(req.email))


@router.post("/auth/logout", tags=["auth"])
def logout(
    req: LogoutRequest | None = Body(default=None),
    header_token: str | None = Depends(bearer_token),
    service: AuthService = Depends(auth_service),
) -> JSONResponse:
    # R: El header tiene prioridad sobre el body.
    token = header_token or (req.token if req else "")
    return envelope_response(service.logout(token))


# -----------------------------------------------------------------------------
# Endpoints con token
# -----------------------------------------------------------------------------
@router.get("/auth/me", tags=["auth"])
def me(
    token: str | None = Depends(bearer_token),
    service: AuthService = Depends(auth_service),
) -> JSONResponse:
    return envelope_response(service.current_user(token or ""))


@router.get("/accounts/{account_id}/access", tags=["accounts"])
def account_access(
    account_id: str,
    session: Session = Depends(require_session),
    gate: AccessGate = Depends(access_gate),
) -> JSONResponse:
    # R: Forbidden / ValidationError los renderiza el exception handler.
    gate.authorize_account(session, account_id)
    if gate.is_admin(session):
        return envelope_response(success("Admin access granted", user=session.user))
    return envelope_response(success("User access granted", user=session.user))
