# controller/auth_controller.py
from typing import Optional
from fastapi import APIRouter, Depends, status
from model.api import LoginRequest, LoginResponse, SessionResponse
from service.auth_service import AuthService
from util.constants import InternalURIs
from controller.controller_dependencies import (
    bearer_token,
    get_auth_service,
    rate_limiter,
    require_admin,
)

auth_router = APIRouter(dependencies=[Depends(rate_limiter)])


@auth_router.post(InternalURIs.ADMIN_LOGIN, response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    return await service.sign_in(payload.email, payload.password)


@auth_router.post(
    InternalURIs.ADMIN_LOGOUT,
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def logout(
    token: Optional[str] = Depends(bearer_token),
    service: AuthService = Depends(get_auth_service),
) -> None:
    await service.sign_out(token or "")


@auth_router.get(InternalURIs.ADMIN_SESSION, response_model=SessionResponse)
async def session(
    token: Optional[str] = Depends(bearer_token),
    service: AuthService = Depends(get_auth_service),
) -> SessionResponse:
    email = await service.get_session(token)
    return SessionResponse(authenticated=email is not None, email=email)
