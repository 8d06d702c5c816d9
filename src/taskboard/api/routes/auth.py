"""Public sign-up and sign-in endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from taskboard.api.dependencies import get_auth_service
from taskboard.core.auth_service import AuthService
from taskboard.models import (
    AuthenticationRequest,
    AuthenticationResponse,
    RegistrationRequest,
    RegistrationResponse,
)

router = APIRouter(prefix="/auth", tags=["auth"])

Auth = Annotated[AuthService, Depends(get_auth_service)]


@router.post("/sign-up", status_code=status.HTTP_201_CREATED, response_model=RegistrationResponse)
async def sign_up(body: RegistrationRequest, auth: Auth) -> RegistrationResponse:
    """Register a new account."""
    user = await auth.sign_up(body)
    return RegistrationResponse.from_record(user)


@router.post("/sign-in", response_model=AuthenticationResponse)
async def sign_in(body: AuthenticationRequest, auth: Auth) -> AuthenticationResponse:
    """Exchange a username and password for a bearer token."""
    return AuthenticationResponse(jwt=await auth.sign_in(body))
