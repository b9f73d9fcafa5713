"""Account endpoints: signup, login and password reset."""

from fastapi import APIRouter, Depends, status

from atelier.application.schemas.auth import (
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
    UserResponse,
)
from atelier.application.services import AuthService
from atelier.infrastructure.dependencies import get_auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    data: SignupRequest,
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Register a new client account."""
    user = await service.signup(data)
    return UserResponse.model_validate(user, from_attributes=True)


@router.post("/login", response_model=UserResponse)
async def login(
    data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Check credentials against the requested role group and return the account."""
    user = await service.login(data.email, data.password, data.role_group)
    return UserResponse.model_validate(user, from_attributes=True)


@router.post("/reset-password", status_code=status.HTTP_204_NO_CONTENT)
async def reset_password(
    data: ResetPasswordRequest,
    service: AuthService = Depends(get_auth_service),
) -> None:
    await service.reset_password(data.email, data.new_password)
