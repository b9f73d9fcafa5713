"""Staff directory and onboarding endpoints (superadmin console)."""

from fastapi import APIRouter, Depends, status

from atelier.application.schemas.auth import StaffCreateRequest, UserResponse
from atelier.application.services import AuthService
from atelier.domain.entities import User
from atelier.infrastructure.dependencies import get_auth_service, get_current_user

router = APIRouter(prefix="/staff", tags=["Staff"])


@router.get("", response_model=list[UserResponse])
async def list_staff(
    actor: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
) -> list[UserResponse]:
    staff = await service.list_staff(actor)
    return [UserResponse.model_validate(u, from_attributes=True) for u in staff]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_staff(
    data: StaffCreateRequest,
    actor: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Onboard a worker, project manager or inspector."""
    user = await service.create_staff(actor, data)
    return UserResponse.model_validate(user, from_attributes=True)
