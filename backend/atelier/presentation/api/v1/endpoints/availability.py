"""Consultation calendar endpoints."""

from datetime import date

from fastapi import APIRouter, Depends

from atelier.application.schemas.availability import (
    AvailabilityRecordSchema,
    AvailabilityResponse,
    SetAvailabilityRequest,
)
from atelier.application.services import AvailabilityService
from atelier.domain.entities import AvailabilityRecord, User
from atelier.infrastructure.dependencies import get_availability_service, get_current_user

router = APIRouter(prefix="/availability", tags=["Availability"])


@router.get("", response_model=list[AvailabilityRecordSchema])
async def list_availability(
    service: AvailabilityService = Depends(get_availability_service),
) -> list[AvailabilityRecordSchema]:
    """All date overrides, ordered by date."""
    records = await service.get_availability()
    return [AvailabilityRecordSchema.model_validate(r, from_attributes=True) for r in records]


@router.get("/{day}", response_model=AvailabilityResponse)
async def check_date(
    day: date,
    service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse:
    """Bookable slots for one date."""
    result = await service.is_date_available(day)
    return AvailabilityResponse(date=day, available=result.available, slots=list(result.slots))


@router.put("", response_model=list[AvailabilityRecordSchema])
async def set_availability(
    data: SetAvailabilityRequest,
    actor: User = Depends(get_current_user),
    service: AvailabilityService = Depends(get_availability_service),
) -> list[AvailabilityRecordSchema]:
    """Replace the whole override calendar."""
    records = [AvailabilityRecord(date=r.date, slots=list(r.slots)) for r in data.records]
    stored = await service.set_availability(actor, records)
    return [AvailabilityRecordSchema.model_validate(r, from_attributes=True) for r in stored]
