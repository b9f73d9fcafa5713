"""Pydantic DTOs for the consultation calendar."""

import datetime as dt

from pydantic import BaseModel, Field


class AvailabilityRecordSchema(BaseModel):
    """One date override; an empty slot list closes the date."""

    date: dt.date
    slots: list[str] = Field(default_factory=list, examples=[["09:00", "10:00"]])

    model_config = {"from_attributes": True}


class SetAvailabilityRequest(BaseModel):
    records: list[AvailabilityRecordSchema] = Field(default_factory=list)


class AvailabilityResponse(BaseModel):
    date: dt.date
    available: bool
    slots: list[str]
