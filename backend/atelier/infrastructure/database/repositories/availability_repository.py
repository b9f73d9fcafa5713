"""Concrete repository implementation for availability overrides backed by SQLAlchemy."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from atelier.application.interfaces import AvailabilityRepository
from atelier.domain.entities import AvailabilityRecord
from atelier.infrastructure.database.models import AvailabilityModel


class SQLAlchemyAvailabilityRepository(AvailabilityRepository):
    """Implements the AvailabilityRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_all(self) -> list[AvailabilityRecord]:
        result = await self._session.execute(
            select(AvailabilityModel).order_by(AvailabilityModel.day)
        )
        return [
            AvailabilityRecord(date=row.day, slots=list(row.slots or []))
            for row in result.scalars().all()
        ]

    async def replace_all(self, records: list[AvailabilityRecord]) -> list[AvailabilityRecord]:
        await self._session.execute(delete(AvailabilityModel))
        for record in records:
            self._session.add(AvailabilityModel(day=record.date, slots=list(record.slots)))
        await self._session.flush()
        return await self.get_all()
