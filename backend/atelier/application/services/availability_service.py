"""Availability service — consultation calendar reads and superadmin edits."""

import logging
from datetime import date

from atelier.application.interfaces import AvailabilityRepository
from atelier.domain.access_policy import Action, authorize
from atelier.domain.entities import AvailabilityRecord, AvailabilityResult, User, resolve_availability
from atelier.domain.exceptions import UnauthorizedActionError, WorkflowValidationError
from atelier.domain.workflow import validate_slot

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Answers slot queries and replaces the override calendar."""

    def __init__(self, availability: AvailabilityRepository):
        self._availability = availability

    async def get_availability(self) -> list[AvailabilityRecord]:
        return await self._availability.get_all()

    async def is_date_available(self, day: date) -> AvailabilityResult:
        """An unavailable date is a normal answer, not an error."""
        overrides = await self._availability.get_all()
        return resolve_availability(day, overrides)

    async def set_availability(
        self, actor: User, records: list[AvailabilityRecord]
    ) -> list[AvailabilityRecord]:
        decision = authorize(actor, Action.EDIT_AVAILABILITY)
        if not decision.allowed:
            raise UnauthorizedActionError(Action.EDIT_AVAILABILITY.value, decision.reason or "denied")

        seen: set[date] = set()
        cleaned: list[AvailabilityRecord] = []
        for record in records:
            if record.date in seen:
                raise WorkflowValidationError("date", f"{record.date.isoformat()} listed twice")
            seen.add(record.date)
            slots = sorted({validate_slot(slot) for slot in record.slots})
            cleaned.append(AvailabilityRecord(date=record.date, slots=slots))

        stored = await self._availability.replace_all(sorted(cleaned, key=lambda r: r.date))
        logger.info("Availability replaced by %s: %d override(s)", actor.id, len(stored))
        return stored
