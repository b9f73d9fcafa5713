"""Domain entities for consultation availability."""

from dataclasses import dataclass, field
from datetime import date

DEFAULT_SLOTS: tuple[str, ...] = (
    "09:00", "10:00", "11:00", "12:00", "13:00",
    "14:00", "15:00", "16:00", "17:00",
)


@dataclass
class AvailabilityRecord:
    """Override of the default schedule for a single date.

    An empty ``slots`` list closes the date entirely.
    """

    date: date
    slots: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AvailabilityResult:
    """Answer to "can a client book on this date?"."""

    available: bool
    slots: tuple[str, ...] = ()


def resolve_availability(day: date, overrides: list[AvailabilityRecord]) -> AvailabilityResult:
    """Compute bookable slots for ``day``.

    An override for the date always wins; otherwise weekdays get the
    default slots and weekends get none.
    """
    for record in overrides:
        if record.date == day:
            return AvailabilityResult(available=len(record.slots) > 0, slots=tuple(record.slots))

    if day.weekday() < 5:
        return AvailabilityResult(available=True, slots=DEFAULT_SLOTS)
    return AvailabilityResult(available=False, slots=())
