"""Domain entity for consultation appointments embedded in a project."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from uuid import uuid4


class AppointmentStatus(str, Enum):
    """Lifecycle states of a consultation appointment."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    RESCHEDULED = "rescheduled"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


@dataclass
class Appointment:
    """A consultation slot booked by a client.

    ``time`` is the ``HH:MM`` slot label; ``scheduled_for`` is the combined
    slot start as an aware UTC datetime.
    """

    client_id: str
    date: date
    time: str
    scheduled_for: datetime
    status: AppointmentStatus = AppointmentStatus.PENDING
    staff_id: str | None = None
    notes: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def is_pending(self) -> bool:
        return self.status is AppointmentStatus.PENDING
