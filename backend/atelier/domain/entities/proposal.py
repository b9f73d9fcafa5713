"""Domain entity for cost proposals issued to clients."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import uuid4


class ProposalStatus(str, Enum):
    """Lifecycle states of a proposal."""

    PENDING_APPROVAL = "pending_approval"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    REVISION_REQUESTED = "revision_requested"


@dataclass
class Proposal:
    """A staff-issued cost estimate attached to a project.

    Proposals from non-superadmin staff start in ``PENDING_APPROVAL`` and are
    hidden from the client until a superadmin releases them.
    """

    project_id: str
    file_ref: str
    amount: Decimal
    created_by_id: str
    valid_until: datetime
    status: ProposalStatus = ProposalStatus.PENDING_APPROVAL
    sent_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    revision_notes: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def is_pending_approval(self) -> bool:
        return self.status is ProposalStatus.PENDING_APPROVAL
