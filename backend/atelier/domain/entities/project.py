"""Domain entity for client projects — the workflow aggregate."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from .appointment import Appointment, AppointmentStatus
from .brief import Brief
from .proposal import Proposal, ProposalStatus
from .site_update import SiteUpdate


class ProjectStatus(str, Enum):
    """Lifecycle stages of a project, in workflow order."""

    INITIAL_FORM = "Initial Form"
    APPOINTMENT_NEEDED = "Appointment Needed"
    CONSULTATION_DONE = "Consultation Done"
    PROPOSAL_SENT = "Proposal Sent"
    PROPOSAL_REVISION = "Proposal Revision"
    PAYMENT_PENDING = "Payment Pending"
    PAID = "Paid"
    CONCEPT_SHARED = "Concept Shared"
    CONCEPT_APPROVED = "Concept Approved"
    CONSTRUCTION = "Construction"
    INSPECTION = "Inspection"
    HANDOVER = "Handover"
    COMPLETED = "Completed"


class PaymentStatus(str, Enum):
    """Deposit payment states."""

    UNPAID = "unpaid"
    PENDING_VERIFICATION = "pending_verification"
    PAID = "paid"
    FAILED = "failed"


class ClientApproval(str, Enum):
    """Client's verdict on a shared concept."""

    YES = "yes"
    NO = "no"


@dataclass
class Project:
    """Core aggregate tracking one client engagement from brief to handover.

    A project holds at most one appointment and one proposal (new ones
    replace the old); construction updates accumulate most-recent-first.
    """

    client_id: str
    title: str
    status: ProjectStatus = ProjectStatus.APPOINTMENT_NEEDED
    brief: Brief | None = None
    appointment: Appointment | None = None
    consultation_notes: str | None = None
    proposal: Proposal | None = None
    invoice_amount: Decimal | None = None
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    concept_files: list[str] = field(default_factory=list)
    concept_link: str | None = None
    concept_is_approved: bool = False
    client_approval: ClientApproval | None = None
    client_change_request_notes: str | None = None
    client_change_request_files: list[str] = field(default_factory=list)
    construction_updates: list[SiteUpdate] = field(default_factory=list)
    percent_complete: int = 0
    handover_file: str | None = None
    completion_date: datetime | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # ── Derived state ────────────────────────────────────────────────

    @property
    def has_concept(self) -> bool:
        return bool(self.concept_files) or bool(self.concept_link)

    @property
    def has_pending_proposal(self) -> bool:
        return self.proposal is not None and self.proposal.status is ProposalStatus.PENDING_APPROVAL

    @property
    def has_pending_concept(self) -> bool:
        return self.has_concept and not self.concept_is_approved

    @property
    def has_pending_payment(self) -> bool:
        return self.payment_status is PaymentStatus.PENDING_VERIFICATION

    @property
    def has_pending_appointment(self) -> bool:
        return self.appointment is not None and self.appointment.status is AppointmentStatus.PENDING

    @property
    def pending_updates(self) -> list[SiteUpdate]:
        return [u for u in self.construction_updates if not u.is_approved]

    @property
    def concept_visible_to_client(self) -> bool:
        """Clients only see a concept once staff approved it and the deposit is paid."""
        return (
            self.has_concept
            and self.concept_is_approved
            and self.payment_status is PaymentStatus.PAID
        )

    def find_update(self, update_id: str) -> SiteUpdate | None:
        for update in self.construction_updates:
            if update.id == update_id:
                return update
        return None
