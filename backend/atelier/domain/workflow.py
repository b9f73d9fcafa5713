"""Project workflow state machine.

Every transition is a pure function: it takes the current project, the
acting user and the action's parameters, validates guards, and returns a
*new* ``Project``. The input is never mutated, so a rejected transition
leaves no partial state behind. Time is passed in as ``now``.

Staff submissions (proposals, concepts, site updates) from anyone other
than a superadmin never move ``project.status``; they only record a pending
sub-state on the submitted entity, which a superadmin later approves.
"""

import copy
import re
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

from .entities import (
    Appointment,
    AppointmentStatus,
    AvailabilityResult,
    Brief,
    ClientApproval,
    PaymentStatus,
    Project,
    ProjectStatus,
    Proposal,
    ProposalStatus,
    SiteUpdate,
    User,
)
from .exceptions import EntityNotFoundError, InvalidTransitionError, WorkflowValidationError

_SLOT_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

PROPOSAL_STATES: frozenset[ProjectStatus] = frozenset({
    ProjectStatus.INITIAL_FORM,
    ProjectStatus.APPOINTMENT_NEEDED,
    ProjectStatus.CONSULTATION_DONE,
    ProjectStatus.PROPOSAL_SENT,
    ProjectStatus.PROPOSAL_REVISION,
    ProjectStatus.PAYMENT_PENDING,
})

CONCEPT_STATES: frozenset[ProjectStatus] = frozenset({
    ProjectStatus.PAYMENT_PENDING,
    ProjectStatus.PAID,
    ProjectStatus.CONCEPT_SHARED,
    ProjectStatus.CONCEPT_APPROVED,
})

CONSTRUCTION_STATES: frozenset[ProjectStatus] = frozenset({
    ProjectStatus.CONCEPT_APPROVED,
    ProjectStatus.CONSTRUCTION,
    ProjectStatus.INSPECTION,
})

FINALIZABLE_STATES: frozenset[ProjectStatus] = frozenset({
    ProjectStatus.INSPECTION,
    ProjectStatus.HANDOVER,
})

_SETTLED_PAYMENTS: frozenset[PaymentStatus] = frozenset({
    PaymentStatus.PENDING_VERIFICATION,
    PaymentStatus.PAID,
})


# ── Helpers ──────────────────────────────────────────────────────────


def _require_text(field_name: str, value: str | None) -> str:
    if value is None or not value.strip():
        raise WorkflowValidationError(field_name, "must not be empty")
    return value


def _require_non_negative(field_name: str, value: Decimal) -> Decimal:
    if value < 0:
        raise WorkflowValidationError(field_name, "must not be negative")
    return value


def _require_percentage(value: int) -> int:
    if value < 0 or value > 100:
        raise WorkflowValidationError("progress_percentage", "must be between 0 and 100")
    return value


def _require_status(project: Project, action: str, allowed: frozenset[ProjectStatus]) -> None:
    if project.status not in allowed:
        raise InvalidTransitionError(action, project.status.value)


def _require_no_pending_updates(project: Project, action: str) -> None:
    pending = len(project.pending_updates)
    if pending:
        raise InvalidTransitionError(
            action, project.status.value, f"{pending} site update(s) awaiting approval",
        )


def _stage_for_progress(percentage: int) -> ProjectStatus:
    return ProjectStatus.INSPECTION if percentage >= 100 else ProjectStatus.CONSTRUCTION


def validate_slot(value: str) -> str:
    """Check an ``HH:MM`` slot label."""
    if not _SLOT_PATTERN.match(value):
        raise WorkflowValidationError("slot", f"'{value}' is not a valid HH:MM time")
    return value


# ── Brief & appointment ──────────────────────────────────────────────


def open_project(client_id: str, brief: Brief) -> Project:
    """Create a project from a client's brief.

    Submitting the brief satisfies the ``Initial Form`` stage, so new
    projects start at ``Appointment Needed``.
    """
    _require_text("project_title", brief.project_title)
    _require_non_negative("budget", brief.budget)
    return Project(
        client_id=client_id,
        title=brief.project_title.strip(),
        status=ProjectStatus.APPOINTMENT_NEEDED,
        brief=copy.deepcopy(brief),
        percent_complete=0,
        payment_status=PaymentStatus.UNPAID,
    )


def book_appointment(
    project: Project,
    client: User,
    day: date,
    slot: str,
    availability: AvailabilityResult,
    notes: str | None = None,
) -> Project:
    _require_status(project, "book_appointment", frozenset({ProjectStatus.APPOINTMENT_NEEDED}))
    validate_slot(slot)
    if slot not in availability.slots:
        raise WorkflowValidationError("slot", f"{slot} on {day.isoformat()} is not available")

    updated = copy.deepcopy(project)
    hour, minute = (int(part) for part in slot.split(":"))
    updated.appointment = Appointment(
        client_id=client.id,
        date=day,
        time=slot,
        scheduled_for=datetime.combine(day, time(hour, minute), tzinfo=timezone.utc),
        status=AppointmentStatus.PENDING,
        notes=notes,
    )
    return updated


def confirm_appointment(project: Project, actor: User, notes: str | None = None) -> Project:
    if project.appointment is None:
        raise EntityNotFoundError("Appointment", project.id)
    appointment = project.appointment
    if appointment.status is AppointmentStatus.CONFIRMED:
        return copy.deepcopy(project)
    if not appointment.is_pending:
        raise InvalidTransitionError(
            "confirm_appointment", project.status.value,
            f"appointment is {appointment.status.value}",
        )
    _require_status(project, "confirm_appointment", frozenset({ProjectStatus.APPOINTMENT_NEEDED}))

    updated = copy.deepcopy(project)
    updated.appointment.status = AppointmentStatus.CONFIRMED
    updated.appointment.staff_id = actor.id
    if notes:
        updated.consultation_notes = notes
    updated.status = ProjectStatus.CONSULTATION_DONE
    return updated


# ── Proposal ─────────────────────────────────────────────────────────


def send_proposal(
    project: Project,
    actor: User,
    amount: Decimal,
    file_ref: str,
    now: datetime,
    validity_days: int = 7,
) -> Project:
    """Issue (or replace) the project's proposal.

    A superadmin's proposal goes straight to the client; anyone else's
    waits in ``pending_approval`` and the project status stays put.
    """
    _require_non_negative("amount", amount)
    _require_status(project, "send_proposal", PROPOSAL_STATES)
    if project.payment_status in _SETTLED_PAYMENTS:
        raise InvalidTransitionError(
            "send_proposal", project.status.value,
            f"payment is already {project.payment_status.value}",
        )

    updated = copy.deepcopy(project)
    updated.proposal = Proposal(
        project_id=project.id,
        file_ref=file_ref,
        amount=amount,
        created_by_id=actor.id,
        valid_until=now + timedelta(days=validity_days),
        status=ProposalStatus.SENT if actor.is_superadmin else ProposalStatus.PENDING_APPROVAL,
        sent_at=now,
    )
    updated.invoice_amount = amount
    updated.payment_status = PaymentStatus.UNPAID
    if actor.is_superadmin:
        updated.status = ProjectStatus.PROPOSAL_SENT
    return updated


def approve_proposal(project: Project) -> Project:
    if project.proposal is None:
        raise EntityNotFoundError("Proposal", project.id)
    if project.proposal.status is ProposalStatus.SENT:
        return copy.deepcopy(project)
    if not project.proposal.is_pending_approval:
        raise InvalidTransitionError(
            "approve_proposal", project.status.value,
            f"proposal is {project.proposal.status.value}",
        )

    updated = copy.deepcopy(project)
    updated.proposal.status = ProposalStatus.SENT
    updated.status = ProjectStatus.PROPOSAL_SENT
    return updated


def request_proposal_revision(project: Project, notes: str) -> Project:
    _require_text("revision_notes", notes)
    if project.proposal is None:
        raise EntityNotFoundError("Proposal", project.id)
    _require_status(
        project, "request_proposal_revision",
        frozenset({ProjectStatus.PROPOSAL_SENT, ProjectStatus.PROPOSAL_REVISION}),
    )

    updated = copy.deepcopy(project)
    updated.proposal.status = ProposalStatus.REVISION_REQUESTED
    updated.proposal.revision_notes = notes
    updated.status = ProjectStatus.PROPOSAL_REVISION
    return updated


def accept_proposal(project: Project) -> Project:
    if project.proposal is None:
        raise EntityNotFoundError("Proposal", project.id)
    _require_status(project, "accept_proposal", frozenset({ProjectStatus.PROPOSAL_SENT}))
    if project.proposal.status is not ProposalStatus.SENT:
        raise InvalidTransitionError(
            "accept_proposal", project.status.value,
            f"proposal is {project.proposal.status.value}",
        )

    updated = copy.deepcopy(project)
    updated.proposal.status = ProposalStatus.ACCEPTED
    updated.status = ProjectStatus.PAYMENT_PENDING
    return updated


# ── Payment ──────────────────────────────────────────────────────────


def record_payment(project: Project, amount: Decimal) -> Project:
    """Register a gateway payment; a superadmin must still verify receipt."""
    _require_non_negative("amount", amount)
    if project.proposal is None or project.invoice_amount is None:
        raise EntityNotFoundError("Proposal", project.id)
    # A concept may be shared before the deposit lands, so Concept Shared still takes payment.
    _require_status(project, "record_payment", CONCEPT_STATES)
    if project.proposal.status is not ProposalStatus.ACCEPTED:
        raise InvalidTransitionError(
            "record_payment", project.status.value,
            f"proposal is {project.proposal.status.value}",
        )
    if project.payment_status in _SETTLED_PAYMENTS:
        raise InvalidTransitionError(
            "record_payment", project.status.value,
            f"payment is already {project.payment_status.value}",
        )

    updated = copy.deepcopy(project)
    updated.payment_status = PaymentStatus.PENDING_VERIFICATION
    return updated


def verify_payment(project: Project) -> Project:
    if project.payment_status is PaymentStatus.PAID:
        return copy.deepcopy(project)
    if project.payment_status is not PaymentStatus.PENDING_VERIFICATION:
        raise InvalidTransitionError(
            "verify_payment", project.status.value,
            f"payment is {project.payment_status.value}",
        )

    updated = copy.deepcopy(project)
    updated.payment_status = PaymentStatus.PAID
    # A concept shared while the payment was pending keeps its stage.
    if project.status is ProjectStatus.PAYMENT_PENDING:
        updated.status = ProjectStatus.PAID
    return updated


def reject_payment(project: Project) -> Project:
    if project.payment_status is not PaymentStatus.PENDING_VERIFICATION:
        raise InvalidTransitionError(
            "reject_payment", project.status.value,
            f"payment is {project.payment_status.value}",
        )

    updated = copy.deepcopy(project)
    updated.payment_status = PaymentStatus.FAILED
    return updated


# ── Concept ──────────────────────────────────────────────────────────


def share_concept(project: Project, actor: User, files: list[str], link: str | None) -> Project:
    files = [f for f in files if f.strip()]
    link = link.strip() if link else None
    if not files and not link:
        raise WorkflowValidationError("concept", "at least one file or a link is required")
    _require_status(project, "share_concept", CONCEPT_STATES)

    updated = copy.deepcopy(project)
    updated.concept_files = files
    updated.concept_link = link
    updated.concept_is_approved = actor.is_superadmin
    updated.client_approval = None
    updated.client_change_request_notes = None
    updated.client_change_request_files = []
    if actor.is_superadmin:
        updated.status = ProjectStatus.CONCEPT_SHARED
    return updated


def approve_concept(project: Project) -> Project:
    if not project.has_concept:
        raise EntityNotFoundError("Concept", project.id)
    if project.concept_is_approved:
        return copy.deepcopy(project)
    _require_status(project, "approve_concept", CONCEPT_STATES)

    updated = copy.deepcopy(project)
    updated.concept_is_approved = True
    updated.status = ProjectStatus.CONCEPT_SHARED
    return updated


def _require_client_visible_concept(project: Project, action: str) -> None:
    if not project.has_concept:
        raise EntityNotFoundError("Concept", project.id)
    _require_status(project, action, frozenset({ProjectStatus.CONCEPT_SHARED}))
    if not project.concept_visible_to_client:
        raise InvalidTransitionError(
            action, project.status.value, "concept is not yet released to the client",
        )


def approve_client_concept(project: Project) -> Project:
    _require_client_visible_concept(project, "approve_client_concept")

    updated = copy.deepcopy(project)
    updated.client_approval = ClientApproval.YES
    updated.status = ProjectStatus.CONCEPT_APPROVED
    return updated


def request_concept_changes(project: Project, notes: str, files: list[str] | None = None) -> Project:
    _require_text("change_request_notes", notes)
    _require_client_visible_concept(project, "request_concept_changes")

    updated = copy.deepcopy(project)
    updated.client_approval = ClientApproval.NO
    updated.client_change_request_notes = notes
    updated.client_change_request_files = list(files or [])
    return updated


# ── Construction ─────────────────────────────────────────────────────


def post_site_update(
    project: Project,
    actor: User,
    title: str,
    progress_percentage: int,
    now: datetime,
    notes: str = "",
    image_refs: list[str] | None = None,
) -> Project:
    """Prepend a site update; only a superadmin's update moves progress."""
    _require_text("title", title)
    _require_percentage(progress_percentage)
    _require_status(project, "post_site_update", CONSTRUCTION_STATES)

    updated = copy.deepcopy(project)
    update = SiteUpdate(
        project_id=project.id,
        title=title,
        notes=notes,
        image_refs=list(image_refs or []),
        progress_percentage=progress_percentage,
        created_by_id=actor.id,
        created_at=now,
        is_approved=actor.is_superadmin,
    )
    updated.construction_updates.insert(0, update)
    if actor.is_superadmin:
        updated.percent_complete = progress_percentage
        updated.status = _stage_for_progress(progress_percentage)
    return updated


def approve_site_update(project: Project, update_id: str) -> Project:
    update = project.find_update(update_id)
    if update is None:
        raise EntityNotFoundError("SiteUpdate", update_id)
    if update.is_approved:
        return copy.deepcopy(project)
    _require_status(project, "approve_site_update", CONSTRUCTION_STATES)

    updated = copy.deepcopy(project)
    approved = updated.find_update(update_id)
    approved.is_approved = True
    updated.percent_complete = approved.progress_percentage
    updated.status = _stage_for_progress(approved.progress_percentage)
    return updated


def mark_handover(project: Project, handover_file: str | None = None) -> Project:
    _require_status(project, "mark_handover", frozenset({ProjectStatus.INSPECTION}))
    _require_no_pending_updates(project, "mark_handover")

    updated = copy.deepcopy(project)
    updated.status = ProjectStatus.HANDOVER
    if handover_file:
        updated.handover_file = handover_file
    return updated


def finalize_handover(project: Project, now: datetime) -> Project:
    _require_status(project, "finalize_handover", FINALIZABLE_STATES)
    _require_no_pending_updates(project, "finalize_handover")

    updated = copy.deepcopy(project)
    updated.status = ProjectStatus.COMPLETED
    updated.completion_date = now
    return updated
