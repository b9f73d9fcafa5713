"""Unit tests for the project state machine (pure transitions)."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from atelier.domain import workflow
from atelier.domain.entities import (
    AppointmentStatus,
    ApprovalQueue,
    AvailabilityRecord,
    Brief,
    ClientApproval,
    PaymentStatus,
    Project,
    ProjectStatus,
    ProposalStatus,
    resolve_availability,
)
from atelier.domain.exceptions import (
    EntityNotFoundError,
    InvalidTransitionError,
    WorkflowValidationError,
)

NOW = datetime(2024, 5, 6, 12, 0, tzinfo=timezone.utc)
MONDAY = date(2024, 5, 6)
SATURDAY = date(2024, 5, 4)


# ── Helpers ──


def _at(project: Project, status: ProjectStatus, **changes) -> Project:
    project.status = status
    for name, value in changes.items():
        setattr(project, name, value)
    return project


def _with_sent_proposal(project: Project, superadmin) -> Project:
    project = _at(project, ProjectStatus.CONSULTATION_DONE)
    return workflow.send_proposal(project, superadmin, Decimal("15000000"), "proposal.pdf", NOW)


def _paid(project: Project, superadmin) -> Project:
    project = _with_sent_proposal(project, superadmin)
    project = workflow.accept_proposal(project)
    project = workflow.record_payment(project, Decimal("15000000"))
    return workflow.verify_payment(project)


# ── Brief & appointment ──


def test_open_project_starts_at_appointment_needed(client_user):
    project = workflow.open_project(client_user.id, Brief(project_title="  Beach House "))

    assert project.status is ProjectStatus.APPOINTMENT_NEEDED
    assert project.title == "Beach House"
    assert project.percent_complete == 0
    assert project.payment_status is PaymentStatus.UNPAID
    assert project.client_id == client_user.id


def test_open_project_rejects_blank_title(client_user):
    with pytest.raises(WorkflowValidationError):
        workflow.open_project(client_user.id, Brief(project_title="   "))


def test_open_project_rejects_negative_budget(client_user):
    with pytest.raises(WorkflowValidationError):
        workflow.open_project(client_user.id, Brief(project_title="X", budget=Decimal("-1")))


def test_book_appointment_on_default_weekday_slot(project, client_user):
    availability = resolve_availability(MONDAY, [])
    updated = workflow.book_appointment(project, client_user, MONDAY, "10:00", availability, "Gate code 42")

    assert updated.appointment.status is AppointmentStatus.PENDING
    assert updated.appointment.scheduled_for == datetime(2024, 5, 6, 10, 0, tzinfo=timezone.utc)
    assert updated.appointment.notes == "Gate code 42"
    assert updated.status is ProjectStatus.APPOINTMENT_NEEDED
    assert project.appointment is None  # input untouched


def test_book_appointment_rejects_slot_not_offered(project, client_user):
    closed = resolve_availability(MONDAY, [AvailabilityRecord(date=MONDAY, slots=[])])
    with pytest.raises(WorkflowValidationError):
        workflow.book_appointment(project, client_user, MONDAY, "10:00", closed)


def test_book_appointment_rejects_weekend_without_override(project, client_user):
    with pytest.raises(WorkflowValidationError):
        workflow.book_appointment(project, client_user, SATURDAY, "10:00", resolve_availability(SATURDAY, []))


def test_rebooking_replaces_the_appointment(project, client_user):
    availability = resolve_availability(MONDAY, [])
    first = workflow.book_appointment(project, client_user, MONDAY, "10:00", availability)
    second = workflow.book_appointment(first, client_user, MONDAY, "14:00", availability)

    assert second.appointment.time == "14:00"
    assert second.appointment.id != first.appointment.id


def test_confirm_appointment_moves_to_consultation_done(project, client_user, superadmin):
    booked = workflow.book_appointment(project, client_user, MONDAY, "10:00", resolve_availability(MONDAY, []))
    confirmed = workflow.confirm_appointment(booked, superadmin, "Discussed site access")

    assert confirmed.status is ProjectStatus.CONSULTATION_DONE
    assert confirmed.appointment.status is AppointmentStatus.CONFIRMED
    assert confirmed.appointment.staff_id == superadmin.id
    assert confirmed.consultation_notes == "Discussed site access"


def test_confirm_appointment_twice_is_a_noop(project, client_user, superadmin):
    booked = workflow.book_appointment(project, client_user, MONDAY, "10:00", resolve_availability(MONDAY, []))
    confirmed = workflow.confirm_appointment(booked, superadmin)
    assert workflow.confirm_appointment(confirmed, superadmin) == confirmed


def test_confirm_without_appointment_is_not_found(project, superadmin):
    with pytest.raises(EntityNotFoundError):
        workflow.confirm_appointment(project, superadmin)


# ── Proposal ──


def test_superadmin_proposal_is_sent_immediately(project, superadmin):
    updated = _with_sent_proposal(project, superadmin)

    assert updated.status is ProjectStatus.PROPOSAL_SENT
    assert updated.proposal.status is ProposalStatus.SENT
    assert updated.invoice_amount == Decimal("15000000")
    assert updated.proposal.valid_until == NOW + timedelta(days=7)


def test_worker_proposal_waits_for_approval(project, worker, superadmin):
    project = _at(project, ProjectStatus.CONSULTATION_DONE)
    pending = workflow.send_proposal(project, worker, Decimal("900"), "p.pdf", NOW)

    assert pending.status is ProjectStatus.CONSULTATION_DONE
    assert pending.proposal.status is ProposalStatus.PENDING_APPROVAL
    assert ApprovalQueue.from_projects([pending]).proposals == [pending]

    approved = workflow.approve_proposal(pending)
    assert approved.status is ProjectStatus.PROPOSAL_SENT
    assert approved.proposal.status is ProposalStatus.SENT
    assert workflow.approve_proposal(approved) == approved


def test_send_proposal_rejects_negative_amount(project, superadmin):
    with pytest.raises(WorkflowValidationError):
        workflow.send_proposal(project, superadmin, Decimal("-5"), "p.pdf", NOW)


def test_send_proposal_rejected_once_paid(project, superadmin):
    paid = _paid(project, superadmin)
    with pytest.raises(InvalidTransitionError):
        workflow.send_proposal(paid, superadmin, Decimal("1"), "p.pdf", NOW)


def test_revision_notes_overwrite_previous(project, superadmin):
    sent = _with_sent_proposal(project, superadmin)
    first = workflow.request_proposal_revision(sent, "Cheaper finishes please")
    second = workflow.request_proposal_revision(first, "Also drop the pool")

    assert second.status is ProjectStatus.PROPOSAL_REVISION
    assert second.proposal.status is ProposalStatus.REVISION_REQUESTED
    assert second.proposal.revision_notes == "Also drop the pool"


def test_revision_requires_notes(project, superadmin):
    sent = _with_sent_proposal(project, superadmin)
    with pytest.raises(WorkflowValidationError):
        workflow.request_proposal_revision(sent, "  ")


def test_revision_without_proposal_is_not_found(project):
    with pytest.raises(EntityNotFoundError):
        workflow.request_proposal_revision(project, "notes")


def test_accept_proposal_moves_to_payment_pending(project, superadmin):
    accepted = workflow.accept_proposal(_with_sent_proposal(project, superadmin))
    assert accepted.status is ProjectStatus.PAYMENT_PENDING
    assert accepted.proposal.status is ProposalStatus.ACCEPTED


def test_accept_pending_proposal_is_invalid(project, worker):
    project = _at(project, ProjectStatus.PROPOSAL_SENT)
    pending = workflow.send_proposal(project, worker, Decimal("1"), "p.pdf", NOW)
    with pytest.raises(InvalidTransitionError):
        workflow.accept_proposal(pending)


# ── Payment ──


def test_payment_needs_verification(project, superadmin):
    accepted = workflow.accept_proposal(_with_sent_proposal(project, superadmin))
    recorded = workflow.record_payment(accepted, Decimal("15000000"))

    assert recorded.payment_status is PaymentStatus.PENDING_VERIFICATION
    assert recorded.status is ProjectStatus.PAYMENT_PENDING

    verified = workflow.verify_payment(recorded)
    assert verified.payment_status is PaymentStatus.PAID
    assert verified.status is ProjectStatus.PAID
    assert workflow.verify_payment(verified) == verified


def test_record_payment_without_proposal_is_not_found(project):
    with pytest.raises(EntityNotFoundError):
        workflow.record_payment(_at(project, ProjectStatus.PAYMENT_PENDING), Decimal("1"))


def test_verify_without_recorded_payment_is_invalid(project, superadmin):
    accepted = workflow.accept_proposal(_with_sent_proposal(project, superadmin))
    with pytest.raises(InvalidTransitionError):
        workflow.verify_payment(accepted)


def test_rejected_payment_can_be_retried(project, superadmin):
    accepted = workflow.accept_proposal(_with_sent_proposal(project, superadmin))
    failed = workflow.reject_payment(workflow.record_payment(accepted, Decimal("1")))

    assert failed.payment_status is PaymentStatus.FAILED
    retried = workflow.record_payment(failed, Decimal("15000000"))
    assert retried.payment_status is PaymentStatus.PENDING_VERIFICATION


def test_verifying_keeps_stage_of_concept_shared_early(project, superadmin):
    accepted = workflow.accept_proposal(_with_sent_proposal(project, superadmin))
    shared = workflow.share_concept(accepted, superadmin, ["render.png"], None)
    verified = workflow.verify_payment(workflow.record_payment(shared, Decimal("1")))

    assert verified.status is ProjectStatus.CONCEPT_SHARED
    assert verified.concept_visible_to_client


# ── Concept ──


def test_concept_hidden_until_paid(project, superadmin):
    accepted = workflow.accept_proposal(_with_sent_proposal(project, superadmin))
    shared = workflow.share_concept(accepted, superadmin, ["render.png"], None)

    assert shared.status is ProjectStatus.CONCEPT_SHARED
    assert not shared.concept_visible_to_client
    with pytest.raises(InvalidTransitionError):
        workflow.approve_client_concept(shared)


def test_worker_concept_needs_superadmin_release(project, superadmin, worker):
    paid = _paid(project, superadmin)
    shared = workflow.share_concept(paid, worker, [], "https://drive.example/concept")

    assert shared.status is ProjectStatus.PAID
    assert not shared.concept_is_approved
    assert ApprovalQueue.from_projects([shared]).concepts == [shared]
    with pytest.raises(InvalidTransitionError):
        workflow.approve_client_concept(shared)

    released = workflow.approve_concept(shared)
    assert released.status is ProjectStatus.CONCEPT_SHARED
    assert workflow.approve_concept(released) == released

    approved = workflow.approve_client_concept(released)
    assert approved.status is ProjectStatus.CONCEPT_APPROVED
    assert approved.client_approval is ClientApproval.YES


def test_share_concept_requires_files_or_link(project, superadmin):
    with pytest.raises(WorkflowValidationError):
        workflow.share_concept(_paid(project, superadmin), superadmin, ["  "], "")


def test_approve_concept_without_concept_is_not_found(project, superadmin):
    with pytest.raises(EntityNotFoundError):
        workflow.approve_concept(_paid(project, superadmin))


def test_client_change_request_then_reshare_clears_it(project, superadmin):
    shared = workflow.share_concept(_paid(project, superadmin), superadmin, ["v1.png"], None)
    changes = workflow.request_concept_changes(shared, "Bigger windows", ["sketch.jpg"])

    assert changes.client_approval is ClientApproval.NO
    assert changes.client_change_request_notes == "Bigger windows"
    assert changes.status is ProjectStatus.CONCEPT_SHARED

    reshared = workflow.share_concept(changes, superadmin, ["v2.png"], None)
    assert reshared.client_approval is None
    assert reshared.client_change_request_notes is None
    assert reshared.client_change_request_files == []


# ── Construction & handover ──


def test_site_update_rejected_before_concept_approval(project, superadmin):
    with pytest.raises(InvalidTransitionError):
        workflow.post_site_update(_paid(project, superadmin), superadmin, "Foundations", 10, NOW)


@pytest.mark.parametrize("percentage", [-1, 101])
def test_site_update_percentage_bounds(project, superadmin, percentage):
    project = _at(project, ProjectStatus.CONCEPT_APPROVED)
    with pytest.raises(WorkflowValidationError):
        workflow.post_site_update(project, superadmin, "Bad", percentage, NOW)


def test_worker_update_is_pending_and_prepended(project, worker):
    project = _at(project, ProjectStatus.CONSTRUCTION, percent_complete=30)
    first = workflow.post_site_update(project, worker, "Walls", 40, NOW)
    second = workflow.post_site_update(first, worker, "Roof", 60, NOW)

    assert [u.title for u in second.construction_updates] == ["Roof", "Walls"]
    assert second.percent_complete == 30
    assert second.status is ProjectStatus.CONSTRUCTION
    assert len(second.pending_updates) == 2


def test_approving_update_applies_its_progress(project, worker):
    project = _at(project, ProjectStatus.CONSTRUCTION)
    posted = workflow.post_site_update(project, worker, "Topping out", 100, NOW)
    update_id = posted.construction_updates[0].id

    approved = workflow.approve_site_update(posted, update_id)
    assert approved.percent_complete == 100
    assert approved.status is ProjectStatus.INSPECTION
    assert approved.construction_updates[0].is_approved
    assert workflow.approve_site_update(approved, update_id) == approved


def test_approve_unknown_update_is_not_found(project):
    with pytest.raises(EntityNotFoundError):
        workflow.approve_site_update(_at(project, ProjectStatus.CONSTRUCTION), "missing")


def test_progress_regression_is_accepted(project, superadmin):
    project = _at(project, ProjectStatus.CONSTRUCTION, percent_complete=70)
    updated = workflow.post_site_update(project, superadmin, "Rework", 50, NOW)
    assert updated.percent_complete == 50


def test_handover_and_finalize(project):
    inspection = _at(project, ProjectStatus.INSPECTION)
    handed_over = workflow.mark_handover(inspection, "keys.pdf")
    assert handed_over.status is ProjectStatus.HANDOVER
    assert handed_over.handover_file == "keys.pdf"

    completed = workflow.finalize_handover(handed_over, NOW)
    assert completed.status is ProjectStatus.COMPLETED
    assert completed.completion_date == NOW


def test_handover_waits_for_pending_site_updates(project, worker):
    inspection = _at(project, ProjectStatus.INSPECTION, percent_complete=100)
    posted = workflow.post_site_update(inspection, worker, "Snag list", 100, NOW)

    with pytest.raises(InvalidTransitionError, match="awaiting approval"):
        workflow.mark_handover(posted, "keys.pdf")
    with pytest.raises(InvalidTransitionError, match="awaiting approval"):
        workflow.finalize_handover(posted, NOW)

    approved = workflow.approve_site_update(posted, posted.construction_updates[0].id)
    handed_over = workflow.mark_handover(approved, "keys.pdf")
    assert handed_over.status is ProjectStatus.HANDOVER
    assert handed_over.pending_updates == []


def test_completed_is_terminal(project, superadmin):
    completed = _at(project, ProjectStatus.COMPLETED)
    with pytest.raises(InvalidTransitionError):
        workflow.finalize_handover(completed, NOW)
    with pytest.raises(InvalidTransitionError):
        workflow.post_site_update(completed, superadmin, "Late", 100, NOW)


def test_failed_transition_leaves_input_untouched(project, superadmin):
    before = _with_sent_proposal(project, superadmin)
    snapshot = workflow.approve_proposal(before)  # no-op copy
    with pytest.raises(InvalidTransitionError):
        workflow.verify_payment(before)
    assert before == snapshot


def test_lakehouse_end_to_end(project, client_user, worker, superadmin):
    p = workflow.book_appointment(project, client_user, MONDAY, "10:00", resolve_availability(MONDAY, []))
    p = workflow.confirm_appointment(p, superadmin)
    p = workflow.send_proposal(p, worker, Decimal("14000000"), "draft.pdf", NOW)
    p = workflow.approve_proposal(p)
    p = workflow.request_proposal_revision(p, "Reduce the budget")
    p = workflow.send_proposal(p, superadmin, Decimal("12500000"), "v2.pdf", NOW)
    assert p.status is ProjectStatus.PROPOSAL_SENT
    p = workflow.accept_proposal(p)
    p = workflow.record_payment(p, Decimal("12500000"))
    p = workflow.verify_payment(p)
    p = workflow.share_concept(p, worker, ["concept.png"], None)
    p = workflow.approve_concept(p)
    p = workflow.approve_client_concept(p)
    p = workflow.post_site_update(p, worker, "Foundations", 25, NOW)
    p = workflow.approve_site_update(p, p.construction_updates[0].id)
    assert (p.status, p.percent_complete) == (ProjectStatus.CONSTRUCTION, 25)
    p = workflow.post_site_update(p, superadmin, "Finishes", 100, NOW)
    p = workflow.mark_handover(p)
    p = workflow.finalize_handover(p, NOW)

    assert p.status is ProjectStatus.COMPLETED
    assert p.invoice_amount == Decimal("12500000")
    assert ApprovalQueue.from_projects([p]).total == 0
