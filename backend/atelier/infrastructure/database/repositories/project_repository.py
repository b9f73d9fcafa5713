"""Concrete repository implementation for Project backed by SQLAlchemy.

The aggregate is one row; embedded objects are serialised to JSON with
ISO-8601 timestamps and exact decimal strings so they round-trip unchanged.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from atelier.application.interfaces import ProjectRepository
from atelier.domain.entities import (
    Appointment,
    AppointmentStatus,
    Brief,
    ClientApproval,
    PaymentStatus,
    Project,
    ProjectStatus,
    Proposal,
    ProposalStatus,
    SiteUpdate,
)
from atelier.domain.exceptions import DuplicateEntityError, EntityNotFoundError
from atelier.infrastructure.database.models import ProjectModel


# ── Embedded object (de)serialisation ────────────────────────────────


def _parse_timestamp(value: str) -> datetime:
    """Read an ISO-8601 timestamp; naive values from older rows are taken as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def _brief_to_json(brief: Brief | None) -> dict[str, Any] | None:
    if brief is None:
        return None
    return {
        "project_title": brief.project_title,
        "project_location": brief.project_location,
        "project_type": brief.project_type,
        "budget": str(brief.budget),
        "timeline": brief.timeline,
        "requirements": brief.requirements,
        "inspiration_images": list(brief.inspiration_images),
        "submitted_at": brief.submitted_at.isoformat(),
    }


def _brief_from_json(data: dict[str, Any] | None) -> Brief | None:
    if data is None:
        return None
    return Brief(
        project_title=data["project_title"],
        project_location=data.get("project_location", ""),
        project_type=data.get("project_type", ""),
        budget=Decimal(data.get("budget", "0")),
        timeline=data.get("timeline", ""),
        requirements=data.get("requirements", ""),
        inspiration_images=list(data.get("inspiration_images", [])),
        submitted_at=_parse_timestamp(data["submitted_at"]),
    )


def _appointment_to_json(appointment: Appointment | None) -> dict[str, Any] | None:
    if appointment is None:
        return None
    return {
        "id": appointment.id,
        "client_id": appointment.client_id,
        "staff_id": appointment.staff_id,
        "date": appointment.date.isoformat(),
        "time": appointment.time,
        "scheduled_for": appointment.scheduled_for.isoformat(),
        "status": appointment.status.value,
        "notes": appointment.notes,
    }


def _appointment_from_json(data: dict[str, Any] | None) -> Appointment | None:
    if data is None:
        return None
    return Appointment(
        id=data["id"],
        client_id=data["client_id"],
        staff_id=data.get("staff_id"),
        date=date.fromisoformat(data["date"]),
        time=data["time"],
        scheduled_for=_parse_timestamp(data["scheduled_for"]),
        status=AppointmentStatus(data["status"]),
        notes=data.get("notes"),
    )


def _proposal_to_json(proposal: Proposal | None) -> dict[str, Any] | None:
    if proposal is None:
        return None
    return {
        "id": proposal.id,
        "project_id": proposal.project_id,
        "file_ref": proposal.file_ref,
        "amount": str(proposal.amount),
        "valid_until": proposal.valid_until.isoformat(),
        "status": proposal.status.value,
        "sent_at": proposal.sent_at.isoformat(),
        "revision_notes": proposal.revision_notes,
        "created_by_id": proposal.created_by_id,
    }


def _proposal_from_json(data: dict[str, Any] | None) -> Proposal | None:
    if data is None:
        return None
    return Proposal(
        id=data["id"],
        project_id=data["project_id"],
        file_ref=data["file_ref"],
        amount=Decimal(data["amount"]),
        valid_until=_parse_timestamp(data["valid_until"]),
        status=ProposalStatus(data["status"]),
        sent_at=_parse_timestamp(data["sent_at"]),
        revision_notes=data.get("revision_notes"),
        created_by_id=data["created_by_id"],
    )


def _update_to_json(update: SiteUpdate) -> dict[str, Any]:
    return {
        "id": update.id,
        "project_id": update.project_id,
        "title": update.title,
        "notes": update.notes,
        "image_refs": list(update.image_refs),
        "progress_percentage": update.progress_percentage,
        "created_by_id": update.created_by_id,
        "created_at": update.created_at.isoformat(),
        "is_approved": update.is_approved,
    }


def _update_from_json(data: dict[str, Any]) -> SiteUpdate:
    return SiteUpdate(
        id=data["id"],
        project_id=data["project_id"],
        title=data["title"],
        notes=data.get("notes", ""),
        image_refs=list(data.get("image_refs", [])),
        progress_percentage=int(data["progress_percentage"]),
        created_by_id=data["created_by_id"],
        created_at=_parse_timestamp(data["created_at"]),
        is_approved=bool(data["is_approved"]),
    )


# ── Repository ───────────────────────────────────────────────────────


class SQLAlchemyProjectRepository(ProjectRepository):
    """Implements the ProjectRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: ProjectModel) -> Project:
        """Map ORM model → domain entity."""
        return Project(
            id=model.id,
            client_id=model.client_id,
            title=model.title,
            status=ProjectStatus(model.status),
            brief=_brief_from_json(model.brief),
            appointment=_appointment_from_json(model.appointment),
            consultation_notes=model.consultation_notes,
            proposal=_proposal_from_json(model.proposal),
            invoice_amount=model.invoice_amount,
            payment_status=PaymentStatus(model.payment_status),
            concept_files=list(model.concept_files or []),
            concept_link=model.concept_link,
            concept_is_approved=model.concept_is_approved,
            client_approval=ClientApproval(model.client_approval) if model.client_approval else None,
            client_change_request_notes=model.client_change_request_notes,
            client_change_request_files=list(model.client_change_request_files or []),
            construction_updates=[_update_from_json(u) for u in model.construction_updates or []],
            percent_complete=model.percent_complete,
            handover_file=model.handover_file,
            completion_date=model.completion_date,
            created_at=model.created_at,
        )

    @staticmethod
    def _apply(model: ProjectModel, entity: Project) -> None:
        """Copy every mutable field of ``entity`` onto ``model`` (full replace)."""
        model.client_id = entity.client_id
        model.title = entity.title
        model.status = entity.status.value
        model.brief = _brief_to_json(entity.brief)
        model.appointment = _appointment_to_json(entity.appointment)
        model.consultation_notes = entity.consultation_notes
        model.proposal = _proposal_to_json(entity.proposal)
        model.invoice_amount = entity.invoice_amount
        model.payment_status = entity.payment_status.value
        model.concept_files = list(entity.concept_files)
        model.concept_link = entity.concept_link
        model.concept_is_approved = entity.concept_is_approved
        model.client_approval = entity.client_approval.value if entity.client_approval else None
        model.client_change_request_notes = entity.client_change_request_notes
        model.client_change_request_files = list(entity.client_change_request_files)
        model.construction_updates = [_update_to_json(u) for u in entity.construction_updates]
        model.percent_complete = entity.percent_complete
        model.handover_file = entity.handover_file
        model.completion_date = entity.completion_date

    async def get_by_id(self, project_id: str) -> Project | None:
        result = await self._session.get(ProjectModel, project_id)
        return self._to_entity(result) if result else None

    async def get_all(self, *, client_id: str | None = None) -> list[Project]:
        stmt = select(ProjectModel)
        if client_id is not None:
            stmt = stmt.where(ProjectModel.client_id == client_id)
        stmt = stmt.order_by(ProjectModel.created_at.desc())
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, project: Project) -> Project:
        if await self._session.get(ProjectModel, project.id) is not None:
            raise DuplicateEntityError("Project", "id", project.id)
        model = ProjectModel(id=project.id, created_at=project.created_at)
        self._apply(model, project)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, project: Project) -> Project:
        model = await self._session.get(ProjectModel, project.id)
        if model is None:
            raise EntityNotFoundError("Project", project.id)
        self._apply(model, project)
        await self._session.flush()
        return self._to_entity(model)
