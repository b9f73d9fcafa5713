"""Pydantic DTOs for projects and their workflow actions."""

import datetime as dt
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from atelier.domain.entities import (
    AppointmentStatus,
    ClientApproval,
    PaymentStatus,
    Project,
    ProjectStatus,
    ProposalStatus,
    User,
)


# ── Requests ─────────────────────────────────────────────────────────


class BriefCreate(BaseModel):
    """Initial brief submitted by a client; opens a new project."""

    project_title: str = Field(..., max_length=255, examples=["Minimalist Lakehouse"])
    project_location: str = Field("", max_length=255, examples=["Epe, Lagos"])
    project_type: str = Field("", max_length=100, examples=["Residential"])
    budget: Decimal = Field(Decimal("0"), examples=["45000000"])
    timeline: str = Field("", max_length=100, examples=["12 Months"])
    requirements: str = ""
    inspiration_images: list[str] = Field(default_factory=list)


class BookAppointmentRequest(BaseModel):
    date: dt.date
    time: str = Field(..., examples=["10:00"])
    notes: str | None = None


class ConfirmAppointmentRequest(BaseModel):
    notes: str | None = None


class ProposalCreate(BaseModel):
    amount: Decimal = Field(..., examples=["5000000"])
    file_ref: str = Field("", max_length=1024, examples=["proposals/lakehouse-v1.pdf"])


class RevisionRequest(BaseModel):
    notes: str


class PaymentCreate(BaseModel):
    amount: Decimal


class ConceptCreate(BaseModel):
    files: list[str] = Field(default_factory=list)
    link: str | None = None


class ConceptChangeRequest(BaseModel):
    notes: str
    files: list[str] = Field(default_factory=list)


class SiteUpdateCreate(BaseModel):
    title: str = Field(..., max_length=255)
    notes: str = ""
    image_refs: list[str] = Field(default_factory=list)
    progress_percentage: int


class HandoverRequest(BaseModel):
    handover_file: str | None = None


# ── Responses ────────────────────────────────────────────────────────


class BriefResponse(BaseModel):
    project_title: str
    project_location: str
    project_type: str
    budget: Decimal
    timeline: str
    requirements: str
    inspiration_images: list[str]
    submitted_at: datetime

    model_config = {"from_attributes": True}


class AppointmentResponse(BaseModel):
    id: str
    client_id: str
    staff_id: str | None
    date: dt.date
    time: str
    scheduled_for: datetime
    status: AppointmentStatus
    notes: str | None

    model_config = {"from_attributes": True}


class ProposalResponse(BaseModel):
    id: str
    project_id: str
    file_ref: str
    amount: Decimal
    valid_until: datetime
    status: ProposalStatus
    sent_at: datetime
    revision_notes: str | None
    created_by_id: str

    model_config = {"from_attributes": True}


class SiteUpdateResponse(BaseModel):
    id: str
    project_id: str
    title: str
    notes: str
    image_refs: list[str]
    progress_percentage: int
    created_by_id: str
    created_at: datetime
    is_approved: bool

    model_config = {"from_attributes": True}


class ProjectResponse(BaseModel):
    """Project aggregate as returned by the API."""

    id: str
    client_id: str
    title: str
    status: ProjectStatus
    brief: BriefResponse | None
    appointment: AppointmentResponse | None
    consultation_notes: str | None
    proposal: ProposalResponse | None
    invoice_amount: Decimal | None
    payment_status: PaymentStatus
    concept_files: list[str]
    concept_link: str | None
    concept_is_approved: bool
    client_approval: ClientApproval | None
    client_change_request_notes: str | None
    client_change_request_files: list[str]
    construction_updates: list[SiteUpdateResponse]
    percent_complete: int
    handover_file: str | None
    completion_date: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}

    @classmethod
    def for_viewer(cls, project: Project, viewer: User) -> "ProjectResponse":
        """Staff get the full aggregate; clients only see what has been released to them."""
        response = cls.model_validate(project, from_attributes=True)
        if viewer.is_staff:
            return response
        if not project.concept_visible_to_client:
            response.concept_files = []
            response.concept_link = None
        if response.proposal is not None and response.proposal.status is ProposalStatus.PENDING_APPROVAL:
            response.proposal = None
            response.invoice_amount = None
        response.construction_updates = [u for u in response.construction_updates if u.is_approved]
        return response


class PendingSiteUpdateResponse(BaseModel):
    project_id: str
    project_title: str
    update: SiteUpdateResponse


class ApprovalQueueResponse(BaseModel):
    """Everything awaiting a superadmin decision."""

    proposals: list[ProjectResponse]
    concepts: list[ProjectResponse]
    site_updates: list[PendingSiteUpdateResponse]
    payments: list[ProjectResponse]
    appointments: list[ProjectResponse]
    total: int
