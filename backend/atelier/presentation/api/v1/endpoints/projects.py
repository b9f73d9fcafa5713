"""Project endpoints — listing, brief submission and one POST per workflow action."""

from fastapi import APIRouter, Depends, status

from atelier.application.schemas.project import (
    BookAppointmentRequest,
    BriefCreate,
    ConceptChangeRequest,
    ConceptCreate,
    ConfirmAppointmentRequest,
    HandoverRequest,
    PaymentCreate,
    ProjectResponse,
    ProposalCreate,
    RevisionRequest,
    SiteUpdateCreate,
)
from atelier.application.services import ProjectWorkflowService
from atelier.domain.entities import User
from atelier.infrastructure.dependencies import get_current_user, get_workflow_service

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("", response_model=list[ProjectResponse])
async def list_projects(
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> list[ProjectResponse]:
    """Staff see every project, clients only their own (newest first)."""
    projects = await service.list_projects(actor)
    return [ProjectResponse.for_viewer(p, actor) for p in projects]


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    data: BriefCreate,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    """Submit an initial brief, opening a new project."""
    project = await service.create_project(actor, data)
    return ProjectResponse.for_viewer(project, actor)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    project = await service.get_project(actor, project_id)
    return ProjectResponse.for_viewer(project, actor)


# ── Appointment ──────────────────────────────────────────────────────


@router.post("/{project_id}/appointment", response_model=ProjectResponse)
async def book_appointment(
    project_id: str,
    data: BookAppointmentRequest,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    project = await service.book_appointment(actor, project_id, data.date, data.time, data.notes)
    return ProjectResponse.for_viewer(project, actor)


@router.post("/{project_id}/appointment/confirm", response_model=ProjectResponse)
async def confirm_appointment(
    project_id: str,
    data: ConfirmAppointmentRequest,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    project = await service.confirm_appointment(actor, project_id, data.notes)
    return ProjectResponse.for_viewer(project, actor)


# ── Proposal ─────────────────────────────────────────────────────────


@router.post("/{project_id}/proposal", response_model=ProjectResponse)
async def send_proposal(
    project_id: str,
    data: ProposalCreate,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    """Issue (or replace) the proposal; non-superadmin submissions await approval."""
    project = await service.send_proposal(actor, project_id, data.amount, data.file_ref)
    return ProjectResponse.for_viewer(project, actor)


@router.post("/{project_id}/proposal/approve", response_model=ProjectResponse)
async def approve_proposal(
    project_id: str,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    project = await service.approve_proposal(actor, project_id)
    return ProjectResponse.for_viewer(project, actor)


@router.post("/{project_id}/proposal/revision", response_model=ProjectResponse)
async def request_proposal_revision(
    project_id: str,
    data: RevisionRequest,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    project = await service.request_proposal_revision(actor, project_id, data.notes)
    return ProjectResponse.for_viewer(project, actor)


@router.post("/{project_id}/proposal/accept", response_model=ProjectResponse)
async def accept_proposal(
    project_id: str,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    project = await service.accept_proposal(actor, project_id)
    return ProjectResponse.for_viewer(project, actor)


# ── Payment ──────────────────────────────────────────────────────────


@router.post("/{project_id}/payment", response_model=ProjectResponse)
async def record_payment(
    project_id: str,
    data: PaymentCreate,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    project = await service.record_payment(actor, project_id, data.amount)
    return ProjectResponse.for_viewer(project, actor)


@router.post("/{project_id}/payment/verify", response_model=ProjectResponse)
async def verify_payment(
    project_id: str,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    project = await service.verify_payment(actor, project_id)
    return ProjectResponse.for_viewer(project, actor)


@router.post("/{project_id}/payment/reject", response_model=ProjectResponse)
async def reject_payment(
    project_id: str,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    project = await service.reject_payment(actor, project_id)
    return ProjectResponse.for_viewer(project, actor)


# ── Concept ──────────────────────────────────────────────────────────


@router.post("/{project_id}/concept", response_model=ProjectResponse)
async def share_concept(
    project_id: str,
    data: ConceptCreate,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    project = await service.share_concept(actor, project_id, data.files, data.link)
    return ProjectResponse.for_viewer(project, actor)


@router.post("/{project_id}/concept/approve", response_model=ProjectResponse)
async def approve_concept(
    project_id: str,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    """Superadmin release of a concept shared by other staff."""
    project = await service.approve_concept(actor, project_id)
    return ProjectResponse.for_viewer(project, actor)


@router.post("/{project_id}/concept/client-approve", response_model=ProjectResponse)
async def approve_client_concept(
    project_id: str,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    project = await service.approve_client_concept(actor, project_id)
    return ProjectResponse.for_viewer(project, actor)


@router.post("/{project_id}/concept/changes", response_model=ProjectResponse)
async def request_concept_changes(
    project_id: str,
    data: ConceptChangeRequest,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    project = await service.request_concept_changes(actor, project_id, data.notes, data.files)
    return ProjectResponse.for_viewer(project, actor)


# ── Construction & handover ──────────────────────────────────────────


@router.post("/{project_id}/updates", response_model=ProjectResponse)
async def post_site_update(
    project_id: str,
    data: SiteUpdateCreate,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    project = await service.post_site_update(actor, project_id, data)
    return ProjectResponse.for_viewer(project, actor)


@router.post("/{project_id}/updates/{update_id}/approve", response_model=ProjectResponse)
async def approve_site_update(
    project_id: str,
    update_id: str,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    project = await service.approve_site_update(actor, project_id, update_id)
    return ProjectResponse.for_viewer(project, actor)


@router.post("/{project_id}/handover", response_model=ProjectResponse)
async def mark_handover(
    project_id: str,
    data: HandoverRequest,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    project = await service.mark_handover(actor, project_id, data.handover_file)
    return ProjectResponse.for_viewer(project, actor)


@router.post("/{project_id}/handover/finalize", response_model=ProjectResponse)
async def finalize_handover(
    project_id: str,
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ProjectResponse:
    project = await service.finalize_handover(actor, project_id)
    return ProjectResponse.for_viewer(project, actor)
