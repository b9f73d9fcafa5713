"""Superadmin approval queue."""

from fastapi import APIRouter, Depends

from atelier.application.schemas.project import (
    ApprovalQueueResponse,
    PendingSiteUpdateResponse,
    ProjectResponse,
    SiteUpdateResponse,
)
from atelier.application.services import ProjectWorkflowService
from atelier.domain.entities import User
from atelier.infrastructure.dependencies import get_current_user, get_workflow_service

router = APIRouter(prefix="/approvals", tags=["Approvals"])


@router.get("", response_model=ApprovalQueueResponse)
async def get_approval_queue(
    actor: User = Depends(get_current_user),
    service: ProjectWorkflowService = Depends(get_workflow_service),
) -> ApprovalQueueResponse:
    """Pending proposals, concepts, site updates, payments and appointments."""
    queue = await service.get_approval_queue(actor)

    def present(projects):
        return [ProjectResponse.model_validate(p, from_attributes=True) for p in projects]

    return ApprovalQueueResponse(
        proposals=present(queue.proposals),
        concepts=present(queue.concepts),
        payments=present(queue.payments),
        appointments=present(queue.appointments),
        site_updates=[
            PendingSiteUpdateResponse(
                project_id=item.project.id,
                project_title=item.project.title,
                update=SiteUpdateResponse.model_validate(item.update, from_attributes=True),
            )
            for item in queue.site_updates
        ],
        total=queue.total,
    )
