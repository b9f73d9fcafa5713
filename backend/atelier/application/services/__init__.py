from .auth_service import AuthService
from .availability_service import AvailabilityService
from .project_workflow_service import ProjectWorkflowService

__all__ = [
    "AuthService",
    "AvailabilityService",
    "ProjectWorkflowService",
]
