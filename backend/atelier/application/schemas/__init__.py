from .auth import (
    SignupRequest,
    StaffCreateRequest,
    LoginRequest,
    ResetPasswordRequest,
    UserResponse,
)
from .project import (
    BriefCreate,
    BookAppointmentRequest,
    ConfirmAppointmentRequest,
    ProposalCreate,
    RevisionRequest,
    PaymentCreate,
    ConceptCreate,
    ConceptChangeRequest,
    SiteUpdateCreate,
    HandoverRequest,
    ProjectResponse,
    ApprovalQueueResponse,
    PendingSiteUpdateResponse,
)
from .availability import (
    AvailabilityRecordSchema,
    SetAvailabilityRequest,
    AvailabilityResponse,
)

__all__ = [
    "SignupRequest",
    "StaffCreateRequest",
    "LoginRequest",
    "ResetPasswordRequest",
    "UserResponse",
    "BriefCreate",
    "BookAppointmentRequest",
    "ConfirmAppointmentRequest",
    "ProposalCreate",
    "RevisionRequest",
    "PaymentCreate",
    "ConceptCreate",
    "ConceptChangeRequest",
    "SiteUpdateCreate",
    "HandoverRequest",
    "ProjectResponse",
    "ApprovalQueueResponse",
    "PendingSiteUpdateResponse",
    "AvailabilityRecordSchema",
    "SetAvailabilityRequest",
    "AvailabilityResponse",
]
