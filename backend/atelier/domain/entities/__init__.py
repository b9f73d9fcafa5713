from .user import User, UserRole, STAFF_ROLES, ONBOARDABLE_ROLES, is_staff, normalize_email
from .brief import Brief
from .appointment import Appointment, AppointmentStatus
from .proposal import Proposal, ProposalStatus
from .site_update import SiteUpdate
from .project import Project, ProjectStatus, PaymentStatus, ClientApproval
from .availability import (
    AvailabilityRecord,
    AvailabilityResult,
    DEFAULT_SLOTS,
    resolve_availability,
)
from .approval_queue import ApprovalQueue, PendingSiteUpdate

__all__ = [
    "User",
    "UserRole",
    "STAFF_ROLES",
    "ONBOARDABLE_ROLES",
    "is_staff",
    "normalize_email",
    "Brief",
    "Appointment",
    "AppointmentStatus",
    "Proposal",
    "ProposalStatus",
    "SiteUpdate",
    "Project",
    "ProjectStatus",
    "PaymentStatus",
    "ClientApproval",
    "AvailabilityRecord",
    "AvailabilityResult",
    "DEFAULT_SLOTS",
    "resolve_availability",
    "ApprovalQueue",
    "PendingSiteUpdate",
]
