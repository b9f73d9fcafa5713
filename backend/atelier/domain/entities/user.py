"""Domain entity for portal accounts — clients and firm staff."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


class UserRole(str, Enum):
    """Closed set of account roles."""

    CLIENT = "client"
    SUPERADMIN = "superadmin"
    WORKER = "worker"
    PROJECT_MANAGER = "project_manager"
    INSPECTOR = "inspector"


STAFF_ROLES: frozenset[UserRole] = frozenset({
    UserRole.SUPERADMIN,
    UserRole.WORKER,
    UserRole.PROJECT_MANAGER,
    UserRole.INSPECTOR,
})

# Roles a superadmin may onboard; superadmins are provisioned out of band.
ONBOARDABLE_ROLES: frozenset[UserRole] = STAFF_ROLES - {UserRole.SUPERADMIN}


def is_staff(role: UserRole) -> bool:
    """True for every role that works for the firm rather than for a client."""
    return role in STAFF_ROLES


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookups."""
    return email.strip().lower()


@dataclass
class User:
    """A portal account.

    ``password`` is an opaque credential (a salted hash), never the raw
    secret. ``project_ids`` lists the projects a client owns.
    """

    name: str
    email: str
    password: str
    role: UserRole = UserRole.CLIENT
    phone: str = ""
    company: str | None = None
    project_ids: list[str] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_staff(self) -> bool:
        return is_staff(self.role)

    @property
    def is_superadmin(self) -> bool:
        return self.role is UserRole.SUPERADMIN

    def add_project(self, project_id: str) -> None:
        if project_id not in self.project_ids:
            self.project_ids.append(project_id)
