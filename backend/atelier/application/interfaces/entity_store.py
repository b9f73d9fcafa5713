"""Entity Store — the bundle of repository ports the services depend on."""

from dataclasses import dataclass

from .availability_repository import AvailabilityRepository
from .project_repository import ProjectRepository
from .user_repository import UserRepository


@dataclass
class EntityStore:
    """Groups the three repositories sharing one backend (and transaction).

    Backends are chosen at composition time; services never inspect which
    implementation they received.
    """

    users: UserRepository
    projects: ProjectRepository
    availability: AvailabilityRepository
