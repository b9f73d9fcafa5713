from .user_repository import UserRepository
from .project_repository import ProjectRepository
from .availability_repository import AvailabilityRepository
from .entity_store import EntityStore
from .record_sync import RecordSyncGateway

__all__ = [
    "UserRepository",
    "ProjectRepository",
    "AvailabilityRepository",
    "EntityStore",
    "RecordSyncGateway",
]
