from .user_repository import SQLAlchemyUserRepository
from .project_repository import SQLAlchemyProjectRepository
from .availability_repository import SQLAlchemyAvailabilityRepository

__all__ = [
    "SQLAlchemyUserRepository",
    "SQLAlchemyProjectRepository",
    "SQLAlchemyAvailabilityRepository",
]
