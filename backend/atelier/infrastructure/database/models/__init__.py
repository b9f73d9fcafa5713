from .user import UserModel
from .project import ProjectModel
from .availability import AvailabilityModel

__all__ = [
    "UserModel",
    "ProjectModel",
    "AvailabilityModel",
]
