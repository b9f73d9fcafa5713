from .base import Base, DecimalString, UTCDateTime
from .session import engine, async_session_factory, session_scope
from .models import UserModel, ProjectModel, AvailabilityModel

__all__ = [
    "Base",
    "DecimalString",
    "UTCDateTime",
    "engine",
    "async_session_factory",
    "session_scope",
    "UserModel",
    "ProjectModel",
    "AvailabilityModel",
]
