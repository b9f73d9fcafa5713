"""In-memory Entity Store backend."""

from .in_memory_store import (
    InMemoryAvailabilityRepository,
    InMemoryProjectRepository,
    InMemoryStore,
    InMemoryUserRepository,
)

__all__ = [
    "InMemoryAvailabilityRepository",
    "InMemoryProjectRepository",
    "InMemoryStore",
    "InMemoryUserRepository",
]
