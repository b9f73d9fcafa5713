"""Abstract repository interface (port) for availability overrides."""

from abc import ABC, abstractmethod

from atelier.domain.entities import AvailabilityRecord


class AvailabilityRepository(ABC):
    """Port for the process-wide availability calendar."""

    @abstractmethod
    async def get_all(self) -> list[AvailabilityRecord]:
        """Retrieve all overrides ordered by date."""
        ...

    @abstractmethod
    async def replace_all(self, records: list[AvailabilityRecord]) -> list[AvailabilityRecord]:
        """Replace the whole collection with ``records``."""
        ...
