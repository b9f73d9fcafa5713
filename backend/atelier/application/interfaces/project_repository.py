"""Abstract repository interface (port) for Project persistence."""

from abc import ABC, abstractmethod

from atelier.domain.entities import Project


class ProjectRepository(ABC):
    """Port for project persistence — implemented in the infrastructure layer.

    Nested objects (brief, appointment, proposal, site updates) are part of
    the aggregate and must round-trip losslessly. Projects are archived,
    never deleted.
    """

    @abstractmethod
    async def get_by_id(self, project_id: str) -> Project | None:
        """Retrieve a single project by id."""
        ...

    @abstractmethod
    async def get_all(self, *, client_id: str | None = None) -> list[Project]:
        """Retrieve projects, newest first, optionally for one client only."""
        ...

    @abstractmethod
    async def create(self, project: Project) -> Project:
        """Persist a new project and return it."""
        ...

    @abstractmethod
    async def update(self, project: Project) -> Project:
        """Replace the stored project (full-record write, last write wins).

        Raises EntityNotFoundError if the project does not exist.
        """
        ...
