"""In-memory Entity Store backend.

Used by the test suite and by ``STORE_BACKEND=memory`` for demos. Every
read and write goes through ``copy.deepcopy`` so callers only ever hold
read copies, exactly as with the database backend.
"""

import copy

from atelier.application.interfaces import (
    AvailabilityRepository,
    EntityStore,
    ProjectRepository,
    UserRepository,
)
from atelier.domain.entities import AvailabilityRecord, Project, User, UserRole, normalize_email
from atelier.domain.exceptions import DuplicateEntityError, EntityNotFoundError


class InMemoryUserRepository(UserRepository):
    def __init__(self, users: dict[str, User]):
        self._users = users

    async def get_by_id(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        return copy.deepcopy(user) if user else None

    async def get_by_email(self, email: str) -> User | None:
        wanted = normalize_email(email)
        for user in self._users.values():
            if normalize_email(user.email) == wanted:
                return copy.deepcopy(user)
        return None

    async def get_all(self, *, roles: set[UserRole] | None = None) -> list[User]:
        users = [u for u in self._users.values() if roles is None or u.role in roles]
        users.sort(key=lambda u: u.created_at)
        return copy.deepcopy(users)

    async def create(self, user: User) -> User:
        if await self.get_by_email(user.email) is not None:
            raise DuplicateEntityError("User", "email", normalize_email(user.email))
        stored = copy.deepcopy(user)
        stored.email = normalize_email(stored.email)
        self._users[stored.id] = stored
        return copy.deepcopy(stored)

    async def update(self, user: User) -> User:
        if user.id not in self._users:
            raise EntityNotFoundError("User", user.id)
        self._users[user.id] = copy.deepcopy(user)
        return copy.deepcopy(user)


class InMemoryProjectRepository(ProjectRepository):
    def __init__(self, projects: dict[str, Project]):
        self._projects = projects

    async def get_by_id(self, project_id: str) -> Project | None:
        project = self._projects.get(project_id)
        return copy.deepcopy(project) if project else None

    async def get_all(self, *, client_id: str | None = None) -> list[Project]:
        projects = [
            p for p in self._projects.values()
            if client_id is None or p.client_id == client_id
        ]
        projects.sort(key=lambda p: p.created_at, reverse=True)
        return copy.deepcopy(projects)

    async def create(self, project: Project) -> Project:
        if project.id in self._projects:
            raise DuplicateEntityError("Project", "id", project.id)
        self._projects[project.id] = copy.deepcopy(project)
        return copy.deepcopy(project)

    async def update(self, project: Project) -> Project:
        if project.id not in self._projects:
            raise EntityNotFoundError("Project", project.id)
        self._projects[project.id] = copy.deepcopy(project)
        return copy.deepcopy(project)


class InMemoryAvailabilityRepository(AvailabilityRepository):
    def __init__(self, records: list[AvailabilityRecord]):
        self._records = records

    async def get_all(self) -> list[AvailabilityRecord]:
        return copy.deepcopy(sorted(self._records, key=lambda r: r.date))

    async def replace_all(self, records: list[AvailabilityRecord]) -> list[AvailabilityRecord]:
        self._records[:] = copy.deepcopy(records)
        return await self.get_all()


class InMemoryStore:
    """Holds the process-wide collections and hands out repository views."""

    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.projects: dict[str, Project] = {}
        self.availability: list[AvailabilityRecord] = []

    def entity_store(self) -> EntityStore:
        return EntityStore(
            users=InMemoryUserRepository(self.users),
            projects=InMemoryProjectRepository(self.projects),
            availability=InMemoryAvailabilityRepository(self.availability),
        )
