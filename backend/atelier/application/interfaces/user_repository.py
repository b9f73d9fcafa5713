"""Abstract repository interface (port) for User persistence."""

from abc import ABC, abstractmethod

from atelier.domain.entities import User, UserRole


class UserRepository(ABC):
    """Port for account persistence — implemented in the infrastructure layer.

    Users are never deleted; there is deliberately no ``delete`` method.
    """

    @abstractmethod
    async def get_by_id(self, user_id: str) -> User | None:
        """Retrieve a single user by id."""
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        """Case-insensitive, whitespace-trimmed e-mail lookup."""
        ...

    @abstractmethod
    async def get_all(self, *, roles: set[UserRole] | None = None) -> list[User]:
        """Retrieve users, optionally restricted to the given roles."""
        ...

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persist a new user.

        Raises:
            DuplicateEntityError: if the e-mail is already registered.
        """
        ...

    @abstractmethod
    async def update(self, user: User) -> User:
        """Replace a stored user. Raises EntityNotFoundError if missing."""
        ...
