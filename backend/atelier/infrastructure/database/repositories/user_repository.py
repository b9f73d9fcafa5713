"""Concrete repository implementation for User backed by SQLAlchemy."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from atelier.application.interfaces import UserRepository
from atelier.domain.entities import User, UserRole, normalize_email
from atelier.domain.exceptions import DuplicateEntityError, EntityNotFoundError
from atelier.infrastructure.database.models import UserModel


class SQLAlchemyUserRepository(UserRepository):
    """Implements the UserRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: UserModel) -> User:
        """Map ORM model → domain entity."""
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            password=model.password,
            phone=model.phone,
            role=UserRole(model.role),
            company=model.company,
            project_ids=list(model.project_ids or []),
            created_at=model.created_at,
        )

    def _to_model(self, entity: User) -> UserModel:
        """Map domain entity → ORM model (for creation)."""
        return UserModel(
            id=entity.id,
            name=entity.name,
            email=normalize_email(entity.email),
            password=entity.password,
            phone=entity.phone,
            role=entity.role.value,
            company=entity.company,
            project_ids=list(entity.project_ids),
            created_at=entity.created_at,
        )

    async def get_by_id(self, user_id: str) -> User | None:
        result = await self._session.get(UserModel, user_id)
        return self._to_entity(result) if result else None

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(UserModel).where(UserModel.email == normalize_email(email))
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all(self, *, roles: set[UserRole] | None = None) -> list[User]:
        stmt = select(UserModel)
        if roles is not None:
            stmt = stmt.where(UserModel.role.in_([r.value for r in roles]))
        stmt = stmt.order_by(UserModel.created_at)
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, user: User) -> User:
        if await self.get_by_email(user.email) is not None:
            raise DuplicateEntityError("User", "email", normalize_email(user.email))
        model = self._to_model(user)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise DuplicateEntityError("User", "email", model.email) from exc
        return self._to_entity(model)

    async def update(self, user: User) -> User:
        model = await self._session.get(UserModel, user.id)
        if model is None:
            raise EntityNotFoundError("User", user.id)
        model.name = user.name
        model.password = user.password
        model.phone = user.phone
        model.company = user.company
        model.project_ids = list(user.project_ids)
        await self._session.flush()
        return self._to_entity(model)
