"""Application service for accounts: signup, login, password reset, staff onboarding."""

import logging
import re

from atelier.application.interfaces import RecordSyncGateway, UserRepository
from atelier.application.schemas.auth import SignupRequest, StaffCreateRequest
from atelier.domain.access_policy import Action, authorize, matches_role_group
from atelier.domain.entities import (
    ONBOARDABLE_ROLES,
    STAFF_ROLES,
    User,
    UserRole,
    normalize_email,
)
from atelier.domain.exceptions import (
    EntityNotFoundError,
    InvalidCredentialsError,
    UnauthorizedActionError,
    WorkflowValidationError,
)
from atelier.infrastructure.security.passwords import (
    MAX_PASSWORD_BYTES,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AuthService:
    """Orchestrates account use cases. Depends on the user repository port (DI)."""

    def __init__(self, users: UserRepository, record_sync: RecordSyncGateway | None = None):
        self._users = users
        self._record_sync = record_sync

    # ── Lookups ──────────────────────────────────────────────────────

    async def get_user(self, user_id: str) -> User:
        user = await self._users.get_by_id(user_id)
        if user is None:
            raise EntityNotFoundError("User", user_id)
        return user

    async def list_staff(self, actor: User) -> list[User]:
        _authorize(actor, Action.LIST_STAFF)
        return await self._users.get_all(roles=set(STAFF_ROLES))

    # ── Use cases ────────────────────────────────────────────────────

    async def login(self, email: str, password: str, role_group: str) -> User:
        user = await self._users.get_by_email(email)
        if (
            user is None
            or not verify_password(password, user.password)
            or not matches_role_group(user, role_group)
        ):
            logger.warning("Failed login for %s as '%s'", normalize_email(email), role_group)
            raise InvalidCredentialsError()
        logger.info("User %s logged in as %s", user.id, user.role.value)
        return user

    async def signup(self, data: SignupRequest) -> User:
        """Register a new client account and sync it to the external sheet."""
        user = self._build_user(data, UserRole.CLIENT)
        created = await self._users.create(user)
        logger.info("Registered client %s", created.id)

        if self._record_sync is not None:
            try:
                await self._record_sync.sync_client(created)
            except Exception:
                logger.exception("Record sync failed for client %s — continuing", created.id)
        return created

    async def create_staff(self, actor: User, data: StaffCreateRequest) -> User:
        _authorize(actor, Action.ONBOARD_STAFF)
        if data.role not in ONBOARDABLE_ROLES:
            raise WorkflowValidationError("role", f"cannot onboard a '{data.role.value}'")
        created = await self._users.create(self._build_user(data, data.role))
        logger.info("Superadmin %s onboarded %s %s", actor.id, created.role.value, created.id)
        return created

    async def reset_password(self, email: str, new_password: str) -> User:
        _check_password(new_password)
        user = await self._users.get_by_email(email)
        if user is None:
            raise EntityNotFoundError("User", normalize_email(email))
        user.password = hash_password(new_password)
        updated = await self._users.update(user)
        logger.info("Password reset for user %s", updated.id)
        return updated

    # ── Helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _build_user(data: SignupRequest, role: UserRole) -> User:
        if not data.name.strip():
            raise WorkflowValidationError("name", "must not be empty")
        email = normalize_email(data.email)
        if not _EMAIL_PATTERN.match(email):
            raise WorkflowValidationError("email", f"'{data.email}' is not a valid address")
        _check_password(data.password)
        return User(
            name=data.name.strip(),
            email=email,
            password=hash_password(data.password),
            phone=data.phone.strip(),
            company=data.company,
            role=role,
        )


def _check_password(password: str) -> None:
    if not password:
        raise WorkflowValidationError("password", "must not be empty")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise WorkflowValidationError("password", f"must be at most {MAX_PASSWORD_BYTES} bytes")


def _authorize(actor: User, action: Action) -> None:
    decision = authorize(actor, action)
    if not decision.allowed:
        logger.warning("Denied %s for user %s: %s", action.value, actor.id, decision.reason)
        raise UnauthorizedActionError(action.value, decision.reason or "denied")
