"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from atelier.config import get_settings
from atelier.application.interfaces import EntityStore, RecordSyncGateway
from atelier.application.services import (
    AuthService,
    AvailabilityService,
    ProjectWorkflowService,
)
from atelier.domain.entities import User
from atelier.domain.exceptions import EntityNotFoundError
from atelier.infrastructure.database.session import session_scope
from atelier.infrastructure.database.repositories import (
    SQLAlchemyAvailabilityRepository,
    SQLAlchemyProjectRepository,
    SQLAlchemyUserRepository,
)
from atelier.infrastructure.memory import InMemoryStore
from atelier.infrastructure.sync import LoggingRecordSync, WebhookRecordSync


@lru_cache
def get_memory_store() -> InMemoryStore:
    """Process-wide in-memory store used when STORE_BACKEND=memory."""
    return InMemoryStore()


def build_sql_store(session: AsyncSession) -> EntityStore:
    """Bundle the SQLAlchemy repositories around one session."""
    return EntityStore(
        users=SQLAlchemyUserRepository(session),
        projects=SQLAlchemyProjectRepository(session),
        availability=SQLAlchemyAvailabilityRepository(session),
    )


async def get_entity_store() -> AsyncGenerator[EntityStore, None]:
    """Provides the configured Entity Store; SQL stores commit per request."""
    settings = get_settings()
    if settings.store_backend == "memory":
        yield get_memory_store().entity_store()
        return

    async with session_scope() as session:
        yield build_sql_store(session)


def get_record_sync() -> RecordSyncGateway:
    """Webhook sync when a URL is configured, otherwise log-only."""
    settings = get_settings()
    url = settings.record_sync_webhook_url.strip()
    if url:
        return WebhookRecordSync(url=url, timeout=settings.record_sync_timeout)
    return LoggingRecordSync()


async def get_auth_service(
    store: EntityStore = Depends(get_entity_store),
    record_sync: RecordSyncGateway = Depends(get_record_sync),
) -> AsyncGenerator[AuthService, None]:
    """Provides an AuthService with the user repository wired up."""
    yield AuthService(store.users, record_sync=record_sync)


async def get_workflow_service(
    store: EntityStore = Depends(get_entity_store),
    record_sync: RecordSyncGateway = Depends(get_record_sync),
) -> AsyncGenerator[ProjectWorkflowService, None]:
    """Provides a ProjectWorkflowService over the request's Entity Store."""
    settings = get_settings()
    yield ProjectWorkflowService(
        store,
        record_sync=record_sync,
        proposal_validity_days=settings.proposal_validity_days,
    )


async def get_availability_service(
    store: EntityStore = Depends(get_entity_store),
) -> AsyncGenerator[AvailabilityService, None]:
    yield AvailabilityService(store.availability)


async def get_current_user(
    x_user_id: str | None = Header(None, description="ID of the acting user"),
    service: AuthService = Depends(get_auth_service),
) -> User:
    """Resolves the acting user from the ``X-User-Id`` header."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="X-User-Id header missing")
    try:
        return await service.get_user(x_user_id)
    except EntityNotFoundError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user")
