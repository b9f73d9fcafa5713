"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from atelier.config import get_settings
from atelier.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    ExternalServiceError,
    InvalidCredentialsError,
    InvalidTransitionError,
    UnauthorizedActionError,
    WorkflowValidationError,
)
from atelier.infrastructure.database import Base, engine
from atelier.infrastructure.database.session import session_scope
from atelier.infrastructure.dependencies import build_sql_store, get_memory_store
from atelier.infrastructure.logging.log_config import setup_logging
from atelier.infrastructure.seed.demo_seed import load_seed_file, seed_demo_data
from atelier.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)

# Domain error → (HTTP status, error kind). Subclasses are listed so that
# Starlette's MRO lookup picks the most specific handler.
_ERROR_RESPONSES: dict[type[Exception], tuple[int, str]] = {
    EntityNotFoundError: (status.HTTP_404_NOT_FOUND, "not_found"),
    UnauthorizedActionError: (status.HTTP_403_FORBIDDEN, "unauthorized"),
    InvalidCredentialsError: (status.HTTP_401_UNAUTHORIZED, "invalid_credentials"),
    DuplicateEntityError: (status.HTTP_409_CONFLICT, "duplicate"),
    WorkflowValidationError: (status.HTTP_422_UNPROCESSABLE_CONTENT, "validation_error"),
    InvalidTransitionError: (status.HTTP_409_CONFLICT, "invalid_transition"),
    ExternalServiceError: (status.HTTP_502_BAD_GATEWAY, "external_failure"),
}


def _ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-based SQLite database."""
    if not database_url.startswith("sqlite") or ":memory:" in database_url:
        return
    db_path = database_url.split(":///", 1)[-1]
    if db_path:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)


async def _seed_demo_data() -> None:
    """Load the demo accounts and project into the configured store."""
    settings = get_settings()
    document = load_seed_file(settings.seed_file)
    if not document:
        return

    if settings.store_backend == "memory":
        await seed_demo_data(get_memory_store().entity_store(), document)
        return

    try:
        async with session_scope() as session:
            await seed_demo_data(build_sql_store(session), document)
    except Exception:
        logger.exception("Failed to seed demo data — continuing without it")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging, create tables, seed demo data."""
    settings = get_settings()
    setup_logging()

    # 1. Create all database tables
    if settings.store_backend == "sql":
        _ensure_sqlite_directory(settings.database_url)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    # 2. Seed demo accounts
    if settings.seed_demo_data:
        await _seed_demo_data()

    logger.info("%s started (store=%s)", settings.app_title, settings.store_backend)
    yield

    await engine.dispose()


def _register_exception_handlers(app: FastAPI) -> None:
    def make_handler(status_code: int, kind: str):
        async def handler(request: Request, exc: Exception) -> JSONResponse:
            return JSONResponse(
                status_code=status_code,
                content={"error": kind, "detail": str(exc)},
            )
        return handler

    for exc_class, (status_code, kind) in _ERROR_RESPONSES.items():
        app.add_exception_handler(exc_class, make_handler(status_code, kind))


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "atelier.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
