import logging
from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_config_logger = logging.getLogger(__name__)

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Atelier Client Portal API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    database_url: str = "sqlite:///data/atelier.db"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Entity store backend: "sql" (database_url) or "memory" (process-local)
    store_backend: str = "sql"

    # Workflow
    proposal_validity_days: int = 7

    # Spreadsheet sync; an empty URL only logs records locally
    record_sync_webhook_url: str = ""
    record_sync_timeout: float = 10.0

    # Demo data seeded at startup
    seed_demo_data: bool = True
    seed_file: str = str(_BACKEND_DIR / "data" / "seed.yaml")

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine — SQL queries
    log_level_http: str = "WARNING"          # httpx / httpcore — outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_workflow: str = "INFO"         # project workflow transitions
    log_level_sync: str = "INFO"             # record sync gateways

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        """Normalise the store backend name, falling back to SQL."""
        backend = self.store_backend.strip().lower()
        if backend not in {"sql", "memory"}:
            _config_logger.warning("Unknown store_backend '%s', using 'sql'", self.store_backend)
            backend = "sql"
        object.__setattr__(self, "store_backend", backend)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
