"""Domain entity for construction site updates."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4


@dataclass
class SiteUpdate:
    """A progress entry logged by staff during construction."""

    project_id: str
    title: str
    progress_percentage: int
    created_by_id: str
    notes: str = ""
    image_refs: list[str] = field(default_factory=list)
    is_approved: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: str = field(default_factory=lambda: str(uuid4()))
