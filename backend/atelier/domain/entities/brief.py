"""Domain entity for the client's initial project brief."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal


@dataclass
class Brief:
    """Initial requirements submitted by a client when opening a project."""

    project_title: str
    project_location: str = ""
    project_type: str = ""
    budget: Decimal = Decimal("0")
    timeline: str = ""
    requirements: str = ""
    inspiration_images: list[str] = field(default_factory=list)
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
