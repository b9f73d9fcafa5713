"""SQLAlchemy ORM model for the Project aggregate.

Embedded objects (brief, appointment, proposal, site updates) live in JSON
columns so the aggregate is written and read as one row.
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, Index, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from atelier.infrastructure.database.base import Base, DecimalString, UTCDateTime


class ProjectModel(Base):
    """ORM model — maps to the 'projects' table."""

    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    client_id: Mapped[str] = mapped_column(String(36), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False)
    brief: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    appointment: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    consultation_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    proposal: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    invoice_amount: Mapped[Decimal | None] = mapped_column(DecimalString, nullable=True)
    payment_status: Mapped[str] = mapped_column(String(32), nullable=False)
    concept_files: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    concept_link: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    concept_is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    client_approval: Mapped[str | None] = mapped_column(String(8), nullable=True)
    client_change_request_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    client_change_request_files: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    # Most-recent-first; list order is significant.
    construction_updates: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    percent_complete: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    handover_file: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    completion_date: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_projects_client", "client_id"),
        Index("ix_projects_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<ProjectModel(id={self.id}, title='{self.title}', status='{self.status}')>"
