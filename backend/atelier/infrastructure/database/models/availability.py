"""SQLAlchemy ORM model for availability overrides."""

import datetime as dt

from sqlalchemy import Date, JSON
from sqlalchemy.orm import Mapped, mapped_column

from atelier.infrastructure.database.base import Base


class AvailabilityModel(Base):
    """ORM model — maps to the 'availability' table (one row per date)."""

    __tablename__ = "availability"

    day: Mapped[dt.date] = mapped_column("date", Date, primary_key=True)
    slots: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<AvailabilityModel(date={self.day}, slots={len(self.slots)})>"
