"""Custom Event ORM — user-defined events, rebuilt into the catalog on startup.

Invariants:
    - id is the catalog EventId ("custom-<slug>")
    - moves stores the face letters as entered; the move set is rebuilt by
      build_custom_event() so validation runs again on every load
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from cubetimer.db.base import Base


class CustomEventRecord(Base):
    """Persisted custom event definition."""
    __tablename__ = "custom_events"

    id: Mapped[str] = mapped_column(String(80), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    moves: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    scramble_length: Mapped[int] = mapped_column(Integer, nullable=False)
    inspection_ms: Mapped[int] = mapped_column(Integer, nullable=False)
    hold_threshold_ms: Mapped[int] = mapped_column(Integer, nullable=False)
    inspection_policy: Mapped[str] = mapped_column(
        String(10), nullable=False, default="none",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
