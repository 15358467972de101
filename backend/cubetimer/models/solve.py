"""Solve ORM — one row per completed attempt.

Invariants:
    - id is the core SolveId; scramble_id is unique (a scramble serves one solve)
    - elapsed_ms is the raw stopwatch time; penalty stored separately (+2 never baked in)
    - penalty holds Penalty.value ("none", "+2", "dnf")

Design Decisions:
    - Generic Uuid type: same model works on SQLite (default) and PostgreSQL
    - event_id indexed: every read is "all solves of one event, oldest first"
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from cubetimer.db.base import Base


class SolveRecord(Base):
    """Persisted Solve."""
    __tablename__ = "solves"
    __table_args__ = (
        CheckConstraint("elapsed_ms >= 0", name="ck_solves_elapsed_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    event_id: Mapped[str] = mapped_column(
        String(80), nullable=False, index=True,
    )
    scramble_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, nullable=False, unique=True,
    )
    scramble: Mapped[str] = mapped_column(Text, nullable=False)
    elapsed_ms: Mapped[int] = mapped_column(Integer, nullable=False)
    penalty: Mapped[str] = mapped_column(
        String(8), nullable=False, default="none",
    )
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
