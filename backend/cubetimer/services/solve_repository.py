"""SQL Repositories — SQLAlchemy implementations of the core persistence Protocols.

Invariants:
    - Rows are converted to core dataclasses before leaving this module
    - Solves are returned oldest first (recorded_at, then id for ties)
    - Timestamps are stored in UTC; naive values read back from SQLite are UTC
    - Custom events are rebuilt through build_custom_event(), so a stored
      definition that no longer validates fails loudly on load

Design Decisions:
    - Repository receives an AsyncSession per request (FastAPI dependency),
      commits its own writes: routes stay free of SQL
"""

from datetime import timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cubetimer.core.domain_types import (
    EventId, InspectionPolicy, Penalty, ScrambleId, SolveId,
)
from cubetimer.core.event_catalog import Event, build_custom_event
from cubetimer.core.solve import Solve
from cubetimer.models.custom_event import CustomEventRecord
from cubetimer.models.solve import SolveRecord


def solve_from_record(record: SolveRecord) -> Solve:
    recorded_at = record.recorded_at
    if recorded_at.tzinfo is None:
        recorded_at = recorded_at.replace(tzinfo=timezone.utc)
    return Solve(
        id=SolveId(record.id),
        event_id=EventId(record.event_id),
        scramble_id=ScrambleId(record.scramble_id),
        scramble=record.scramble,
        elapsed_ms=record.elapsed_ms,
        penalty=Penalty(record.penalty),
        recorded_at=recorded_at,
        comment=record.comment,
    )


def solve_to_record(solve: Solve) -> SolveRecord:
    return SolveRecord(
        id=solve.id,
        event_id=solve.event_id,
        scramble_id=solve.scramble_id,
        scramble=solve.scramble,
        elapsed_ms=solve.elapsed_ms,
        penalty=solve.penalty.value,
        comment=solve.comment,
        recorded_at=solve.recorded_at.astimezone(timezone.utc),
    )


class SqlSolveRepository:
    """SolveRepository backed by the `solves` table."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def add(self, solve: Solve) -> None:
        self._db.add(solve_to_record(solve))
        await self._db.commit()

    async def add_many(self, solves: list[Solve]) -> None:
        self._db.add_all([solve_to_record(s) for s in solves])
        await self._db.commit()

    async def list_for_event(self, event_id: EventId) -> list[Solve]:
        result = await self._db.execute(
            select(SolveRecord)
            .where(SolveRecord.event_id == event_id)
            .order_by(SolveRecord.recorded_at, SolveRecord.id),
        )
        return [solve_from_record(r) for r in result.scalars().all()]

    async def get(self, solve_id: SolveId) -> Solve | None:
        record = await self._db.get(SolveRecord, solve_id)
        return solve_from_record(record) if record else None

    async def update(
        self, solve_id: SolveId, *, penalty: Penalty | None = None,
        comment: str | None = None,
    ) -> Solve | None:
        record = await self._db.get(SolveRecord, solve_id)
        if not record:
            return None
        if penalty is not None:
            record.penalty = penalty.value
        if comment is not None:
            record.comment = comment
        await self._db.commit()
        return solve_from_record(record)

    async def delete(self, solve_id: SolveId) -> bool:
        record = await self._db.get(SolveRecord, solve_id)
        if not record:
            return False
        await self._db.delete(record)
        await self._db.commit()
        return True

    async def scrambles_in_use(self, scramble_ids: list[ScrambleId]) -> set[ScrambleId]:
        """Subset of scramble_ids already issued to a stored solve, in any event."""
        if not scramble_ids:
            return set()
        result = await self._db.execute(
            select(SolveRecord.scramble_id)
            .where(SolveRecord.scramble_id.in_(scramble_ids)),
        )
        return {ScrambleId(s) for s in result.scalars().all()}


class SqlCustomEventRepository:
    """CustomEventRepository backed by the `custom_events` table."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def save(self, event: Event, moves: list[str]) -> None:
        self._db.add(CustomEventRecord(
            id=event.id,
            name=event.name,
            moves=list(moves),
            scramble_length=event.min_scramble_length,
            inspection_ms=event.inspection_ms,
            hold_threshold_ms=event.hold_threshold_ms,
            inspection_policy=event.inspection_policy.value,
        ))
        await self._db.commit()

    async def list_all(self) -> list[Event]:
        result = await self._db.execute(
            select(CustomEventRecord).order_by(CustomEventRecord.created_at),
        )
        return [
            build_custom_event(
                r.name, r.moves, r.scramble_length,
                inspection_ms=r.inspection_ms,
                hold_threshold_ms=r.hold_threshold_ms,
                inspection_policy=InspectionPolicy(r.inspection_policy),
            )
            for r in result.scalars().all()
        ]

    async def delete(self, event_id: EventId) -> bool:
        record = await self._db.get(CustomEventRecord, event_id)
        if not record:
            return False
        await self._db.delete(record)
        await self._db.commit()
        return True
