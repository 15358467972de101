"""Solve & Stats Schemas — API shapes for solve history, edits, imports and statistics.

Invariants:
    - SolveUpdate requires at least one of penalty/comment
    - Imported solves: elapsed_ms >= 0 and timezone-aware recorded_at
    - Undefined statistics serialize with status "undefined" and ms null, never 0
"""

from uuid import UUID, uuid4
from typing import Literal

from pydantic import AwareDatetime, BaseModel, Field, model_validator

from cubetimer.core.domain_types import EventId, Penalty, ScrambleId, SolveId
from cubetimer.core.format_time import format_solve, format_stat
from cubetimer.core.solve import Solve
from cubetimer.core.statistics import StatsSnapshot, StatValue

PenaltyValue = Literal["none", "+2", "dnf"]


class SolveResponse(BaseModel):
    """A persisted solve, with its penalised time and display text."""
    id: UUID
    event_id: str
    scramble_id: UUID
    scramble: str
    elapsed_ms: int
    penalty: PenaltyValue
    effective_ms: int | None
    display: str
    recorded_at: AwareDatetime
    comment: str

    @classmethod
    def from_solve(cls, solve: Solve) -> "SolveResponse":
        return cls(
            id=solve.id,
            event_id=solve.event_id,
            scramble_id=solve.scramble_id,
            scramble=solve.scramble,
            elapsed_ms=solve.elapsed_ms,
            penalty=solve.penalty.value,
            effective_ms=solve.effective_ms,
            display=format_solve(solve),
            recorded_at=solve.recorded_at,
            comment=solve.comment,
        )


class SolveUpdate(BaseModel):
    """Retroactive edit of a solve's penalty and/or comment."""
    penalty: PenaltyValue | None = None
    comment: str | None = Field(None, max_length=500)

    @model_validator(mode="after")
    def require_a_change(self):
        if self.penalty is None and self.comment is None:
            raise ValueError("update requires penalty or comment")
        return self


class SolveImport(BaseModel):
    """One externally persisted solve record."""
    scramble: str = Field(min_length=1, max_length=2000)
    elapsed_ms: int = Field(ge=0)
    penalty: PenaltyValue = "none"
    recorded_at: AwareDatetime
    comment: str = Field("", max_length=500)
    scramble_id: UUID | None = None

    def to_solve(self, event_id: str) -> Solve:
        return Solve(
            event_id=EventId(event_id),
            scramble_id=ScrambleId(self.scramble_id or uuid4()),
            scramble=self.scramble,
            elapsed_ms=self.elapsed_ms,
            penalty=Penalty(self.penalty),
            recorded_at=self.recorded_at,
            comment=self.comment,
            id=SolveId(uuid4()),
        )


class SolvesImportRequest(BaseModel):
    solves: list[SolveImport] = Field(min_length=1, max_length=10_000)


class StatValueResponse(BaseModel):
    status: Literal["ok", "dnf", "undefined"]
    ms: int | None
    display: str

    @classmethod
    def from_value(cls, value: StatValue) -> "StatValueResponse":
        return cls(status=value.status.value, ms=value.ms, display=format_stat(value))


class StatsResponse(BaseModel):
    """StatsSnapshot over one event's session."""
    event_id: str
    count: int
    dnf_count: int
    mean: StatValueResponse
    best: StatValueResponse
    worst: StatValueResponse
    ao5: StatValueResponse
    ao12: StatValueResponse
    ao100: StatValueResponse
    best_ao5: StatValueResponse
    best_ao12: StatValueResponse

    @classmethod
    def from_snapshot(cls, event_id: str, snapshot: StatsSnapshot) -> "StatsResponse":
        values = {
            name: StatValueResponse.from_value(getattr(snapshot, name))
            for name in (
                "mean", "best", "worst", "ao5", "ao12", "ao100",
                "best_ao5", "best_ao12",
            )
        }
        return cls(
            event_id=event_id, count=snapshot.count,
            dnf_count=snapshot.dnf_count, **values,
        )
