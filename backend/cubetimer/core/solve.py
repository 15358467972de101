"""Solve & Session — completed attempts and the per-event ordered history.

Invariants:
    - Solve is immutable (frozen dataclass); elapsed_ms >= 0
    - A Session holds solves of exactly one event, oldest first
    - No two solves in a Session share a scramble_id
    - Retroactive edits (penalty, comment) replace the Solve with a new instance;
      the Session list is the only mutable thing and only the owner mutates it

Design Decisions:
    - Solve stores the rendered scramble text plus its ScrambleId, so records
      reloaded from persistence need no notation parser
    - Session.from_solves() is the persistence seam: reloaded records are
      validated against the same rules as freshly timed ones
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Iterable, Iterator

from cubetimer.core.domain_types import (
    PLUS_TWO_MS,
    EventId,
    Penalty,
    ScrambleId,
    SolveId,
)
from cubetimer.core.errors import InvalidSolveError, ResourceNotFoundError


@dataclass(frozen=True)
class Solve:
    """One completed attempt."""

    event_id: EventId
    scramble_id: ScrambleId
    scramble: str
    elapsed_ms: int
    penalty: Penalty = Penalty.NONE
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    comment: str = ""
    id: SolveId = field(default_factory=lambda: SolveId(uuid.uuid4()))

    @property
    def is_dnf(self) -> bool:
        return self.penalty is Penalty.DNF

    @property
    def effective_ms(self) -> int | None:
        """Time used for statistics: +2 adds 2000ms, DNF has no numeric time."""
        if self.penalty is Penalty.DNF:
            return None
        if self.penalty is Penalty.PLUS_TWO:
            return self.elapsed_ms + PLUS_TWO_MS
        return self.elapsed_ms


def validate_solve(solve: Solve) -> None:
    """Raise InvalidSolveError if the record breaks the Solve invariants."""
    if solve.elapsed_ms < 0:
        raise InvalidSolveError(
            f"Solve elapsed time must be >= 0, got {solve.elapsed_ms}",
            str(solve.id),
        )
    if solve.recorded_at.tzinfo is None:
        raise InvalidSolveError("Solve timestamp must be timezone-aware", str(solve.id))


class Session:
    """Ordered solves for one event. Append-only while timing."""

    def __init__(self, event_id: EventId):
        self.event_id = event_id
        self._solves: list[Solve] = []
        self._scramble_ids: set[ScrambleId] = set()

    @classmethod
    def from_solves(cls, event_id: EventId, solves: Iterable[Solve]) -> "Session":
        """Seed a session from reloaded records (oldest first)."""
        session = cls(event_id)
        for solve in solves:
            session.append(solve)
        return session

    @property
    def solves(self) -> tuple[Solve, ...]:
        """Immutable view for the statistics engine."""
        return tuple(self._solves)

    def __len__(self) -> int:
        return len(self._solves)

    def __iter__(self) -> Iterator[Solve]:
        return iter(self._solves)

    def append(self, solve: Solve) -> None:
        validate_solve(solve)
        if solve.event_id != self.event_id:
            raise InvalidSolveError(
                f"Solve belongs to event '{solve.event_id}', "
                f"session is '{self.event_id}'",
                str(solve.id),
            )
        if solve.scramble_id in self._scramble_ids:
            raise InvalidSolveError(
                f"Scramble {solve.scramble_id} already used by another solve",
                str(solve.id),
            )
        self._solves.append(solve)
        self._scramble_ids.add(solve.scramble_id)

    def get(self, solve_id: SolveId) -> Solve:
        return self._solves[self._index_of(solve_id)]

    def set_penalty(self, solve_id: SolveId, penalty: Penalty) -> Solve:
        return self._replace(solve_id, penalty=penalty)

    def set_comment(self, solve_id: SolveId, comment: str) -> Solve:
        return self._replace(solve_id, comment=comment)

    def remove(self, solve_id: SolveId) -> Solve:
        removed = self._solves.pop(self._index_of(solve_id))
        self._scramble_ids.discard(removed.scramble_id)
        return removed

    def _replace(self, solve_id: SolveId, **changes) -> Solve:
        index = self._index_of(solve_id)
        updated = replace(self._solves[index], **changes)
        self._solves[index] = updated
        return updated

    def _index_of(self, solve_id: SolveId) -> int:
        for index, solve in enumerate(self._solves):
            if solve.id == solve_id:
                return index
        raise ResourceNotFoundError("Solve", str(solve_id))
