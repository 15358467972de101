"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Persistence format is the shell's concern; the core only sees Solve and Event
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, but the core functions that
      consume their results (Session.from_solves, compute_snapshot) are never async
"""

from typing import Protocol

from cubetimer.core.domain_types import EventId, Penalty, ScrambleId, SolveId
from cubetimer.core.event_catalog import Event
from cubetimer.core.solve import Solve


class SolveRepository(Protocol):
    """Contract for solve history persistence — implemented by shell."""
    async def add(self, solve: Solve) -> None: ...
    async def add_many(self, solves: list[Solve]) -> None: ...
    async def list_for_event(self, event_id: EventId) -> list[Solve]: ...
    async def get(self, solve_id: SolveId) -> Solve | None: ...
    async def update(
        self, solve_id: SolveId, *, penalty: Penalty | None = None,
        comment: str | None = None,
    ) -> Solve | None: ...
    async def delete(self, solve_id: SolveId) -> bool: ...
    async def scrambles_in_use(self, scramble_ids: list[ScrambleId]) -> set[ScrambleId]: ...


class CustomEventRepository(Protocol):
    """Contract for user-defined event persistence — implemented by shell."""
    async def save(self, event: Event, moves: list[str]) -> None: ...
    async def list_all(self) -> list[Event]: ...
    async def delete(self, event_id: EventId) -> bool: ...
