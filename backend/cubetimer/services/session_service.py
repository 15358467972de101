"""Session Service — load history, apply a pure core step, persist, recompute stats.

Invariants:
    - Statistics are always computed from the persisted solve list (never cached)
    - Every write goes through Session first, so reloaded history and new solves
      obey the same Solve invariants (elapsed >= 0, one event, unique scramble)
    - Missing solves raise ResourceNotFoundError (404 via global handler)
    - A scramble id serves one solve across every event; reuse is rejected as
      InvalidSolveError before anything is written
    - A timed Solve leaves the machine's unrecorded list only after its write
      is confirmed, so a failed write is retried on the next timer call

Design Decisions:
    - Free async functions over a service class: each is one impureim sandwich
"""

import logging

from cubetimer.core.domain_types import EventId, Penalty, SolveId
from cubetimer.core.errors import InvalidSolveError, ResourceNotFoundError
from cubetimer.core.repository_protocols import SolveRepository
from cubetimer.core.solve import Session, Solve
from cubetimer.core.statistics import StatsSnapshot, compute_snapshot
from cubetimer.core.timer_machine import TimerMachine

logger = logging.getLogger(__name__)


async def load_session(repo: SolveRepository, event_id: EventId) -> Session:
    return Session.from_solves(event_id, await repo.list_for_event(event_id))


async def stats_for_event(repo: SolveRepository, event_id: EventId) -> StatsSnapshot:
    session = await load_session(repo, event_id)
    return compute_snapshot(session.solves)


async def record_solve(repo: SolveRepository, solve: Solve) -> StatsSnapshot:
    """Append a freshly timed solve and return the refreshed snapshot."""
    session = await load_session(repo, solve.event_id)
    session.append(solve)
    await _reject_used_scrambles(repo, [solve])
    await repo.add(solve)
    logger.info(
        "Solve recorded",
        extra={
            "event_id": solve.event_id, "solve_id": str(solve.id),
            "elapsed_ms": solve.elapsed_ms, "penalty": solve.penalty.value,
        },
    )
    return compute_snapshot(session.solves)


async def import_solves(
    repo: SolveRepository, event_id: EventId, solves: list[Solve],
) -> StatsSnapshot:
    """Seed an event's history from externally persisted records."""
    session = await load_session(repo, event_id)
    for solve in sorted(solves, key=lambda s: s.recorded_at):
        session.append(solve)
    await _reject_used_scrambles(repo, solves)
    await repo.add_many(solves)
    logger.info(f"Imported {len(solves)} solve(s)", extra={"event_id": event_id})
    return compute_snapshot(session.solves)


async def flush_unrecorded(repo: SolveRepository, machine: TimerMachine) -> None:
    """Persist solves the machine emitted whose earlier write did not go through."""
    for solve in machine.unrecorded:
        if await repo.get(solve.id) is None:
            await record_solve(repo, solve)
        machine.mark_recorded(solve)


async def edit_solve(
    repo: SolveRepository, solve_id: SolveId, *,
    penalty: Penalty | None = None, comment: str | None = None,
) -> Solve:
    updated = await repo.update(solve_id, penalty=penalty, comment=comment)
    if updated is None:
        raise ResourceNotFoundError("Solve", str(solve_id))
    logger.info(
        "Solve edited",
        extra={"solve_id": str(solve_id), "event_id": updated.event_id},
    )
    return updated


async def delete_solve(repo: SolveRepository, solve_id: SolveId) -> None:
    if not await repo.delete(solve_id):
        raise ResourceNotFoundError("Solve", str(solve_id))
    logger.info("Solve deleted", extra={"solve_id": str(solve_id)})


async def _reject_used_scrambles(repo: SolveRepository, solves: list[Solve]) -> None:
    used = await repo.scrambles_in_use([s.scramble_id for s in solves])
    for solve in solves:
        if solve.scramble_id in used:
            raise InvalidSolveError(
                f"Scramble {solve.scramble_id} already used by another solve",
                str(solve.id),
            )
