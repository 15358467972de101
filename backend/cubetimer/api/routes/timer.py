"""Timer — key edges from the presentation layer drive the per-event TimerMachine.

Invariants:
    - Timestamps are the client's monotonic milliseconds; the server never samples a clock
      for timing (only wall time for the Solve's recorded_at)
    - Out-of-order edges are silently ignored by the machine (200 with unchanged state)
    - A press that stops the clock persists the Solve before responding; if that
      write fails the Solve stays on the machine and is written before the next
      press, abort or acknowledge is applied
    - abort discards the attempt without emitting a Solve
    - A new scramble can only be armed while Idle

Design Decisions:
    - One POST per edge rather than a websocket: edges carry their own timestamps,
      so transport latency does not affect measured times
"""

import logging

from fastapi import APIRouter, Depends, Query

from cubetimer.api.dependencies import get_solve_repository
from cubetimer.core.scramble import generate_scramble
from cubetimer.schemas.solve import SolveResponse, StatsResponse
from cubetimer.schemas.timer import (
    KeyEdgeInput, KeyEdgeResponse, TimerStateResponse,
)
from cubetimer.services import session_service, timer_registry
from cubetimer.services.solve_repository import SqlSolveRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/timer", tags=["timer"])


@router.get("/{event_id}", response_model=TimerStateResponse)
async def get_timer(event_id: str, now_ms: int = Query(0, ge=0)):
    """Timer view at the client's now_ms (render tick, never a transition)."""
    machine = timer_registry.get_timer(event_id)
    return TimerStateResponse.from_machine(machine, now_ms)


@router.post("/{event_id}/press", response_model=KeyEdgeResponse)
async def press(
    event_id: str,
    body: KeyEdgeInput,
    repo: SqlSolveRepository = Depends(get_solve_repository),
):
    machine = timer_registry.get_timer(event_id)
    await session_service.flush_unrecorded(repo, machine)
    solve = machine.press(body.timestamp_ms)
    _log_phase(machine.event.id, machine.phase.value, "press")
    if solve is None:
        return KeyEdgeResponse(
            timer=TimerStateResponse.from_machine(machine, body.timestamp_ms),
        )
    snapshot = await session_service.record_solve(repo, solve)
    machine.mark_recorded(solve)
    return KeyEdgeResponse(
        timer=TimerStateResponse.from_machine(machine, body.timestamp_ms),
        solve=SolveResponse.from_solve(solve),
        stats=StatsResponse.from_snapshot(solve.event_id, snapshot),
    )


@router.post("/{event_id}/release", response_model=KeyEdgeResponse)
async def release(event_id: str, body: KeyEdgeInput):
    machine = timer_registry.get_timer(event_id)
    machine.release(body.timestamp_ms)
    _log_phase(machine.event.id, machine.phase.value, "release")
    return KeyEdgeResponse(
        timer=TimerStateResponse.from_machine(machine, body.timestamp_ms),
    )


@router.post("/{event_id}/abort", response_model=TimerStateResponse)
async def abort(
    event_id: str, repo: SqlSolveRepository = Depends(get_solve_repository),
):
    """Discard any in-progress attempt."""
    machine = timer_registry.get_timer(event_id)
    await session_service.flush_unrecorded(repo, machine)
    machine.abort()
    _log_phase(machine.event.id, machine.phase.value, "abort")
    return TimerStateResponse.from_machine(machine, 0)


@router.post("/{event_id}/acknowledge", response_model=TimerStateResponse)
async def acknowledge(
    event_id: str, repo: SqlSolveRepository = Depends(get_solve_repository),
):
    """Consume the stopped result and arm a fresh scramble."""
    machine = timer_registry.get_timer(event_id)
    await session_service.flush_unrecorded(repo, machine)
    machine.acknowledge()
    _log_phase(machine.event.id, machine.phase.value, "acknowledge")
    return TimerStateResponse.from_machine(machine, 0)


@router.post("/{event_id}/scramble", response_model=TimerStateResponse)
async def new_scramble(event_id: str):
    """Skip the armed scramble for a fresh one. Ignored unless the timer is idle."""
    machine = timer_registry.get_timer(event_id)
    machine.arm(generate_scramble(machine.event))
    _log_phase(machine.event.id, machine.phase.value, "new scramble")
    return TimerStateResponse.from_machine(machine, 0)


def _log_phase(event_id: str, phase: str, action: str) -> None:
    logger.debug(
        f"Timer {action}", extra={"event_id": event_id, "timer_phase": phase},
    )
