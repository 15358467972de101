"""Events — catalog listing, custom event registration, scramble preview, per-event history.

Invariants:
    - Unknown event ids -> 404 (UnknownEventError via global handler)
    - Custom events are validated by the catalog before they are persisted
    - Only custom events can be deleted (409 for standard ones); their solves stay
      in history
    - Reported hold thresholds include the settings override, matching the timer
    - Statistics are recomputed from persisted solves on every request
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from cubetimer.api.dependencies import (
    get_custom_event_repository, get_solve_repository,
)
from cubetimer.core.domain_types import InspectionPolicy
from cubetimer.core.errors import DuplicateEventError
from cubetimer.core.event_catalog import build_custom_event
from cubetimer.core.format_time import format_ms
from cubetimer.core.scramble import generate_scramble
from cubetimer.schemas.event import (
    CustomEventCreate, EventResponse, ScrambleResponse,
)
from cubetimer.schemas.solve import (
    SolveResponse, SolvesImportRequest, StatsResponse,
)
from cubetimer.services import session_service, timer_registry
from cubetimer.services.solve_repository import (
    SqlCustomEventRepository, SqlSolveRepository,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/events", tags=["events"])


@router.get("", response_model=list[EventResponse])
async def list_events():
    """All standard and custom events."""
    return [EventResponse.from_event(e) for e in timer_registry.list_events()]


@router.post(
    "", response_model=EventResponse, status_code=status.HTTP_201_CREATED,
)
async def create_custom_event(
    body: CustomEventCreate,
    repo: SqlCustomEventRepository = Depends(get_custom_event_repository),
):
    """Register a user-defined event (validated before it is stored)."""
    event = build_custom_event(
        body.name, body.moves, body.scramble_length,
        inspection_ms=body.inspection_ms,
        hold_threshold_ms=body.hold_threshold_ms,
        inspection_policy=InspectionPolicy(body.inspection_policy),
    )
    if event.id in timer_registry.get_catalog():
        raise DuplicateEventError(event.id)
    await repo.save(event, body.moves)
    timer_registry.register_event(event)
    logger.info("Custom event registered", extra={"event_id": event.id})
    return EventResponse.from_event(timer_registry.get_event(event.id))


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: str):
    return EventResponse.from_event(timer_registry.get_event(event_id))


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_custom_event(
    event_id: str,
    repo: SqlCustomEventRepository = Depends(get_custom_event_repository),
):
    """Remove a custom event and its timer. Recorded solves are kept."""
    event = timer_registry.get_catalog().check_removable(event_id)
    await repo.delete(event.id)
    timer_registry.unregister_event(event.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{event_id}/scramble", response_model=ScrambleResponse)
async def preview_scramble(event_id: str):
    """A fresh scramble, not armed on the timer."""
    scramble = generate_scramble(timer_registry.get_catalog().get(event_id))
    return ScrambleResponse(
        id=str(scramble.id), event_id=scramble.event_id,
        text=scramble.text, length=len(scramble),
    )


@router.get("/{event_id}/solves", response_model=list[SolveResponse])
async def list_solves(
    event_id: str, repo: SqlSolveRepository = Depends(get_solve_repository),
):
    """Session history, oldest first."""
    event = timer_registry.get_catalog().get(event_id)
    session = await session_service.load_session(repo, event.id)
    return [SolveResponse.from_solve(s) for s in session]


@router.get("/{event_id}/stats", response_model=StatsResponse)
async def get_stats(
    event_id: str, repo: SqlSolveRepository = Depends(get_solve_repository),
):
    event = timer_registry.get_catalog().get(event_id)
    snapshot = await session_service.stats_for_event(repo, event.id)
    return StatsResponse.from_snapshot(event.id, snapshot)


@router.post(
    "/{event_id}/solves/import", response_model=StatsResponse,
    status_code=status.HTTP_201_CREATED,
)
async def import_solves(
    event_id: str,
    body: SolvesImportRequest,
    repo: SqlSolveRepository = Depends(get_solve_repository),
):
    """Seed the session from records kept by an external store."""
    event = timer_registry.get_catalog().get(event_id)
    solves = [record.to_solve(event.id) for record in body.solves]
    snapshot = await session_service.import_solves(repo, event.id, solves)
    best = snapshot.best.ms
    logger.info(
        f"Session seeded, best {format_ms(best) if best is not None else '-'}",
        extra={"event_id": event.id},
    )
    return StatsResponse.from_snapshot(event.id, snapshot)
