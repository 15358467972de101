"""Timer Schemas — key edge input and timer view output.

Invariants:
    - timestamp_ms comes from the client's monotonic clock, never wall-clock-of-day
    - A press that stops the clock returns the emitted solve and refreshed stats
"""

from pydantic import BaseModel, Field

from cubetimer.core.timer_machine import TimerMachine
from cubetimer.schemas.event import ScrambleResponse
from cubetimer.schemas.solve import SolveResponse, StatsResponse


class KeyEdgeInput(BaseModel):
    """Key-down or key-up edge stamped by the client's monotonic clock."""
    timestamp_ms: int = Field(ge=0)


class TimerStateResponse(BaseModel):
    event_id: str
    phase: str
    elapsed_ms: int
    inspection_remaining_ms: int | None
    pending_penalty: str
    hold_threshold_ms: int
    scramble: ScrambleResponse
    unrecorded_solves: int = 0

    @classmethod
    def from_machine(cls, machine: TimerMachine, now_ms: int) -> "TimerStateResponse":
        view = machine.view(now_ms)
        scramble = machine.scramble
        return cls(
            event_id=machine.event.id,
            phase=view.phase.value,
            elapsed_ms=view.elapsed_ms,
            inspection_remaining_ms=view.inspection_remaining_ms,
            pending_penalty=view.pending_penalty.value,
            hold_threshold_ms=machine.event.hold_threshold_ms,
            scramble=ScrambleResponse(
                id=str(scramble.id), event_id=scramble.event_id,
                text=scramble.text, length=len(scramble),
            ),
            unrecorded_solves=len(machine.unrecorded),
        )


class KeyEdgeResponse(BaseModel):
    timer: TimerStateResponse
    solve: SolveResponse | None = None
    stats: StatsResponse | None = None
