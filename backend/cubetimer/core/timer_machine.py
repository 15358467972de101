"""Timing State Machine — WCA-style inspection, hold-to-ready, green light, stop.

Invariants:
    - States form a tagged union: Idle | Inspecting | ReadyHold | Running | Stopped
    - transition() is PURE: (state, key edge, event) -> new state, no clock reads
    - Releasing before the hold threshold never reaches Running (clock stays at zero)
    - Running.started_ms is the release timestamp, never the inspection start
    - Stopped.elapsed_ms == stop press timestamp - Running.started_ms, exactly
    - Out-of-order timestamps are ignored with the prior state preserved (no exceptions)
      within one attempt; returning to Idle starts a new timebase
    - Re-pressing while already holding is a no-op
    - A scramble issued to a Solve is never armed again
    - An emitted Solve stays in unrecorded until the caller marks it persisted;
      acknowledge and abort never drop it

Design Decisions:
    - Inspecting -> ReadyHold is decided by settle() from the hold's press timestamp,
      applied when the next key edge is processed; view(now) settles a copy for
      display, so render ticks never change the stored state
    - Inspection overrun is a penalty decided at release (InspectionPolicy on the Event),
      never an automatic failure while still inspecting
    - TimerMachine is the thin imperative wrapper: holds the current state and
      scramble, turns Stopped into a Solve, draws a fresh scramble on acknowledge
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from cubetimer.core.domain_types import (
    WCA_OVERRUN_GRACE_MS,
    InspectionPolicy,
    KeyEdgeKind,
    Penalty,
    ScrambleId,
    TimerPhase,
)
from cubetimer.core.errors import ScrambleReusedError
from cubetimer.core.event_catalog import Event
from cubetimer.core.scramble import Scramble, generate_scramble
from cubetimer.core.solve import Solve


# ─── Inputs ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class KeyEdge:
    """Key-down/key-up edge stamped by a monotonic clock (milliseconds)."""
    kind: KeyEdgeKind
    timestamp_ms: int
    wall_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# ─── States ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class Idle:
    phase = TimerPhase.IDLE


@dataclass(frozen=True)
class Inspecting:
    started_ms: int
    hold_started_ms: int | None = None
    phase = TimerPhase.INSPECTING


@dataclass(frozen=True)
class ReadyHold:
    inspection_started_ms: int
    hold_started_ms: int
    phase = TimerPhase.READY_HOLD


@dataclass(frozen=True)
class Running:
    started_ms: int
    penalty: Penalty = Penalty.NONE
    phase = TimerPhase.RUNNING


@dataclass(frozen=True)
class Stopped:
    elapsed_ms: int
    stopped_ms: int
    penalty: Penalty = Penalty.NONE
    phase = TimerPhase.STOPPED


TimerState = Idle | Inspecting | ReadyHold | Running | Stopped


# ─── Pure transition logic ───────────────────────────────────────

def inspection_penalty(event: Event, inspection_elapsed_ms: int) -> Penalty:
    """Penalty for starting the solve after inspection_elapsed_ms of inspection."""
    if event.inspection_policy is InspectionPolicy.NONE:
        return Penalty.NONE
    if inspection_elapsed_ms > event.inspection_ms + WCA_OVERRUN_GRACE_MS:
        return Penalty.DNF
    if inspection_elapsed_ms > event.inspection_ms:
        return Penalty.PLUS_TWO
    return Penalty.NONE


def settle(state: TimerState, now_ms: int, event: Event) -> TimerState:
    """Promote a sustained hold to ReadyHold once the threshold has elapsed."""
    match state:
        case Inspecting(started_ms=started, hold_started_ms=int() as hold) if (
            now_ms - hold >= event.hold_threshold_ms
        ):
            return ReadyHold(inspection_started_ms=started, hold_started_ms=hold)
    return state


def transition(state: TimerState, edge: KeyEdge, event: Event) -> TimerState:
    """Apply one key edge. Inputs that do not apply leave the state unchanged."""
    t = edge.timestamp_ms
    state = settle(state, t, event)
    pressed = edge.kind is KeyEdgeKind.PRESS

    match state:
        case Idle() if pressed:
            return Inspecting(started_ms=t, hold_started_ms=t)

        case Inspecting(started_ms=started, hold_started_ms=None) if pressed:
            if t < started:
                return state
            return Inspecting(started_ms=started, hold_started_ms=t)

        case Inspecting(started_ms=started, hold_started_ms=int() as hold) if not pressed:
            # Held too briefly: cancel the hold, inspection continues
            if t < hold:
                return state
            return Inspecting(started_ms=started)

        case ReadyHold(inspection_started_ms=started, hold_started_ms=hold) if not pressed:
            if t < hold:
                return state
            return Running(started_ms=t, penalty=inspection_penalty(event, t - started))

        case Running(started_ms=started, penalty=penalty) if pressed:
            if t < started:
                return state
            return Stopped(elapsed_ms=t - started, stopped_ms=t, penalty=penalty)

    return state


# ─── Display view ────────────────────────────────────────────────

@dataclass(frozen=True)
class TimerView:
    """What the presentation layer renders at a given instant."""
    phase: TimerPhase
    elapsed_ms: int
    inspection_remaining_ms: int | None = None
    pending_penalty: Penalty = Penalty.NONE


def view_state(state: TimerState, now_ms: int, event: Event) -> TimerView:
    """Pure projection of a state at now_ms. Never a transition."""
    state = settle(state, now_ms, event)
    match state:
        case Inspecting(started_ms=started) | ReadyHold(inspection_started_ms=started):
            inspected = max(now_ms - started, 0)
            return TimerView(
                phase=state.phase,
                elapsed_ms=0,
                inspection_remaining_ms=(
                    event.inspection_ms - inspected if event.inspection_ms else None
                ),
                pending_penalty=inspection_penalty(event, inspected),
            )
        case Running(started_ms=started, penalty=penalty):
            return TimerView(
                phase=state.phase,
                elapsed_ms=max(now_ms - started, 0),
                pending_penalty=penalty,
            )
        case Stopped(elapsed_ms=elapsed, penalty=penalty):
            return TimerView(phase=state.phase, elapsed_ms=elapsed, pending_penalty=penalty)
    return TimerView(phase=TimerPhase.IDLE, elapsed_ms=0)


# ─── Imperative wrapper ──────────────────────────────────────────

ScrambleFactory = Callable[[Event], Scramble]


class TimerMachine:
    """Single-flight timer for one event — owns the current state and scramble."""

    def __init__(
        self, event: Event, scramble_factory: ScrambleFactory = generate_scramble,
    ):
        self.event = event
        self._scramble_factory = scramble_factory
        self._state: TimerState = Idle()
        self._scramble = scramble_factory(event)
        self._issued: set[ScrambleId] = set()
        self._last_edge_ms: int | None = None
        self._unrecorded: list[Solve] = []

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def phase(self) -> TimerPhase:
        return self._state.phase

    @property
    def scramble(self) -> Scramble:
        return self._scramble

    @property
    def unrecorded(self) -> tuple[Solve, ...]:
        """Solves emitted by this machine that the caller has not yet persisted."""
        return tuple(self._unrecorded)

    def mark_recorded(self, solve: Solve) -> None:
        self._unrecorded = [s for s in self._unrecorded if s.id != solve.id]

    def arm(self, scramble: Scramble) -> None:
        """Replace the pending scramble (only while Idle)."""
        if scramble.id in self._issued:
            raise ScrambleReusedError(str(scramble.id))
        if scramble.event_id != self.event.id:
            raise ValueError(
                f"Scramble for '{scramble.event_id}' cannot arm the "
                f"'{self.event.id}' timer",
            )
        if isinstance(self._state, Idle):
            self._scramble = scramble

    def press(self, timestamp_ms: int, wall_time: datetime | None = None) -> Solve | None:
        """Key-down edge. Returns the Solve when this press stops the clock."""
        return self.handle(KeyEdge(
            KeyEdgeKind.PRESS, timestamp_ms,
            wall_time or datetime.now(timezone.utc),
        ))

    def release(self, timestamp_ms: int) -> None:
        """Key-up edge."""
        self.handle(KeyEdge(KeyEdgeKind.RELEASE, timestamp_ms))

    def handle(self, edge: KeyEdge) -> Solve | None:
        if self._last_edge_ms is not None and edge.timestamp_ms < self._last_edge_ms:
            return None
        if isinstance(self._state, Stopped) and edge.kind is KeyEdgeKind.PRESS:
            self.acknowledge()
        self._last_edge_ms = edge.timestamp_ms

        previous = self._state
        self._state = transition(previous, edge, self.event)
        if isinstance(self._state, Stopped) and not isinstance(previous, Stopped):
            return self._emit_solve(self._state, edge.wall_time)
        return None

    def abort(self) -> None:
        """Discard the in-progress attempt without emitting a Solve."""
        if isinstance(self._state, Stopped):
            self.acknowledge()
            return
        self._state = Idle()
        self._last_edge_ms = None

    def acknowledge(self) -> None:
        """Consume a Stopped result and re-arm with a fresh scramble."""
        if not isinstance(self._state, Stopped):
            return
        self._state = Idle()
        self._last_edge_ms = None
        self._scramble = self._scramble_factory(self.event)

    def view(self, now_ms: int) -> TimerView:
        return view_state(self._state, now_ms, self.event)

    def _emit_solve(self, stopped: Stopped, wall_time: datetime) -> Solve:
        self._issued.add(self._scramble.id)
        solve = Solve(
            event_id=self.event.id,
            scramble_id=self._scramble.id,
            scramble=self._scramble.text,
            elapsed_ms=stopped.elapsed_ms,
            penalty=stopped.penalty,
            recorded_at=wall_time,
        )
        self._unrecorded.append(solve)
        return solve
