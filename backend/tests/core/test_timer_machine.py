"""Timing State Machine — transitions, penalties, solve emission.

Invariants:
    - Early release never reaches Running and the clock stays at zero
    - Stopped.elapsed_ms == stop press - release that started the clock
    - Out-of-order edges are ignored within an attempt, prior state preserved
    - Emitted solves stay unrecorded until marked persisted
    - A scramble is issued to at most one Solve
"""

import random
from datetime import datetime, timezone

import pytest

from cubetimer.core.domain_types import KeyEdgeKind, Penalty, TimerPhase
from cubetimer.core.errors import ScrambleReusedError
from cubetimer.core.event_catalog import EventCatalog
from cubetimer.core.scramble import generate_scramble
from cubetimer.core.timer_machine import (
    Idle, Inspecting, KeyEdge, ReadyHold, Running, Stopped, TimerMachine,
    inspection_penalty, settle, transition,
)

CATALOG = EventCatalog()
THREE = CATALOG.get("333")
BLD = CATALOG.get("333bf")


def press(t: int) -> KeyEdge:
    return KeyEdge(KeyEdgeKind.PRESS, t)


def release(t: int) -> KeyEdge:
    return KeyEdge(KeyEdgeKind.RELEASE, t)


def run(edges, event=THREE):
    state = Idle()
    for edge in edges:
        state = transition(state, edge, event)
    return state


# --- Pure transitions ---------------------------------------------------------

def test_press_from_idle_starts_inspection_and_hold():
    state = transition(Idle(), press(0), THREE)
    assert state == Inspecting(started_ms=0, hold_started_ms=0)


def test_full_attempt_measures_release_to_press():
    event = THREE.with_hold_threshold(1000)
    state = run([press(0), release(1000), press(9230)], event)
    assert isinstance(state, Stopped)
    assert state.elapsed_ms == 8230
    assert state.penalty is Penalty.NONE


def test_hold_reaches_ready_after_threshold():
    event = THREE.with_hold_threshold(1000)
    state = transition(Idle(), press(0), event)
    assert settle(state, 999, event) == state
    assert settle(state, 1000, event) == ReadyHold(inspection_started_ms=0, hold_started_ms=0)


def test_release_starts_clock_at_release_timestamp():
    state = run([press(0), release(1500)])
    assert state == Running(started_ms=1500, penalty=Penalty.NONE)


def test_early_release_never_starts_the_clock():
    state = run([press(0), release(100)])
    assert state == Inspecting(started_ms=0, hold_started_ms=None)

    state = run([press(0), release(100), press(500), release(799)])
    assert isinstance(state, Inspecting)
    assert state.started_ms == 0


def test_re_hold_after_early_release_can_start():
    state = run([press(0), release(100), press(500), release(800)])
    assert state == Running(started_ms=800, penalty=Penalty.NONE)


def test_press_while_holding_is_a_no_op():
    held = run([press(0)])
    assert transition(held, press(50), THREE) == held


def test_press_during_ready_hold_is_a_no_op():
    ready = settle(run([press(0)]), 400, THREE)
    assert isinstance(ready, ReadyHold)
    assert transition(ready, press(450), THREE) == ready


def test_release_while_running_is_ignored():
    running = run([press(0), release(500)])
    assert transition(running, release(600), THREE) == running


def test_out_of_order_stop_is_ignored():
    running = run([press(0), release(500)])
    assert transition(running, press(400), THREE) == running


def test_out_of_order_release_is_ignored():
    held = run([press(0), release(100), press(1000)])
    assert transition(held, release(900), THREE) == held


def test_idle_ignores_release():
    assert transition(Idle(), release(10), THREE) == Idle()


def test_stopped_ignores_further_edges():
    stopped = run([press(0), release(500), press(2500)])
    assert transition(stopped, press(3000), THREE) == stopped
    assert transition(stopped, release(3000), THREE) == stopped


# --- Inspection penalties -----------------------------------------------------

def test_inspection_penalty_thresholds():
    assert inspection_penalty(THREE, 15_000) is Penalty.NONE
    assert inspection_penalty(THREE, 15_001) is Penalty.PLUS_TWO
    assert inspection_penalty(THREE, 17_000) is Penalty.PLUS_TWO
    assert inspection_penalty(THREE, 17_001) is Penalty.DNF


def test_no_inspection_policy_never_penalises():
    assert inspection_penalty(BLD, 60_000) is Penalty.NONE


def test_late_start_carries_plus_two_to_stop():
    state = run([press(0), release(100), press(16_000), release(16_500), press(26_500)])
    assert isinstance(state, Stopped)
    assert state.penalty is Penalty.PLUS_TWO
    assert state.elapsed_ms == 10_000


def test_start_after_grace_period_is_dnf():
    state = run([press(0), release(100), press(17_500), release(18_000), press(20_000)])
    assert isinstance(state, Stopped)
    assert state.penalty is Penalty.DNF


# --- TimerMachine -------------------------------------------------------------

def make_machine(event=THREE):
    rng = random.Random(42)
    return TimerMachine(event, scramble_factory=lambda e: generate_scramble(e, rng))


def test_machine_emits_solve_on_stop():
    machine = make_machine()
    scramble = machine.scramble
    wall = datetime(2026, 1, 1, tzinfo=timezone.utc)

    assert machine.press(0) is None
    machine.release(1000)
    assert machine.phase is TimerPhase.RUNNING
    solve = machine.press(9230, wall_time=wall)

    assert solve is not None
    assert solve.elapsed_ms == 8230
    assert solve.event_id == "333"
    assert solve.scramble_id == scramble.id
    assert solve.scramble == scramble.text
    assert solve.recorded_at == wall
    assert machine.unrecorded == (solve,)
    assert machine.phase is TimerPhase.STOPPED


def test_machine_ignores_edges_older_than_last_accepted():
    machine = make_machine()
    machine.press(100)
    machine.release(1000)
    before = machine.state
    assert machine.press(900) is None
    assert machine.state == before


def test_acknowledge_returns_to_idle_with_fresh_scramble():
    machine = make_machine()
    first = machine.scramble
    machine.press(0)
    machine.release(500)
    machine.press(1500)

    machine.acknowledge()

    assert machine.phase is TimerPhase.IDLE
    assert machine.scramble.id != first.id


def test_press_after_stop_starts_next_attempt_with_new_scramble():
    machine = make_machine()
    first = machine.scramble
    machine.press(0)
    machine.release(500)
    machine.press(1500)

    assert machine.press(2000) is None
    assert machine.phase is TimerPhase.INSPECTING
    assert machine.scramble.id != first.id


def test_abort_discards_attempt_without_solve():
    machine = make_machine()
    scramble = machine.scramble
    machine.press(0)
    machine.release(500)

    machine.abort()

    assert machine.phase is TimerPhase.IDLE
    assert machine.unrecorded == ()
    assert machine.scramble == scramble


def test_abort_from_stopped_acknowledges():
    machine = make_machine()
    machine.press(0)
    machine.release(500)
    machine.press(700)
    machine.abort()
    assert machine.phase is TimerPhase.IDLE
    assert len(machine.unrecorded) == 1


def test_acknowledge_keeps_unrecorded_solve_until_marked():
    machine = make_machine()
    machine.press(0)
    machine.release(500)
    solve = machine.press(700)

    machine.acknowledge()
    machine.press(1000)

    assert machine.unrecorded == (solve,)
    machine.mark_recorded(solve)
    assert machine.unrecorded == ()


def test_abort_resets_timebase_for_restarted_client_clock():
    machine = make_machine()
    machine.press(50_000)
    machine.abort()

    machine.press(0)

    assert machine.phase is TimerPhase.INSPECTING


def test_acknowledge_resets_timebase_for_restarted_client_clock():
    machine = make_machine()
    machine.press(50_000)
    machine.release(50_500)
    machine.press(60_000)
    machine.acknowledge()

    machine.press(0)
    machine.release(500)

    assert machine.phase is TimerPhase.RUNNING


def test_acknowledge_outside_stopped_is_a_no_op():
    machine = make_machine()
    scramble = machine.scramble
    machine.acknowledge()
    assert machine.scramble == scramble


def test_arm_rejects_scramble_already_used():
    machine = make_machine()
    used = machine.scramble
    machine.press(0)
    machine.release(500)
    machine.press(700)
    machine.acknowledge()

    with pytest.raises(ScrambleReusedError):
        machine.arm(used)


def test_arm_replaces_pending_scramble_while_idle():
    machine = make_machine()
    fresh = generate_scramble(THREE)
    machine.arm(fresh)
    assert machine.scramble == fresh


def test_arm_rejects_other_event_scramble():
    machine = make_machine()
    with pytest.raises(ValueError):
        machine.arm(generate_scramble(CATALOG.get("222")))


def test_view_does_not_change_state():
    machine = make_machine()
    machine.press(0)
    state = machine.state

    shown = machine.view(5000)

    assert shown.phase is TimerPhase.READY_HOLD
    assert shown.elapsed_ms == 0
    assert shown.inspection_remaining_ms == 10_000
    assert machine.state == state


def test_view_while_running_shows_elapsed():
    machine = make_machine()
    machine.press(0)
    machine.release(400)
    shown = machine.view(2400)
    assert shown.phase is TimerPhase.RUNNING
    assert shown.elapsed_ms == 2000


def test_view_reports_pending_inspection_penalty():
    machine = make_machine()
    machine.press(0)
    machine.release(10)
    assert machine.view(16_000).pending_penalty is Penalty.PLUS_TWO
    assert machine.view(18_000).pending_penalty is Penalty.DNF


def test_blindfolded_view_has_no_countdown():
    machine = make_machine(BLD)
    machine.press(0)
    machine.release(10)
    assert machine.view(1000).inspection_remaining_ms is None


def test_idle_view():
    shown = make_machine().view(123)
    assert shown.phase is TimerPhase.IDLE
    assert shown.elapsed_ms == 0
