"""Time formatting for solves and statistics."""

import uuid

from cubetimer.core.domain_types import Penalty
from cubetimer.core.format_time import format_ms, format_solve, format_stat
from cubetimer.core.solve import Solve
from cubetimer.core.statistics import StatValue


def test_under_a_minute():
    assert format_ms(0) == "0.000"
    assert format_ms(8_230) == "8.230"
    assert format_ms(59_999) == "59.999"


def test_a_minute_or_more():
    assert format_ms(60_000) == "1:00.000"
    assert format_ms(83_045) == "1:23.045"
    assert format_ms(10 * 60_000 + 5_001) == "10:05.001"


def test_solve_with_penalties():
    base = dict(event_id="333", scramble_id=uuid.uuid4(), scramble="R", elapsed_ms=9_500)
    assert format_solve(Solve(**base)) == "9.500"
    assert format_solve(Solve(**base, penalty=Penalty.PLUS_TWO)) == "11.500+"
    assert format_solve(Solve(**base, penalty=Penalty.DNF)) == "DNF(9.500)"


def test_stat_values():
    assert format_stat(StatValue.of(10_333)) == "10.333"
    assert format_stat(StatValue.dnf()) == "DNF"
    assert format_stat(StatValue.undefined()) == "-"
