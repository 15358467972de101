"""Time Formatting — human-readable renderings of solve times and statistics.

Invariants:
    - Under a minute: "S.mmm"; a minute or more: "M:SS.mmm"
    - +2 solves show the penalised time with a trailing "+"
    - DNF renders as "DNF(raw)" for a solve and "DNF" for a statistic
    - Undefined statistics render as "-", never as a number
"""

from cubetimer.core.domain_types import Penalty, StatStatus
from cubetimer.core.solve import Solve
from cubetimer.core.statistics import StatValue

UNDEFINED_TEXT: str = "-"


def format_ms(ms: int) -> str:
    minutes, rest = divmod(max(ms, 0), 60_000)
    seconds, millis = divmod(rest, 1000)
    if minutes:
        return f"{minutes}:{seconds:02d}.{millis:03d}"
    return f"{seconds}.{millis:03d}"


def format_solve(solve: Solve) -> str:
    if solve.penalty is Penalty.DNF:
        return f"DNF({format_ms(solve.elapsed_ms)})"
    if solve.penalty is Penalty.PLUS_TWO:
        return f"{format_ms(solve.effective_ms)}+"
    return format_ms(solve.elapsed_ms)


def format_stat(value: StatValue) -> str:
    if value.status is StatStatus.DNF:
        return "DNF"
    if value.status is StatStatus.UNDEFINED or value.ms is None:
        return UNDEFINED_TEXT
    return format_ms(value.ms)
