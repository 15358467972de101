"""Statistics Engine — pure aggregates over a session's solve list.

Invariants:
    - All inputs are an immutable Sequence[Solve], oldest first (no IO, no state)
    - +2 adds exactly 2000ms before any aggregation; DNF never becomes a number
    - Undefined results are StatStatus.UNDEFINED, never a numeric sentinel
    - average_of(n): fewer than n solves -> UNDEFINED; trim ceil(5% of n) from
      each end (1 for ao5/ao12); DNFs sort as worst; more DNFs than trimmed -> DNF
    - compute_snapshot(s) == compute_snapshot(s) for an unchanged list

Design Decisions:
    - Free functions, not an accumulator: stats cannot drift from the history,
      even after penalties are edited or solves deleted
    - Integer milliseconds with round-half-up: displayed averages are stable
"""

from dataclasses import dataclass
from typing import Sequence

from cubetimer.core.domain_types import StatStatus
from cubetimer.core.solve import Solve

AVERAGE_TRIM_PERCENT: int = 5


@dataclass(frozen=True)
class StatValue:
    """A statistic: a time in ms, a DNF, or undefined."""
    status: StatStatus
    ms: int | None = None

    @classmethod
    def of(cls, ms: int) -> "StatValue":
        return cls(StatStatus.OK, ms)

    @classmethod
    def dnf(cls) -> "StatValue":
        return cls(StatStatus.DNF)

    @classmethod
    def undefined(cls) -> "StatValue":
        return cls(StatStatus.UNDEFINED)

    @property
    def is_defined(self) -> bool:
        return self.status is not StatStatus.UNDEFINED

    @property
    def is_dnf(self) -> bool:
        return self.status is StatStatus.DNF


@dataclass(frozen=True)
class StatsSnapshot:
    """Derived view over a session. Recomputed, never stored."""
    count: int
    dnf_count: int
    mean: StatValue
    best: StatValue
    worst: StatValue
    ao5: StatValue
    ao12: StatValue
    ao100: StatValue
    best_ao5: StatValue
    best_ao12: StatValue


def effective_time_ms(solve: Solve) -> int | None:
    """Numeric time with penalties applied; None for DNF."""
    return solve.effective_ms


def _round_mean(values: Sequence[int]) -> int:
    total, count = sum(values), len(values)
    return (2 * total + count) // (2 * count)


def _numeric_times(solves: Sequence[Solve]) -> list[int]:
    return [t for t in (effective_time_ms(s) for s in solves) if t is not None]


def mean(solves: Sequence[Solve]) -> StatValue:
    """Arithmetic mean of every non-DNF time."""
    if not solves:
        return StatValue.undefined()
    times = _numeric_times(solves)
    if not times:
        return StatValue.dnf()
    return StatValue.of(_round_mean(times))


def best(solves: Sequence[Solve]) -> StatValue:
    if not solves:
        return StatValue.undefined()
    times = _numeric_times(solves)
    return StatValue.of(min(times)) if times else StatValue.dnf()


def worst(solves: Sequence[Solve]) -> StatValue:
    """Slowest numeric time; DNF only when every solve is DNF."""
    if not solves:
        return StatValue.undefined()
    times = _numeric_times(solves)
    return StatValue.of(max(times)) if times else StatValue.dnf()


def trim_count(n: int) -> int:
    """Solves dropped from each end of an average of n. Ceiling of 5%, so ao5 and ao12 trim 1."""
    return -(-n * AVERAGE_TRIM_PERCENT // 100)


def _window_average(window: Sequence[Solve]) -> StatValue:
    n = len(window)
    trim = trim_count(n)
    if trim * 2 >= n:
        return StatValue.undefined()
    times = [effective_time_ms(s) for s in window]
    dnfs = sum(1 for t in times if t is None)
    if dnfs > trim:
        return StatValue.dnf()
    # DNFs sort after every number, so they fall into the trimmed worst slots
    ordered = sorted(t for t in times if t is not None) + [None] * dnfs
    kept = ordered[trim:n - trim]
    return StatValue.of(_round_mean(kept))


def average_of(solves: Sequence[Solve], n: int) -> StatValue:
    """Current trimmed average over the most recent n solves (ao5, ao12, ...)."""
    if n <= 0 or len(solves) < n:
        return StatValue.undefined()
    return _window_average(solves[-n:])


def best_average_of(solves: Sequence[Solve], n: int) -> StatValue:
    """Best trimmed average over every rolling window of n solves."""
    if n <= 0 or len(solves) < n:
        return StatValue.undefined()
    averages = [_window_average(solves[i:i + n]) for i in range(len(solves) - n + 1)]
    numeric = [a.ms for a in averages if a.status is StatStatus.OK]
    if numeric:
        return StatValue.of(min(numeric))
    if any(a.is_dnf for a in averages):
        return StatValue.dnf()
    return StatValue.undefined()


def compute_snapshot(solves: Sequence[Solve]) -> StatsSnapshot:
    """Full stats view over a session. Pure, no IO."""
    return StatsSnapshot(
        count=len(solves),
        dnf_count=sum(1 for s in solves if s.is_dnf),
        mean=mean(solves),
        best=best(solves),
        worst=worst(solves),
        ao5=average_of(solves, 5),
        ao12=average_of(solves, 12),
        ao100=average_of(solves, 100),
        best_ao5=best_average_of(solves, 5),
        best_ao12=best_average_of(solves, 12),
    )
