"""Scramble Generator — constrained random walk over an event's move set.

Invariants:
    - len(scramble.moves) == event.min_scramble_length
    - Every generated sequence satisfies is_valid_sequence() (core/moves.py)
    - Scramble is immutable and carries a fresh ScrambleId; it is issued to at most one Solve
    - Events are validated before generation, so a legal candidate exists at every
      position; a misconfigured event raises EventConfigurationError up front

Design Decisions:
    - Reject-and-resample per position with a small retry bound, then a
      choice among the legal candidates: no backtracking across the sequence
      because the rules only look at the previous one or two moves
    - Bias is accepted: this is not a uniform distribution over legal scrambles
    - rng is injectable so tests can seed it
"""

import random
import uuid
from dataclasses import dataclass, field

from cubetimer.core.domain_types import EventId, EventKind, ScrambleId
from cubetimer.core.event_catalog import Event, validate_event
from cubetimer.core.moves import Move, can_follow, render_sequence


MAX_RESAMPLES: int = 32


@dataclass(frozen=True)
class Scramble:
    """Ordered, immutable move sequence for one solve attempt."""

    event_id: EventId
    kind: EventKind
    moves: tuple[Move, ...]
    id: ScrambleId = field(default_factory=lambda: ScrambleId(uuid.uuid4()))

    @property
    def text(self) -> str:
        return render_sequence(self.moves, self.kind)

    def __len__(self) -> int:
        return len(self.moves)

    def __str__(self) -> str:
        return self.text


def _next_move(pool: list[Move], chosen: list[Move], rng: random.Random) -> Move:
    for _ in range(MAX_RESAMPLES):
        candidate = rng.choice(pool)
        if can_follow(chosen, candidate):
            return candidate
    return rng.choice([m for m in pool if can_follow(chosen, m)])


def generate_scramble(event: Event, rng: random.Random | None = None) -> Scramble:
    """Produce a fresh scramble for the event."""
    validate_event(event)
    rng = rng or random.Random()
    # Sorted pool keeps seeded runs reproducible across hash seeds
    pool = sorted(event.moves)
    chosen: list[Move] = []
    while len(chosen) < event.min_scramble_length:
        chosen.append(_next_move(pool, chosen, rng))

    return Scramble(event_id=event.id, kind=event.kind, moves=tuple(chosen))
