"""Moves — the atomic unit of a scramble and the local adjacency rules between moves.

Invariants:
    - Move is immutable and hashable (frozen dataclass), usable in frozensets
    - can_follow() is the single source of truth for the two adjacency rules:
        1. no-cancellation: a move never follows a move on the same face
        2. no-redundant-axis: at most two consecutive moves share an axis
    - Rules only look at the previous one or two moves (strictly local)

Design Decisions:
    - Face equality (not face+depth) for rule 1: R followed by Rw is a redundant
      combination on NxN, so the stricter rule is used
    - Rendering dispatched by EventKind: notation differs per puzzle family but
      the adjacency rules do not
"""

from dataclasses import dataclass
from typing import Sequence

from cubetimer.core.domain_types import EventKind


@dataclass(frozen=True, order=True)
class Move:
    """A single turn: face (or pin/slice), its axis, signed amount and layer depth."""

    face: str
    axis: str
    amount: int
    depth: int = 1


def can_follow(previous: Sequence[Move], candidate: Move) -> bool:
    """Whether candidate may be appended after the previous moves."""
    if previous and previous[-1].face == candidate.face:
        return False
    if (
        len(previous) >= 2
        and previous[-1].axis == candidate.axis
        and previous[-2].axis == candidate.axis
    ):
        return False
    return True


def is_valid_sequence(moves: Sequence[Move]) -> bool:
    """Check both adjacency rules over a whole sequence."""
    return all(can_follow(moves[:i], move) for i, move in enumerate(moves))


# --- Notation -----------------------------------------------------------------

_CUBE_SUFFIX = {1: "", -1: "'", 2: "2", -2: "2'"}


def _render_cube(move: Move) -> str:
    if move.depth <= 1:
        prefix = move.face
    elif move.depth == 2:
        prefix = f"{move.face}w"
    else:
        prefix = f"{move.depth}{move.face}w"
    return prefix + _CUBE_SUFFIX.get(move.amount, str(move.amount))


def _render_megaminx(move: Move) -> str:
    if move.face == "U":
        return "U" if move.amount > 0 else "U'"
    return move.face + ("++" if move.amount > 0 else "--")


def _render_clock(move: Move) -> str:
    return f"{move.face}{abs(move.amount)}{'+' if move.amount > 0 else '-'}"


def _render_square1(move: Move) -> str:
    if move.face == "/":
        return "/"
    return f"{move.face}{move.amount}"


_RENDERERS = {
    EventKind.NXN: _render_cube,
    EventKind.PYRAMINX: _render_cube,
    EventKind.SKEWB: _render_cube,
    EventKind.CUSTOM: _render_cube,
    EventKind.MEGAMINX: _render_megaminx,
    EventKind.CLOCK: _render_clock,
    EventKind.SQUARE1: _render_square1,
}


def render_move(move: Move, kind: EventKind) -> str:
    """Render a single move in the notation of its puzzle family."""
    return _RENDERERS[kind](move)


def render_sequence(moves: Sequence[Move], kind: EventKind) -> str:
    """Render a move sequence as the human-readable scramble line.

    Square-1 groups top/bottom turns before each slice: ``(3,-2)/ (0,4)/``;
    a slice with no turn before it renders as a bare ``/``.
    """
    if kind is not EventKind.SQUARE1:
        return " ".join(render_move(m, kind) for m in moves)

    parts: list[str] = []
    top, bottom, pending = 0, 0, False
    for move in moves:
        if move.face == "/":
            parts.append(f"({top},{bottom})/" if pending else "/")
            top, bottom, pending = 0, 0, False
        elif move.face == "U":
            top, pending = move.amount, True
        else:
            bottom, pending = move.amount, True
    if pending:
        parts.append(f"({top},{bottom})")
    return " ".join(parts)
