"""Event Catalog — static description of every supported puzzle/event.

Invariants:
    - Event is immutable (frozen dataclass); one instance per event id
    - Every registered event can satisfy the adjacency rules in core/moves.py
      (>= 2 distinct faces on >= 2 axes, every face on exactly one axis,
      scramble length >= 1); violations raise
      EventConfigurationError at registration time, never at generation time
    - Standard events are always present; custom events are added via register()
      and are the only ones unregister() will remove
    - Unknown event ids raise UnknownEventError (caller bug, mapped to 404 by the shell)

Design Decisions:
    - WCA event ids ("333", "pyram", ...) as catalog keys: stable across renames
    - Scramble lengths follow WCA practice (20 for 3x3, 20 * (N - 2) for big cubes)
    - Hold threshold and inspection policy live on the Event, not in the timer,
      so they stay configurable per event
"""

import re
from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from cubetimer.core.domain_types import (
    DEFAULT_HOLD_THRESHOLD_MS,
    DEFAULT_INSPECTION_MS,
    EventId,
    EventKind,
    InspectionPolicy,
)
from cubetimer.core.errors import (
    DuplicateEventError,
    EventConfigurationError,
    EventNotRemovableError,
    UnknownEventError,
)
from cubetimer.core.moves import Move


@dataclass(frozen=True)
class Event:
    """A puzzle/event definition — immutable, defined at startup."""

    id: EventId
    name: str
    kind: EventKind
    moves: frozenset[Move]
    min_scramble_length: int
    cube_size: int = 0
    inspection_ms: int = DEFAULT_INSPECTION_MS
    hold_threshold_ms: int = DEFAULT_HOLD_THRESHOLD_MS
    inspection_policy: InspectionPolicy = InspectionPolicy.WCA

    @property
    def axes(self) -> frozenset[str]:
        return frozenset(m.axis for m in self.moves)

    @property
    def faces(self) -> frozenset[str]:
        return frozenset(m.face for m in self.moves)

    def with_hold_threshold(self, hold_threshold_ms: int) -> "Event":
        """Copy of this event with another hold-to-ready threshold."""
        return replace(self, hold_threshold_ms=hold_threshold_ms)


# --- Move set builders --------------------------------------------------------

_FACE_AXES: dict[str, str] = {
    "R": "x", "L": "x",
    "U": "y", "D": "y",
    "F": "z", "B": "z",
}
_QUARTER_AMOUNTS: tuple[int, ...] = (1, -1, 2)
_DIAL_AMOUNTS: tuple[int, ...] = tuple(a for a in range(-5, 7) if a != 0)


def _nxn_moves(size: int, faces: Iterable[str] = "RLUDFB") -> frozenset[Move]:
    """Outer turns for N <= 3, plus wide turns up to depth N // 2 for N >= 4."""
    max_depth = 1 if size <= 3 else size // 2
    return frozenset(
        Move(face, _FACE_AXES[face], amount, depth)
        for face in faces
        for amount in _QUARTER_AMOUNTS
        for depth in range(1, max_depth + 1)
    )


def _corner_moves(faces: Iterable[str]) -> frozenset[Move]:
    """Pyraminx/Skewb: each corner turns about its own axis, clockwise or not."""
    return frozenset(
        Move(face, face.lower(), amount) for face in faces for amount in (1, -1)
    )


def _megaminx_moves() -> frozenset[Move]:
    return frozenset(
        [Move(face, face.lower(), amount) for face in "RD" for amount in (2, -2)]
        + [Move("U", "u", amount) for amount in (1, -1)]
    )


def _square1_moves() -> frozenset[Move]:
    layer_turns = [
        Move(face, "y", amount) for face in "UD" for amount in _DIAL_AMOUNTS
    ]
    return frozenset(layer_turns + [Move("/", "slice", 1)])


_CLOCK_PINS: tuple[str, ...] = ("UR", "DR", "DL", "UL", "U", "R", "D", "L", "ALL")


def _clock_moves() -> frozenset[Move]:
    return frozenset(
        Move(pin, pin, amount) for pin in _CLOCK_PINS for amount in _DIAL_AMOUNTS
    )


def _nxn_event(
    event_id: str, name: str, size: int, length: int, **overrides,
) -> Event:
    faces = "RUF" if size == 2 else "RLUDFB"
    return Event(
        id=EventId(event_id), name=name, kind=EventKind.NXN,
        moves=_nxn_moves(size, faces), min_scramble_length=length,
        cube_size=size, **overrides,
    )


def _standard_events() -> tuple[Event, ...]:
    return (
        _nxn_event("333", "3x3x3", 3, 20),
        _nxn_event("222", "2x2x2", 2, 10),
        _nxn_event("444", "4x4x4", 4, 40),
        _nxn_event("555", "5x5x5", 5, 60),
        _nxn_event("666", "6x6x6", 6, 80),
        _nxn_event("777", "7x7x7", 7, 100),
        Event(
            id=EventId("pyram"), name="Pyraminx", kind=EventKind.PYRAMINX,
            moves=_corner_moves("RULB"), min_scramble_length=10,
        ),
        Event(
            id=EventId("minx"), name="Megaminx", kind=EventKind.MEGAMINX,
            moves=_megaminx_moves(), min_scramble_length=70,
        ),
        Event(
            id=EventId("skewb"), name="Skewb", kind=EventKind.SKEWB,
            moves=_corner_moves("RULB"), min_scramble_length=11,
        ),
        Event(
            id=EventId("sq1"), name="Square-1", kind=EventKind.SQUARE1,
            moves=_square1_moves(), min_scramble_length=20,
        ),
        Event(
            id=EventId("clock"), name="Clock", kind=EventKind.CLOCK,
            moves=_clock_moves(), min_scramble_length=14,
        ),
        _nxn_event("333oh", "3x3 OH", 3, 20),
        # Blindfolded: memorisation is part of the solve, so no inspection
        _nxn_event(
            "333bf", "3x3 BLD", 3, 20,
            inspection_ms=0, inspection_policy=InspectionPolicy.NONE,
        ),
        _nxn_event("333ft", "3x3 Feet", 3, 20),
    )


# --- Validation ---------------------------------------------------------------

def validate_event(event: Event) -> None:
    """Raise EventConfigurationError if the event cannot be scrambled or timed."""
    if event.min_scramble_length < 1:
        raise EventConfigurationError(event.id, "scramble length must be >= 1")
    if not event.moves:
        raise EventConfigurationError(event.id, "move set is empty")
    face_axes: dict[str, set[str]] = {}
    for move in event.moves:
        face_axes.setdefault(move.face, set()).add(move.axis)
    if len(face_axes) < 2:
        raise EventConfigurationError(
            event.id, "move set turns a single face; at least 2 faces are needed",
        )
    split = sorted(face for face, axes in face_axes.items() if len(axes) > 1)
    if split:
        raise EventConfigurationError(
            event.id, f"faces turn about more than one axis: {', '.join(split)}",
        )
    if len(event.axes) < 2:
        raise EventConfigurationError(
            event.id,
            "move set spans a single axis; at least 2 axes are needed "
            "to avoid consecutive same-axis turns",
        )
    if event.inspection_ms < 0:
        raise EventConfigurationError(event.id, "inspection time must be >= 0")
    if event.hold_threshold_ms < 0:
        raise EventConfigurationError(event.id, "hold threshold must be >= 0")
    if event.inspection_policy is InspectionPolicy.WCA and event.inspection_ms == 0:
        raise EventConfigurationError(
            event.id, "WCA inspection policy requires a positive inspection time",
        )


_MOVE_TOKEN = re.compile(r"^[A-Za-z]+$")


def _slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-")


def build_custom_event(
    name: str,
    moves: Sequence[str],
    scramble_length: int,
    *,
    inspection_ms: int = DEFAULT_INSPECTION_MS,
    hold_threshold_ms: int = DEFAULT_HOLD_THRESHOLD_MS,
    inspection_policy: InspectionPolicy = InspectionPolicy.NONE,
) -> Event:
    """Build a user-defined event from face letters (e.g. ["R", "U", "M"]).

    Standard cube faces keep their cube axis (R/L share x); any other letter
    turns about its own axis. Every face gets the quarter/prime/half amounts.
    """
    slug = _slugify(name)
    if not slug:
        raise EventConfigurationError(name, "event name must contain letters or digits")
    event_id = EventId(f"custom-{slug}")
    for token in moves:
        if not _MOVE_TOKEN.match(token):
            raise EventConfigurationError(event_id, f"invalid move token {token!r}")
    move_set = frozenset(
        Move(face, _FACE_AXES.get(face, face), amount)
        for face in dict.fromkeys(moves)
        for amount in _QUARTER_AMOUNTS
    )
    event = Event(
        id=event_id, name=name.strip(), kind=EventKind.CUSTOM,
        moves=move_set, min_scramble_length=scramble_length,
        inspection_ms=inspection_ms, hold_threshold_ms=hold_threshold_ms,
        inspection_policy=inspection_policy,
    )
    validate_event(event)
    return event


# --- Catalog ------------------------------------------------------------------

class EventCatalog:
    """Lookup table of events — standard WCA set plus registered custom events."""

    def __init__(self, events: Iterable[Event] | None = None):
        self._events: dict[EventId, Event] = {}
        for event in _standard_events() if events is None else events:
            self.register(event)

    def register(self, event: Event) -> Event:
        """Add an event after validating it. Duplicate ids are rejected."""
        validate_event(event)
        if event.id in self._events:
            raise DuplicateEventError(event.id)
        self._events[event.id] = event
        return event

    def events_list(self) -> list[Event]:
        """All events in registration order (standard events first)."""
        return list(self._events.values())

    def get(self, event_id: str) -> Event:
        try:
            return self._events[EventId(event_id)]
        except KeyError:
            raise UnknownEventError(event_id) from None

    def __contains__(self, event_id: object) -> bool:
        return event_id in self._events

    def check_removable(self, event_id: str) -> Event:
        """The event, if unregister() would accept it."""
        event = self.get(event_id)
        if event.kind is not EventKind.CUSTOM:
            raise EventNotRemovableError(event.id)
        return event

    def unregister(self, event_id: str) -> Event:
        """Remove a custom event. Standard events raise EventNotRemovableError."""
        event = self.check_removable(event_id)
        del self._events[event.id]
        return event


def move_set(event: Event) -> frozenset[Move]:
    """Legal moves of an event."""
    return event.moves
