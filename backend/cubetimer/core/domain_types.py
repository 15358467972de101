"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - SolveId and ScrambleId wrap UUIDs, EventId wraps the catalog key
    - Milliseconds are plain ints on a monotonic time base
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (API and DB store .value)
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

EventId = NewType("EventId", str)
SolveId = NewType("SolveId", UUID)
ScrambleId = NewType("ScrambleId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

Milliseconds = NewType("Milliseconds", int)     # >= 0 for durations

PLUS_TWO_MS: int = 2000
DEFAULT_INSPECTION_MS: int = 15_000
DEFAULT_HOLD_THRESHOLD_MS: int = 300
WCA_OVERRUN_GRACE_MS: int = 2000


# ─── Enums ───────────────────────────────────────────────────────

class Penalty(str, Enum):
    """Solve penalty — DNF is categorical, never a number."""
    NONE = "none"
    PLUS_TWO = "+2"
    DNF = "dnf"


class EventKind(str, Enum):
    """Puzzle family — selects move set construction and notation."""
    NXN = "nxn"
    PYRAMINX = "pyraminx"
    MEGAMINX = "megaminx"
    SKEWB = "skewb"
    SQUARE1 = "square1"
    CLOCK = "clock"
    CUSTOM = "custom"


class InspectionPolicy(str, Enum):
    """What happens when inspection overruns the event's limit."""
    NONE = "none"   # overrun is ignored
    WCA = "wca"     # <= 2s over -> +2, beyond -> DNF


class TimerPhase(str, Enum):
    """Timer lifecycle states — drives timer colour/text in the presentation layer."""
    IDLE = "idle"
    INSPECTING = "inspecting"
    READY_HOLD = "ready_hold"
    RUNNING = "running"
    STOPPED = "stopped"


class KeyEdgeKind(str, Enum):
    """The two logical key edges the presentation layer delivers."""
    PRESS = "press"
    RELEASE = "release"


class StatStatus(str, Enum):
    """Outcome of a statistic — only OK carries a number."""
    OK = "ok"
    DNF = "dnf"
    UNDEFINED = "undefined"
