"""Event Schemas — catalog listing and custom event registration.

Invariants:
    - CustomEventCreate.name: 1-100 chars, stripped, non-empty
    - moves: 1-20 face tokens of letters only (catalog re-validates axes)
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from cubetimer.core.event_catalog import Event, move_set
from cubetimer.core.moves import render_move


class EventResponse(BaseModel):
    id: str
    name: str
    kind: str
    cube_size: int
    min_scramble_length: int
    inspection_ms: int
    hold_threshold_ms: int
    inspection_policy: str
    moves: list[str]

    @classmethod
    def from_event(cls, event: Event) -> "EventResponse":
        return cls(
            id=event.id,
            name=event.name,
            kind=event.kind.value,
            cube_size=event.cube_size,
            min_scramble_length=event.min_scramble_length,
            inspection_ms=event.inspection_ms,
            hold_threshold_ms=event.hold_threshold_ms,
            inspection_policy=event.inspection_policy.value,
            moves=[render_move(m, event.kind) for m in sorted(move_set(event))],
        )


class CustomEventCreate(BaseModel):
    """User-defined event: face letters plus scramble length."""
    name: str = Field(min_length=1, max_length=100)
    moves: list[str] = Field(min_length=1, max_length=20)
    scramble_length: int = Field(ge=1, le=200)
    inspection_ms: int = Field(15_000, ge=0, le=60_000)
    hold_threshold_ms: int = Field(300, ge=0, le=5_000)
    inspection_policy: Literal["none", "wca"] = "none"

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v

    @field_validator("moves")
    @classmethod
    def strip_moves(cls, v: list[str]) -> list[str]:
        moves = [m.strip() for m in v]
        if any(not m.isalpha() or len(m) > 3 for m in moves):
            raise ValueError("moves must be 1-3 letter face names")
        return moves


class ScrambleResponse(BaseModel):
    id: str
    event_id: str
    text: str
    length: int
