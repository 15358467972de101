"""Timer Registry — process-wide event catalog and one TimerMachine per event.

Invariants:
    - At most one TimerMachine per event id (single-flight per event)
    - Machines are created lazily from the catalog; unknown ids raise UnknownEventError
    - Settings.hold_threshold_ms, when set, overrides the event's threshold for
      every reader: get_event(), list_events() and the timers all agree
    - Removing a custom event drops its timer with it

Design Decisions:
    - Module-level state: deliberate exception to no-global-state rule
      (ADR: single-process uvicorn, one user per timer, state lost on restart is
      acceptable because a completed Solve is persisted before the timer
      accepts the next attempt)
    - Custom events are reloaded from the repository on startup
"""

import logging

from cubetimer.config import get_settings
from cubetimer.core.domain_types import EventId
from cubetimer.core.event_catalog import Event, EventCatalog
from cubetimer.core.repository_protocols import CustomEventRepository
from cubetimer.core.timer_machine import TimerMachine

logger = logging.getLogger(__name__)

_catalog = EventCatalog()
_timers: dict[EventId, TimerMachine] = {}


def get_catalog() -> EventCatalog:
    return _catalog


def _with_overrides(event: Event) -> Event:
    threshold = get_settings().hold_threshold_ms
    if threshold is not None:
        return event.with_hold_threshold(threshold)
    return event


def get_event(event_id: str) -> Event:
    """Catalog event as the timers see it (settings overrides applied)."""
    return _with_overrides(_catalog.get(event_id))


def list_events() -> list[Event]:
    return [_with_overrides(e) for e in _catalog.events_list()]


def get_timer(event_id: str) -> TimerMachine:
    """Timer for the event, created on first use."""
    event = get_event(event_id)
    machine = _timers.get(event.id)
    if machine is None:
        machine = TimerMachine(event)
        _timers[event.id] = machine
        logger.info("Timer created", extra={"event_id": event.id})
    return machine


def register_event(event: Event) -> Event:
    return _catalog.register(event)


def unregister_event(event_id: str) -> Event:
    """Remove a custom event and discard its timer."""
    event = _catalog.unregister(event_id)
    _timers.pop(event.id, None)
    logger.info("Custom event removed", extra={"event_id": event.id})
    return event


async def load_custom_events(repo: CustomEventRepository) -> int:
    """Register persisted custom events not yet in the catalog."""
    loaded = 0
    for event in await repo.list_all():
        if event.id not in _catalog:
            _catalog.register(event)
            loaded += 1
    logger.info(f"Loaded {loaded} custom event(s)")
    return loaded


def reset_registry() -> None:
    """Drop custom events and timers (tests, reload)."""
    global _catalog
    _catalog = EventCatalog()
    _timers.clear()
