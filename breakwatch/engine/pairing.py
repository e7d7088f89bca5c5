"""Session pairing for breakwatch.

Walks one user's events in time order and matches each exit to the entry
right before it. Anti-passback events are collected separately and never
paired.
"""

from datetime import timedelta, timezone
from typing import Dict, Iterable, List, Optional
from breakwatch.models.constants import APB_EVENT_PREFIX, BREAK_AREA_LABEL, DATE_FORMAT, TIME_FORMAT
from breakwatch.models.event import Direction, NormalizedEvent
from breakwatch.models.report import EventStamp, SessionPair, ViolationRecord
from breakwatch.engine.aggregation import format_duration


class PairingResult:
    """Pairs and violations produced for one user."""

    def __init__(self, user_id: str, events: Optional[List[NormalizedEvent]] = None):
        self.user_id = user_id
        self.events: List[NormalizedEvent] = events or []
        self.pairs: List[SessionPair] = []
        self.violations: List[ViolationRecord] = []


def sort_events(events: Iterable[NormalizedEvent]) -> List[NormalizedEvent]:
    """Sort events ascending by timestamp (stable for equal timestamps)."""
    return sorted(events, key=lambda event: event.timestamp.timestamp())


def group_by_user(events: Iterable[NormalizedEvent]) -> Dict[str, List[NormalizedEvent]]:
    """Group events by user id, keeping first-seen user order and event order."""
    grouped: Dict[str, List[NormalizedEvent]] = {}
    for event in events:
        grouped.setdefault(event.user_id, []).append(event)
    return grouped


def violation_message(event: NormalizedEvent) -> str:
    """Message shown for an APB event.

    Uses the vendor message when present, otherwise derives one from the event
    type, e.g. DOOR_APB_DOUBLE_ENTRY -> "DOUBLE ENTRY".
    """
    if event.violation_message:
        return event.violation_message
    return event.event_type.replace(APB_EVENT_PREFIX, "", 1).replace("_", " ")


def _stamp(event: NormalizedEvent) -> EventStamp:
    return EventStamp(
        date=event.timestamp.strftime(DATE_FORMAT),
        time=event.timestamp.strftime(TIME_FORMAT),
        location=f"{event.door_name} {event.direction_label}",
    )


def _build_violation(event: NormalizedEvent) -> ViolationRecord:
    return ViolationRecord(
        date=event.timestamp.strftime(DATE_FORMAT),
        time=event.timestamp.strftime(TIME_FORMAT),
        message=violation_message(event),
        event_type=event.event_type,
    )


def _build_pair(user_id: str, first: NormalizedEvent, second: NormalizedEvent) -> SessionPair:
    # Compare in UTC; same-tzinfo subtraction uses wall-clock time across DST changes
    elapsed = second.timestamp.astimezone(timezone.utc) - first.timestamp.astimezone(timezone.utc)
    duration_ms = max(0, elapsed // timedelta(milliseconds=1))
    return SessionPair(
        user_id=user_id,
        user_name=first.user_name or second.user_name,
        site_name=first.site_name or second.site_name,
        area=BREAK_AREA_LABEL,
        in_event=_stamp(first),
        out_event=_stamp(second),
        duration_ms=duration_ms,
        duration_label=format_duration(duration_ms),
    )


def pair_sessions(events: List[NormalizedEvent], user_id: Optional[str] = None) -> PairingResult:
    """Pair one user's entries and exits in a single forward pass.

    Rules:
    - APB events become violations; they are never paired and leave the
      pending entry untouched
    - An entry replaces any earlier unmatched entry (most recent entry wins)
    - An exit closes the pending entry; an exit with no pending entry is dropped
    - An entry still pending at the end is discarded

    Args:
        events: One user's events, sorted ascending by timestamp
        user_id: User the events belong to (defaults to the first event's user)

    Returns:
        PairingResult with pairs and violations in event order
    """
    if user_id is None:
        user_id = events[0].user_id if events else ""
    result = PairingResult(user_id, list(events))
    pending_in: Optional[NormalizedEvent] = None

    for event in events:
        if event.is_apb_violation:
            result.violations.append(_build_violation(event))
            continue

        if event.direction == Direction.IN.value:
            pending_in = event
        elif event.direction == Direction.OUT.value and pending_in is not None:
            result.pairs.append(_build_pair(user_id, pending_in, event))
            pending_in = None

    return result
