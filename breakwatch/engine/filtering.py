"""Door event filtering for breakwatch.

The events API returns traffic for every door in the requested window, so
reports keep only what is relevant to the selected door.
"""

from typing import Iterable, List
from breakwatch.models.event import NormalizedEvent


def is_relevant_event(event: NormalizedEvent, door_id: str) -> bool:
    """Check whether an event belongs in a door's break report.

    An event is kept if it is an in/out swipe at the door, or if it is an
    anti-passback violation. APB events are reported against the zone
    configuration, so their door id is not checked.
    """
    if event.is_apb_violation:
        return True
    return event.door_id == door_id and event.is_directional


def filter_door_events(events: Iterable[NormalizedEvent], door_id: str) -> List[NormalizedEvent]:
    """Filter events to the ones relevant for a door, preserving order.

    Args:
        events: Normalized events for the report window
        door_id: Door the report is for

    Returns:
        Subsequence of events in original relative order
    """
    return [event for event in events if is_relevant_event(event, door_id)]
