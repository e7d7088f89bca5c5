"""Data models for breakwatch."""

from breakwatch.models.event import Direction, RawAccessEvent, NormalizedEvent
from breakwatch.models.report import (
    BreakReport,
    Door,
    DoorSummary,
    EventStamp,
    ReportWindow,
    SessionPair,
    UserReport,
    ViolationRecord,
)

__all__ = [
    "Direction",
    "RawAccessEvent",
    "NormalizedEvent",
    "BreakReport",
    "Door",
    "DoorSummary",
    "EventStamp",
    "ReportWindow",
    "SessionPair",
    "UserReport",
    "ViolationRecord",
]
