"""Break report engine for breakwatch."""

from breakwatch.engine.normalizer import normalize_direction, normalize_event, normalize_events
from breakwatch.engine.filtering import filter_door_events
from breakwatch.engine.pairing import PairingResult, group_by_user, pair_sessions, sort_events
from breakwatch.engine.aggregation import aggregate_reports, format_duration
from breakwatch.engine.report import build_break_report, generate_break_report, resolve_report_window

__all__ = [
    "normalize_direction",
    "normalize_event",
    "normalize_events",
    "filter_door_events",
    "PairingResult",
    "group_by_user",
    "pair_sessions",
    "sort_events",
    "aggregate_reports",
    "format_duration",
    "build_break_report",
    "generate_break_report",
    "resolve_report_window",
]
