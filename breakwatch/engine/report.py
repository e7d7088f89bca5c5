"""Break report generation for breakwatch.

Ties the pipeline together: resolve the door and the day window, normalize
and filter the raw events, pair sessions per user and aggregate the result.
"""

import logging
import math
import re
from datetime import datetime, time, timezone, tzinfo
from typing import Any, Dict, Iterable, Optional, Sequence

from breakwatch.errors import DoorNotFoundError, InvalidDateError
from breakwatch.models.constants import DATE_FORMAT, DEFAULT_MIN_MINUTES, DEFAULT_TIMEZONE
from breakwatch.models.report import BreakReport, Door, ReportWindow
from breakwatch.engine.aggregation import aggregate_reports
from breakwatch.engine.filtering import filter_door_events
from breakwatch.engine.normalizer import normalize_events, resolve_timezone
from breakwatch.engine.pairing import PairingResult, group_by_user, pair_sessions, sort_events

logger = logging.getLogger(__name__)

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def find_door(door_id: str, doors: Iterable[Door]) -> Door:
    """Find a door by id.

    Raises:
        DoorNotFoundError: If no door in the list has that id
    """
    for door in doors:
        if door.door_id == door_id:
            return door
    raise DoorNotFoundError(door_id)


def resolve_report_window(
    date_iso: Optional[str],
    time_zone: Optional[str],
    now: Optional[datetime] = None,
) -> ReportWindow:
    """Resolve the unix range for one calendar day in the door's timezone.

    Args:
        date_iso: Day as YYYY-MM-DD, or None for today in the door's timezone
        time_zone: Door IANA timezone
        now: Current time, for today's date (defaults to the wall clock)

    Returns:
        ReportWindow from local midnight to the last second of the day

    Raises:
        InvalidDateError: If date_iso is not a valid calendar date
    """
    tz_name = time_zone or DEFAULT_TIMEZONE
    zone: tzinfo = resolve_timezone(tz_name)

    if date_iso:
        value = date_iso.strip()
        if not _DATE_PATTERN.match(value):
            raise InvalidDateError(date_iso)
        try:
            day = datetime.strptime(value, DATE_FORMAT).date()
        except ValueError as e:
            raise InvalidDateError(date_iso) from e
    else:
        current = now or datetime.now(zone)
        if current.tzinfo is None:
            current = current.replace(tzinfo=zone)
        day = current.astimezone(zone).date()

    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day, time.max, tzinfo=zone)
    return ReportWindow(
        start_unix=math.floor(start.timestamp()),
        end_unix=math.floor(end.timestamp()),
        tz=tz_name,
    )


def pair_by_user(events) -> Dict[str, PairingResult]:
    """Sort, group and pair events, returning user_id -> PairingResult in grouping order."""
    grouped = group_by_user(sort_events(events))
    return {user_id: pair_sessions(user_events, user_id) for user_id, user_events in grouped.items()}


def build_break_report(
    door_id: str,
    date_iso: Optional[str],
    threshold_minutes: float,
    all_doors: Sequence[Door],
    raw_events: Iterable[Any],
    now: Optional[datetime] = None,
) -> BreakReport:
    """Build the break report for one door and one day.

    This function is deterministic for a fixed date: same inputs always
    produce the same report.

    Args:
        door_id: Door to report on
        date_iso: Day as YYYY-MM-DD (None for today in the door's timezone)
        threshold_minutes: Minimum total break time for a user without violations
        all_doors: Door list used to resolve the door's metadata and timezone
        raw_events: Vendor access events for the day (all doors)
        now: Current time, used only when date_iso is None

    Returns:
        BreakReport with users ordered by total break time

    Raises:
        DoorNotFoundError: If door_id is not in all_doors
        InvalidDateError: If date_iso is not a valid date
    """
    door = find_door(door_id, all_doors)
    window = resolve_report_window(date_iso, door.timezone, now=now)

    events = normalize_events(raw_events, door.timezone, door)
    relevant = filter_door_events(events, door.door_id)
    results = pair_by_user(relevant)
    users = aggregate_reports(results, threshold_minutes)

    logger.info(
        f"Break report for door {door.door_id} ({window.start_unix}-{window.end_unix} {window.tz}): "
        f"{len(events)} events, {len(relevant)} relevant, {len(results)} users, {len(users)} reported"
    )

    return BreakReport(
        door=door.summary(),
        generated_range=window,
        threshold_minutes=threshold_minutes,
        users=users,
    )


def generate_break_report(
    client,
    door_id: str,
    date_iso: Optional[str] = None,
    threshold_minutes: float = DEFAULT_MIN_MINUTES,
    now: Optional[datetime] = None,
) -> BreakReport:
    """Fetch doors and events from the access-control API and build the report.

    Doors are fetched across all sites so any door id can be reported on.
    Events are fetched only after the door and date have been validated.

    Raises:
        DoorNotFoundError, InvalidDateError, UpstreamFetchError
    """
    now = now or datetime.now(timezone.utc)
    doors = client.fetch_doors()
    door = find_door(door_id, doors)
    window = resolve_report_window(date_iso, door.timezone, now=now)
    raw_events = client.fetch_access_events(window.start_unix, window.end_unix)
    return build_break_report(door_id, date_iso, threshold_minutes, doors, raw_events, now=now)
