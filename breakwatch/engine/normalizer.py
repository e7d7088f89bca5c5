"""Event normalization for breakwatch.

Turns raw vendor access events into NormalizedEvent objects zoned to the
door's local time. This is the only place the vendor payload shape is read;
everything downstream works with typed fields.
"""

import logging
from datetime import timezone, tzinfo
from typing import Any, Iterable, List, Optional, Tuple, Union

from dateutil import parser as date_parser
from dateutil import tz as date_tz
from pydantic import ValidationError

from breakwatch.errors import MalformedEventError
from breakwatch.models.constants import (
    DEFAULT_TIMEZONE,
    UNKNOWN_DOOR_NAME,
    UNKNOWN_SITE_NAME,
    UNKNOWN_USER_ID,
    UNKNOWN_USER_NAME,
)
from breakwatch.models.event import Direction, NormalizedEvent, RawAccessEvent, VendorEventInfo
from breakwatch.models.report import Door

logger = logging.getLogger(__name__)

_IN_SYNONYMS = ("in", "entry", "entrance")
_OUT_SYNONYMS = ("out", "exit", "egress")


def normalize_direction(raw: Optional[str]) -> Tuple[str, str]:
    """Map a vendor direction string to (direction, display label).

    Args:
        raw: Direction value from the event info block (may be None)

    Returns:
        ("in", "Inbound"), ("out", "Outbound"), ("unknown", "Unknown"), or the
        lowercased vendor value with its first letter capitalized as label
    """
    if not raw:
        return Direction.UNKNOWN.value, "Unknown"
    value = str(raw).lower()
    if value in _IN_SYNONYMS:
        return Direction.IN.value, "Inbound"
    if value in _OUT_SYNONYMS:
        return Direction.OUT.value, "Outbound"
    return value, value[:1].upper() + value[1:]


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """Resolve an IANA timezone name, falling back to UTC."""
    zone = date_tz.gettz(name or DEFAULT_TIMEZONE)
    if zone is None:
        logger.warning(f"Unknown timezone {name!r}, using UTC")
        return timezone.utc
    return zone


def normalize_event(
    raw: Union[dict, RawAccessEvent],
    time_zone: Union[str, tzinfo, None],
    door: Optional[Door] = None,
) -> NormalizedEvent:
    """Normalize one vendor access event.

    Args:
        raw: Vendor event dict (or an already parsed RawAccessEvent)
        time_zone: Door timezone name or tzinfo
        door: Door metadata used as fallback for site and door names

    Returns:
        NormalizedEvent with timestamp converted to the door's timezone

    Raises:
        MalformedEventError: If the record is not an event or its timestamp can't be parsed
    """
    if isinstance(raw, RawAccessEvent):
        event = raw
    else:
        try:
            event = RawAccessEvent.model_validate(raw)
        except ValidationError as e:
            event_id = raw.get("event_id") if isinstance(raw, dict) else None
            raise MalformedEventError(event_id, f"invalid record: {e.error_count()} validation error(s)") from e

    if not event.timestamp:
        raise MalformedEventError(event.event_id, "missing timestamp")
    try:
        parsed = date_parser.isoparse(event.timestamp)
    except (ValueError, OverflowError) as e:
        raise MalformedEventError(event.event_id, f"unparsable timestamp {event.timestamp!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    zone = time_zone if isinstance(time_zone, tzinfo) else resolve_timezone(time_zone)
    info = event.event_info or VendorEventInfo()

    direction, direction_label = normalize_direction(info.direction)
    user_info = info.user_info

    door_site = door.site_name if door and door.site_name else None
    door_name = door.name if door and door.name else None

    return NormalizedEvent(
        event_id=event.event_id,
        event_type=event.event_type or "",
        violation_message=info.message or None,
        timestamp=parsed.astimezone(zone),
        user_id=info.user_id or (user_info.user_id if user_info else None) or UNKNOWN_USER_ID,
        user_name=info.user_name or (user_info.name if user_info else None) or UNKNOWN_USER_NAME,
        site_name=info.site_name or door_site or UNKNOWN_SITE_NAME,
        door_id=info.door_id or event.device_id,
        direction=direction,
        direction_label=direction_label,
        door_name=(info.door_info.name if info.door_info else None) or door_name or UNKNOWN_DOOR_NAME,
    )


def normalize_events(
    raws: Iterable[Any],
    time_zone: Union[str, tzinfo, None],
    door: Optional[Door] = None,
) -> List[NormalizedEvent]:
    """Normalize a batch of vendor events, dropping malformed records.

    A record that fails normalization is logged and skipped; the rest of the
    batch is still processed.
    """
    zone = time_zone if isinstance(time_zone, tzinfo) else resolve_timezone(time_zone)
    normalized: List[NormalizedEvent] = []
    dropped = 0
    for raw in raws:
        try:
            normalized.append(normalize_event(raw, zone, door))
        except MalformedEventError as e:
            dropped += 1
            logger.warning(f"Dropping access event: {e}")
    if dropped:
        logger.info(f"Normalized {len(normalized)} access events, dropped {dropped} malformed")
    return normalized
