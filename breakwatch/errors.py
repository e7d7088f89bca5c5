"""Error types for breakwatch report generation."""


class BreakReportError(Exception):
    """Base class for errors raised while building a break report."""


class MalformedEventError(BreakReportError):
    """A single access event could not be normalized.

    Raised by the normalizer for one record; batch normalization catches it
    and drops the record.
    """

    def __init__(self, event_id, reason: str):
        self.event_id = event_id
        self.reason = reason
        super().__init__(f"Malformed access event {event_id}: {reason}")


class DoorNotFoundError(BreakReportError):
    """Requested door is not in the door list."""

    def __init__(self, door_id: str):
        self.door_id = door_id
        super().__init__("Door not found")


class InvalidDateError(BreakReportError):
    """Report date is not a valid YYYY-MM-DD calendar date."""

    def __init__(self, value: str):
        self.value = value
        super().__init__("Invalid date format. Use YYYY-MM-DD.")


class UpstreamFetchError(BreakReportError):
    """Fetching doors, events or a token from the access-control API failed."""
