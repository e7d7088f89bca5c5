"""Break report data models for breakwatch."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from breakwatch.models.constants import BREAK_AREA_LABEL, DEFAULT_TIMEZONE, UNKNOWN_SITE_NAME


class Door(BaseModel):
    """Access-controlled door as listed by the doors API."""

    door_id: str = Field(..., description="Vendor door identifier")
    name: str = Field("", description="Door display name")
    site_name: str = Field(UNKNOWN_SITE_NAME, description="Site the door belongs to")
    site_id: Optional[str] = Field(None, description="Vendor site identifier")
    timezone: str = Field(DEFAULT_TIMEZONE, description="IANA timezone of the door")
    camera_info: Dict[str, Any] = Field(default_factory=dict, description="Camera metadata passed through from the vendor")

    @classmethod
    def from_vendor(cls, data: Dict[str, Any]) -> "Door":
        """Build a Door from a doors API record."""
        site = data.get("site") or {}
        site_id = site.get("site_id")
        return cls(
            door_id=str(data["door_id"]),
            name=data.get("name") or "",
            site_name=site.get("name") or UNKNOWN_SITE_NAME,
            site_id=str(site_id) if site_id is not None else None,
            timezone=data.get("timezone") or DEFAULT_TIMEZONE,
            camera_info=data.get("camera_info") or {},
        )

    def summary(self) -> "DoorSummary":
        return DoorSummary(
            door_id=self.door_id,
            name=self.name,
            site_name=self.site_name,
            timezone=self.timezone,
        )


class ReportWindow(BaseModel):
    """Unix-second range covered by a report, inclusive on both ends."""

    start_unix: int
    end_unix: int
    tz: str


class EventStamp(BaseModel):
    """One side of a session pair, formatted in door local time."""

    date: str
    time: str
    location: str


class SessionPair(BaseModel):
    """A matched entry followed by an exit for one user."""

    user_id: str
    user_name: str
    site_name: str
    area: str = BREAK_AREA_LABEL
    in_event: EventStamp
    out_event: EventStamp
    duration_ms: int = Field(..., ge=0)
    duration_label: str


class ViolationRecord(BaseModel):
    """Anti-passback violation surfaced on its own, never paired."""

    date: str
    time: str
    message: str
    event_type: str


class UserReport(BaseModel):
    """Per-user break summary."""

    user_id: str
    user_name: str
    site_name: str
    total_duration_ms: int
    total_duration_label: str
    pairs: List[SessionPair] = Field(default_factory=list)
    violations: List[ViolationRecord] = Field(default_factory=list)


class DoorSummary(BaseModel):
    """Door block echoed back in a report."""

    door_id: str
    name: str
    site_name: str
    timezone: str


class BreakReport(BaseModel):
    """Full response for one door and one day."""

    door: DoorSummary
    generated_range: ReportWindow
    threshold_minutes: float
    users: List[UserReport] = Field(default_factory=list)
