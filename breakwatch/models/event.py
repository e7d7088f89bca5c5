"""Access event data models for breakwatch."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from breakwatch.models.constants import APB_EVENT_PREFIX


class Direction(str, Enum):
    """Normalized door direction."""
    IN = "in"
    OUT = "out"
    UNKNOWN = "unknown"


class VendorUserInfo(BaseModel):
    """Nested user block some access events carry instead of flat user fields."""

    user_id: Optional[str] = Field(None, alias="userId")
    name: Optional[str] = None

    @field_validator("user_id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return None if value is None else str(value)


class VendorDoorInfo(BaseModel):
    """Door block embedded in an access event."""

    name: Optional[str] = None


class VendorEventInfo(BaseModel):
    """The `event_info` block of a Verkada access event."""

    door_id: Optional[str] = Field(None, alias="doorId")
    user_id: Optional[str] = Field(None, alias="userId")
    user_name: Optional[str] = Field(None, alias="userName")
    user_info: Optional[VendorUserInfo] = Field(None, alias="userInfo")
    site_name: Optional[str] = Field(None, alias="siteName")
    direction: Optional[str] = None
    message: Optional[str] = None
    door_info: Optional[VendorDoorInfo] = Field(None, alias="doorInfo")

    @field_validator("door_id", "user_id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return None if value is None else str(value)


class RawAccessEvent(BaseModel):
    """Access event as returned by the Verkada events API.

    Only the fields breakwatch reads are declared; everything else in the
    vendor payload is ignored.
    """

    event_id: Optional[str] = None
    event_type: Optional[str] = None
    device_id: Optional[str] = None
    timestamp: Optional[str] = None
    event_info: Optional[VendorEventInfo] = None

    @field_validator("event_id", "device_id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return None if value is None else str(value)


class NormalizedEvent(BaseModel):
    """Canonical access event, zoned to the door's local time."""

    event_id: Optional[str] = Field(None, description="Vendor event identifier")
    event_type: str = Field("", description="Vendor event type, e.g. DOOR_ACCESS_GRANTED or DOOR_APB_DOUBLE_ENTRY")
    violation_message: Optional[str] = Field(None, description="Vendor message attached to the event")
    timestamp: datetime = Field(..., description="Event time in the door's timezone")
    user_id: str = Field(..., description="Badge holder identifier")
    user_name: str = Field(..., description="Badge holder display name")
    site_name: str = Field(..., description="Site the event was reported for")
    door_id: Optional[str] = Field(None, description="Door the event was reported for")
    direction: str = Field(Direction.UNKNOWN.value, description="in, out, unknown, or the lowercased vendor value")
    direction_label: str = Field("Unknown", description="Display label for the direction")
    door_name: str = Field(..., description="Door display name")

    @property
    def is_apb_violation(self) -> bool:
        return self.event_type.startswith(APB_EVENT_PREFIX)

    @property
    def is_directional(self) -> bool:
        return self.direction in (Direction.IN.value, Direction.OUT.value)
