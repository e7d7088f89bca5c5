"""Pytest fixtures and configuration for breakwatch tests."""

import pytest
from datetime import datetime, timezone
from fastapi.testclient import TestClient
from dateutil import tz

from breakwatch.models.event import NormalizedEvent
from breakwatch.models.report import Door


DOOR_ID = "door-break-1"
DOOR_TZ = "America/Chicago"


@pytest.fixture
def door_id():
    """Door the tests report on."""
    return DOOR_ID


@pytest.fixture
def door():
    """Break room door in a non-UTC timezone."""
    return Door(
        door_id=DOOR_ID,
        name="Break Room",
        site_name="Plant 1",
        site_id="site-1",
        timezone=DOOR_TZ,
    )


@pytest.fixture
def other_door():
    """Another door at the same site."""
    return Door(
        door_id="door-lobby",
        name="Lobby",
        site_name="Plant 1",
        site_id="site-1",
        timezone=DOOR_TZ,
    )


@pytest.fixture
def make_raw_event():
    """Factory for vendor access event dicts.

    Timestamps are given as UTC ISO strings, as the events API returns them.
    """
    counter = {"n": 0}

    def _make(
        timestamp: str,
        direction=None,
        user_id="U1",
        user_name="Alice Smith",
        door_id=DOOR_ID,
        event_type="DOOR_ACCESS_GRANTED",
        message=None,
        **info_overrides,
    ) -> dict:
        counter["n"] += 1
        info = {
            "doorId": door_id,
            "userId": user_id,
            "userName": user_name,
            "siteName": "Plant 1",
            "direction": direction,
            "doorInfo": {"name": "Break Room"},
        }
        if message is not None:
            info["message"] = message
        info.update(info_overrides)
        return {
            "event_id": f"evt-{counter['n']}",
            "event_type": event_type,
            "device_id": door_id,
            "timestamp": timestamp,
            "event_info": info,
        }

    return _make


@pytest.fixture
def make_event():
    """Factory for NormalizedEvent objects at a local wall-clock time in the door's timezone."""
    zone = tz.gettz(DOOR_TZ)

    def _make(
        hour: int,
        minute: int = 0,
        second: int = 0,
        direction: str = "in",
        user_id: str = "U1",
        user_name: str = "Alice Smith",
        event_type: str = "DOOR_ACCESS_GRANTED",
        door_id: str = DOOR_ID,
        violation_message=None,
        day: int = 15,
    ) -> NormalizedEvent:
        labels = {"in": "Inbound", "out": "Outbound", "unknown": "Unknown"}
        return NormalizedEvent(
            event_id=f"{user_id}-{hour:02d}{minute:02d}{second:02d}-{direction}",
            event_type=event_type,
            violation_message=violation_message,
            timestamp=datetime(2024, 3, day, hour, minute, second, tzinfo=zone),
            user_id=user_id,
            user_name=user_name,
            site_name="Plant 1",
            door_id=door_id,
            direction=direction,
            direction_label=labels.get(direction, direction.title()),
            door_name="Break Room",
        )

    return _make


@pytest.fixture
def fixed_now():
    """Wall clock used when a report defaults to today."""
    return datetime(2024, 3, 15, 18, 0, 0, tzinfo=timezone.utc)


class FakeVerkadaClient:
    """In-memory stand-in for VerkadaClient used by API and orchestration tests."""

    def __init__(self, doors=None, events=None, error=None):
        self.doors = doors or []
        self.events = events or []
        self.error = error
        self.door_calls = []
        self.event_calls = []

    def fetch_doors(self, site_id=None):
        self.door_calls.append(site_id)
        if self.error:
            raise self.error
        return list(self.doors)

    def fetch_access_events(self, start_unix, end_unix):
        self.event_calls.append((start_unix, end_unix))
        if self.error:
            raise self.error
        return list(self.events)


@pytest.fixture
def make_client():
    """Factory for fake Verkada clients."""
    return FakeVerkadaClient


@pytest.fixture
def fake_client(door, other_door):
    """Fake client with two doors and no events."""
    return FakeVerkadaClient(doors=[other_door, door])


@pytest.fixture
def test_client(fake_client):
    """Create a FastAPI test client with the Verkada client dependency overridden."""
    from breakwatch.api.app import app, get_verkada_client

    app.dependency_overrides[get_verkada_client] = lambda: fake_client

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
