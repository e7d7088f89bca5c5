"""Tests for the Verkada access API client.

Network calls are replaced with mocked `requests` responses.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from breakwatch.errors import UpstreamFetchError
from breakwatch.integrations.verkada import VerkadaClient, order_doors_for_breaks
from breakwatch.models.report import Door


def _response(payload, status_ok=True):
    resp = MagicMock()
    resp.json.return_value = payload
    if status_ok:
        resp.raise_for_status.return_value = None
    else:
        resp.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
    return resp


def _client(**kwargs):
    return VerkadaClient(api_key="test_api_key_value", api_base="https://api.example.test", **kwargs)


def test_requires_api_key():
    with patch("breakwatch.integrations.verkada.config.VERKADA_API_KEY", None):
        with pytest.raises(ValueError):
            VerkadaClient()


def test_token_is_cached_until_expiry():
    client = _client(token_ttl_seconds=300)

    with patch("breakwatch.integrations.verkada.requests.post", return_value=_response({"token": "tok-1"})) as post, patch(
        "breakwatch.integrations.verkada.time"
    ) as mock_time:
        mock_time.time.side_effect = [1000.0, 1100.0, 1400.0]
        assert client.get_bearer_token() == "tok-1"
        assert client.get_bearer_token() == "tok-1"
        assert post.call_count == 1

        post.return_value = _response({"token": "tok-2"})
        assert client.get_bearer_token() == "tok-2"
        assert post.call_count == 2

    _, kwargs = post.call_args
    assert kwargs["headers"]["x-api-key"] == "test_api_key_value"


def test_token_failure_raises_upstream_error():
    client = _client()

    with patch("breakwatch.integrations.verkada.requests.post", return_value=_response({}, status_ok=False)):
        with pytest.raises(UpstreamFetchError):
            client.get_bearer_token()


def test_fetch_doors_maps_vendor_records():
    client = _client()
    payload = {
        "doors": [
            {
                "door_id": "d1",
                "name": "Break Room",
                "site": {"name": "Plant 1", "site_id": "s1"},
                "timezone": "America/Chicago",
            },
            {"door_id": "d2", "name": "Lobby"},
        ]
    }

    with patch.object(client, "get_bearer_token", return_value="tok"), patch(
        "breakwatch.integrations.verkada.requests.get", return_value=_response(payload)
    ) as get:
        doors = client.fetch_doors(site_id="s1")

    assert [d.door_id for d in doors] == ["d1", "d2"]
    assert doors[0].site_name == "Plant 1"
    assert doors[0].timezone == "America/Chicago"
    assert doors[1].site_name == "Unknown Site"
    assert doors[1].timezone == "UTC"
    args, kwargs = get.call_args
    assert args[0] == "https://api.example.test/access/v1/doors"
    assert kwargs["params"] == {"site_ids": "s1"}
    assert kwargs["headers"]["x-verkada-auth"] == "tok"


def test_fetch_doors_skips_records_without_door_id():
    client = _client()
    payload = {
        "doors": [
            {"name": "Unlabeled"},
            {"door_id": None, "name": "Blank"},
            {"door_id": 7, "name": "Break Room"},
        ]
    }

    with patch.object(client, "get_bearer_token", return_value="tok"), patch(
        "breakwatch.integrations.verkada.requests.get", return_value=_response(payload)
    ):
        doors = client.fetch_doors()

    assert [(d.door_id, d.name) for d in doors] == [("7", "Break Room")]


def test_fetch_access_events_follows_pagination():
    client = _client(page_size=2)
    pages = [
        _response({"events": [{"event_id": "1"}, {"event_id": "2"}], "next_page_token": "p2"}),
        _response({"events": [{"event_id": "3"}], "next_page_token": None}),
    ]

    with patch.object(client, "get_bearer_token", return_value="tok"), patch(
        "breakwatch.integrations.verkada.requests.get", side_effect=pages
    ) as get:
        events = client.fetch_access_events(100, 200)

    assert [e["event_id"] for e in events] == ["1", "2", "3"]
    assert get.call_count == 2
    first_params = get.call_args_list[0].kwargs["params"]
    second_params = get.call_args_list[1].kwargs["params"]
    assert first_params == {"start_time": "100", "end_time": "200", "page_size": "2"}
    assert second_params["page_token"] == "p2"


def test_fetch_access_events_failure_raises_upstream_error():
    client = _client()

    with patch.object(client, "get_bearer_token", return_value="tok"), patch(
        "breakwatch.integrations.verkada.requests.get",
        side_effect=requests.ConnectionError("connection refused"),
    ):
        with pytest.raises(UpstreamFetchError):
            client.fetch_access_events(100, 200)


def test_order_doors_for_breaks():
    doors = [
        Door(door_id="1", name="Lobby"),
        Door(door_id="2", name="West Break Room"),
        Door(door_id="3", name="Annex"),
        Door(door_id="4", name="break area"),
    ]

    ordered = order_doors_for_breaks(doors)

    assert [d.name for d in ordered] == ["break area", "West Break Room", "Annex", "Lobby"]
