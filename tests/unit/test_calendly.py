"""Unit tests for the Calendly booking client, against a mocked API."""

import datetime as dt

import httpx
import pytest
from libs.common.errors import ExternalServiceError
from services.sessions_service.services.calendly import (
    client_name_from_email,
    fetch_upcoming_bookings,
    infer_session_type,
)

BASE = "https://api.calendly.com"
EVENT_TYPE_URI = f"{BASE}/event_types/ET1"


def _event(uuid: str, uri_suffix: str = "") -> dict:
    return {
        "uri": f"{BASE}/scheduled_events/{uuid}{uri_suffix}",
        "name": "Coaching Call",
        "start_time": "2030-05-01T09:00:00.000000Z",
        "end_time": "2030-05-01T09:45:00.000000Z",
        "event_type": EVENT_TYPE_URI,
        "event_memberships": [{"user_email": "coach@example.com"}],
        "location": {"join_url": "https://zoom.us/j/123"},
    }


def _handler(invitees: dict, events: list):
    def handle(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer token-1"
        path = request.url.path
        if path == "/users/me":
            return httpx.Response(200, json={"resource": {"uri": f"{BASE}/users/U1"}})
        if path == "/scheduled_events":
            return httpx.Response(200, json={"collection": events})
        if path == "/event_types/ET1":
            return httpx.Response(200, json={"resource": {"name": "Executive Coaching"}})
        if path.endswith("/invitees"):
            event_uuid = path.split("/")[-2]
            return httpx.Response(200, json={"collection": invitees.get(event_uuid, [])})
        return httpx.Response(404)

    return handle


@pytest.mark.unit
@pytest.mark.parametrize(
    "name, expected",
    [
        ("Team Offsite", "team"),
        ("Group coaching", "team"),
        ("Mentor coaching hour", "mentor"),
        ("Discovery call", "individual"),
    ],
)
def test_infer_session_type(name, expected):
    assert infer_session_type(name) == expected


@pytest.mark.unit
def test_client_name_from_email():
    assert client_name_from_email("jo+calendly@example.com") == "jo"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_bookings_are_mapped_and_logged_ones_excluded():
    invitees = {
        "EV1": [
            {"email": "coach@example.com", "name": "Coach", "status": "active"},
            {"email": "dana@example.com", "name": "Dana Client", "status": "active"},
        ],
        "EV2": [{"email": "eli@example.com", "name": "Eli", "status": "active"}],
    }
    transport = httpx.MockTransport(_handler(invitees, [_event("EV1"), _event("EV2")]))

    async with httpx.AsyncClient(transport=transport) as http:
        bookings = await fetch_upcoming_bookings("token-1", {"EV2"}, http=http)

    assert len(bookings) == 1
    booking = bookings[0]
    assert booking["calendly_booking_id"] == "EV1"
    assert booking["event_name"] == "Executive Coaching"
    assert booking["client_name"] == "Dana Client"
    assert booking["client_email"] == "dana@example.com"
    assert booking["date"] == dt.date(2030, 5, 1)
    assert booking["duration"] == 45
    assert booking["types"] == ["individual"]
    assert booking["location"] == "https://zoom.us/j/123"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_fully_cancelled_booking_is_dropped():
    invitees = {"EV1": [{"email": "dana@example.com", "status": "canceled"}]}
    transport = httpx.MockTransport(_handler(invitees, [_event("EV1")]))

    async with httpx.AsyncClient(transport=transport) as http:
        bookings = await fetch_upcoming_bookings("token-1", set(), http=http)

    assert bookings == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_api_error_is_reported():
    transport = httpx.MockTransport(lambda request: httpx.Response(401, json={}))

    async with httpx.AsyncClient(transport=transport) as http:
        with pytest.raises(ExternalServiceError):
            await fetch_upcoming_bookings("token-1", set(), http=http)
