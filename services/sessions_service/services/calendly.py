"""Upcoming Calendly bookings, shaped like sessions the coach can log.

Uses the Calendly v2 REST API with either the coach's own OAuth token or
the deployment-wide API token.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Optional

import httpx
from libs.common.config import get_settings
from libs.common.errors import ExternalServiceError
from libs.common.logging import get_logger, get_request_id

logger = get_logger(__name__)

_DEFAULT_TIMEOUT = 10.0
MAX_EVENTS = 20
ONE_TO_ONE_MARKERS = ("one-to-one", "one-on-one", "1-on-1", "1-to-1")


def infer_session_type(event_name: str) -> str:
    name = event_name.lower()
    if "team" in name or "group" in name:
        return "team"
    if "mentor" in name:
        return "mentor"
    return "individual"


def client_name_from_email(email: str) -> str:
    """Local part of an address without plus-addressing: ``jo+cal@x.com`` -> ``jo``."""
    return email.split("@")[0].split("+")[0].strip()


def _parse_time(value: Optional[str]) -> Optional[dt.datetime]:
    if not value:
        return None
    return dt.datetime.fromisoformat(value.replace("Z", "+00:00"))


class CalendlyClient:
    """Minimal async Calendly API client."""

    def __init__(
        self,
        token: str,
        base_url: Optional[str] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.token = token.strip()
        self.base_url = (base_url or get_settings().CALENDLY_API_URL).rstrip("/")
        self._http = http

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }
        request_id = get_request_id()
        if request_id:
            headers["X-Request-ID"] = request_id
        return headers

    async def _get(self, url: str, params: Optional[dict] = None) -> dict[str, Any]:
        if not url.startswith("http"):
            url = f"{self.base_url}{url}"
        if self._http is not None:
            response = await self._http.get(url, headers=self._headers(), params=params)
        else:
            async with httpx.AsyncClient(timeout=_DEFAULT_TIMEOUT) as client:
                response = await client.get(url, headers=self._headers(), params=params)
        response.raise_for_status()
        return response.json()

    async def current_user_uri(self) -> str:
        data = await self._get("/users/me")
        return data["resource"]["uri"]

    async def upcoming_events(self, user_uri: str) -> list[dict]:
        now = dt.datetime.now(dt.timezone.utc).isoformat().replace("+00:00", "Z")
        data = await self._get(
            "/scheduled_events",
            params={"user": user_uri, "min_start_time": now, "status": "active"},
        )
        return data.get("collection", [])[:MAX_EVENTS]

    async def event_type(self, uri: str) -> dict:
        return (await self._get(uri)).get("resource", {})

    async def invitees(self, event_uuid: str) -> list[dict]:
        data = await self._get(f"/scheduled_events/{event_uuid}/invitees")
        return data.get("collection", [])


def _pick_invitee(invitees: list[dict], host_email: Optional[str]) -> Optional[dict]:
    active = [i for i in invitees if (i.get("status") or "active") != "canceled"]
    if not active:
        return None
    for invitee in active:
        email = invitee.get("email")
        if email and email != host_email:
            return invitee
    return active[0]


async def _event_to_session(client: CalendlyClient, event: dict) -> Optional[dict]:
    """Map one scheduled event; ``None`` when every invitee cancelled."""
    event_uuid = event["uri"].rstrip("/").split("/")[-1]
    start = _parse_time(event.get("start_time"))
    end = _parse_time(event.get("end_time"))
    duration = round((end - start).total_seconds() / 60) if start and end else 60
    name = event.get("name") or "Unknown"

    # Older payloads carry the event type as a bare URI string
    event_type_uri = event.get("event_type")
    if isinstance(event_type_uri, dict):
        event_type_uri = event_type_uri.get("uri")
    if event_type_uri:
        try:
            resource = await client.event_type(event_type_uri)
            name = resource.get("name") or name
            if resource.get("duration"):
                # Calendly reports event-type duration in seconds
                duration = round(resource["duration"] / 60)
        except httpx.HTTPError as e:
            logger.debug(f"Calendly event type lookup failed for {event_uuid}: {e}")
    session_type = infer_session_type(name)

    number_in_group = None
    if any(marker in event["uri"].lower() for marker in ONE_TO_ONE_MARKERS):
        session_type = "individual"
        number_in_group = 1

    client_name, client_email = None, None
    try:
        memberships = event.get("event_memberships") or [{}]
        invitee = _pick_invitee(
            await client.invitees(event_uuid), memberships[0].get("user_email")
        )
        if invitee is None:
            return None
        email = (invitee.get("email") or "").strip()
        client_name = (invitee.get("name") or "").strip() or (
            client_name_from_email(email) if "@" in email else None
        )
        client_email = email if "@" in email else None
    except httpx.HTTPError as e:
        logger.debug(f"Calendly invitee lookup failed for {event_uuid}: {e}")

    location = event.get("location") or {}
    return {
        "calendly_booking_id": event_uuid,
        "event_name": name,
        "client_name": client_name or f"Calendly Booking - {name}",
        "client_email": client_email,
        "date": start.date() if start else dt.date.today(),
        "start_time": start,
        "end_time": end,
        "duration": duration,
        "types": [session_type],
        "number_in_group": number_in_group or 1,
        "location": location.get("join_url") or location.get("location"),
    }


async def fetch_upcoming_bookings(
    token: str,
    exclude_booking_ids: set[str],
    http: Optional[httpx.AsyncClient] = None,
) -> list[dict]:
    """Upcoming bookings not yet logged as sessions."""
    client = CalendlyClient(token, http=http)
    try:
        user_uri = await client.current_user_uri()
        events = await client.upcoming_events(user_uri)
    except httpx.HTTPStatusError as e:
        logger.warning(f"Calendly request failed: {e.response.status_code}")
        raise ExternalServiceError(
            f"Failed to fetch Calendly events ({e.response.status_code})"
        ) from e
    except httpx.HTTPError as e:
        raise ExternalServiceError(f"Failed to reach Calendly: {e}") from e

    bookings = []
    for event in events:
        booking = await _event_to_session(client, event)
        if booking and booking["calendly_booking_id"] not in exclude_booking_ids:
            bookings.append(booking)
    return bookings
