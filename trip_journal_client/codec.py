"""Wire encoding and decoding for trip journal payloads.

Outgoing bodies follow the service contract literally:
- Dates are ISO-8601 internet date-time in UTC (``2024-05-01T09:30:00Z``)
- Every key is always present; absent optionals become ``""`` or ``0.0``
- Identifiers are sent as strings

Incoming payloads are decoded into frozen models. Any shape mismatch raises
FailedToDecodeResponse.
"""

from __future__ import annotations

import base64
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any
from urllib.parse import urlencode

from .errors import FailedToDecodeResponse
from .models import (
    DEFAULT_TOKEN_VALIDITY,
    Event,
    EventCreate,
    EventUpdate,
    Location,
    Media,
    MediaCreate,
    Token,
    Trip,
    TripCreate,
    TripUpdate,
)

_INTERNET_DATE_TIME = "%Y-%m-%dT%H:%M:%SZ"


# -------------------------------------------------------------------------
# Dates
# -------------------------------------------------------------------------


def format_datetime(value: datetime) -> str:
    """Format a datetime as UTC internet date-time without fractional seconds.

    Naive datetimes are treated as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime(_INTERNET_DATE_TIME)


def parse_datetime(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts a ``Z`` designator, numeric offsets, fractional seconds and naive
    timestamps (assumed UTC).

    Raises:
        FailedToDecodeResponse: If the value is not an ISO-8601 string.
    """
    if not isinstance(value, str):
        raise FailedToDecodeResponse(f"Expected ISO-8601 string, got {value!r}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as err:
        raise FailedToDecodeResponse(f"Invalid ISO-8601 timestamp: {value!r}") from err
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


# -------------------------------------------------------------------------
# Encoding
# -------------------------------------------------------------------------


def encode_credentials(username: str, password: str) -> dict[str, str]:
    """Build the JSON registration body."""
    return {"username": username, "password": password}


def encode_login_form(username: str, password: str) -> dict[str, str]:
    """Build the OAuth2 password-grant form fields (empty grant_type)."""
    return {"grant_type": "", "username": username, "password": password}


def encode_form(fields: Mapping[str, str]) -> bytes:
    """URL-encode form fields preserving their order."""
    return urlencode(list(fields.items())).encode("utf-8")


def encode_trip(trip: TripCreate | TripUpdate) -> dict[str, Any]:
    """Encode trip fields for create and update requests."""
    return {
        "name": trip.name,
        "start_date": format_datetime(trip.start_date),
        "end_date": format_datetime(trip.end_date),
    }


def encode_location(location: Location | None) -> dict[str, Any]:
    """Encode a location, substituting defaults when it is absent."""
    if location is None:
        return {"latitude": 0.0, "longitude": 0.0, "address": ""}
    return {
        "latitude": float(location.latitude),
        "longitude": float(location.longitude),
        "address": location.address or "",
    }


def _encode_event_fields(event: EventCreate | EventUpdate) -> dict[str, Any]:
    return {
        "name": event.name,
        "note": event.note or "",
        "date": format_datetime(event.date),
        "location": encode_location(event.location),
        "transition_from_previous": event.transition_from_previous or "",
    }


def encode_event_create(event: EventCreate) -> dict[str, Any]:
    """Encode an event creation body, including its trip id."""
    return {"trip_id": str(event.trip_id), **_encode_event_fields(event)}


def encode_event_update(event: EventUpdate) -> dict[str, Any]:
    """Encode an event update body; the trip is fixed by the event id."""
    return _encode_event_fields(event)


def encode_media_url(event_id: int, url: str) -> dict[str, Any]:
    """Encode a media record referencing an already uploaded file."""
    return {"event_id": str(event_id), "url": url}


def encode_media_base64(media: MediaCreate) -> dict[str, Any]:
    """Encode a media record embedding the image as base64."""
    return {
        "event_id": str(media.event_id),
        "base64_data": base64.b64encode(media.data).decode("ascii"),
    }


# -------------------------------------------------------------------------
# Decoding
# -------------------------------------------------------------------------


def _as_mapping(payload: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise FailedToDecodeResponse(f"Expected {what} object, got {type(payload).__name__}")
    return payload


def _require(payload: Mapping[str, Any], key: str, what: str) -> Any:
    try:
        value = payload[key]
    except KeyError as err:
        raise FailedToDecodeResponse(f"{what} is missing '{key}'") from err
    if value is None:
        raise FailedToDecodeResponse(f"{what} has null '{key}'")
    return value


def _require_str(payload: Mapping[str, Any], key: str, what: str) -> str:
    value = _require(payload, key, what)
    if not isinstance(value, str):
        raise FailedToDecodeResponse(f"{what} '{key}' must be a string")
    return value


def _require_id(payload: Mapping[str, Any], key: str, what: str) -> int:
    value = _require(payload, key, what)
    # bool is an int subclass and never a valid identifier
    if isinstance(value, bool):
        raise FailedToDecodeResponse(f"{what} '{key}' must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    raise FailedToDecodeResponse(f"{what} '{key}' must be an integer")


def _optional_str(payload: Mapping[str, Any], key: str, what: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise FailedToDecodeResponse(f"{what} '{key}' must be a string")
    return value


def _as_list(payload: Any, what: str) -> list[Any]:
    if not isinstance(payload, list):
        raise FailedToDecodeResponse(f"Expected list of {what}, got {type(payload).__name__}")
    return payload


def decode_token(
    payload: Any,
    *,
    now: datetime | None = None,
    validity: timedelta = DEFAULT_TOKEN_VALIDITY,
) -> Token:
    """Decode a token response and assign its expiration date."""
    data = _as_mapping(payload, "token")
    return Token(
        access_token=_require_str(data, "access_token", "token"),
        token_type=_require_str(data, "token_type", "token"),
        expiration_date=Token.default_expiration_date(now, validity),
    )


def decode_location(payload: Any) -> Location | None:
    if payload is None:
        return None
    data = _as_mapping(payload, "location")
    try:
        latitude = float(_require(data, "latitude", "location"))
        longitude = float(_require(data, "longitude", "location"))
    except (TypeError, ValueError) as err:
        raise FailedToDecodeResponse("location coordinates must be numbers") from err
    return Location(
        latitude=latitude,
        longitude=longitude,
        address=_optional_str(data, "address", "location"),
    )


def decode_media(payload: Any) -> Media:
    """Decode a media record."""
    data = _as_mapping(payload, "media")
    return Media(
        id=_require_id(data, "id", "media"),
        event_id=_require_id(data, "event_id", "media"),
        url=_require_str(data, "url", "media"),
    )


def decode_event(payload: Any) -> Event:
    """Decode an event, including any embedded media."""
    data = _as_mapping(payload, "event")
    medias = data.get("medias") or []
    return Event(
        id=_require_id(data, "id", "event"),
        trip_id=_require_id(data, "trip_id", "event"),
        name=_require_str(data, "name", "event"),
        date=parse_datetime(_require(data, "date", "event")),
        note=_optional_str(data, "note", "event"),
        location=decode_location(data.get("location")),
        transition_from_previous=_optional_str(data, "transition_from_previous", "event"),
        medias=tuple(decode_media(item) for item in _as_list(medias, "medias")),
    )


def decode_trip(payload: Any) -> Trip:
    """Decode a trip, including any embedded events."""
    data = _as_mapping(payload, "trip")
    events = data.get("events") or []
    return Trip(
        id=_require_id(data, "id", "trip"),
        name=_require_str(data, "name", "trip"),
        start_date=parse_datetime(_require(data, "start_date", "trip")),
        end_date=parse_datetime(_require(data, "end_date", "trip")),
        events=tuple(decode_event(item) for item in _as_list(events, "events")),
    )


def decode_trips(payload: Any) -> list[Trip]:
    """Decode a list of trips."""
    return [decode_trip(item) for item in _as_list(payload, "trips")]


def decode_upload_url(payload: Any) -> str | None:
    """Extract the assigned URL from an upload response, if any."""
    data = _as_mapping(payload, "upload response")
    url = data.get("url")
    if url is None:
        return None
    if not isinstance(url, str):
        raise FailedToDecodeResponse("upload response 'url' must be a string")
    return url or None
