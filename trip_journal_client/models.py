"""Domain models exchanged with the trip journal service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

# The service does not send an expiration, so one is assigned on adoption.
DEFAULT_TOKEN_VALIDITY = timedelta(hours=1)


@dataclass(frozen=True)
class Token:
    """Bearer credential plus client-assigned expiration.

    Attributes:
        access_token: Opaque bearer token issued by the service.
        token_type: Token type reported by the service (usually "bearer").
        expiration_date: When the client considers the token stale.
    """

    access_token: str
    token_type: str
    expiration_date: datetime

    @staticmethod
    def default_expiration_date(
        now: datetime | None = None,
        validity: timedelta = DEFAULT_TOKEN_VALIDITY,
    ) -> datetime:
        """Return the expiration assigned to a freshly issued token."""
        issued_at = now if now is not None else datetime.now(tz=UTC)
        return issued_at + validity

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the token is past its expiration date."""
        current = now if now is not None else datetime.now(tz=UTC)
        return current >= self.expiration_date

    @property
    def authorization_value(self) -> str:
        return f"Bearer {self.access_token}"


@dataclass(frozen=True)
class TripCreate:
    """Fields required to create a trip."""

    name: str
    start_date: datetime
    end_date: datetime


@dataclass(frozen=True)
class TripUpdate:
    """Fields sent when replacing a trip."""

    name: str
    start_date: datetime
    end_date: datetime


@dataclass(frozen=True)
class Location:
    """Geographic position attached to an event."""

    latitude: float
    longitude: float
    address: str | None = None


@dataclass(frozen=True)
class Media:
    """Media record attached to an event."""

    id: int
    event_id: int
    url: str


@dataclass(frozen=True)
class MediaCreate:
    """Raw image data to attach to an event."""

    event_id: int
    data: bytes
    filename: str = "image.jpg"
    content_type: str = "image/jpeg"


@dataclass(frozen=True)
class Event:
    """Event within a trip, as returned by the service."""

    id: int
    trip_id: int
    name: str
    date: datetime
    note: str | None = None
    location: Location | None = None
    transition_from_previous: str | None = None
    medias: tuple[Media, ...] = ()


@dataclass(frozen=True)
class EventCreate:
    """Fields required to create an event."""

    trip_id: int
    name: str
    date: datetime
    note: str | None = None
    location: Location | None = None
    transition_from_previous: str | None = None


@dataclass(frozen=True)
class EventUpdate:
    """Fields sent when replacing an event."""

    name: str
    date: datetime
    note: str | None = None
    location: Location | None = None
    transition_from_previous: str | None = None


@dataclass(frozen=True)
class Trip:
    """Trip as returned by the service."""

    id: int
    name: str
    start_date: datetime
    end_date: datetime
    events: tuple[Event, ...] = ()


@dataclass(frozen=True)
class RawResponse:
    """Status code and body bytes returned by the transport."""

    status: int
    body: bytes = b""
