"""Symbolic endpoint references and their resolution to URLs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from yarl import URL

from .errors import BadUrl


class EndpointKind(Enum):
    """Closed set of remote resources the client talks to."""

    REGISTER = "register"
    LOGIN = "login"
    TRIPS = "trips"
    TRIP = "trip"
    EVENTS = "events"
    EVENT = "event"
    MEDIA = "media"
    MEDIA_ITEM = "media_item"


_ID_KINDS = frozenset({EndpointKind.TRIP, EndpointKind.EVENT, EndpointKind.MEDIA_ITEM})


@dataclass(frozen=True)
class Endpoint:
    """Tagged reference to a remote resource.

    Attributes:
        kind: Which resource is addressed.
        resource_id: Identifier for single-resource kinds, None otherwise.
    """

    kind: EndpointKind
    resource_id: int | str | None = None

    def __post_init__(self) -> None:
        """Validate that only single-resource kinds carry an id."""
        if self.kind in _ID_KINDS and self.resource_id is None:
            raise ValueError(f"{self.kind.value} endpoint requires a resource id")
        if self.kind not in _ID_KINDS and self.resource_id is not None:
            raise ValueError(f"{self.kind.value} endpoint does not take a resource id")

    @classmethod
    def register(cls) -> Endpoint:
        return cls(EndpointKind.REGISTER)

    @classmethod
    def login(cls) -> Endpoint:
        return cls(EndpointKind.LOGIN)

    @classmethod
    def trips(cls) -> Endpoint:
        return cls(EndpointKind.TRIPS)

    @classmethod
    def trip(cls, trip_id: int | str) -> Endpoint:
        return cls(EndpointKind.TRIP, trip_id)

    @classmethod
    def events(cls) -> Endpoint:
        return cls(EndpointKind.EVENTS)

    @classmethod
    def event(cls, event_id: int | str) -> Endpoint:
        return cls(EndpointKind.EVENT, event_id)

    @classmethod
    def media(cls) -> Endpoint:
        return cls(EndpointKind.MEDIA)

    @classmethod
    def media_item(cls, media_id: int | str) -> Endpoint:
        return cls(EndpointKind.MEDIA_ITEM, media_id)


def _validate(url: str) -> URL:
    try:
        parsed = URL(url)
    except (TypeError, ValueError) as err:
        raise BadUrl(f"Invalid URL: {url!r}") from err
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise BadUrl(f"Invalid URL: {url!r}")
    return parsed


class EndpointResolver:
    """Resolve endpoint references against a fixed base origin.

    The base origin is validated on construction so a misconfigured client
    fails before any request is attempted.
    """

    def __init__(self, base_url: str, *, media_path: str = "media") -> None:
        _validate(base_url)
        self._base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self._media_path = media_path.strip("/")
        if not self._media_path:
            raise BadUrl("media_path must not be empty")

    @property
    def base_url(self) -> str:
        return self._base_url

    def _path(self, endpoint: Endpoint) -> str:
        kind = endpoint.kind
        if kind is EndpointKind.REGISTER:
            return "register"
        if kind is EndpointKind.LOGIN:
            return "token"
        if kind is EndpointKind.TRIPS:
            return "trips"
        if kind is EndpointKind.TRIP:
            return f"trips/{endpoint.resource_id}"
        if kind is EndpointKind.EVENTS:
            return "events"
        if kind is EndpointKind.EVENT:
            return f"events/{endpoint.resource_id}"
        if kind is EndpointKind.MEDIA:
            return self._media_path
        return f"{self._media_path}/{endpoint.resource_id}"

    def resolve(self, endpoint: Endpoint) -> str:
        """Return the fully qualified URL for an endpoint.

        Raises:
            BadUrl: If the produced string is not a valid URL.
        """
        url = self._base_url + self._path(endpoint)
        _validate(url)
        return url
