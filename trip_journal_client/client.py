"""High-level client for the trip journal service.

Every domain operation runs the same pipeline:
    session token -> build request -> transport -> decode/classify

Authenticated operations fail with InvalidValue before any network call when
no token is present.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from types import TracebackType
from typing import Any, TypeVar

import aiohttp

from .codec import (
    decode_event,
    decode_media,
    decode_token,
    decode_trip,
    decode_trips,
    decode_upload_url,
    encode_credentials,
    encode_event_create,
    encode_event_update,
    encode_login_form,
    encode_media_base64,
    encode_media_url,
    encode_trip,
)
from .config import JournalClientConfig, ListFailurePolicy, MediaUploadMode
from .endpoints import Endpoint, EndpointResolver
from .errors import BadResponse, JournalClientError
from .models import (
    Event,
    EventCreate,
    EventUpdate,
    Media,
    MediaCreate,
    Token,
    Trip,
    TripCreate,
    TripUpdate,
)
from .request import (
    FormBody,
    HttpMethod,
    JsonBody,
    MultipartBody,
    RequestBody,
    RequestDescriptor,
    build_request,
)
from .response import decode_response, expect_no_content
from .session import JournalSession
from .token_store import TokenStore
from .transport import JournalTransport

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class JournalClient:
    """Access layer for trips, events and media on the journal service.

    Usage:
        async with JournalClient(JournalClientConfig(base_url="https://j.example/")) as client:
            await client.log_in("user", "secret")
            trip = await client.create_trip(TripCreate("Lisbon", start, end))
            await client.delete_trip(trip.id)
            client.log_out()
    """

    def __init__(
        self,
        config: JournalClientConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        token_store: TokenStore | None = None,
        transport: JournalTransport | None = None,
    ) -> None:
        """Initialize client.

        Args:
            config: Client configuration; defaults target a local service.
            session: Shared aiohttp session; one is created lazily if omitted.
            token_store: Token persistence backend; in-memory if omitted.
            transport: Pre-built transport, mainly for tests.
        """
        self._config = config or JournalClientConfig()
        self._resolver = EndpointResolver(
            self._config.base_url, media_path=self._config.media_path
        )
        self._transport = transport or JournalTransport(
            session,
            request_timeout=self._config.request_timeout,
            resource_timeout=self._config.resource_timeout,
        )
        self._session = JournalSession(
            token_store, enforce_expiration=self._config.enforce_expiration
        )

    async def __aenter__(self) -> JournalClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Release transport resources."""
        await self._transport.close()

    @property
    def config(self) -> JournalClientConfig:
        return self._config

    @property
    def session(self) -> JournalSession:
        return self._session

    # -------------------------------------------------------------------------
    # Public API: Authentication
    # -------------------------------------------------------------------------

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    def on_authenticated_changed(
        self, callback: Callable[[bool], None]
    ) -> Callable[[], None]:
        """Observe the authenticated flag; replays the current value."""
        return self._session.on_authenticated_changed(callback)

    def restore_session(self) -> bool:
        """Adopt a token persisted by a previous run, if any."""
        return self._session.restore()

    async def register(self, username: str, password: str) -> Token:
        """Create an account and adopt the issued token."""
        request = await build_request(
            HttpMethod.POST,
            self._resolver.resolve(Endpoint.register()),
            body=JsonBody(encode_credentials(username, password)),
        )
        return await self._authenticate(request)

    async def log_in(self, username: str, password: str) -> Token:
        """Exchange credentials for a token via the password grant."""
        request = await build_request(
            HttpMethod.POST,
            self._resolver.resolve(Endpoint.login()),
            body=FormBody(encode_login_form(username, password)),
        )
        return await self._authenticate(request)

    def log_out(self) -> None:
        """Discard the current token. Never fails."""
        self._session.clear()

    async def _authenticate(self, request: RequestDescriptor) -> Token:
        raw = await self._transport.send(request)
        validity = self._config.token_validity
        token = decode_response(
            raw,
            lambda payload: decode_token(
                payload, now=datetime.now(tz=UTC), validity=validity
            ),
        )
        self._session.adopt(token)
        return token

    # -------------------------------------------------------------------------
    # Public API: Trips
    # -------------------------------------------------------------------------

    async def get_trips(self) -> list[Trip]:
        """List trips.

        With ListFailurePolicy.FALLBACK_EMPTY, request failures are logged and
        an empty list is returned. A missing token is always raised.
        """
        token = self._session.require_token()
        try:
            return await self._call(
                HttpMethod.GET, Endpoint.trips(), token, decoder=decode_trips
            )
        except JournalClientError as err:
            if self._config.trips_failure_policy is ListFailurePolicy.PROPAGATE:
                raise
            _LOGGER.warning("Fetching trips failed, returning no trips: %s", err)
            return []

    async def get_trip(self, trip_id: int) -> Trip:
        token = self._session.require_token()
        return await self._call(
            HttpMethod.GET, Endpoint.trip(trip_id), token, decoder=decode_trip
        )

    async def create_trip(self, trip: TripCreate) -> Trip:
        token = self._session.require_token()
        return await self._call(
            HttpMethod.POST,
            Endpoint.trips(),
            token,
            body=JsonBody(encode_trip(trip)),
            decoder=decode_trip,
        )

    async def update_trip(self, trip_id: int, trip: TripUpdate) -> Trip:
        token = self._session.require_token()
        return await self._call(
            HttpMethod.PUT,
            Endpoint.trip(trip_id),
            token,
            body=JsonBody(encode_trip(trip)),
            decoder=decode_trip,
        )

    async def delete_trip(self, trip_id: int) -> None:
        token = self._session.require_token()
        await self._call_void(HttpMethod.DELETE, Endpoint.trip(trip_id), token)

    # -------------------------------------------------------------------------
    # Public API: Events
    # -------------------------------------------------------------------------

    async def create_event(self, event: EventCreate) -> Event:
        token = self._session.require_token()
        return await self._call(
            HttpMethod.POST,
            Endpoint.events(),
            token,
            body=JsonBody(encode_event_create(event)),
            decoder=decode_event,
        )

    async def update_event(self, event_id: int, event: EventUpdate) -> Event:
        token = self._session.require_token()
        return await self._call(
            HttpMethod.PUT,
            Endpoint.event(event_id),
            token,
            body=JsonBody(encode_event_update(event)),
            decoder=decode_event,
        )

    async def delete_event(self, event_id: int) -> None:
        token = self._session.require_token()
        await self._call_void(HttpMethod.DELETE, Endpoint.event(event_id), token)

    # -------------------------------------------------------------------------
    # Public API: Media
    # -------------------------------------------------------------------------

    async def upload_media(
        self,
        data: bytes,
        *,
        filename: str = "image.jpg",
        content_type: str = "image/jpeg",
    ) -> str:
        """Upload raw image bytes and return the URL assigned by the service.

        Raises:
            BadResponse: If the service does not return a URL.
        """
        token = self._session.require_token()
        return await self._upload(
            data, token, filename=filename, content_type=content_type
        )

    async def create_media(self, media: MediaCreate) -> Media:
        """Attach an image to an event using the configured upload mode."""
        token = self._session.require_token()
        if self._config.media_upload_mode is MediaUploadMode.BASE64:
            payload = encode_media_base64(media)
        else:
            url = await self._upload(
                media.data,
                token,
                filename=media.filename,
                content_type=media.content_type,
            )
            _LOGGER.debug("Uploaded media for event %s to %s", media.event_id, url)
            payload = encode_media_url(media.event_id, url)
        return await self._call(
            HttpMethod.POST,
            Endpoint.media(),
            token,
            body=JsonBody(payload),
            decoder=decode_media,
        )

    async def delete_media(self, media_id: int) -> None:
        token = self._session.require_token()
        await self._call_void(HttpMethod.DELETE, Endpoint.media_item(media_id), token)

    # -------------------------------------------------------------------------
    # Internal: Request pipeline
    # -------------------------------------------------------------------------

    async def _upload(
        self, data: bytes, token: Token, *, filename: str, content_type: str
    ) -> str:
        request = await build_request(
            HttpMethod.POST,
            self._resolver.resolve(Endpoint.media()),
            token=token,
            body=MultipartBody(
                data=data, filename=filename, file_content_type=content_type
            ),
            accept=False,
        )
        raw = await self._transport.send(request)
        url = decode_response(raw, decode_upload_url)
        if url is None:
            raise BadResponse(raw.status, "Upload response did not include a URL")
        return url

    async def _call(
        self,
        method: HttpMethod,
        endpoint: Endpoint,
        token: Token,
        *,
        decoder: Callable[[Any], T],
        body: RequestBody | None = None,
    ) -> T:
        request = await build_request(
            method, self._resolver.resolve(endpoint), token=token, body=body
        )
        raw = await self._transport.send(request)
        return decode_response(raw, decoder)

    async def _call_void(
        self, method: HttpMethod, endpoint: Endpoint, token: Token
    ) -> None:
        request = await build_request(method, self._resolver.resolve(endpoint), token=token)
        raw = await self._transport.send(request)
        expect_no_content(raw)
