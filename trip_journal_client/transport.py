"""HTTP transport for trip journal requests."""

from __future__ import annotations

import logging

import aiohttp

from .errors import BadResponse, JournalTimeout
from .models import RawResponse
from .request import RequestDescriptor

_LOGGER = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_RESOURCE_TIMEOUT = 60.0


class JournalTransport:
    """Send request descriptors over HTTP and return raw responses.

    This is the only I/O boundary of the client. Every call is a live round
    trip: aiohttp keeps no response cache and no retries are attempted.
    A single instance is safe to share between concurrent callers.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        *,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        resource_timeout: float = DEFAULT_RESOURCE_TIMEOUT,
    ) -> None:
        self._session = session
        self._owns_session = session is None
        self._timeout = aiohttp.ClientTimeout(
            total=resource_timeout,
            sock_connect=request_timeout,
            sock_read=request_timeout,
        )

    @property
    def timeout(self) -> aiohttp.ClientTimeout:
        return self._timeout

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or (self._owns_session and self._session.closed):
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def send(self, request: RequestDescriptor) -> RawResponse:
        """Execute a request and return its status and body bytes.

        Raises:
            JournalTimeout: If the request or resource timeout elapses.
            BadResponse: If no response could be obtained.
        """
        session = self._get_session()
        _LOGGER.debug("%s %s", request.method.value, request.url)
        try:
            async with session.request(
                request.method.value,
                request.url,
                headers=dict(request.headers),
                data=request.body,
                timeout=self._timeout,
            ) as resp:
                body = await resp.read()
                _LOGGER.debug(
                    "%s %s -> %d (%d bytes)",
                    request.method.value,
                    request.url,
                    resp.status,
                    len(body),
                )
                return RawResponse(status=resp.status, body=body)
        except TimeoutError as err:
            raise JournalTimeout(
                f"{request.method.value} {request.url} timed out"
            ) from err
        except aiohttp.ClientError as err:
            raise BadResponse(
                None, f"{request.method.value} {request.url} failed: {err}"
            ) from err

    async def close(self) -> None:
        """Close the HTTP session if this transport created it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
