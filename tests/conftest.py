"""Pytest configuration and fixtures for trip_journal_client tests."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from trip_journal_client import (
    JournalClient,
    JournalClientConfig,
    RawResponse,
    RequestDescriptor,
    Token,
)

BASE_URL = "http://journal.test/"


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock aiohttp ClientSession."""
    import aiohttp

    return MagicMock(spec=aiohttp.ClientSession)


def create_mock_response(
    status: int = 200,
    read_data: bytes = b"",
) -> AsyncMock:
    """Create a configured mock aiohttp response.

    Args:
        status: HTTP status code
        read_data: Data to return from read() call

    Returns:
        Configured AsyncMock response
    """
    response = AsyncMock()
    response.status = status
    response.read.return_value = read_data
    response.__aenter__.return_value = response
    response.__aexit__.return_value = None
    return response


def json_response(payload: Any, status: int = 200) -> RawResponse:
    """Build a raw response carrying a JSON body."""
    return RawResponse(status=status, body=json.dumps(payload).encode("utf-8"))


class RecordingTransport:
    """Transport double that records requests and replays queued responses."""

    def __init__(self, *responses: RawResponse | BaseException) -> None:
        self.requests: list[RequestDescriptor] = []
        self._responses = list(responses)
        self.closed = False

    def queue(self, response: RawResponse | BaseException) -> None:
        self._responses.append(response)

    async def send(self, request: RequestDescriptor) -> RawResponse:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        response = self._responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True


def make_token(access_token: str = "abc", *, expired: bool = False) -> Token:
    """Build a token that is valid (or already expired)."""
    offset = timedelta(hours=-1) if expired else timedelta(hours=1)
    return Token(
        access_token=access_token,
        token_type="bearer",
        expiration_date=datetime.now(tz=UTC) + offset,
    )


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def client(transport: RecordingTransport) -> JournalClient:
    """Unauthenticated client wired to a recording transport."""
    return JournalClient(
        JournalClientConfig(base_url=BASE_URL),
        transport=transport,  # type: ignore[arg-type]
    )


@pytest.fixture
def authed_client(client: JournalClient) -> JournalClient:
    """Client holding a valid token "abc"."""
    client.session.adopt(make_token("abc"))
    return client
