"""Tests for JournalTransport."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import aiohttp
import pytest

from trip_journal_client.errors import BadResponse, JournalTimeout
from trip_journal_client.models import RawResponse
from trip_journal_client.request import HttpMethod, JsonBody, build_request
from trip_journal_client.transport import JournalTransport

from .conftest import create_mock_response, make_token


async def _request():
    return await build_request(
        HttpMethod.POST,
        "http://journal.test/trips",
        token=make_token("abc"),
        body=JsonBody({"name": "x"}),
    )


class TestSend:
    """Tests for JournalTransport.send()."""

    async def test_returns_status_and_body(self, mock_session: MagicMock) -> None:
        mock_session.request.return_value = create_mock_response(200, b'{"id": 1}')
        transport = JournalTransport(mock_session)

        raw = await transport.send(await _request())

        assert raw == RawResponse(status=200, body=b'{"id": 1}')

    async def test_passes_descriptor_through(self, mock_session: MagicMock) -> None:
        mock_session.request.return_value = create_mock_response(200)
        transport = JournalTransport(mock_session)
        request = await _request()

        await transport.send(request)

        call_args = mock_session.request.call_args
        assert call_args.args == ("POST", "http://journal.test/trips")
        assert call_args.kwargs["headers"] == dict(request.headers)
        assert call_args.kwargs["data"] == request.body

    async def test_default_timeouts(self, mock_session: MagicMock) -> None:
        """Requests time out after 30s idle and 60s total."""
        mock_session.request.return_value = create_mock_response(204)
        transport = JournalTransport(mock_session)

        await transport.send(await _request())

        timeout = mock_session.request.call_args.kwargs["timeout"]
        assert timeout.total == 60
        assert timeout.sock_read == 30
        assert timeout.sock_connect == 30

    async def test_non_success_status_is_returned(self, mock_session: MagicMock) -> None:
        mock_session.request.return_value = create_mock_response(500, b"boom")
        transport = JournalTransport(mock_session)

        raw = await transport.send(await _request())

        assert raw.status == 500

    async def test_timeout_raises_journal_timeout(self, mock_session: MagicMock) -> None:
        mock_session.request.side_effect = TimeoutError("Request timed out")
        transport = JournalTransport(mock_session)

        with pytest.raises(JournalTimeout, match="timed out") as exc_info:
            await transport.send(await _request())
        assert isinstance(exc_info.value, BadResponse)
        assert exc_info.value.status is None

    async def test_client_error_raises_bad_response(self, mock_session: MagicMock) -> None:
        mock_session.request.side_effect = aiohttp.ClientError("Connection refused")
        transport = JournalTransport(mock_session)

        with pytest.raises(BadResponse) as exc_info:
            await transport.send(await _request())
        assert exc_info.value.status is None

    async def test_cancellation_propagates(self, mock_session: MagicMock) -> None:
        mock_session.request.side_effect = asyncio.CancelledError()
        transport = JournalTransport(mock_session)

        with pytest.raises(asyncio.CancelledError):
            await transport.send(await _request())


class TestClose:
    """Tests for JournalTransport.close()."""

    async def test_does_not_close_shared_session(self, mock_session: MagicMock) -> None:
        transport = JournalTransport(mock_session)

        await transport.close()

        mock_session.close.assert_not_called()

    async def test_closes_owned_session(self) -> None:
        transport = JournalTransport()
        session = transport._get_session()

        await transport.close()

        assert session.closed
