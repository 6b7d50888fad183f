"""Tests for response decoding and failure classification."""

from __future__ import annotations

import logging

import pytest

from trip_journal_client.codec import decode_trip, decode_trips
from trip_journal_client.errors import (
    BadResponse,
    FailedToDecodeResponse,
    UnprocessableEntity,
)
from trip_journal_client.models import RawResponse
from trip_journal_client.response import decode_response, expect_no_content

from .conftest import json_response

TRIP = {
    "id": 1,
    "name": "Lisbon",
    "start_date": "2024-06-01T00:00:00Z",
    "end_date": "2024-06-08T00:00:00Z",
}


class TestDecodeResponse:
    """Tests for decode_response()."""

    def test_decodes_200(self) -> None:
        trip = decode_response(json_response(TRIP), decode_trip)
        assert trip.name == "Lisbon"

    def test_invalid_json(self) -> None:
        with pytest.raises(FailedToDecodeResponse):
            decode_response(RawResponse(200, b"<html>"), decode_trip)

    def test_shape_mismatch(self) -> None:
        with pytest.raises(FailedToDecodeResponse):
            decode_response(json_response(TRIP), decode_trips)

    @pytest.mark.parametrize("body", [b"", b"{}", b'{"detail": [{"msg": "bad"}]}', b"\xff"])
    def test_422_is_unprocessable_regardless_of_body(self, body: bytes) -> None:
        with pytest.raises(UnprocessableEntity):
            decode_response(RawResponse(422, body), decode_trip)

    def test_422_body_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING), pytest.raises(UnprocessableEntity):
            decode_response(RawResponse(422, b"name is required"), decode_trip)
        assert "name is required" in caplog.text

    @pytest.mark.parametrize("status", [100, 201, 204, 301, 304, 400, 401, 403, 404, 409, 500, 503])
    def test_other_statuses_are_bad_response(self, status: int) -> None:
        with pytest.raises(BadResponse) as exc_info:
            decode_response(json_response(TRIP, status=status), decode_trip)
        assert exc_info.value.status == status


class TestExpectNoContent:
    """Tests for expect_no_content()."""

    @pytest.mark.parametrize("status", [200, 204])
    def test_success_without_decoding(self, status: int) -> None:
        assert expect_no_content(RawResponse(status, b"not json")) is None

    def test_422(self) -> None:
        with pytest.raises(UnprocessableEntity):
            expect_no_content(RawResponse(422, b""))

    def test_404(self) -> None:
        with pytest.raises(BadResponse):
            expect_no_content(RawResponse(404, b""))
