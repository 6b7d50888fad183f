"""Response decoding and failure classification.

Every resource type shares the same rules:
- 200 decodes the body into the expected shape
- 204 is accepted for operations that return nothing
- 422 is reported as UnprocessableEntity, with the body logged only
- Anything else is a BadResponse
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any, NoReturn, TypeVar

from .errors import BadResponse, FailedToDecodeResponse, UnprocessableEntity
from .models import RawResponse

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def classify_failure(raw: RawResponse) -> NoReturn:
    """Raise the classified error for a non-success response."""
    if raw.status == 422:
        _LOGGER.warning(
            "Service rejected request (422): %s",
            raw.body.decode("utf-8", errors="replace"),
        )
        raise UnprocessableEntity("Service rejected the request as unprocessable")
    raise BadResponse(raw.status, f"Unexpected response status {raw.status}")


def decode_response(raw: RawResponse, decoder: Callable[[Any], T]) -> T:
    """Decode a 200 response body with ``decoder`` or raise a classified error."""
    if raw.status != 200:
        classify_failure(raw)
    try:
        payload = json.loads(raw.body)
    except ValueError as err:
        raise FailedToDecodeResponse("Response body is not valid JSON") from err
    try:
        return decoder(payload)
    except FailedToDecodeResponse:
        raise
    except (KeyError, TypeError, ValueError) as err:
        raise FailedToDecodeResponse(f"Unexpected response shape: {err}") from err


def expect_no_content(raw: RawResponse) -> None:
    """Accept 200/204 for void operations without touching the body."""
    if raw.status in (200, 204):
        return
    classify_failure(raw)
