"""Request descriptors and body-encoding strategies."""

from __future__ import annotations

import json
import uuid
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

import aiohttp
from aiohttp import hdrs

from .codec import encode_form
from .models import Token


class HttpMethod(Enum):
    """HTTP methods used by the journal service."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class MimeType(Enum):
    """Content types understood by the journal service."""

    JSON = "application/json"
    FORM = "application/x-www-form-urlencoded"
    MULTIPART = "multipart/form-data"


class RequestBody(ABC):
    """Strategy that turns a typed payload into request bytes."""

    @property
    @abstractmethod
    def content_type(self) -> str:
        """Value for the Content-Type header."""

    @abstractmethod
    async def encode(self) -> bytes:
        """Serialize the body."""


@dataclass(frozen=True)
class JsonBody(RequestBody):
    """Structured body serialized as JSON."""

    payload: Any

    @property
    def content_type(self) -> str:
        return MimeType.JSON.value

    async def encode(self) -> bytes:
        return json.dumps(self.payload).encode("utf-8")


@dataclass(frozen=True)
class FormBody(RequestBody):
    """URL-encoded form body, used by the password grant."""

    fields: Mapping[str, str]

    @property
    def content_type(self) -> str:
        return MimeType.FORM.value

    async def encode(self) -> bytes:
        return encode_form(self.fields)


@dataclass(frozen=True)
class MultipartBody(RequestBody):
    """Single-file multipart/form-data body for binary uploads.

    Part headers are rendered by aiohttp.MultipartWriter, which quotes the
    field name and filename.
    """

    data: bytes
    field_name: str = "file"
    filename: str = "image.jpg"
    file_content_type: str = "image/jpeg"
    boundary: str = field(default_factory=lambda: f"Boundary-{uuid.uuid4().hex}")

    def __post_init__(self) -> None:
        if any(c in self.file_content_type for c in "\r\n"):
            raise ValueError("file_content_type must not contain line breaks")

    @property
    def content_type(self) -> str:
        return f"{MimeType.MULTIPART.value}; boundary={self.boundary}"

    async def encode(self) -> bytes:
        writer = aiohttp.MultipartWriter("form-data", boundary=self.boundary)
        part = writer.append(self.data, {hdrs.CONTENT_TYPE: self.file_content_type})
        part.set_content_disposition(
            "form-data", name=self.field_name, filename=self.filename
        )
        return await writer.as_bytes()


@dataclass(frozen=True)
class RequestDescriptor:
    """Fully materialized outbound HTTP call.

    Attributes:
        method: HTTP method.
        url: Absolute URL.
        headers: Read-only, insertion-ordered header mapping.
        body: Encoded body bytes, if any.
    """

    method: HttpMethod
    url: str
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    body: bytes | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))


async def build_request(
    method: HttpMethod,
    url: str,
    *,
    token: Token | None = None,
    body: RequestBody | None = None,
    accept: bool = True,
) -> RequestDescriptor:
    """Build a request descriptor.

    Args:
        method: HTTP method.
        url: Resolved endpoint URL.
        token: Bearer token; adds an Authorization header when given.
        body: Body strategy; sets Content-Type and the encoded bytes.
        accept: Whether to send ``Accept: application/json``.

    Returns:
        Immutable RequestDescriptor.
    """
    headers: dict[str, str] = {}
    if accept:
        headers["Accept"] = MimeType.JSON.value
    if token is not None:
        headers["Authorization"] = token.authorization_value
    encoded: bytes | None = None
    if body is not None:
        headers["Content-Type"] = body.content_type
        encoded = await body.encode()
    return RequestDescriptor(
        method=method,
        url=url,
        headers=MappingProxyType(headers),
        body=encoded,
    )
