"""Client configuration and YAML loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigLoadError
from .models import DEFAULT_TOKEN_VALIDITY
from .transport import DEFAULT_REQUEST_TIMEOUT, DEFAULT_RESOURCE_TIMEOUT

DEFAULT_BASE_URL = "http://localhost:8000/"


class MediaUploadMode(Enum):
    """How media records are created on the service."""

    URL = "url"  # multipart upload, then a record referencing the URL
    BASE64 = "base64"  # one record embedding the image as base64_data


class ListFailurePolicy(Enum):
    """What listing trips does when the request fails."""

    FALLBACK_EMPTY = "fallback_empty"
    PROPAGATE = "propagate"


@dataclass(frozen=True)
class JournalClientConfig:
    """Configuration for JournalClient.

    Attributes:
        base_url: Origin of the journal service.
        media_path: Path segment of the media collection ("media" or "medias").
        request_timeout: Connect/read timeout per request (seconds).
        resource_timeout: Total timeout per request (seconds).
        token_validity: Lifetime assigned to newly issued tokens.
        media_upload_mode: Media creation contract expected by the service.
        trips_failure_policy: Failure handling for listing trips.
        enforce_expiration: Fail authenticated calls once the token expires.
    """

    base_url: str = DEFAULT_BASE_URL
    media_path: str = "media"
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    resource_timeout: float = DEFAULT_RESOURCE_TIMEOUT
    token_validity: timedelta = field(default=DEFAULT_TOKEN_VALIDITY)
    media_upload_mode: MediaUploadMode = MediaUploadMode.URL
    trips_failure_policy: ListFailurePolicy = ListFailurePolicy.FALLBACK_EMPTY
    enforce_expiration: bool = False

    def __post_init__(self) -> None:
        """Validate timeouts and token lifetime."""
        if self.request_timeout <= 0 or self.resource_timeout <= 0:
            raise ValueError("Timeouts must be positive")
        if self.request_timeout > self.resource_timeout:
            raise ValueError("request_timeout must not exceed resource_timeout")
        if self.token_validity <= timedelta(0):
            raise ValueError("token_validity must be positive")


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file contents."""
    if not path.exists():
        raise ConfigLoadError(f"File not found: {path}")
    with path.open(encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as err:
            raise ConfigLoadError(f"Invalid YAML in {path}") from err
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Expected a mapping in {path}")
    return data


def load_config(path: Path | str) -> JournalClientConfig:
    """Load client configuration from a YAML file.

    Example:
        base_url: https://journal.example.com/
        media_path: medias
        token_validity_seconds: 3600
        media_upload_mode: base64
        trips_failure_policy: propagate

    Raises:
        ConfigLoadError: If the file is missing or contains invalid values.
    """
    path = Path(path)
    data = _load_yaml(path)
    try:
        kwargs: dict[str, Any] = {}
        for key in ("base_url", "media_path"):
            if key in data:
                kwargs[key] = str(data[key])
        for key in ("request_timeout", "resource_timeout"):
            if key in data:
                kwargs[key] = float(data[key])
        if "token_validity_seconds" in data:
            kwargs["token_validity"] = timedelta(
                seconds=float(data["token_validity_seconds"])
            )
        if "media_upload_mode" in data:
            kwargs["media_upload_mode"] = MediaUploadMode(data["media_upload_mode"])
        if "trips_failure_policy" in data:
            kwargs["trips_failure_policy"] = ListFailurePolicy(
                data["trips_failure_policy"]
            )
        if "enforce_expiration" in data:
            kwargs["enforce_expiration"] = bool(data["enforce_expiration"])
        return JournalClientConfig(**kwargs)
    except (TypeError, ValueError) as err:
        raise ConfigLoadError(f"Invalid configuration in {path}: {err}") from err
