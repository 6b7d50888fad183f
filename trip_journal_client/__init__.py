"""Async client for the trip journal service."""

__version__ = "0.1.0"

from .client import JournalClient
from .config import (
    JournalClientConfig,
    ListFailurePolicy,
    MediaUploadMode,
    load_config,
)
from .endpoints import Endpoint, EndpointKind, EndpointResolver
from .errors import (
    BadResponse,
    BadUrl,
    ConfigLoadError,
    FailedToDecodeResponse,
    InvalidValue,
    JournalClientError,
    JournalTimeout,
    SessionExpired,
    TokenStoreError,
    UnprocessableEntity,
)
from .models import (
    Event,
    EventCreate,
    EventUpdate,
    Location,
    Media,
    MediaCreate,
    RawResponse,
    Token,
    Trip,
    TripCreate,
    TripUpdate,
)
from .request import HttpMethod, RequestDescriptor, build_request
from .session import JournalSession
from .token_store import FileTokenStore, InMemoryTokenStore, TokenStore
from .transport import JournalTransport

__all__ = [
    "BadResponse",
    "BadUrl",
    "ConfigLoadError",
    "Endpoint",
    "EndpointKind",
    "EndpointResolver",
    "Event",
    "EventCreate",
    "EventUpdate",
    "FailedToDecodeResponse",
    "FileTokenStore",
    "HttpMethod",
    "InMemoryTokenStore",
    "InvalidValue",
    "JournalClient",
    "JournalClientConfig",
    "JournalClientError",
    "JournalSession",
    "JournalTimeout",
    "JournalTransport",
    "ListFailurePolicy",
    "Location",
    "Media",
    "MediaCreate",
    "MediaUploadMode",
    "RawResponse",
    "RequestDescriptor",
    "SessionExpired",
    "Token",
    "TokenStore",
    "TokenStoreError",
    "Trip",
    "TripCreate",
    "TripUpdate",
    "UnprocessableEntity",
    "__version__",
    "build_request",
    "load_config",
]
