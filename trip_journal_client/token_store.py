"""Token persistence backends."""

from __future__ import annotations

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path

from .codec import format_datetime, parse_datetime
from .errors import FailedToDecodeResponse, TokenStoreError
from .models import Token


class TokenStore(ABC):
    """Durable key-value storage for the current session token."""

    @abstractmethod
    def save(self, token: Token) -> None:
        """Persist the token, replacing any previous one."""

    @abstractmethod
    def load(self) -> Token | None:
        """Return the persisted token, or None if nothing is stored."""

    @abstractmethod
    def delete(self) -> None:
        """Remove the persisted token."""


class InMemoryTokenStore(TokenStore):
    """Process-local token store."""

    def __init__(self, token: Token | None = None) -> None:
        self._token = token

    def save(self, token: Token) -> None:
        self._token = token

    def load(self) -> Token | None:
        return self._token

    def delete(self) -> None:
        self._token = None


class FileTokenStore(TokenStore):
    """Token store backed by a JSON file readable only by its owner."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, token: Token) -> None:
        data = {
            "access_token": token.access_token,
            "token_type": token.token_type,
            "expiration_date": format_datetime(token.expiration_date),
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            # O_CREAT mode only applies to new files.
            os.fchmod(fd, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
        except OSError as err:
            raise TokenStoreError(f"Failed to save token to {self._path}") from err

    def load(self) -> Token | None:
        if not self._path.exists():
            return None
        try:
            with self._path.open(encoding="utf-8") as f:
                data = json.load(f)
            return Token(
                access_token=data["access_token"],
                token_type=data["token_type"],
                expiration_date=parse_datetime(data["expiration_date"]),
            )
        except (OSError, ValueError, KeyError, TypeError, FailedToDecodeResponse) as err:
            raise TokenStoreError(f"Failed to load token from {self._path}") from err

    def delete(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as err:
            raise TokenStoreError(f"Failed to delete token at {self._path}") from err
