"""Authentication state for the trip journal client.

The session owns the only shared mutable state of the client: the current
token. It provides:
- Atomic token swaps (readers always get a complete snapshot)
- Serialized transitions: persistence and signals follow swap order
- Best-effort persistence on every transition
- A replaying "is authenticated" signal for observers
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime

from .errors import InvalidValue, SessionExpired, TokenStoreError
from .models import Token
from .token_store import InMemoryTokenStore, TokenStore

_LOGGER = logging.getLogger(__name__)


class JournalSession:
    """Token state machine: unauthenticated <-> authenticated.

    Usage:
        session = JournalSession(FileTokenStore("~/.trip-journal/token.json"))
        session.restore()
        unsubscribe = session.on_authenticated_changed(print)
        session.adopt(token)
        session.clear()
        unsubscribe()
    """

    def __init__(
        self,
        store: TokenStore | None = None,
        *,
        enforce_expiration: bool = False,
    ) -> None:
        """Initialize session.

        Args:
            store: Persistence backend for the token.
            enforce_expiration: Reject expired tokens with SessionExpired
                instead of sending them.
        """
        self._store = store if store is not None else InMemoryTokenStore()
        self._enforce_expiration = enforce_expiration
        self._lock = threading.Lock()
        # Serializes whole transitions (swap, persist, notify) so the store
        # and the signal always end in the state of the last transition.
        self._transition_lock = threading.RLock()
        self._token: Token | None = None
        self._callbacks: list[Callable[[bool], None]] = []

    @property
    def token(self) -> Token | None:
        """Snapshot of the current token."""
        with self._lock:
            return self._token

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def enforce_expiration(self) -> bool:
        return self._enforce_expiration

    # -------------------------------------------------------------------------
    # Public API: Transitions
    # -------------------------------------------------------------------------

    def adopt(self, token: Token) -> None:
        """Replace the current token and persist it."""
        with self._transition_lock:
            previous = self._swap(token)
            _LOGGER.info("Session authenticated (%s token)", token.token_type)
            self._persist(lambda: self._store.save(token), "save")
            self._notify(previous is not None, True)

    def clear(self) -> None:
        """Discard the current token and delete it from the store."""
        with self._transition_lock:
            previous = self._swap(None)
            if previous is not None:
                _LOGGER.info("Session cleared")
            self._persist(self._store.delete, "delete")
            self._notify(previous is not None, False)

    def restore(self) -> bool:
        """Adopt a previously persisted token, if one exists.

        Returns:
            True if a token was restored.
        """
        with self._transition_lock:
            try:
                token = self._store.load()
            except TokenStoreError as err:
                _LOGGER.warning("Failed to load persisted token: %s", err)
                return False
            if token is None:
                return False
            previous = self._swap(token)
            _LOGGER.info("Restored persisted session token")
            self._notify(previous is not None, True)
            return True

    def require_token(self, now: datetime | None = None) -> Token:
        """Return a token snapshot for an authenticated request.

        Raises:
            InvalidValue: If the session is not authenticated.
            SessionExpired: If expiration is enforced and the token is stale.
        """
        token = self.token
        if token is None:
            raise InvalidValue("Operation requires an authenticated session")
        if self._enforce_expiration and token.is_expired(now):
            raise SessionExpired("Session token has expired")
        return token

    # -------------------------------------------------------------------------
    # Public API: Signal
    # -------------------------------------------------------------------------

    def on_authenticated_changed(
        self, callback: Callable[[bool], None]
    ) -> Callable[[], None]:
        """Register an observer of the authenticated flag.

        The callback is invoked immediately with the current value and then on
        every change.

        Returns:
            A function that removes the observer.
        """
        with self._transition_lock:
            with self._lock:
                self._callbacks.append(callback)
                current = self._token is not None
            self._invoke(callback, current)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _swap(self, token: Token | None) -> Token | None:
        with self._lock:
            previous = self._token
            self._token = token
        return previous

    def _persist(self, action: Callable[[], None], operation: str) -> None:
        try:
            action()
        except TokenStoreError as err:
            _LOGGER.warning("Token %s failed: %s", operation, err)

    def _notify(self, was_authenticated: bool, is_authenticated: bool) -> None:
        if was_authenticated == is_authenticated:
            return
        with self._lock:
            callbacks = list(self._callbacks)
        for callback in callbacks:
            self._invoke(callback, is_authenticated)

    @staticmethod
    def _invoke(callback: Callable[[bool], None], value: bool) -> None:
        try:
            callback(value)
        except Exception as err:  # Observer errors must not break transitions
            _LOGGER.error("Authenticated callback error: %s", err)
