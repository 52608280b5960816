from __future__ import annotations

from threading import Lock
from typing import Callable

from wasafiri.core.logging import get_logger


SessionListener = Callable[[bool], None]

_logger = get_logger(__name__)


class SessionState:
    """Observable "signed in" flag for presentation code to subscribe to."""

    def __init__(self, signed_in: bool = False) -> None:
        self._signed_in = signed_in
        self._listeners: list[SessionListener] = []
        self._lock = Lock()

    @property
    def signed_in(self) -> bool:
        return self._signed_in

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener``; it is called at once with the current value."""

        with self._lock:
            self._listeners.append(listener)
            current = self._signed_in
        listener(current)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def set(self, signed_in: bool) -> None:
        with self._lock:
            if signed_in == self._signed_in:
                return
            self._signed_in = signed_in
            listeners = list(self._listeners)
        _logger.info("Session state changed", signed_in=signed_in)
        for listener in listeners:
            listener(signed_in)


class BearerTokenAuthProvider:
    """Holds an OAuth access token obtained by the browser sign-in flow."""

    def __init__(self, token: str | None = None) -> None:
        self._token: str | None = None
        self._session = SessionState()
        if token:
            self.sign_in(token)

    @property
    def session(self) -> SessionState:
        return self._session

    def access_token(self) -> str | None:
        return self._token

    def sign_in(self, token: str) -> None:
        token = token.strip()
        if not token:
            raise ValueError("Access token must not be empty")
        self._token = token
        self._session.set(True)

    def sign_out(self) -> None:
        self._token = None
        self._session.set(False)
