from __future__ import annotations


class RoutePlanningError(Exception):
    """Base class for failures surfaced to the person planning a trip."""

    @property
    def user_message(self) -> str:
        return str(self)


class InvalidInput(RoutePlanningError):
    """Raised when the form cannot be turned into a route request."""


class RequestFailed(RoutePlanningError):
    """Raised when an upstream service answers with an unexpected status."""

    def __init__(self, status_code: int, reason: str | None = None) -> None:
        self.status_code = status_code
        self.reason = reason
        message = f"Request failed with status code {status_code}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class TransportError(RoutePlanningError):
    """Raised when the request never produced an HTTP response."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Request failed: {message}")


class NoRouteFound(RoutePlanningError):
    def __init__(self, message: str = "No route found") -> None:
        super().__init__(message)


class TimezoneLookupFailed(RoutePlanningError):
    """Logged when the origin time zone cannot be resolved. Never fatal."""


class NotSignedIn(RoutePlanningError):
    def __init__(self, message: str = "Sign in with Google to save routes") -> None:
        super().__init__(message)
