from __future__ import annotations

from fastapi import HTTPException, status

from wasafiri.domain.errors import (
    InvalidInput,
    NoRouteFound,
    NotSignedIn,
    RequestFailed,
    RoutePlanningError,
    TransportError,
)


_STATUS_BY_ERROR: list[tuple[type[RoutePlanningError], int]] = [
    (InvalidInput, status.HTTP_400_BAD_REQUEST),
    (NotSignedIn, status.HTTP_401_UNAUTHORIZED),
    (NoRouteFound, status.HTTP_404_NOT_FOUND),
    (RequestFailed, status.HTTP_502_BAD_GATEWAY),
    (TransportError, status.HTTP_504_GATEWAY_TIMEOUT),
]


def to_http_exception(error: RoutePlanningError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return HTTPException(status_code, error.user_message)
    return HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, error.user_message)
