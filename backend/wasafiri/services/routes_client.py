from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from wasafiri.core.config import Settings, get_settings
from wasafiri.core.logging import get_logger
from wasafiri.domain.errors import NoRouteFound, RequestFailed, TransportError
from wasafiri.domain.formatting import parse_duration_seconds
from wasafiri.services.route_request import RouteRequest, route_headers


_logger = get_logger(__name__)


class RoutesConfigurationError(RuntimeError):
    """Raised when the routes client cannot be configured with provided settings."""


@dataclass(frozen=True, slots=True)
class RouteResult:
    distance_meters: int
    duration_seconds: int
    encoded_polyline: str


class RoutesClient:
    """Calls the Routes API ``computeRoutes`` method for a single driving route."""

    def __init__(
        self,
        api_key: str | None,
        *,
        endpoint: str,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        if not api_key:
            raise RoutesConfigurationError(
                "Routing requires WASAFIRI_GOOGLE_MAPS_API_KEY to be set"
            )
        self._api_key = api_key
        self._endpoint = endpoint
        self._timeout = timeout
        self._client = client

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, **kwargs: Any
    ) -> "RoutesClient":
        settings = settings or get_settings()
        return cls(
            settings.google_maps_api_key,
            endpoint=settings.routes_endpoint,
            timeout=settings.routes_timeout,
            **kwargs,
        )

    def compute_route(self, request: RouteRequest) -> RouteResult:
        """
        Send one request and return the first route. No retries are made;
        failures surface immediately as :class:`RequestFailed`,
        :class:`TransportError` or :class:`NoRouteFound`.
        """
        payload = request.to_payload()
        _logger.info(
            "Routes request sent",
            endpoint=self._endpoint,
            departure_time=payload.get("departureTime"),
        )

        try:
            response = self._post(payload)
        except httpx.RequestError as exc:
            message = str(exc) or type(exc).__name__
            _logger.warning("Routes request transport failure", error=message)
            raise TransportError(message) from exc

        if response.status_code != httpx.codes.OK:
            _logger.warning(
                "Routes request failed",
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise RequestFailed(response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            _logger.warning("Routes response parse error", error=str(exc))
            raise RequestFailed(
                response.status_code, "response body is not JSON"
            ) from exc

        result = parse_route_response(data)
        _logger.info(
            "Routes response received",
            distance_meters=result.distance_meters,
            duration_seconds=result.duration_seconds,
        )
        return result

    def _post(self, payload: dict[str, Any]) -> httpx.Response:
        headers = route_headers(self._api_key)
        if self._client is not None:
            return self._client.post(
                self._endpoint, json=payload, headers=headers, timeout=self._timeout
            )
        with httpx.Client(timeout=self._timeout) as client:
            return client.post(self._endpoint, json=payload, headers=headers)


def parse_route_response(data: Any) -> RouteResult:
    """Extract the first route from a ``computeRoutes`` response body."""

    routes = data.get("routes") if isinstance(data, dict) else None
    if not routes:
        raise NoRouteFound()

    route = routes[0]
    if not isinstance(route, dict):
        raise RequestFailed(httpx.codes.OK, "route entry is not an object")

    # Zero-valued fields are omitted from proto3 JSON.
    distance_value = route.get("distanceMeters", 0)
    try:
        distance_meters = int(distance_value)
        duration_seconds = parse_duration_seconds(route.get("duration", 0))
    except (TypeError, ValueError) as exc:
        raise RequestFailed(httpx.codes.OK, f"malformed route: {exc}") from exc

    polyline = route.get("polyline") or {}
    encoded = polyline.get("encodedPolyline", "") if isinstance(polyline, dict) else ""

    if distance_meters < 0:
        raise RequestFailed(httpx.codes.OK, "negative route distance")

    return RouteResult(
        distance_meters=distance_meters,
        duration_seconds=duration_seconds,
        encoded_polyline=encoded,
    )
