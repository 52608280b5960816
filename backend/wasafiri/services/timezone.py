from __future__ import annotations

import time
from threading import Lock
from typing import Any

import httpx
from cachetools import TTLCache

from wasafiri.core.config import Settings, get_settings
from wasafiri.core.logging import get_logger
from wasafiri.domain.errors import TimezoneLookupFailed


FALLBACK_TIME_ZONE = "UTC"

_logger = get_logger(__name__)


class TimezoneClient:
    """Resolves the IANA time zone at a coordinate via the Time Zone API."""

    def __init__(
        self,
        api_key: str | None,
        *,
        endpoint: str,
        timeout: float = 5.0,
        client: httpx.Client | None = None,
        cache_ttl: float = 60 * 60 * 6,
    ) -> None:
        self._api_key = api_key
        self._endpoint = endpoint
        self._timeout = timeout
        self._client = client
        self._cache: TTLCache = TTLCache(maxsize=256, ttl=cache_ttl)
        self._cache_lock = Lock()

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, **kwargs: Any
    ) -> "TimezoneClient":
        settings = settings or get_settings()
        return cls(
            settings.google_maps_api_key,
            endpoint=settings.timezone_endpoint,
            timeout=settings.timezone_timeout,
            **kwargs,
        )

    def lookup(
        self, latitude: float, longitude: float, timestamp: int | None = None
    ) -> str:
        """Return the zone id, or ``"UTC"`` when it cannot be determined."""

        if timestamp is None:
            timestamp = int(time.time())
        # DST rules only change on day boundaries at the earliest.
        key = (round(latitude, 3), round(longitude, 3), timestamp // 86_400)
        with self._cache_lock:
            cached = self._cache.get(key)
        if cached:
            return cached

        try:
            zone = self._fetch(latitude, longitude, timestamp)
        except TimezoneLookupFailed as exc:
            _logger.warning(
                "Timezone lookup failed",
                latitude=latitude,
                longitude=longitude,
                error=str(exc),
                fallback=FALLBACK_TIME_ZONE,
            )
            return FALLBACK_TIME_ZONE

        with self._cache_lock:
            self._cache[key] = zone
        _logger.info(
            "Timezone lookup success",
            latitude=latitude,
            longitude=longitude,
            time_zone=zone,
        )
        return zone

    def _fetch(self, latitude: float, longitude: float, timestamp: int) -> str:
        if not self._api_key:
            raise TimezoneLookupFailed("missing API key")

        params = {
            "location": f"{latitude},{longitude}",
            "timestamp": str(timestamp),
            "key": self._api_key,
        }
        try:
            if self._client is not None:
                response = self._client.get(
                    self._endpoint, params=params, timeout=self._timeout
                )
            else:
                response = httpx.get(
                    self._endpoint, params=params, timeout=self._timeout
                )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise TimezoneLookupFailed(str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise TimezoneLookupFailed("response body is not JSON") from exc

        status = data.get("status") if isinstance(data, dict) else None
        zone = data.get("timeZoneId") if isinstance(data, dict) else None
        if status != "OK" or not isinstance(zone, str) or not zone:
            raise TimezoneLookupFailed(f"status {status}")
        return zone
