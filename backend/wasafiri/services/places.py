from __future__ import annotations

from typing import Any, Mapping

from wasafiri.core.logging import get_logger
from wasafiri.domain.geometry import GeoPoint


PLACE_FIELDS = ["formatted_address", "geometry"]

_logger = get_logger(__name__)


def autocomplete_options(country_code: str | None = None) -> dict[str, Any]:
    """Options for the Places autocomplete widget, narrowed to one country."""

    country = country_code.strip().lower() if country_code else None
    return {
        "componentRestrictions": {"country": country or None},
        "fields": list(PLACE_FIELDS),
    }


class PlaceSelectionResolver:
    """Resolves ``place_changed`` payloads from the autocomplete widget."""

    def resolve(self, place: Mapping[str, Any]) -> GeoPoint | None:
        geometry = place.get("geometry")
        if not isinstance(geometry, Mapping):
            # The user pressed enter on free text without picking a suggestion.
            _logger.info("Place selection without geometry", name=place.get("name"))
            return None

        location = geometry.get("location")
        if not isinstance(location, Mapping):
            return None
        try:
            latitude = float(location["lat"])
            longitude = float(location["lng"])
        except (KeyError, TypeError, ValueError):
            _logger.warning("Place selection has invalid location", location=location)
            return None

        address = place.get("formatted_address")
        return GeoPoint(
            latitude,
            longitude,
            address=address if isinstance(address, str) else None,
        )
