from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Protocol, Sequence, runtime_checkable

from wasafiri.domain.geometry import GeoPoint

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from wasafiri.services.session import SessionState


@runtime_checkable
class GeoResolver(Protocol):
    """Turns a place picked in the autocomplete widget into a point."""

    def resolve(self, place: Mapping[str, Any]) -> GeoPoint | None: ...


@runtime_checkable
class MapRenderer(Protocol):
    """Draws markers for both ends and the decoded route."""

    def render(
        self,
        origin: GeoPoint,
        destination: GeoPoint,
        path: Sequence[GeoPoint],
    ) -> None: ...


@runtime_checkable
class AuthProvider(Protocol):
    @property
    def session(self) -> "SessionState": ...

    def access_token(self) -> str | None: ...
