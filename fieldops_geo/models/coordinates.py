"""Coordinate value types for the two axis orders in play.

The backend stores positions in native ``(latitude, longitude)`` order; the
interchange format and every geometry in the feature model use
``(longitude, latitude)``. The two orders are distinct types so a pair in
one order can never be passed where the other is expected: they never
compare equal, and ``swap()`` is the only way across.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from fieldops_geo.core.constants import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
)
from fieldops_geo.core.exceptions import InvalidGeometry


@dataclass(frozen=True, slots=True)
class LatLng:
    """A backend-native position: latitude first.

    Attributes:
        latitude: Degrees north, WGS 84.
        longitude: Degrees east, WGS 84.
    """

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        _check_position(self.longitude, self.latitude)

    def swap(self) -> LngLat:
        """Return the same position in interchange order."""
        return LngLat(self.longitude, self.latitude)

    def to_list(self) -> list[float]:
        """Serialise as a native ``[lat, lng]`` pair."""
        return [self.latitude, self.longitude]

    def to_dict(self) -> dict[str, float]:
        """Serialise as a native ``{latitude, longitude}`` object."""
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True, slots=True)
class LngLat:
    """An interchange-order position: longitude first.

    Attributes:
        lng: Degrees east, WGS 84.
        lat: Degrees north, WGS 84.
    """

    lng: float
    lat: float

    def __post_init__(self) -> None:
        _check_position(self.lng, self.lat)

    def swap(self) -> LatLng:
        """Return the same position in backend-native order."""
        return LatLng(self.lat, self.lng)

    def to_list(self) -> list[float]:
        """Serialise as an interchange ``[lng, lat]`` pair."""
        return [self.lng, self.lat]


def _check_position(lon: object, lat: object) -> None:
    """Validate a longitude/latitude pair is numeric, finite and in WGS 84 bounds.

    Raises:
        InvalidGeometry: If either value is not a usable coordinate.
    """
    for axis, value in (("longitude", lon), ("latitude", lat)):
        if isinstance(value, bool) or not isinstance(value, int | float):
            msg = f"{axis} must be a number, got {type(value).__name__}"
            raise InvalidGeometry(msg)
        if not math.isfinite(value):
            msg = f"{axis} must be finite, got {value!r}"
            raise InvalidGeometry(msg)

    if not (MIN_LONGITUDE <= lon <= MAX_LONGITUDE):  # type: ignore[operator]
        msg = f"Longitude {lon} out of WGS 84 range [{MIN_LONGITUDE}, {MAX_LONGITUDE}]"
        raise InvalidGeometry(msg)
    if not (MIN_LATITUDE <= lat <= MAX_LATITUDE):  # type: ignore[operator]
        msg = f"Latitude {lat} out of WGS 84 range [{MIN_LATITUDE}, {MAX_LATITUDE}]"
        raise InvalidGeometry(msg)
