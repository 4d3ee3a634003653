"""Feature measurement: geodesic area, perimeter and a map focus region.

Areas and lengths are geodesic on the WGS 84 ellipsoid (``pyproj.Geod``),
so a drawn geofence reports the same size regardless of latitude. Circle
measurements use the stored radius directly (``pi r^2``, ``2 pi r``).

``focus_region`` frames a feature on the map: the centre of its bounding
box plus a latitude/longitude span, never smaller than ``min_delta``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from fieldops_geo.core.exceptions import InvalidGeometry
from fieldops_geo.models.feature import Feature
from fieldops_geo.models.geometry import Circle, LineString, Point, Polygon

# Square metres per hectare
SQ_METRES_PER_HECTARE = 10_000.0

DEFAULT_FOCUS_DELTA_DEG = 0.01


@dataclass(frozen=True, slots=True)
class Region:
    """A map viewport in native order.

    Attributes:
        latitude: Centre latitude.
        longitude: Centre longitude.
        latitude_delta: North-south span in degrees.
        longitude_delta: East-west span in degrees.
    """

    latitude: float
    longitude: float
    latitude_delta: float
    longitude_delta: float


def geodesic_area_m2(feature: Feature) -> float:
    """Area of the feature's outer boundary in square metres.

    Points and lines have no area and return ``0.0``.
    """
    geometry = feature.geometry
    if isinstance(geometry, Circle):
        return math.pi * geometry.radius**2
    if isinstance(geometry, Polygon):
        from pyproj import Geod

        geod = Geod(ellps="WGS84")
        lons = [c.lng for c in geometry.outer_ring]
        lats = [c.lat for c in geometry.outer_ring]
        area_m2, _perimeter = geod.polygon_area_perimeter(lons, lats)
        return abs(area_m2)
    return 0.0


def geodesic_perimeter_m(feature: Feature) -> float:
    """Boundary length in metres (path length for lines, ``0.0`` for points)."""
    geometry = feature.geometry
    if isinstance(geometry, Circle):
        return 2 * math.pi * geometry.radius
    if isinstance(geometry, Polygon | LineString):
        from pyproj import Geod

        geod = Geod(ellps="WGS84")
        coords = geometry.outer_ring if isinstance(geometry, Polygon) else geometry.coordinates
        return float(geod.line_length([c.lng for c in coords], [c.lat for c in coords]))
    return 0.0


def area_hectares(feature: Feature) -> float:
    """Area in hectares."""
    return geodesic_area_m2(feature) / SQ_METRES_PER_HECTARE


def bounds(feature: Feature) -> tuple[float, float, float, float]:
    """Bounding box ``(min_lon, min_lat, max_lon, max_lat)``.

    Circles are bounded by the positions one radius north, east, south and
    west of the centre along the ellipsoid.

    Raises:
        InvalidGeometry: If the geometry type is not measurable.
    """
    geometry = feature.geometry
    if isinstance(geometry, Circle):
        from pyproj import Geod

        geod = Geod(ellps="WGS84")
        centre = geometry.center
        lons, lats, _back = geod.fwd(
            [centre.lng] * 4,
            [centre.lat] * 4,
            [0.0, 90.0, 180.0, 270.0],
            [geometry.radius] * 4,
        )
        return (min(lons), min(lats), max(lons), max(lats))

    if isinstance(geometry, Point | LineString | Polygon):
        from shapely.geometry import shape

        return tuple(shape(geometry.to_dict()).bounds)  # type: ignore[return-value]

    msg = f"Cannot measure geometry type {geometry.type!r}"
    raise InvalidGeometry(msg)


def focus_region(feature: Feature, *, min_delta: float = DEFAULT_FOCUS_DELTA_DEG) -> Region:
    """Map region that frames ``feature``, centred on its bounding box."""
    min_lon, min_lat, max_lon, max_lat = bounds(feature)
    return Region(
        latitude=(min_lat + max_lat) / 2,
        longitude=(min_lon + max_lon) / 2,
        latitude_delta=max(max_lat - min_lat, min_delta),
        longitude_delta=max(max_lon - min_lon, min_delta),
    )
