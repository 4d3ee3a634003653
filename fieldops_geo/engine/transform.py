"""Coordinate transform: the boundary between backend records and features.

The backend speaks native ``(latitude, longitude)``; the feature model
speaks interchange ``(longitude, latitude)``. Everything that crosses goes
through this module:

- **Read path**: loosely-typed backend records are parsed into ``LatLng``
  values as early as possible, swapped, and built into validated features.
- **Write path**: a finished feature is swapped back into the native
  payload the persistence collaborator expects.

Failures are always ``InvalidGeometry`` raised at the point of
construction. Nothing here coerces a bad ring into a degenerate shape.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from fieldops_geo.core.constants import (
    FILL_COLOR,
    MIN_POLYGON_DISTINCT_POINTS,
    SHAPE_CIRCLE,
    SHAPE_POLYGON,
    STROKE_COLOR,
    STROKE_WIDTH,
)
from fieldops_geo.core.exceptions import InvalidGeometry
from fieldops_geo.models.coordinates import LatLng, LngLat
from fieldops_geo.models.feature import Feature, FeatureId
from fieldops_geo.models.geometry import Circle, LineString, Point, Polygon

if TYPE_CHECKING:
    from fieldops_geo.models.contracts import GeofenceCreatePayload

logger = logging.getLogger("fieldops_geo.engine.transform")

_STORED_STYLE_KEYS = (STROKE_COLOR, STROKE_WIDTH, FILL_COLOR)


# ---------------------------------------------------------------------------
# Axis order
# ---------------------------------------------------------------------------


def to_interchange(native_ring: Sequence[LatLng]) -> list[LngLat]:
    """Swap each native pair to interchange order. Length is preserved."""
    return [point.swap() for point in native_ring]


def to_native(ring: Sequence[LngLat]) -> list[LatLng]:
    """Swap each interchange pair back to native order."""
    return [point.swap() for point in ring]


def close_polygon(ring: Sequence[LngLat]) -> list[LngLat]:
    """Return ``ring`` closed: the first position repeated at the end if missing.

    Equality is exact. Closing an already closed ring returns it unchanged.
    """
    closed = list(ring)
    if closed and closed[0] != closed[-1]:
        closed.append(closed[0])
    return closed


# ---------------------------------------------------------------------------
# Native input parsing
# ---------------------------------------------------------------------------


def parse_native_point(raw: object) -> LatLng:
    """Parse a backend position into a ``LatLng``.

    Accepts ``{"latitude": .., "longitude": ..}`` mappings and
    ``[lat, lng]`` arrays. Extra array elements (altitude) are dropped.

    Raises:
        InvalidGeometry: If ``raw`` is neither shape or holds non-numbers.
    """
    if isinstance(raw, Mapping):
        if "latitude" not in raw or "longitude" not in raw:
            msg = f"Position object is missing latitude/longitude: keys={sorted(raw)}"
            raise InvalidGeometry(msg)
        lat, lng = raw["latitude"], raw["longitude"]
    elif isinstance(raw, list | tuple):
        if len(raw) < 2:
            msg = f"Position array needs [lat, lng], got {len(raw)} element(s)"
            raise InvalidGeometry(msg)
        lat, lng = raw[0], raw[1]
    else:
        msg = f"Position must be an object or [lat, lng] array, got {type(raw).__name__}"
        raise InvalidGeometry(msg)

    if isinstance(lat, bool) or isinstance(lng, bool):
        msg = f"Position values must be numbers, got lat={lat!r}, lng={lng!r}"
        raise InvalidGeometry(msg)
    try:
        return LatLng(float(lat), float(lng))
    except (TypeError, ValueError) as exc:
        msg = f"Position values must be numbers, got lat={lat!r}, lng={lng!r}"
        raise InvalidGeometry(msg) from exc


def parse_native_ring(raw: object) -> list[LatLng]:
    """Parse a backend array of positions.

    Raises:
        InvalidGeometry: If ``raw`` is not an array or any element is malformed.
    """
    if not isinstance(raw, list | tuple):
        msg = f"Ring must be an array of positions, got {type(raw).__name__}"
        raise InvalidGeometry(msg)
    ring: list[LatLng] = []
    for idx, item in enumerate(raw):
        try:
            ring.append(parse_native_point(item))
        except InvalidGeometry as exc:
            msg = f"Malformed position at index {idx}: {exc.message}"
            raise InvalidGeometry(msg) from exc
    return ring


# ---------------------------------------------------------------------------
# Feature factories
# ---------------------------------------------------------------------------


def polygon_feature(
    feature_id: FeatureId,
    native_ring: Sequence[LatLng],
    properties: Mapping[str, object] | None = None,
) -> Feature:
    """Build a Polygon feature from a native ring: swap, then close.

    Raises:
        InvalidGeometry: If the ring has fewer than 3 distinct points.
    """
    distinct = set(native_ring)
    if len(distinct) < MIN_POLYGON_DISTINCT_POINTS:
        msg = (
            f"Polygon {feature_id!r} has {len(distinct)} distinct point(s), "
            f"need at least {MIN_POLYGON_DISTINCT_POINTS}"
        )
        raise InvalidGeometry(msg)
    ring = close_polygon(to_interchange(native_ring))
    return Feature(feature_id, Polygon((tuple(ring),)), properties or {})


def circle_feature(
    feature_id: FeatureId,
    center: LatLng,
    radius_m: float,
    properties: Mapping[str, object] | None = None,
) -> Feature:
    """Build a Circle feature. The radius stays in metres.

    Raises:
        InvalidGeometry: If ``radius_m`` is not a positive number.
    """
    return Feature(feature_id, Circle(center.swap(), radius_m), properties or {})


def point_feature(
    feature_id: FeatureId,
    position: LatLng,
    properties: Mapping[str, object] | None = None,
) -> Feature:
    """Build a Point feature from a native position."""
    return Feature(feature_id, Point(position.swap()), properties or {})


def line_feature(
    feature_id: FeatureId,
    native_path: Sequence[LatLng],
    properties: Mapping[str, object] | None = None,
) -> Feature:
    """Build a LineString feature from a native path.

    Raises:
        InvalidGeometry: If the path has fewer than 2 positions.
    """
    return Feature(feature_id, LineString(tuple(to_interchange(native_path))), properties or {})


# ---------------------------------------------------------------------------
# Source record adapters
# ---------------------------------------------------------------------------


def worksite_to_feature(record: Mapping[str, Any]) -> Feature:
    """Turn a worksite record into its circular boundary feature.

    Raises:
        InvalidGeometry: If the id, position or radius is missing or invalid.
    """
    feature_id = _record_id(record, "_id")
    center = parse_native_point(_require(record, "coordinates", feature_id))
    radius = _require(record, "radius", feature_id)
    feature = circle_feature(feature_id, center, radius, {"name": record.get("name", "")})
    return feature.with_properties(
        description=record.get("description") or f"Radius: {radius:g}m",
    )


def geofence_to_feature(record: Mapping[str, Any]) -> Feature:
    """Turn a stored geofence record into a Polygon or Circle feature.

    Stored style fields become explicit properties so they win over any
    default during style resolution.

    Raises:
        InvalidGeometry: If the shape type is unsupported or its data is invalid.
    """
    feature_id = _record_id(record, "_id")
    properties: dict[str, object] = {
        "name": record.get("name", ""),
        "description": record.get("description", ""),
        "isActive": record.get("isActive", True),
    }
    for key in _STORED_STYLE_KEYS:
        if record.get(key) is not None:
            properties[key] = record[key]

    shape = record.get("type")
    if shape == SHAPE_POLYGON:
        ring = parse_native_ring(_require(record, "coordinates", feature_id))
        return polygon_feature(feature_id, ring, properties)
    if shape == SHAPE_CIRCLE:
        center = parse_native_point(_require(record, "center", feature_id))
        return circle_feature(feature_id, center, _require(record, "radius", feature_id), properties)
    msg = f"Geofence {feature_id!r} has unsupported type {shape!r}"
    raise InvalidGeometry(msg)


def location_to_feature(record: Mapping[str, Any]) -> Feature:
    """Turn a live position report into a Point feature.

    Device fix extras (accuracy, speed, ...) are carried as properties.

    Raises:
        InvalidGeometry: If the record has no usable id or position.
    """
    feature_id = _record_id(record, "_id", "userId")
    raw_position = _require(record, "coordinates", feature_id)
    position = parse_native_point(raw_position)

    properties: dict[str, object] = {
        "name": record.get("name") or str(record.get("userId", feature_id)),
    }
    for key in ("userId", "timestamp", "isTracking"):
        if key in record:
            properties[key] = record[key]
    if isinstance(raw_position, Mapping):
        for key in ("accuracy", "altitude", "speed", "heading"):
            if raw_position.get(key) is not None:
                properties[key] = raw_position[key]
    return point_feature(feature_id, position, properties)


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------


def feature_to_geofence_payload(feature: Feature, worksite_id: str) -> GeofenceCreatePayload:
    """Convert a finished geofence feature into the native create payload.

    Polygons are stored as the open ring the operator drew (no closing
    vertex), in ``[lat, lng]`` order.

    Raises:
        InvalidGeometry: If the feature is not a Polygon or Circle.
    """
    props = feature.properties
    payload: dict[str, Any] = {
        "worksiteId": worksite_id,
        "name": str(props.get("name", "")),
        "description": str(props.get("description") or ""),
        "strokeColor": props.get(STROKE_COLOR),
        "strokeWidth": props.get(STROKE_WIDTH),
        "fillColor": props.get(FILL_COLOR),
    }
    geometry = feature.geometry
    if isinstance(geometry, Polygon):
        open_ring = geometry.outer_ring[:-1]
        payload["type"] = SHAPE_POLYGON
        payload["coordinates"] = [p.to_list() for p in to_native(open_ring)]
    elif isinstance(geometry, Circle):
        payload["type"] = SHAPE_CIRCLE
        payload["center"] = geometry.center.swap().to_dict()
        payload["radius"] = geometry.radius
    else:
        msg = f"Only Polygon and Circle features can be stored as geofences, got {geometry.type}"
        raise InvalidGeometry(msg)
    return payload  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _record_id(record: Mapping[str, Any], *keys: str) -> FeatureId:
    if not isinstance(record, Mapping):
        msg = f"Record must be an object, got {type(record).__name__}"
        raise InvalidGeometry(msg)
    for key in keys:
        value = record.get(key)
        if isinstance(value, str | int) and not isinstance(value, bool) and value != "":
            return value
    msg = f"Record has no usable id (looked for {', '.join(keys)})"
    raise InvalidGeometry(msg)


def _require(record: Mapping[str, Any], key: str, feature_id: FeatureId) -> Any:
    value = record.get(key)
    if value is None:
        msg = f"Record {feature_id!r} is missing {key!r}"
        raise InvalidGeometry(msg)
    return value
