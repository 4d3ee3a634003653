"""Render projection: one declarative primitive per feature.

The map surface takes native ``(lat, lng)`` positions, so projection swaps
every position back with the same ``swap()`` the transform uses on the way
in. Each primitive carries the feature's resolved style; features that were
never aggregated fall back to the per-geometry defaults.

A feature whose geometry the projection does not recognize is dropped
with a warning; the rest of the pass still renders.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import ClassVar

from fieldops_geo.core.constants import (
    COLOR,
    DEFAULT_MARKER_SIZE,
    DEFAULT_STYLES,
    FILL_COLOR,
    STROKE_COLOR,
    STROKE_WIDTH,
)
from fieldops_geo.engine.transform import to_native
from fieldops_geo.models.coordinates import LatLng
from fieldops_geo.models.feature import Feature, FeatureId
from fieldops_geo.models.geometry import Circle, LineString, Point, Polygon

logger = logging.getLogger("fieldops_geo.engine.render")


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MarkerPrimitive:
    """A pin at one position."""

    kind: ClassVar[str] = "point"

    key: str
    feature_id: FeatureId | None
    position: LatLng
    color: str
    size: int = DEFAULT_MARKER_SIZE
    title: str = ""
    description: str = ""


@dataclass(frozen=True, slots=True)
class PolylinePrimitive:
    """An open stroked path."""

    kind: ClassVar[str] = "line"

    key: str
    feature_id: FeatureId | None
    path: tuple[LatLng, ...]
    stroke_color: str
    stroke_width: float
    title: str = ""
    description: str = ""


@dataclass(frozen=True, slots=True)
class PolygonPrimitive:
    """A filled, stroked outline."""

    kind: ClassVar[str] = "polygon"

    key: str
    feature_id: FeatureId | None
    outline: tuple[LatLng, ...]
    stroke_color: str
    stroke_width: float
    fill_color: str
    title: str = ""
    description: str = ""


@dataclass(frozen=True, slots=True)
class CirclePrimitive:
    """A filled, stroked circle. ``radius_m`` is in metres."""

    kind: ClassVar[str] = "circle"

    key: str
    feature_id: FeatureId | None
    center: LatLng
    radius_m: float
    stroke_color: str
    stroke_width: float
    fill_color: str
    title: str = ""
    description: str = ""


RenderPrimitive = MarkerPrimitive | PolylinePrimitive | PolygonPrimitive | CirclePrimitive


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------


def project(features: Iterable[Feature]) -> list[RenderPrimitive]:
    """Project features to primitives, preserving order and dropping unknown types."""
    primitives: list[RenderPrimitive] = []
    dropped = 0
    for feature in features:
        primitive = project_feature(feature)
        if primitive is None:
            dropped += 1
            continue
        primitives.append(primitive)
    logger.debug("Projected features | primitives=%d | dropped=%d", len(primitives), dropped)
    return primitives


def project_feature(feature: Feature) -> RenderPrimitive | None:
    """Project one feature, or return ``None`` if its geometry is not renderable."""
    projector = _PROJECTORS.get(type(feature.geometry))
    if projector is None:
        logger.warning(
            "Dropping feature with unrenderable geometry | id=%s | type=%s",
            feature.id,
            getattr(feature.geometry, "type", type(feature.geometry).__name__),
        )
        return None
    return projector(feature)


def _project_point(feature: Feature) -> MarkerPrimitive:
    geometry: Point = feature.geometry  # type: ignore[assignment]
    return MarkerPrimitive(
        key=f"{MarkerPrimitive.kind}-{feature.id}",
        feature_id=feature.id,
        position=geometry.coordinates.swap(),
        color=str(_style(feature, COLOR)),
        title=feature.name,
        description=_description(feature),
    )


def _project_line(feature: Feature) -> PolylinePrimitive:
    geometry: LineString = feature.geometry  # type: ignore[assignment]
    return PolylinePrimitive(
        key=f"{PolylinePrimitive.kind}-{feature.id}",
        feature_id=feature.id,
        path=tuple(to_native(geometry.coordinates)),
        stroke_color=str(_style(feature, STROKE_COLOR)),
        stroke_width=float(_style(feature, STROKE_WIDTH)),  # type: ignore[arg-type]
        title=feature.name,
        description=_description(feature),
    )


def _project_polygon(feature: Feature) -> PolygonPrimitive:
    geometry: Polygon = feature.geometry  # type: ignore[assignment]
    return PolygonPrimitive(
        key=f"{PolygonPrimitive.kind}-{feature.id}",
        feature_id=feature.id,
        outline=tuple(to_native(geometry.outer_ring)),
        stroke_color=str(_style(feature, STROKE_COLOR)),
        stroke_width=float(_style(feature, STROKE_WIDTH)),  # type: ignore[arg-type]
        fill_color=str(_style(feature, FILL_COLOR)),
        title=feature.name,
        description=_description(feature),
    )


def _project_circle(feature: Feature) -> CirclePrimitive:
    geometry: Circle = feature.geometry  # type: ignore[assignment]
    return CirclePrimitive(
        key=f"{CirclePrimitive.kind}-{feature.id}",
        feature_id=feature.id,
        center=geometry.center.swap(),
        radius_m=geometry.radius,
        stroke_color=str(_style(feature, STROKE_COLOR)),
        stroke_width=float(_style(feature, STROKE_WIDTH)),  # type: ignore[arg-type]
        fill_color=str(_style(feature, FILL_COLOR)),
        title=feature.name,
        description=_description(feature),
    )


_PROJECTORS: dict[type, Callable[[Feature], RenderPrimitive]] = {
    Point: _project_point,
    LineString: _project_line,
    Polygon: _project_polygon,
    Circle: _project_circle,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _style(feature: Feature, key: str) -> object:
    value = feature.properties.get(key)
    if value is not None:
        return value
    return DEFAULT_STYLES[feature.geometry_type][key]


def _description(feature: Feature) -> str:
    return str(feature.properties.get("description") or "")
