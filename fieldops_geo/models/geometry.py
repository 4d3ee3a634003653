"""Geometry variants of the interchange feature model.

Four frozen value types, each carrying its interchange ``type``
discriminator. ``Circle`` is a domain extension layered on the standard
geometry set: a centre plus a radius in metres.

Every geometry validates itself on construction. A ``Polygon`` can only
exist with closed rings, and a ``Circle`` only with a positive radius.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar

from fieldops_geo.core.constants import (
    CIRCLE,
    LINE_STRING,
    MIN_LINESTRING_POINTS,
    MIN_POLYGON_DISTINCT_POINTS,
    POINT,
    POLYGON,
)
from fieldops_geo.core.exceptions import InvalidGeometry
from fieldops_geo.models.coordinates import LngLat


@dataclass(frozen=True, slots=True)
class Point:
    """A single position."""

    type: ClassVar[str] = POINT

    coordinates: LngLat

    def __post_init__(self) -> None:
        _check_lnglat(self.coordinates, "Point.coordinates")

    def to_dict(self) -> dict[str, object]:
        return {"type": self.type, "coordinates": self.coordinates.to_list()}


@dataclass(frozen=True, slots=True)
class LineString:
    """An open path through two or more positions."""

    type: ClassVar[str] = LINE_STRING

    coordinates: tuple[LngLat, ...]

    def __post_init__(self) -> None:
        coords = tuple(self.coordinates)
        for c in coords:
            _check_lnglat(c, "LineString.coordinates")
        if len(coords) < MIN_LINESTRING_POINTS:
            msg = (
                f"LineString needs at least {MIN_LINESTRING_POINTS} positions, "
                f"got {len(coords)}"
            )
            raise InvalidGeometry(msg)
        object.__setattr__(self, "coordinates", coords)

    def to_dict(self) -> dict[str, object]:
        return {"type": self.type, "coordinates": [c.to_list() for c in self.coordinates]}


@dataclass(frozen=True, slots=True)
class Polygon:
    """A closed area bounded by an outer ring.

    ``coordinates`` holds the rings in interchange layout: the outer ring
    first, followed by any holes. Only the outer ring is used for display
    and measurement; holes are carried through untouched.
    """

    type: ClassVar[str] = POLYGON

    coordinates: tuple[tuple[LngLat, ...], ...]

    def __post_init__(self) -> None:
        rings = tuple(tuple(ring) for ring in self.coordinates)
        if not rings:
            msg = "Polygon has no rings"
            raise InvalidGeometry(msg)
        for idx, ring in enumerate(rings):
            _check_ring(ring, idx)
        object.__setattr__(self, "coordinates", rings)

    @property
    def outer_ring(self) -> tuple[LngLat, ...]:
        """The exterior boundary, closed."""
        return self.coordinates[0]

    @property
    def vertex_count(self) -> int:
        """Distinct vertices of the outer ring (closing vertex excluded)."""
        return len(self.outer_ring) - 1

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.type,
            "coordinates": [[c.to_list() for c in ring] for ring in self.coordinates],
        }


@dataclass(frozen=True, slots=True)
class Circle:
    """A centre position plus a radius in metres."""

    type: ClassVar[str] = CIRCLE

    coordinates: LngLat
    radius: float

    def __post_init__(self) -> None:
        _check_lnglat(self.coordinates, "Circle.coordinates")
        radius = self.radius
        if isinstance(radius, bool) or not isinstance(radius, int | float):
            msg = f"Circle radius must be a number, got {type(radius).__name__}"
            raise InvalidGeometry(msg)
        if not math.isfinite(radius) or radius <= 0:
            msg = f"Circle radius must be > 0 metres, got {radius!r}"
            raise InvalidGeometry(msg)

    @property
    def center(self) -> LngLat:
        return self.coordinates

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.type,
            "coordinates": self.coordinates.to_list(),
            "radius": self.radius,
        }


Geometry = Point | LineString | Polygon | Circle


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _check_lnglat(value: object, context: str) -> None:
    if not isinstance(value, LngLat):
        msg = f"{context} must be an interchange-order LngLat, got {type(value).__name__}"
        raise InvalidGeometry(msg)


def _check_ring(ring: tuple[LngLat, ...], idx: int) -> None:
    """Validate one polygon ring is closed and non-degenerate.

    Raises:
        InvalidGeometry: If the ring is unclosed or has too few distinct points.
    """
    for c in ring:
        _check_lnglat(c, f"Polygon ring {idx}")
    if len(ring) < MIN_POLYGON_DISTINCT_POINTS + 1:
        msg = (
            f"Polygon ring {idx} has {len(ring)} position(s), need at least "
            f"{MIN_POLYGON_DISTINCT_POINTS + 1} including closure"
        )
        raise InvalidGeometry(msg)
    if ring[0] != ring[-1]:
        msg = f"Polygon ring {idx} is not closed: first {ring[0]} != last {ring[-1]}"
        raise InvalidGeometry(msg)
    distinct = set(ring)
    if len(distinct) < MIN_POLYGON_DISTINCT_POINTS:
        msg = (
            f"Polygon ring {idx} has {len(distinct)} distinct point(s), "
            f"need at least {MIN_POLYGON_DISTINCT_POINTS}"
        )
        raise InvalidGeometry(msg)
