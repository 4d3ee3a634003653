"""Shared engine constants.

Coordinate bounds, geometry minimums, the degrees-to-meters scalar used by
the circle drawing tool, and the colour palette shared by the aggregator,
the render projection and the drawing preview.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# WGS 84 coordinate bounds
# ---------------------------------------------------------------------------

MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0

# ---------------------------------------------------------------------------
# Geometry minimums
# ---------------------------------------------------------------------------

MIN_POLYGON_DISTINCT_POINTS = 3
"""Distinct vertices needed before a ring can form a polygon."""

MIN_LINESTRING_POINTS = 2

METERS_PER_DEGREE = 111_000.0
"""Planar approximation used for drawn circle radii.

The drawing tool measures ``sqrt(dlat**2 + dlng**2) * METERS_PER_DEGREE``.
Longitude degrees are not scaled by latitude, so east-west radii are
overestimated away from the equator. Drawn radii in stored geofences
depend on this exact formula.
"""

# ---------------------------------------------------------------------------
# Interchange type discriminators
# ---------------------------------------------------------------------------

FEATURE_TYPE = "Feature"
FEATURE_COLLECTION_TYPE = "FeatureCollection"

POINT = "Point"
LINE_STRING = "LineString"
POLYGON = "Polygon"
CIRCLE = "Circle"

# Backend shape kinds for stored geofences
SHAPE_POLYGON = "polygon"
SHAPE_CIRCLE = "circle"

# ---------------------------------------------------------------------------
# Style property keys
# ---------------------------------------------------------------------------

STROKE_COLOR = "strokeColor"
STROKE_WIDTH = "strokeWidth"
FILL_COLOR = "fillColor"
COLOR = "color"

# ---------------------------------------------------------------------------
# Default styles per geometry type
# ---------------------------------------------------------------------------

DEFAULT_STYLES: dict[str, dict[str, object]] = {
    POLYGON: {
        STROKE_COLOR: "rgba(0, 150, 255, 0.8)",
        STROKE_WIDTH: 2,
        FILL_COLOR: "rgba(0, 150, 255, 0.2)",
    },
    LINE_STRING: {
        STROKE_COLOR: "rgba(255, 140, 0, 0.8)",
        STROKE_WIDTH: 3,
    },
    POINT: {
        COLOR: "#FF5722",
    },
    CIRCLE: {
        STROKE_COLOR: "rgba(76, 175, 80, 0.8)",
        STROKE_WIDTH: 2,
        FILL_COLOR: "rgba(76, 175, 80, 0.2)",
    },
}

DEFAULT_MARKER_SIZE = 6

WORKSITE_STYLE: dict[str, object] = {
    STROKE_COLOR: "rgba(13, 135, 225, 0.5)",
    STROKE_WIDTH: 1,
    FILL_COLOR: "rgba(13, 135, 225, 0.1)",
}
"""Style applied to worksite boundary circles unless a record overrides it."""

# ---------------------------------------------------------------------------
# Drawing tool palette
# ---------------------------------------------------------------------------

DRAFT_STROKE_COLOR = "rgba(0, 150, 255, 0.8)"
DRAFT_STROKE_WIDTH = 2
DRAFT_FILL_COLOR = "rgba(0, 150, 255, 0.2)"

VERTEX_COLOR = "#FF5555"
VERTEX_SIZE = 16
LATEST_VERTEX_COLOR = "#FF00FF"
LATEST_VERTEX_SIZE = 20
DRAWING_CENTER_COLOR = "#FF00FF"
SAVED_CENTER_COLOR = "#0D87E1"
CENTER_MARKER_SIZE = 20
