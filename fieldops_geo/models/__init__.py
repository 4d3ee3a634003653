"""Data models and schemas.

Defines the data structures used throughout the engine:
- LatLng / LngLat: positions in native and interchange axis order
- Point, LineString, Polygon, Circle: geometry variants
- Feature / FeatureCollection: the interchange feature model
- contracts: TypedDicts for backend records and persistence payloads
"""

from fieldops_geo.models.coordinates import LatLng, LngLat
from fieldops_geo.models.feature import Feature, FeatureCollection, FeatureId
from fieldops_geo.models.geometry import Circle, Geometry, LineString, Point, Polygon

__all__ = [
    "Circle",
    "Feature",
    "FeatureCollection",
    "FeatureId",
    "Geometry",
    "LatLng",
    "LineString",
    "LngLat",
    "Point",
    "Polygon",
]
