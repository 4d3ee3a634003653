"""Pydantic schema for interchange documents at rest and on the wire.

Interchange documents follow GeoJSON conventions (longitude-first pairs,
``"Feature"``/``"FeatureCollection"`` discriminators, nested
``geometry.type``) extended with a ``"Circle"`` geometry carrying a
``radius`` in metres.

Loading is best-effort per feature: a collection with one unusable feature
still loads, minus that feature, and the rejects are returned alongside so
the caller can report them. A document that is not a FeatureCollection at
all is rejected outright.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from fieldops_geo.core.constants import CIRCLE, LINE_STRING, POINT, POLYGON
from fieldops_geo.core.exceptions import InvalidGeometry
from fieldops_geo.models.coordinates import LngLat
from fieldops_geo.models.feature import Feature, FeatureCollection
from fieldops_geo.models.geometry import Circle, Geometry, LineString, Point, Polygon

logger = logging.getLogger("fieldops_geo.models.interchange")


class GeometryDocument(BaseModel):
    """Interchange geometry object.

    Attributes:
        type: Geometry discriminator (``Point``, ``LineString``,
            ``Polygon``, ``Circle``).
        coordinates: Nested ``[lng, lat]`` arrays, shape depends on type.
        radius: Circle radius in metres; absent for other types.
    """

    model_config = ConfigDict(extra="allow")

    type: str
    coordinates: Any = None
    radius: float | None = None


class FeatureDocument(BaseModel):
    """Interchange ``Feature`` object."""

    model_config = ConfigDict(extra="allow")

    type: Literal["Feature"] = "Feature"
    id: str | int | None = None
    geometry: GeometryDocument
    properties: dict[str, Any] | None = Field(default_factory=dict)


class FeatureCollectionDocument(BaseModel):
    """Interchange ``FeatureCollection`` object.

    Features are kept raw here and validated one at a time by
    ``load_collection`` so a single bad feature cannot fail the document.
    """

    model_config = ConfigDict(extra="allow")

    type: Literal["FeatureCollection"]
    features: list[Any] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def dump_collection(collection: FeatureCollection) -> dict[str, object]:
    """Serialise a collection to an interchange document dict."""
    return collection.to_dict()


def dumps_collection(collection: FeatureCollection) -> str:
    """Serialise a collection to interchange JSON text."""
    return json.dumps(dump_collection(collection), separators=(",", ":"))


def load_collection(
    document: Mapping[str, Any] | str | bytes,
) -> tuple[FeatureCollection, list[InvalidGeometry]]:
    """Load an interchange FeatureCollection document.

    Args:
        document: A parsed document, or JSON text.

    Returns:
        The loaded collection and the list of per-feature rejections,
        in document order.

    Raises:
        InvalidGeometry: If the document is not a FeatureCollection.
    """
    try:
        if isinstance(document, str | bytes):
            doc = FeatureCollectionDocument.model_validate_json(document)
        else:
            doc = FeatureCollectionDocument.model_validate(document)
    except PydanticValidationError as exc:
        msg = f"Not an interchange FeatureCollection: {exc.error_count()} validation error(s)"
        raise InvalidGeometry(msg) from exc

    features: list[Feature] = []
    skipped: list[InvalidGeometry] = []
    for index, raw in enumerate(doc.features):
        try:
            features.append(_load_feature(raw, index))
        except InvalidGeometry as exc:
            logger.warning("Skipping interchange feature | index=%d | reason=%s", index, exc)
            skipped.append(exc)

    logger.info(
        "Loaded interchange collection | features=%d | skipped=%d",
        len(features),
        len(skipped),
    )
    return FeatureCollection(tuple(features)), skipped


def geometry_from_document(doc: GeometryDocument) -> Geometry:
    """Build a domain geometry from a validated geometry document.

    Raises:
        InvalidGeometry: On unknown types or malformed coordinates.
    """
    if doc.type == POINT:
        return Point(_lnglat(doc.coordinates))
    if doc.type == LINE_STRING:
        return LineString(tuple(_lnglat(c) for c in _as_list(doc.coordinates, "LineString")))
    if doc.type == POLYGON:
        rings = _as_list(doc.coordinates, "Polygon")
        return Polygon(
            tuple(tuple(_lnglat(c) for c in _as_list(ring, "Polygon ring")) for ring in rings)
        )
    if doc.type == CIRCLE:
        if doc.radius is None:
            msg = "Circle geometry has no radius"
            raise InvalidGeometry(msg)
        return Circle(_lnglat(doc.coordinates), doc.radius)
    msg = f"Unsupported geometry type {doc.type!r}"
    raise InvalidGeometry(msg)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_feature(raw: object, index: int) -> Feature:
    if not isinstance(raw, Mapping):
        msg = f"Feature {index} must be an object, got {type(raw).__name__}"
        raise InvalidGeometry(msg)
    try:
        doc = FeatureDocument.model_validate(raw)
    except PydanticValidationError as exc:
        msg = f"Feature {index} is malformed: {exc.error_count()} validation error(s)"
        raise InvalidGeometry(msg) from exc

    geometry = geometry_from_document(doc.geometry)
    feature_id = doc.id if doc.id is not None else f"{geometry.type.lower()}-{index}"
    return Feature(feature_id, geometry, doc.properties or {})


def _as_list(value: object, context: str) -> list[Any]:
    if not isinstance(value, list | tuple):
        msg = f"{context} coordinates must be an array, got {type(value).__name__}"
        raise InvalidGeometry(msg)
    return list(value)


def _lnglat(value: object) -> LngLat:
    """Convert a raw ``[lng, lat]`` (optionally ``[lng, lat, alt]``) array."""
    if not isinstance(value, list | tuple) or len(value) < 2:
        msg = f"Expected a [lng, lat] pair, got {value!r}"
        raise InvalidGeometry(msg)
    lng, lat = value[0], value[1]
    if isinstance(lng, bool) or isinstance(lat, bool):
        msg = f"Expected numeric [lng, lat], got {value!r}"
        raise InvalidGeometry(msg)
    try:
        return LngLat(float(lng), float(lat))
    except (TypeError, ValueError) as exc:
        msg = f"Expected numeric [lng, lat], got {value!r}"
        raise InvalidGeometry(msg) from exc
