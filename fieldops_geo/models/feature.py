"""Feature and FeatureCollection value objects.

A Feature is a geometry plus an id and an open property map. Features are
immutable: ``properties`` is a read-only mapping and edits go through
``with_properties()``, which returns a new Feature. Two features built from
the same data compare equal, which is what the aggregator relies on when
it memoizes.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from fieldops_geo.core.constants import FEATURE_COLLECTION_TYPE, FEATURE_TYPE
from fieldops_geo.core.exceptions import InvalidGeometry
from fieldops_geo.models.geometry import Geometry

FeatureId = str | int


@dataclass(frozen=True, slots=True)
class Feature:
    """A tagged geometric entity.

    Attributes:
        id: Unique within a collection and stable across re-renders.
        geometry: One of ``Point``, ``LineString``, ``Polygon``, ``Circle``.
        properties: Open string-keyed map. Recognized keys are ``name``,
            ``description``, ``strokeColor``, ``strokeWidth``,
            ``fillColor`` and ``color``; anything else passes through.
    """

    id: FeatureId
    geometry: Geometry
    properties: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, str | int):
            msg = f"Feature id must be a string or number, got {type(self.id).__name__}"
            raise InvalidGeometry(msg)
        # Other geometry kinds may ride along; consumers skip what they do not know.
        if not isinstance(getattr(self.geometry, "type", None), str):
            msg = f"Geometry {type(self.geometry).__name__} has no type discriminator"
            raise InvalidGeometry(msg)
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @property
    def geometry_type(self) -> str:
        return self.geometry.type

    @property
    def name(self) -> str:
        return str(self.properties.get("name") or "")

    def with_properties(self, **updates: object) -> Feature:
        """Return a copy with ``updates`` merged over the current properties."""
        return Feature(self.id, self.geometry, {**self.properties, **updates})

    def to_dict(self) -> dict[str, object]:
        """Serialise to an interchange ``Feature`` object."""
        return {
            "type": FEATURE_TYPE,
            "id": self.id,
            "geometry": self.geometry.to_dict(),
            "properties": dict(self.properties),
        }


@dataclass(frozen=True, slots=True)
class FeatureCollection:
    """An ordered, immutable sequence of features.

    Order is insertion order. It drives stable render ordering and has no
    other meaning.
    """

    features: tuple[Feature, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "features", tuple(self.features))

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def __len__(self) -> int:
        return len(self.features)

    def get(self, feature_id: FeatureId) -> Feature | None:
        """Return the first feature with ``feature_id``, or ``None``."""
        for feature in self.features:
            if feature.id == feature_id:
                return feature
        return None

    def to_dict(self) -> dict[str, object]:
        """Serialise to an interchange ``FeatureCollection`` object."""
        return {
            "type": FEATURE_COLLECTION_TYPE,
            "features": [f.to_dict() for f in self.features],
        }
