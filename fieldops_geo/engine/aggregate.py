"""Feature aggregation: many record sources, one styled collection.

Each ``Source`` is an independent array of backend records plus the
adapter that turns one record into one feature. Aggregation:

1. Runs every record through its source's adapter. A record the adapter
   rejects is skipped, logged and reported as a ``SourceRecordError``; the
   rest of that source and every other source still render.
2. Concatenates features in source order, then record order.
3. Resolves style per feature: explicit feature properties, then the
   source's override for that geometry type, then the geometry type's
   default.
4. Returns the combined collection. Overlapping shapes from different
   sources are different entities and are all kept.

``FeatureAggregator`` remembers its last inputs and hands back the very
same result object when called again with equal inputs, so a view that
memoizes on identity does not re-render.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from fieldops_geo.core.constants import CIRCLE, DEFAULT_STYLES, POLYGON, WORKSITE_STYLE
from fieldops_geo.core.exceptions import InvalidGeometry, SourceRecordError
from fieldops_geo.engine.transform import (
    geofence_to_feature,
    location_to_feature,
    worksite_to_feature,
)
from fieldops_geo.models.feature import Feature, FeatureCollection

logger = logging.getLogger("fieldops_geo.engine.aggregate")

RecordAdapter = Callable[[Mapping[str, Any]], Feature]


@dataclass(frozen=True, slots=True)
class Source:
    """One independent collection of backend records.

    Attributes:
        name: Label used in logs and skip reports (e.g. ``"geofences"``).
        records: The raw backend records, in display order.
        adapter: Turns one record into one feature, raising
            ``InvalidGeometry`` for records it cannot use.
        style: Per-geometry-type style overrides for this source, keyed by
            geometry type (``"Polygon"``, ``"Circle"``, ...).
    """

    name: str
    records: Sequence[Any]
    adapter: RecordAdapter
    style: Mapping[str, Mapping[str, object]] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class AggregationResult:
    """Output of one aggregation pass.

    Attributes:
        collection: Every feature that could be built, styled, in order.
        skipped: One error per record that was left out.
    """

    collection: FeatureCollection
    skipped: tuple[SourceRecordError, ...] = ()


# ---------------------------------------------------------------------------
# Source builders
# ---------------------------------------------------------------------------


def worksite_source(
    records: Sequence[Any],
    style: Mapping[str, object] | None = None,
) -> Source:
    """Worksite boundaries, drawn in the worksite palette unless overridden."""
    return Source("worksites", records, worksite_to_feature, {CIRCLE: style or WORKSITE_STYLE})


def geofence_source(
    records: Sequence[Any],
    *,
    polygon_style: Mapping[str, object] | None = None,
    circle_style: Mapping[str, object] | None = None,
) -> Source:
    """Stored geofences. Styles saved on a geofence still win over these."""
    style: dict[str, Mapping[str, object]] = {}
    if polygon_style:
        style[POLYGON] = polygon_style
    if circle_style:
        style[CIRCLE] = circle_style
    return Source("geofences", records, geofence_to_feature, style)


def location_source(records: Sequence[Any]) -> Source:
    """Live entity positions."""
    return Source("locations", records, location_to_feature)


# ---------------------------------------------------------------------------
# Style resolution
# ---------------------------------------------------------------------------


def resolve_style(
    feature: Feature,
    override: Mapping[str, object] | None = None,
) -> Feature:
    """Fill in every style key that applies to the feature's geometry.

    Precedence per key: the feature's own property, then ``override``,
    then the geometry type's default. Keys that do not apply to the
    geometry (``fillColor`` on a line) are left as they are.
    """
    defaults = DEFAULT_STYLES.get(feature.geometry_type, {})
    override = override or {}
    resolved: dict[str, object] = {}
    for key, default in defaults.items():
        explicit = feature.properties.get(key)
        if explicit is not None:
            continue
        resolved[key] = override.get(key, default)
    if not resolved:
        return feature
    return feature.with_properties(**resolved)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def aggregate(sources: Sequence[Source]) -> AggregationResult:
    """Combine ``sources`` into one styled collection, skipping bad records."""
    features: list[Feature] = []
    skipped: list[SourceRecordError] = []

    for source in sources:
        for index, record in enumerate(source.records):
            try:
                feature = source.adapter(record)
            except (InvalidGeometry, KeyError, TypeError, ValueError) as exc:
                error = _skip(source, index, record, exc)
                skipped.append(error)
                continue
            features.append(resolve_style(feature, source.style.get(feature.geometry_type)))

    _warn_duplicate_ids(features)

    logger.info(
        "Aggregated features | sources=%d | features=%d | skipped=%d",
        len(sources),
        len(features),
        len(skipped),
    )
    return AggregationResult(FeatureCollection(tuple(features)), tuple(skipped))


class FeatureAggregator:
    """Memoizing front for ``aggregate``.

    Keeps only the most recent inputs and result. Equal inputs return the
    identical ``AggregationResult``; anything else recomputes.
    """

    def __init__(self) -> None:
        self._last_inputs: tuple[object, ...] | None = None
        self._last_result: AggregationResult | None = None

    def __call__(self, sources: Sequence[Source]) -> AggregationResult:
        inputs = _snapshot(sources)
        if self._last_result is not None and inputs == self._last_inputs:
            logger.debug("Aggregation inputs unchanged, reusing previous result")
            return self._last_result
        result = aggregate(sources)
        self._last_inputs = inputs
        self._last_result = result
        return result

    def invalidate(self) -> None:
        """Forget the cached result."""
        self._last_inputs = None
        self._last_result = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _skip(source: Source, index: int, record: object, exc: Exception) -> SourceRecordError:
    record_id = record.get("_id") if isinstance(record, Mapping) else None
    reason = exc.message if isinstance(exc, InvalidGeometry) else f"{type(exc).__name__}: {exc}"
    error = SourceRecordError(
        f"Skipped record {index} of source '{source.name}': {reason}",
        source=source.name,
        index=index,
        record_id=record_id,
    )
    logger.warning(
        "Skipping source record | source=%s | index=%d | id=%s | reason=%s",
        source.name,
        index,
        record_id,
        reason,
    )
    return error


def _snapshot(sources: Sequence[Source]) -> tuple[object, ...]:
    """Deep-copy the inputs so in-place edits by the caller are detected."""
    return tuple(
        (
            s.name,
            [_copy_record(r) for r in s.records],
            s.adapter,
            {k: dict(v) for k, v in s.style.items()},
        )
        for s in sources
    )


def _copy_record(record: Any) -> Any:
    if isinstance(record, Mapping):
        return {k: _copy_record(v) for k, v in record.items()}
    if isinstance(record, list):
        return [_copy_record(v) for v in record]
    return record


def _warn_duplicate_ids(features: list[Feature]) -> None:
    counts = Counter(f.id for f in features)
    duplicates = sorted(str(fid) for fid, n in counts.items() if n > 1)
    if duplicates:
        logger.warning("Duplicate feature ids in aggregated collection | ids=%s", duplicates)
