"""Feature pipeline: transform, aggregate, project, measure.

- transform: backend records in native order to interchange features, and back
- aggregate: many record sources into one styled collection
- render: features to declarative map primitives
- measure: geodesic area/perimeter and map focus regions
"""

from fieldops_geo.engine.aggregate import (
    AggregationResult,
    FeatureAggregator,
    Source,
    aggregate,
    resolve_style,
)
from fieldops_geo.engine.render import project, project_feature
from fieldops_geo.engine.transform import (
    circle_feature,
    close_polygon,
    polygon_feature,
    to_interchange,
    to_native,
)

__all__ = [
    "AggregationResult",
    "FeatureAggregator",
    "Source",
    "aggregate",
    "circle_feature",
    "close_polygon",
    "polygon_feature",
    "project",
    "project_feature",
    "resolve_style",
    "to_interchange",
    "to_native",
]
