"""Field-operations geospatial feature engine.

Represents worksite boundaries, stored geofences and live entity positions
as interchange-format features, aggregates them into one styled collection,
projects them to map render primitives, and drives the interactive
polygon/circle geofence drawing flow.
"""

__version__ = "0.1.0"
