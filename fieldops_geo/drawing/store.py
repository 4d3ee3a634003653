"""GeofenceStore abstract base class and an in-memory implementation.

The drawing session hands a finished draft to a store as a native-order
``GeofenceCreatePayload`` and gets back the stored id. It never knows which
concrete store is behind the interface.

``InMemoryGeofenceStore`` applies the same checks the backend does (at
least three points for a polygon, a positive radius for a circle) and can
be told to fail so callers can exercise the retry path.
"""

from __future__ import annotations

import abc
import copy
import itertools
import logging
from typing import TYPE_CHECKING

from fieldops_geo.core.constants import MIN_POLYGON_DISTINCT_POINTS, SHAPE_CIRCLE, SHAPE_POLYGON

if TYPE_CHECKING:
    from fieldops_geo.models.contracts import GeofenceCreatePayload

logger = logging.getLogger("fieldops_geo.drawing.store")


class GeofenceStore(abc.ABC):
    """Persistence collaborator for new geofences."""

    @abc.abstractmethod
    async def create(self, payload: GeofenceCreatePayload) -> str:
        """Persist a new geofence.

        Args:
            payload: Native-order create payload.

        Returns:
            The id the store assigned to the geofence.

        Raises:
            Exception: Any failure. The session wraps it in
                ``PersistenceError`` and keeps the draft for a retry.
        """


class InMemoryGeofenceStore(GeofenceStore):
    """Dict-backed store for local use and tests.

    Attributes:
        records: Stored payloads keyed by assigned id, in insertion order.
        fail_next: Number of upcoming ``create`` calls that raise
            ``ConnectionError`` before the store recovers.
    """

    def __init__(self, *, fail_next: int = 0) -> None:
        self.records: dict[str, GeofenceCreatePayload] = {}
        self.fail_next = fail_next
        self.calls = 0
        self._ids = itertools.count(1)

    async def create(self, payload: GeofenceCreatePayload) -> str:
        self.calls += 1
        if self.fail_next > 0:
            self.fail_next -= 1
            msg = "geofence store unavailable"
            raise ConnectionError(msg)

        _validate_payload(payload)
        geofence_id = f"geofence-{next(self._ids)}"
        self.records[geofence_id] = copy.deepcopy(payload)
        logger.info(
            "Geofence stored | id=%s | worksite=%s | type=%s",
            geofence_id,
            payload.get("worksiteId"),
            payload.get("type"),
        )
        return geofence_id


def _validate_payload(payload: GeofenceCreatePayload) -> None:
    """Reject payloads the backend would reject.  Raises ``ValueError``."""
    if not payload.get("worksiteId"):
        msg = "worksiteId is required"
        raise ValueError(msg)
    if not str(payload.get("name", "")).strip():
        msg = "name is required"
        raise ValueError(msg)

    shape = payload.get("type")
    if shape == SHAPE_POLYGON:
        coordinates = payload.get("coordinates") or []
        if len(coordinates) < MIN_POLYGON_DISTINCT_POINTS:
            msg = f"Polygon requires at least {MIN_POLYGON_DISTINCT_POINTS} points"
            raise ValueError(msg)
    elif shape == SHAPE_CIRCLE:
        radius = payload.get("radius")
        if payload.get("center") is None or radius is None or radius <= 0:
            msg = "Circle requires a center and a radius greater than 0"
            raise ValueError(msg)
    else:
        msg = f"Unsupported geofence type {shape!r}"
        raise ValueError(msg)
