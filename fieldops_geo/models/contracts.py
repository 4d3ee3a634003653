"""Canonical payload contracts at the engine's boundaries.

Every record that crosses into the engine from the backend, and every
payload the engine hands back to a collaborator, is described here as a
``TypedDict``.  Field names follow the backend (camelCase, native
``latitude``/``longitude`` order); drift tests compare these contracts
against the models' ``to_dict()`` output.

Design notes:
- Source records use ``total=False``: the backend returns loosely-typed
  documents and the transform adapters check what is actually present.
- Output contracts use ``total=True`` so missing keys are flagged.
"""

from __future__ import annotations

from typing import TypedDict

# ---------------------------------------------------------------------------
# Native positions
# ---------------------------------------------------------------------------


class NativePosition(TypedDict):
    """A backend ``{latitude, longitude}`` object."""

    latitude: float
    longitude: float


class TrackedPosition(NativePosition, total=False):
    """A live device fix; the extra fields are passed through as properties."""

    accuracy: float
    altitude: float
    speed: float
    heading: float


# ---------------------------------------------------------------------------
# Source records (backend -> aggregator)
# ---------------------------------------------------------------------------


class WorksiteRecord(TypedDict, total=False):
    """A worksite with a circular boundary."""

    _id: str
    tenantId: str
    name: str
    description: str
    address: str
    coordinates: NativePosition
    radius: float


class GeofenceRecord(TypedDict, total=False):
    """A stored geofence. ``coordinates`` holds ``[lat, lng]`` pairs for polygons."""

    _id: str
    worksiteId: str
    type: str
    name: str
    description: str
    coordinates: list[list[float]]
    center: NativePosition
    radius: float
    strokeColor: str
    strokeWidth: float
    fillColor: str
    isActive: bool


class UserLocationRecord(TypedDict, total=False):
    """A live entity position report."""

    _id: str
    userId: str
    tenantId: str
    timestamp: float
    coordinates: TrackedPosition
    isTracking: bool
    deviceInfo: str
    batteryLevel: float


# ---------------------------------------------------------------------------
# Persistence (drawing session -> store)
# ---------------------------------------------------------------------------


class _GeofenceCreateRequired(TypedDict):
    worksiteId: str
    type: str
    name: str
    description: str
    strokeColor: str
    strokeWidth: float
    fillColor: str


class GeofenceCreatePayload(_GeofenceCreateRequired, total=False):
    """Native-order payload for creating a geofence.

    Polygons carry ``coordinates`` (the open ring as drawn); circles carry
    ``center`` and ``radius``.
    """

    coordinates: list[list[float]]
    center: NativePosition
    radius: float


# ---------------------------------------------------------------------------
# Interchange (engine -> wire / at rest)
# ---------------------------------------------------------------------------


class FeaturePayload(TypedDict):
    """Serialised ``Feature``."""

    type: str
    id: str | int
    geometry: dict[str, object]
    properties: dict[str, object]


class FeatureCollectionPayload(TypedDict):
    """Serialised ``FeatureCollection``."""

    type: str
    features: list[FeaturePayload]
