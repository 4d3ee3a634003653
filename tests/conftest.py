"""Shared pytest fixtures for the fieldops_geo test suite."""

from __future__ import annotations

from typing import Any

import pytest

from fieldops_geo.drawing.store import InMemoryGeofenceStore
from fieldops_geo.models.coordinates import LatLng

# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Positions
# ---------------------------------------------------------------------------


@pytest.fixture()
def triangle_taps() -> list[LatLng]:
    """Three map taps in native order around downtown San Francisco."""
    return [
        LatLng(37.80, -122.41),
        LatLng(37.79, -122.42),
        LatLng(37.78, -122.40),
    ]


# ---------------------------------------------------------------------------
# Backend records
# ---------------------------------------------------------------------------


@pytest.fixture()
def worksite_record() -> dict[str, Any]:
    return {
        "_id": "ws-1",
        "tenantId": "tenant-a",
        "name": "Pier 39 Yard",
        "coordinates": {"latitude": 37.8087, "longitude": -122.4098},
        "radius": 250,
    }


@pytest.fixture()
def polygon_geofence_record() -> dict[str, Any]:
    return {
        "_id": "gf-poly",
        "worksiteId": "ws-1",
        "type": "polygon",
        "name": "Loading bay",
        "description": "Trucks only",
        "coordinates": [[37.80, -122.41], [37.79, -122.42], [37.78, -122.40]],
        "strokeColor": "#112233",
        "strokeWidth": 4,
        "fillColor": "rgba(1, 2, 3, 0.4)",
        "isActive": True,
    }


@pytest.fixture()
def circle_geofence_record() -> dict[str, Any]:
    return {
        "_id": "gf-circle",
        "worksiteId": "ws-1",
        "type": "circle",
        "name": "Crane radius",
        "center": {"latitude": 37.805, "longitude": -122.415},
        "radius": 40,
        "isActive": False,
    }


@pytest.fixture()
def location_record() -> dict[str, Any]:
    return {
        "_id": "loc-7",
        "userId": "user-7",
        "timestamp": 1_700_000_000_000,
        "isTracking": True,
        "coordinates": {
            "latitude": 37.7955,
            "longitude": -122.3937,
            "accuracy": 5.0,
            "speed": None,
        },
    }


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@pytest.fixture()
def store() -> InMemoryGeofenceStore:
    return InMemoryGeofenceStore()
