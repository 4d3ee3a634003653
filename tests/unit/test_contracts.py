"""Contract drift detection tests.

These tests verify that serialised model keys and persistence payloads
match the canonical contracts defined in ``fieldops_geo.models.contracts``.
If a key is added to or removed from a ``to_dict()`` or payload builder
without updating the contract TypedDict, these tests fail.
"""

from __future__ import annotations

import unittest
from typing import Any, get_type_hints

import pytest

from fieldops_geo.engine.transform import (
    circle_feature,
    feature_to_geofence_payload,
    point_feature,
    polygon_feature,
)
from fieldops_geo.models import FeatureCollection, LatLng
from fieldops_geo.models.contracts import (
    FeatureCollectionPayload,
    FeaturePayload,
    GeofenceCreatePayload,
    GeofenceRecord,
    NativePosition,
    TrackedPosition,
    UserLocationRecord,
    WorksiteRecord,
)

TRIANGLE = [LatLng(0.0, 0.0), LatLng(0.0, 1.0), LatLng(1.0, 1.0)]


def _contract_keys(td: type) -> set[str]:
    """Extract the declared field names from a TypedDict class."""
    return set(get_type_hints(td).keys())


# ---------------------------------------------------------------------------
# Feature / FeatureCollection
# ---------------------------------------------------------------------------


class TestFeatureContract(unittest.TestCase):
    """Feature.to_dict() keys must match FeaturePayload contract."""

    def test_keys_match(self) -> None:
        actual = set(point_feature("p", LatLng(0.0, 0.0)).to_dict().keys())
        expected = _contract_keys(FeaturePayload)
        assert actual == expected, f"Drift detected: {actual.symmetric_difference(expected)}"


class TestFeatureCollectionContract(unittest.TestCase):
    """FeatureCollection.to_dict() keys must match FeatureCollectionPayload."""

    def test_keys_match(self) -> None:
        actual = set(FeatureCollection().to_dict().keys())
        expected = _contract_keys(FeatureCollectionPayload)
        assert actual == expected, f"Drift detected: {actual.symmetric_difference(expected)}"


# ---------------------------------------------------------------------------
# Geofence create payload
# ---------------------------------------------------------------------------


class TestGeofenceCreateContract(unittest.TestCase):
    """feature_to_geofence_payload() output must match GeofenceCreatePayload."""

    def test_polygon_keys(self) -> None:
        payload = feature_to_geofence_payload(polygon_feature("d", TRIANGLE), "ws-1")
        expected = set(GeofenceCreatePayload.__required_keys__) | {"coordinates"}
        assert set(payload) == expected

    def test_circle_keys(self) -> None:
        payload = feature_to_geofence_payload(circle_feature("d", LatLng(0.0, 0.0), 10), "ws-1")
        expected = set(GeofenceCreatePayload.__required_keys__) | {"center", "radius"}
        assert set(payload) == expected

    def test_all_keys_declared(self) -> None:
        declared = _contract_keys(GeofenceCreatePayload)
        for feature in (
            polygon_feature("d", TRIANGLE),
            circle_feature("d", LatLng(0.0, 0.0), 10),
        ):
            assert set(feature_to_geofence_payload(feature, "ws-1")) <= declared

    def test_center_matches_native_position(self) -> None:
        payload = feature_to_geofence_payload(circle_feature("d", LatLng(1.0, 2.0), 10), "ws-1")
        assert set(payload["center"]) == _contract_keys(NativePosition)


# ---------------------------------------------------------------------------
# Source records
# ---------------------------------------------------------------------------


class TestSourceRecordContracts:
    """Sample backend records only use keys the record contracts declare."""

    def test_worksite(self, worksite_record: dict[str, Any]) -> None:
        assert set(worksite_record) <= _contract_keys(WorksiteRecord)

    @pytest.mark.parametrize("fixture", ["polygon_geofence_record", "circle_geofence_record"])
    def test_geofence(self, fixture: str, request: pytest.FixtureRequest) -> None:
        record = request.getfixturevalue(fixture)
        assert set(record) <= _contract_keys(GeofenceRecord)

    def test_location(self, location_record: dict[str, Any]) -> None:
        assert set(location_record) <= _contract_keys(UserLocationRecord)
        assert set(location_record["coordinates"]) <= _contract_keys(TrackedPosition)
