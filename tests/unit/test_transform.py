"""Tests for the coordinate transform.

Covers:
- Axis swap round-trip and closure idempotence
- Polygon minimum and circle validity at the factories
- Backend record adapters (worksites, geofences, live locations)
- Native create payload on the write path
"""

from __future__ import annotations

from typing import Any

import pytest

from fieldops_geo.core.exceptions import InvalidGeometry
from fieldops_geo.engine.transform import (
    circle_feature,
    close_polygon,
    feature_to_geofence_payload,
    geofence_to_feature,
    line_feature,
    location_to_feature,
    parse_native_point,
    parse_native_ring,
    point_feature,
    polygon_feature,
    to_interchange,
    to_native,
    worksite_to_feature,
)
from fieldops_geo.models import Circle, LatLng, LngLat, Point, Polygon


class TestAxisSwap:
    def test_round_trip(self, triangle_taps: list[LatLng]) -> None:
        assert to_native(to_interchange(triangle_taps)) == triangle_taps

    def test_length_preserved_no_rounding(self) -> None:
        ring = [LatLng(37.123456789, -122.987654321)]
        swapped = to_interchange(ring)
        assert swapped == [LngLat(-122.987654321, 37.123456789)]

    def test_empty(self) -> None:
        assert to_interchange([]) == []


class TestClosePolygon:
    def test_appends_first(self) -> None:
        ring = [LngLat(0.0, 0.0), LngLat(1.0, 0.0), LngLat(1.0, 1.0)]
        closed = close_polygon(ring)
        assert closed == [*ring, LngLat(0.0, 0.0)]
        assert len(ring) == 3

    def test_idempotent(self) -> None:
        ring = [LngLat(0.0, 0.0), LngLat(1.0, 0.0), LngLat(1.0, 1.0)]
        once = close_polygon(ring)
        assert close_polygon(once) == once

    def test_empty(self) -> None:
        assert close_polygon([]) == []


class TestPolygonFeature:
    def test_two_points_fail(self) -> None:
        with pytest.raises(InvalidGeometry):
            polygon_feature("p", [LatLng(0.0, 0.0), LatLng(1.0, 1.0)])

    def test_three_points_closed_to_four(self, triangle_taps: list[LatLng]) -> None:
        feature = polygon_feature("p", triangle_taps)
        assert isinstance(feature.geometry, Polygon)
        assert len(feature.geometry.outer_ring) == 4
        assert feature.geometry.outer_ring[0] == feature.geometry.outer_ring[-1]

    def test_triangle_ring_in_interchange_order(self, triangle_taps: list[LatLng]) -> None:
        feature = polygon_feature("p", triangle_taps)
        assert feature.geometry.to_dict()["coordinates"] == [
            [[-122.41, 37.80], [-122.42, 37.79], [-122.40, 37.78], [-122.41, 37.80]]
        ]

    def test_repeated_points_count_once(self) -> None:
        ring = [LatLng(0.0, 0.0), LatLng(1.0, 1.0), LatLng(0.0, 0.0)]
        with pytest.raises(InvalidGeometry, match="distinct"):
            polygon_feature("p", ring)

    def test_already_closed_input_not_doubled(self, triangle_taps: list[LatLng]) -> None:
        feature = polygon_feature("p", [*triangle_taps, triangle_taps[0]])
        assert len(feature.geometry.outer_ring) == 4


class TestCircleFeature:
    def test_center_swapped_radius_kept(self) -> None:
        feature = circle_feature("c", LatLng(37.8, -122.4), 120.5)
        assert feature.geometry == Circle(LngLat(-122.4, 37.8), 120.5)

    @pytest.mark.parametrize("radius", [0, -10])
    def test_non_positive_radius_fails(self, radius: float) -> None:
        with pytest.raises(InvalidGeometry):
            circle_feature("c", LatLng(0.0, 0.0), radius)


class TestPointAndLineFeatures:
    def test_point(self) -> None:
        feature = point_feature("pt", LatLng(1.0, 2.0))
        assert feature.geometry == Point(LngLat(2.0, 1.0))

    def test_line(self) -> None:
        feature = line_feature("ln", [LatLng(1.0, 2.0), LatLng(3.0, 4.0)])
        assert feature.geometry.to_dict()["coordinates"] == [[2.0, 1.0], [4.0, 3.0]]


class TestParseNative:
    def test_object_form(self) -> None:
        assert parse_native_point({"latitude": 1, "longitude": 2}) == LatLng(1.0, 2.0)

    def test_array_form_drops_altitude(self) -> None:
        assert parse_native_point([1.0, 2.0, 30.0]) == LatLng(1.0, 2.0)

    @pytest.mark.parametrize(
        "raw",
        [
            {"latitude": 1.0},
            [1.0],
            "1,2",
            None,
            {"latitude": "north", "longitude": 2.0},
            [True, 2.0],
            [100.0, 0.0],
        ],
    )
    def test_malformed(self, raw: object) -> None:
        with pytest.raises(InvalidGeometry):
            parse_native_point(raw)

    def test_ring_reports_index(self) -> None:
        with pytest.raises(InvalidGeometry, match="index 1"):
            parse_native_ring([[0.0, 0.0], ["x", 1.0]])

    def test_ring_must_be_array(self) -> None:
        with pytest.raises(InvalidGeometry):
            parse_native_ring({"latitude": 0.0, "longitude": 0.0})


class TestWorksiteAdapter:
    def test_builds_circle(self, worksite_record: dict[str, Any]) -> None:
        feature = worksite_to_feature(worksite_record)
        assert feature.id == "ws-1"
        assert feature.geometry == Circle(LngLat(-122.4098, 37.8087), 250)
        assert feature.name == "Pier 39 Yard"
        assert feature.properties["description"] == "Radius: 250m"

    def test_explicit_description_kept(self, worksite_record: dict[str, Any]) -> None:
        worksite_record["description"] = "Main yard"
        assert worksite_to_feature(worksite_record).properties["description"] == "Main yard"

    def test_missing_radius(self, worksite_record: dict[str, Any]) -> None:
        del worksite_record["radius"]
        with pytest.raises(InvalidGeometry, match="radius"):
            worksite_to_feature(worksite_record)

    def test_non_numeric_radius(self, worksite_record: dict[str, Any]) -> None:
        worksite_record["radius"] = "big"
        with pytest.raises(InvalidGeometry):
            worksite_to_feature(worksite_record)

    def test_not_a_mapping(self) -> None:
        with pytest.raises(InvalidGeometry):
            worksite_to_feature(["ws-1"])  # type: ignore[arg-type]


class TestGeofenceAdapter:
    def test_polygon(self, polygon_geofence_record: dict[str, Any]) -> None:
        feature = geofence_to_feature(polygon_geofence_record)
        assert isinstance(feature.geometry, Polygon)
        assert feature.geometry.outer_ring[0] == LngLat(-122.41, 37.80)
        assert feature.properties["strokeColor"] == "#112233"
        assert feature.properties["strokeWidth"] == 4
        assert feature.properties["isActive"] is True

    def test_circle_without_stored_style(self, circle_geofence_record: dict[str, Any]) -> None:
        feature = geofence_to_feature(circle_geofence_record)
        assert feature.geometry == Circle(LngLat(-122.415, 37.805), 40)
        assert "strokeColor" not in feature.properties
        assert feature.properties["isActive"] is False

    def test_unsupported_type(self, circle_geofence_record: dict[str, Any]) -> None:
        circle_geofence_record["type"] = "rectangle"
        with pytest.raises(InvalidGeometry, match="unsupported type"):
            geofence_to_feature(circle_geofence_record)

    def test_degenerate_polygon(self, polygon_geofence_record: dict[str, Any]) -> None:
        polygon_geofence_record["coordinates"] = [[37.8, -122.4], [37.7, -122.3]]
        with pytest.raises(InvalidGeometry):
            geofence_to_feature(polygon_geofence_record)


class TestLocationAdapter:
    def test_point_with_extras(self, location_record: dict[str, Any]) -> None:
        feature = location_to_feature(location_record)
        assert feature.id == "loc-7"
        assert feature.geometry == Point(LngLat(-122.3937, 37.7955))
        assert feature.name == "user-7"
        assert feature.properties["accuracy"] == 5.0
        assert feature.properties["isTracking"] is True
        assert "speed" not in feature.properties

    def test_falls_back_to_user_id(self, location_record: dict[str, Any]) -> None:
        del location_record["_id"]
        assert location_to_feature(location_record).id == "user-7"

    def test_no_id(self, location_record: dict[str, Any]) -> None:
        del location_record["_id"]
        del location_record["userId"]
        with pytest.raises(InvalidGeometry, match="no usable id"):
            location_to_feature(location_record)


class TestGeofencePayload:
    def test_polygon_open_native_ring(self, triangle_taps: list[LatLng]) -> None:
        feature = polygon_feature(
            "draft",
            triangle_taps,
            {"name": "Gate", "strokeColor": "s", "strokeWidth": 2, "fillColor": "f"},
        )
        payload = feature_to_geofence_payload(feature, "ws-1")
        assert payload["worksiteId"] == "ws-1"
        assert payload["type"] == "polygon"
        assert payload["coordinates"] == [[37.80, -122.41], [37.79, -122.42], [37.78, -122.40]]
        assert "center" not in payload

    def test_circle_center_and_radius(self) -> None:
        feature = circle_feature("draft", LatLng(37.8, -122.4), 100, {"name": "Crane"})
        payload = feature_to_geofence_payload(feature, "ws-1")
        assert payload["type"] == "circle"
        assert payload["center"] == {"latitude": 37.8, "longitude": -122.4}
        assert payload["radius"] == 100
        assert "coordinates" not in payload

    def test_point_rejected(self) -> None:
        with pytest.raises(InvalidGeometry):
            feature_to_geofence_payload(point_feature("p", LatLng(0.0, 0.0)), "ws-1")
