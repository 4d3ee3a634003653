"""Tests for the interchange document codec."""

from __future__ import annotations

import json
import logging
from typing import Any

import pytest

from fieldops_geo.core.exceptions import InvalidGeometry
from fieldops_geo.engine.aggregate import aggregate, geofence_source, worksite_source
from fieldops_geo.models import Circle, LngLat, Point
from fieldops_geo.models.interchange import (
    GeometryDocument,
    dump_collection,
    dumps_collection,
    geometry_from_document,
    load_collection,
)


def _feature(geometry: dict[str, Any], **extra: Any) -> dict[str, Any]:
    return {"type": "Feature", "geometry": geometry, "properties": {}, **extra}


class TestDump:
    def test_aggregated_collection_reloads_equal(
        self,
        worksite_record: dict[str, Any],
        polygon_geofence_record: dict[str, Any],
    ) -> None:
        collection = aggregate(
            [worksite_source([worksite_record]), geofence_source([polygon_geofence_record])]
        ).collection
        loaded, skipped = load_collection(dump_collection(collection))
        assert skipped == []
        assert loaded == collection

    def test_dumps_is_compact_json(self, worksite_record: dict[str, Any]) -> None:
        collection = aggregate([worksite_source([worksite_record])]).collection
        text = dumps_collection(collection)
        assert "\": " not in text
        assert json.loads(text)["features"][0]["geometry"] == {
            "type": "Circle",
            "coordinates": [-122.4098, 37.8087],
            "radius": 250,
        }


class TestLoad:
    def test_from_json_text(self) -> None:
        text = json.dumps(
            {
                "type": "FeatureCollection",
                "features": [_feature({"type": "Point", "coordinates": [1.0, 2.0]}, id="p")],
            }
        )
        loaded, _ = load_collection(text)
        assert loaded.get("p").geometry == Point(LngLat(1.0, 2.0))

    def test_missing_id_generated(self) -> None:
        doc = {
            "type": "FeatureCollection",
            "features": [
                _feature({"type": "Point", "coordinates": [0.0, 0.0]}),
                _feature({"type": "Circle", "coordinates": [0.0, 0.0], "radius": 5}),
            ],
        }
        loaded, _ = load_collection(doc)
        assert [f.id for f in loaded] == ["point-0", "circle-1"]

    def test_bad_features_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        doc = {
            "type": "FeatureCollection",
            "features": [
                _feature({"type": "Point", "coordinates": [0.0, 0.0]}, id="ok"),
                _feature({"type": "MultiPolygon", "coordinates": []}, id="multi"),
                _feature(
                    {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1]]]},
                    id="open",
                ),
                _feature({"type": "Circle", "coordinates": [0.0, 0.0]}, id="no-radius"),
                {"type": "Feature"},
            ],
        }
        with caplog.at_level(logging.WARNING, logger="fieldops_geo.models.interchange"):
            loaded, skipped = load_collection(doc)
        assert [f.id for f in loaded] == ["ok"]
        assert len(skipped) == 4
        assert all(isinstance(e, InvalidGeometry) for e in skipped)
        assert "Skipping interchange feature" in caplog.text

    @pytest.mark.parametrize("entry", [None, [1.0, 2.0], 3])
    def test_non_object_feature_skipped(self, entry: Any) -> None:
        doc = {
            "type": "FeatureCollection",
            "features": [
                _feature({"type": "Point", "coordinates": [0.0, 0.0]}, id="a"),
                entry,
                _feature({"type": "Point", "coordinates": [1.0, 1.0]}, id="b"),
            ],
        }
        loaded, skipped = load_collection(doc)
        assert [f.id for f in loaded] == ["a", "b"]
        assert len(skipped) == 1
        assert "Feature 1 must be an object" in skipped[0].message

    def test_null_feature_in_json_text_skipped(self) -> None:
        text = (
            '{"type":"FeatureCollection","features":['
            '{"type":"Feature","id":"a","geometry":{"type":"Point","coordinates":[0,0]}},'
            "null]}"
        )
        loaded, skipped = load_collection(text)
        assert [f.id for f in loaded] == ["a"]
        assert len(skipped) == 1

    @pytest.mark.parametrize(
        "doc",
        [
            {"type": "Feature", "geometry": {"type": "Point", "coordinates": [0, 0]}},
            {"features": []},
            "not json",
        ],
    )
    def test_not_a_collection(self, doc: Any) -> None:
        with pytest.raises(InvalidGeometry):
            load_collection(doc)

    def test_unknown_properties_pass_through(self) -> None:
        doc = {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "id": 7,
                    "geometry": {"type": "Point", "coordinates": [0.0, 0.0]},
                    "properties": {"crew": "B", "strokeColor": "#000"},
                }
            ],
        }
        loaded, _ = load_collection(doc)
        assert dict(loaded.get(7).properties) == {"crew": "B", "strokeColor": "#000"}


class TestGeometryFromDocument:
    def test_circle(self) -> None:
        doc = GeometryDocument(type="Circle", coordinates=[1.0, 2.0], radius=30)
        assert geometry_from_document(doc) == Circle(LngLat(1.0, 2.0), 30.0)

    def test_altitude_ignored(self) -> None:
        doc = GeometryDocument(type="Point", coordinates=[1.0, 2.0, 99.0])
        assert geometry_from_document(doc) == Point(LngLat(1.0, 2.0))

    def test_string_coordinates_rejected(self) -> None:
        doc = GeometryDocument(type="LineString", coordinates="0,0 1,1")
        with pytest.raises(InvalidGeometry):
            geometry_from_document(doc)
