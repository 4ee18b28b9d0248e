import pytest

from data_sources.data_quality import (
    assess_area_data_quality,
    grade_by_count,
    grade_by_coverage,
    grade_by_presence,
)
from data_sources.layer_stats import build_area_context, layer_stats_from_features, polygon_area_km2
from data_sources.models import AreaContext, LayerStats
from data_sources.utils import geometry_length_m, polygon_area_m2

SQUARE = {
    "type": "Polygon",
    "coordinates": [[[0, 0], [0.01, 0], [0.01, 0.01], [0, 0.01], [0, 0]]],
}
SQUARE_M2 = 1_230_906  # a² (1 - e²) Δφ Δλ on WGS84 near the equator


def _feature(geometry):
    return {"type": "Feature", "properties": {}, "geometry": geometry}


def test_polygon_area():
    assert polygon_area_m2(SQUARE) == pytest.approx(SQUARE_M2, rel=1e-3)
    assert polygon_area_km2(SQUARE) == pytest.approx(1.2309, rel=1e-3)


def test_polygon_holes_subtracted():
    outer = SQUARE["coordinates"][0]
    hole = [[0, 0], [0.005, 0], [0.005, 0.005], [0, 0.005], [0, 0]]
    with_hole = {"type": "Polygon", "coordinates": [outer, hole]}
    assert polygon_area_m2(with_hole) == pytest.approx(SQUARE_M2 * 0.75, rel=1e-3)


def test_multipolygon_sums_parts():
    multi = {"type": "MultiPolygon", "coordinates": [SQUARE["coordinates"], SQUARE["coordinates"]]}
    assert polygon_area_m2(multi) == pytest.approx(2 * SQUARE_M2, rel=1e-3)


def test_line_length():
    line = {"type": "LineString", "coordinates": [[0, 0], [0, 0.01]]}
    assert geometry_length_m(line) == pytest.approx(1105.74, abs=0.5)


def test_degenerate_geometries_measure_zero():
    assert polygon_area_m2({"type": "Polygon", "coordinates": [[[0, 0], [1, 1], [0, 0]]]}) == 0.0
    assert polygon_area_m2({"type": "Polygon", "coordinates": []}) == 0.0
    assert polygon_area_m2({"type": "LineString", "coordinates": [[0, 0], [0, 1]]}) == 0.0
    assert geometry_length_m({"type": "LineString", "coordinates": [[0, 0]]}) == 0.0
    assert geometry_length_m(None) == 0.0


def test_multilinestring_sums_parts():
    line = [[0, 0], [0, 0.01]]
    multi = {"type": "MultiLineString", "coordinates": [line, line]}
    assert geometry_length_m(multi) == pytest.approx(2 * 1105.74, abs=1.0)


def test_layer_stats_from_features():
    collection = {
        "type": "FeatureCollection",
        "features": [
            _feature({"type": "Point", "coordinates": [0, 0]}),
            _feature({"type": "LineString", "coordinates": [[0, 0], [0, 0.01]]}),
            _feature(SQUARE),
            _feature(None),
        ],
    }
    stats = layer_stats_from_features(collection)
    assert stats.feature_count == 4
    assert stats.total_length_m == pytest.approx(1105.74, abs=0.5)
    assert stats.total_area_m2 == pytest.approx(SQUARE_M2, rel=1e-3)
    assert layer_stats_from_features(None) == LayerStats()


def test_build_area_context_computes_area_and_drops_unknown_layers():
    parks = {"type": "FeatureCollection", "features": [_feature(SQUARE)]}
    context = build_area_context(SQUARE, {"parks": parks, "made-up": parks}, name="Square")
    assert context.area_km2 == pytest.approx(1.2309, rel=1e-3)
    assert set(context.layers) == {"parks"}
    assert context.get_layer("water") == LayerStats()

    explicit = build_area_context(SQUARE, {}, area_km2=3.0)
    assert explicit.area_km2 == 3.0


def test_layer_stats_from_camel_case_dict():
    stats = LayerStats.from_dict({"featureCount": 3, "totalAreaM2": -5, "totalLength": "12.5"})
    assert stats == LayerStats(feature_count=3, total_area_m2=0.0, total_length_m=12.5)


def test_area_context_from_dict():
    context = AreaContext.from_dict({
        "id": "a1",
        "areaKm2": -2,
        "layers": {"parks": {"feature_count": 2}, "not-a-layer": {"feature_count": 9}},
    })
    assert context.area_id == "a1"
    assert context.area_km2 == 0
    assert context.count("parks") == 2
    assert "not-a-layer" not in context.layers


def test_confidence_grades():
    assert grade_by_coverage(4, 5) == "high"
    assert grade_by_coverage(3, 5) == "medium"
    assert grade_by_coverage(2, 5) == "low"
    assert grade_by_coverage(0, 0) == "low"
    assert grade_by_count(2, high_min=2, medium_min=1) == "high"
    assert grade_by_count(0, high_min=2, medium_min=1) == "low"
    assert grade_by_presence(True, False) == "medium"
    assert grade_by_presence(False, False) == "low"


def test_area_data_quality():
    quality = assess_area_data_quality(AreaContext(area_km2=1, layers={"parks": LayerStats(1)}))
    assert quality["layers_with_data"] == 1
    assert "parks" not in quality["layers_missing"]
    assert quality["quality_tier"] == "very_poor"
