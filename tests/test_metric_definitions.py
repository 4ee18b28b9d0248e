import pytest

from data_sources.metric_definitions import (
    DERIVED_METRIC_DEFINITIONS,
    METRIC_DEFINITIONS,
    format_metric_value,
    get_citation_text,
    get_interpretation,
    get_metric_definition,
    get_metric_interpretation,
    interpret_metric_value,
)
from data_sources.models import KNOWN_LAYER_IDS


def test_nine_definitions():
    ids = [d.id for d in DERIVED_METRIC_DEFINITIONS]
    assert len(ids) == len(set(ids)) == 9
    assert "street_connectivity" in ids


def test_definitions_reference_known_layers():
    for definition in DERIVED_METRIC_DEFINITIONS:
        assert set(definition.required_layers) <= KNOWN_LAYER_IDS
        low, high = definition.thresholds
        assert low < high
        assert set(definition.interpretation) == {"low", "medium", "high"}


@pytest.mark.parametrize("metric_id, value, expected", [
    ("diversity_index", 29.9, "low"),
    ("diversity_index", 30, "medium"),
    ("diversity_index", 60, "high"),
    ("transit_coverage", 24, "low"),
    ("transit_coverage", 49.9, "medium"),
    ("walkability_proxy", 70, "high"),
    ("fifteen_min_score", 80, "high"),
    ("street_connectivity", 99, "medium"),
])
def test_metric_interpretation(metric_id, value, expected):
    assert get_metric_interpretation(value, metric_id) == expected


def test_unknown_metric_reads_medium():
    assert get_metric_interpretation(5, "nope") == "medium"
    assert get_metric_definition("nope") is None


def test_format_metric_value():
    assert format_metric_value(12.345, "green_ratio") == "12.3%"
    assert format_metric_value(85.4, "street_connectivity") == "85/km²"
    assert format_metric_value(55, "bike_score") == "55.0"


def test_poi_reference_ranges():
    assert get_interpretation("poiDensity", 100)["label"] == "Moderate"
    assert get_interpretation("poiDensity", 5000)["label"] == "Very High"
    # Past the last range maps to the last range
    assert get_interpretation("categoryShare", 100)["label"] == "Dominant"
    assert get_interpretation("unknown", 1) is None
    assert interpret_metric_value("coverageScore", 95) == "Excellent: Comprehensive coverage"


def test_citation():
    assert get_citation_text("diversityIndex") == (
        'Shannon, C.E. (1948). "A Mathematical Theory of Communication". '
        'Bell System Technical Journal, 27(3), 379-423'
    )
    assert get_citation_text("poiCount") is None
    assert set(METRIC_DEFINITIONS) == {
        "poiCount", "poiDensity", "diversityIndex", "categoryShare", "coverageScore", "areaSize"
    }
