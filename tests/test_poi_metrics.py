import math

import pytest

from data_sources.models import AreaContext, LayerStats
from pillars.poi_metrics import (
    POI_CATEGORIES,
    calculate_poi_metrics,
    format_density,
    interpret_coverage_score,
    interpret_diversity_index,
)


def _context(area_km2, **counts):
    layers = {
        layer_id.replace("_", "-"): LayerStats(feature_count=count)
        for layer_id, count in counts.items()
    }
    return AreaContext(area_km2=area_km2, layers=layers)


def test_single_food_layer_scenario():
    metrics = calculate_poi_metrics(_context(1, poi_food_drink=100))
    assert metrics.total_count == 100
    assert metrics.density == 100
    assert metrics.coverage_score == 12.5
    assert metrics.diversity_index == 0
    assert metrics.diversity_label == "None"
    assert metrics.coverage_label == "Limited"
    assert metrics.category("food").share == 100


def test_zero_area_keeps_counts_but_zero_density():
    metrics = calculate_poi_metrics(_context(0, poi_food_drink=10, parks=3))
    assert metrics.total_count == 13
    assert metrics.density == 0
    assert all(c.density == 0 for c in metrics.category_breakdown)


def test_empty_area_is_all_zero():
    metrics = calculate_poi_metrics(AreaContext(area_km2=2.0))
    assert metrics.total_count == 0
    assert metrics.coverage_score == 0
    assert metrics.diversity_index == 0
    assert all(c.share == 0 for c in metrics.category_breakdown)


def test_shares_sum_to_100_and_full_coverage():
    metrics = calculate_poi_metrics(_context(
        2.5,
        poi_food_drink=7, poi_shopping=3, poi_grocery=2, poi_health=1,
        poi_education=4, bike_lanes=5, transit_stops=9, parks=2,
    ))
    assert sum(c.share for c in metrics.category_breakdown) == pytest.approx(100, abs=1e-6)
    assert metrics.coverage_score == 100
    assert metrics.coverage_label == "Excellent"
    assert metrics.density == pytest.approx(33 / 2.5)


def test_multi_layer_categories_sum_counts():
    metrics = calculate_poi_metrics(_context(1, poi_bike_parking=2, poi_bike_shops=1, bike_lanes=4,
                                             rail_lines=1, transit_stops=3))
    assert metrics.category("bike").count == 7
    assert metrics.category("transit").count == 4


def test_even_split_reaches_max_entropy():
    metrics = calculate_poi_metrics(_context(1, poi_food_drink=5, poi_shopping=5))
    assert metrics.diversity_index == pytest.approx(math.log(2))
    assert metrics.diversity_label == "Low"


def test_category_order_is_fixed():
    metrics = calculate_poi_metrics(AreaContext(area_km2=1))
    assert [c.id for c in metrics.category_breakdown] == [c[0] for c in POI_CATEGORIES]


def test_timestamp_not_part_of_equality():
    context = _context(1, poi_food_drink=3)
    assert calculate_poi_metrics(context) == calculate_poi_metrics(context)


def test_labels():
    assert interpret_diversity_index(0.4) == "Very Low"
    assert interpret_diversity_index(1.2) == "Moderate"
    assert interpret_diversity_index(1.7) == "High"
    assert interpret_diversity_index(2.1) == "Very High"
    assert interpret_coverage_score(75) == "Good"
    assert interpret_coverage_score(50) == "Partial"


def test_format_density():
    assert format_density(12.34) == "12.3/km²"
    assert format_density(2500) == "2.5k/km²"
