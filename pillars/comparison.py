"""
Comparator
Percentage deltas and trend indicators between two areas
"""

from typing import List, Sequence

from data_sources.metric_definitions import get_metric_definition
from data_sources.models import DerivedMetricValue, MetricComparison, POIMetrics


def calculate_delta(value_a: float, value_b: float) -> float:
    """
    Percentage change of a relative to b.

    b == 0 gives 100 when a > 0, else 0. Not symmetric: delta(a, b) is not
    -delta(b, a).
    """
    if value_b == 0:
        return 100.0 if value_a > 0 else 0.0
    return (value_a - value_b) / value_b * 100


def get_delta_indicator(delta: float) -> str:
    if delta > 50:
        return "▲▲"
    if delta > 10:
        return "▲"
    if delta < -50:
        return "▼▼"
    if delta < -10:
        return "▼"
    return ""


def compare_values(metric_id: str, metric_name: str, value_a: float, value_b: float,
                   unit: str) -> MetricComparison:
    delta = calculate_delta(value_a, value_b)
    return MetricComparison(
        metric_id=metric_id,
        metric_name=metric_name,
        values=(value_a, value_b),
        delta=delta,
        delta_indicator=get_delta_indicator(delta),
        unit=unit,
    )


def compare_area_metrics(metrics_a: POIMetrics, metrics_b: POIMetrics) -> List[MetricComparison]:
    """Compare total count, density and diversity of two areas (a relative to b)."""
    return [
        compare_values("totalCount", "Total POIs", metrics_a.total_count, metrics_b.total_count, "count"),
        compare_values("density", "POI Density", metrics_a.density, metrics_b.density, "per km²"),
        compare_values("diversityIndex", "Diversity Index",
                       metrics_a.diversity_index, metrics_b.diversity_index, "index"),
    ]


def compare_derived_metrics(values_a: Sequence[DerivedMetricValue],
                            values_b: Sequence[DerivedMetricValue]) -> List[MetricComparison]:
    """
    One comparison per metric present in both lists, in the order of values_a.
    """
    by_id_b = {value.metric_id: value for value in values_b}
    comparisons = []
    for value_a in values_a:
        value_b = by_id_b.get(value_a.metric_id)
        if value_b is None:
            continue
        definition = get_metric_definition(value_a.metric_id)
        name = definition.name if definition else value_a.metric_id
        unit = definition.unit if definition else ""
        comparisons.append(compare_values(value_a.metric_id, name, value_a.value, value_b.value, unit))
    return comparisons
