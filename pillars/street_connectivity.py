"""
Street Connectivity
Estimated intersection density from road network length

There is no intersection layer, so intersections are estimated at roughly one
per 200 m of road. Walkability and bike scoring reuse the same estimate.
"""

from data_sources.benchmarks import get_benchmark_profile
from data_sources.data_quality import grade_by_coverage, layers_with_data
from data_sources.models import AreaContext, DerivedMetricValue
from data_sources.normalization import clamp_0_100, safe_divide
from logging_config import get_logger, log_metric_calculation

logger = get_logger(__name__)

METRIC_ID = "street_connectivity"
PROFILE = get_benchmark_profile(METRIC_ID)


def total_road_length_m(context: AreaContext) -> float:
    return sum(context.get_layer(layer_id).total_length_m for layer_id in PROFILE["road_layers"])


def estimate_intersection_density(context: AreaContext) -> float:
    """Estimated intersections per km²; 0 for a zero-sized area."""
    estimated_intersections = total_road_length_m(context) / PROFILE["meters_per_intersection"]
    return safe_divide(estimated_intersections, context.safe_area_km2)


def calculate_street_connectivity(context: AreaContext) -> DerivedMetricValue:
    road_layers = PROFILE["road_layers"]
    road_length = total_road_length_m(context)
    intersection_density = estimate_intersection_density(context)

    breakdown = {
        f"{layer_id}_length_m": context.get_layer(layer_id).total_length_m
        for layer_id in road_layers
    }
    breakdown["total_road_length_m"] = road_length
    breakdown["estimated_intersections"] = road_length / PROFILE["meters_per_intersection"]
    breakdown["intersection_density"] = intersection_density

    available = layers_with_data(context, road_layers, measure="length")
    if context.safe_area_km2 == 0:
        confidence = "low"
    else:
        confidence = grade_by_coverage(len(available), len(road_layers))

    value = clamp_0_100(intersection_density)
    log_metric_calculation(logger, METRIC_ID, value, confidence, area_name=context.name)
    return DerivedMetricValue(METRIC_ID, value, confidence, breakdown)
