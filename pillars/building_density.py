"""
Building Density
Building footprint coverage as a percentage of land area
"""

from data_sources.data_quality import grade_by_count, layers_with_data
from data_sources.metric_definitions import BUILDING_LAYERS
from data_sources.models import AreaContext, DerivedMetricValue
from data_sources.normalization import clamp_0_100, safe_divide
from logging_config import get_logger, log_metric_calculation

logger = get_logger(__name__)

METRIC_ID = "building_density"


def calculate_building_density(context: AreaContext) -> DerivedMetricValue:
    """
    Footprint area over land area, ×100.

    Confidence: ≥2 building layers with area → high, 1 → medium, none → low.
    """
    breakdown = {
        layer_id: context.get_layer(layer_id).total_area_m2 for layer_id in BUILDING_LAYERS
    }
    total_building_area = sum(breakdown.values())
    breakdown["total_building_area_m2"] = total_building_area

    area_m2 = context.safe_area_km2 * 1_000_000
    value = clamp_0_100(safe_divide(total_building_area, area_m2) * 100)

    if area_m2 == 0:
        confidence = "low"
    else:
        available = layers_with_data(context, BUILDING_LAYERS, measure="area")
        confidence = grade_by_count(len(available), high_min=2, medium_min=1)

    log_metric_calculation(logger, METRIC_ID, value, confidence, area_name=context.name)
    return DerivedMetricValue(METRIC_ID, value, confidence, breakdown)
