"""
Green Space Ratio
Share of the area covered by parks and water
"""

from data_sources.data_quality import layers_with_data
from data_sources.models import AreaContext, DerivedMetricValue
from data_sources.normalization import clamp_0_100, safe_divide
from logging_config import get_logger, log_metric_calculation

logger = get_logger(__name__)

METRIC_ID = "green_ratio"
GREEN_LAYERS = ("parks", "water")


def calculate_green_ratio(context: AreaContext) -> DerivedMetricValue:
    breakdown = {
        layer_id: context.get_layer(layer_id).total_area_m2 for layer_id in GREEN_LAYERS
    }
    total_green_area = sum(breakdown.values())
    breakdown["total_green_area_m2"] = total_green_area

    area_m2 = context.safe_area_km2 * 1_000_000
    value = clamp_0_100(safe_divide(total_green_area, area_m2) * 100)

    # Any green layer with area is enough; there is no partial grade
    available = layers_with_data(context, GREEN_LAYERS, measure="area")
    confidence = "high" if available and area_m2 > 0 else "low"

    log_metric_calculation(logger, METRIC_ID, value, confidence, area_name=context.name)
    return DerivedMetricValue(METRIC_ID, value, confidence, breakdown)
