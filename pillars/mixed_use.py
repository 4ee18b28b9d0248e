"""
Mixed-Use Score
Balance between residential and commercial building area
"""

from data_sources.models import AreaContext, DerivedMetricValue
from data_sources.normalization import clamp_0_100
from logging_config import get_logger, log_metric_calculation

logger = get_logger(__name__)

METRIC_ID = "mixed_use_score"


def calculate_mixed_use_score(context: AreaContext) -> DerivedMetricValue:
    """
    (1 - |residential share - commercial share|) × 100.

    Peaks at 100 when the two building types have equal area.
    """
    residential_area = context.get_layer("buildings-residential").total_area_m2
    commercial_area = context.get_layer("buildings-commercial").total_area_m2
    total_area = residential_area + commercial_area

    breakdown = {
        "buildings-residential": residential_area,
        "buildings-commercial": commercial_area,
    }

    if total_area == 0:
        breakdown["residential_ratio"] = 0.0
        breakdown["commercial_ratio"] = 0.0
        log_metric_calculation(logger, METRIC_ID, 0.0, "low", area_name=context.name)
        return DerivedMetricValue(METRIC_ID, 0.0, "low", breakdown)

    residential_ratio = residential_area / total_area
    commercial_ratio = commercial_area / total_area
    breakdown["residential_ratio"] = residential_ratio
    breakdown["commercial_ratio"] = commercial_ratio

    value = clamp_0_100((1 - abs(residential_ratio - commercial_ratio)) * 100)

    log_metric_calculation(logger, METRIC_ID, value, "high", area_name=context.name)
    return DerivedMetricValue(METRIC_ID, value, "high", breakdown)
