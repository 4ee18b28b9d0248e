"""
15-Minute City Score
Presence of essential amenity groups inside the area
"""

from data_sources.models import AreaContext, DerivedMetricValue
from logging_config import get_logger, log_metric_calculation

logger = get_logger(__name__)

METRIC_ID = "fifteen_min_score"

ESSENTIAL_CATEGORIES = (
    ("food", ("poi-food-drink", "poi-grocery")),
    ("healthcare", ("poi-health",)),
    ("education", ("poi-education",)),
    ("green_space", ("parks",)),
    ("transit", ("transit-stops", "rail-lines")),
)


def calculate_fifteen_min_score(context: AreaContext) -> DerivedMetricValue:
    """
    Categories with at least one feature / 5 × 100.

    A presence test has no partial-data state, so confidence is always high.
    """
    breakdown = {}
    present = 0
    for category_id, layer_ids in ESSENTIAL_CATEGORIES:
        has_access = any(context.count(layer_id) > 0 for layer_id in layer_ids)
        breakdown[category_id] = 1.0 if has_access else 0.0
        if has_access:
            present += 1

    value = present / len(ESSENTIAL_CATEGORIES) * 100

    log_metric_calculation(logger, METRIC_ID, value, "high", area_name=context.name)
    return DerivedMetricValue(METRIC_ID, value, "high", breakdown)
