"""
Diversity Index
Shannon entropy over amenity layers, normalized to 0-100
"""

import math

from data_sources.data_quality import grade_by_coverage, layers_with_data
from data_sources.metric_definitions import DIVERSITY_LAYERS
from data_sources.models import AreaContext, DerivedMetricValue
from data_sources.normalization import clamp_0_100, shannon_entropy
from logging_config import get_logger, log_metric_calculation

logger = get_logger(__name__)

METRIC_ID = "diversity_index"


def calculate_diversity_index(context: AreaContext, required_layers=DIVERSITY_LAYERS) -> DerivedMetricValue:
    """
    Normalized Shannon diversity across the required layers.

    The raw entropy is divided by ln(n), the maximum entropy for n layers,
    so an even spread over every layer scores 100.
    """
    counts = {layer_id: context.count(layer_id) for layer_id in required_layers}
    breakdown = {layer_id: float(count) for layer_id, count in counts.items()}

    total = sum(counts.values())
    if total == 0:
        breakdown["raw_entropy"] = 0.0
        breakdown["max_entropy"] = math.log(len(required_layers)) if required_layers else 0.0
        log_metric_calculation(logger, METRIC_ID, 0.0, "low", area_name=context.name)
        return DerivedMetricValue(METRIC_ID, 0.0, "low", breakdown)

    entropy = shannon_entropy(counts.values())
    max_entropy = math.log(len(required_layers))
    value = clamp_0_100(entropy / max_entropy * 100) if max_entropy > 0 else 0.0

    breakdown["raw_entropy"] = entropy
    breakdown["max_entropy"] = max_entropy

    available = layers_with_data(context, required_layers)
    confidence = grade_by_coverage(len(available), len(required_layers))

    log_metric_calculation(logger, METRIC_ID, value, confidence, area_name=context.name)
    return DerivedMetricValue(METRIC_ID, value, confidence, breakdown)
