"""
Transit Score (Proxy)
Mode-weighted stop density with logarithmic normalization

OSM carries no service frequency, so stop counts stand in for it: rail
stations count double, bus stops once. Log normalization models the
diminishing returns riders feel as service improves:
- density 50 (high benchmark) → 100
- density 20 → ~72
- density 5 → ~43
- density 1 → ~17
"""

from data_sources.benchmarks import get_benchmark_profile
from data_sources.data_quality import grade_by_presence
from data_sources.models import AreaContext, DerivedMetricValue
from data_sources.normalization import log_normalize_0_100, safe_divide
from logging_config import get_logger, log_metric_calculation

logger = get_logger(__name__)

METRIC_ID = "transit_coverage"
PROFILE = get_benchmark_profile(METRIC_ID)


def calculate_transit_coverage(context: AreaContext) -> DerivedMetricValue:
    breakdown = {}
    weighted_sum = 0.0
    total_stops = 0

    for layer_id, weight in PROFILE["mode_weights"].items():
        count = context.count(layer_id)
        breakdown[f"{layer_id}_count"] = float(count)
        breakdown[f"{layer_id}_weighted"] = count * weight
        weighted_sum += count * weight
        total_stops += count

    breakdown["total_stops"] = float(total_stops)
    breakdown["weighted_sum"] = weighted_sum

    area_km2 = context.safe_area_km2
    if weighted_sum == 0 or area_km2 == 0:
        breakdown["weighted_density"] = 0.0
        breakdown["raw_score"] = 0.0
        log_metric_calculation(logger, METRIC_ID, 0.0, "low", area_name=context.name)
        return DerivedMetricValue(METRIC_ID, 0.0, "low", breakdown)

    weighted_density = safe_divide(weighted_sum, area_km2)
    score = log_normalize_0_100(weighted_density, benchmark=PROFILE["high_density"])
    breakdown["weighted_density"] = weighted_density
    breakdown["raw_score"] = score

    confidence = grade_by_presence(
        context.count("rail-lines") > 0,
        context.count("transit-stops") > 0,
    )

    log_metric_calculation(logger, METRIC_ID, score, confidence, area_name=context.name)
    return DerivedMetricValue(METRIC_ID, score, confidence, breakdown)
