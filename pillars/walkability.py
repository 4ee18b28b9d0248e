"""
Walk Score (Proxy)
Amenity density per category plus a pedestrian-friendliness bonus

Walk Score awards points by walking distance to the nearest amenities. We
have no routing, so category density stands in for distance: the denser a
category, the more likely one is within a five minute walk.

Final score = weighted category average × 0.85 (amenity component, ≤ 85)
            + min(15, intersection density / 100 × 15) (pedestrian bonus)
"""

from typing import Dict

from data_sources.benchmarks import get_benchmark_profile
from data_sources.data_quality import grade_by_count
from data_sources.models import AreaContext, DerivedMetricValue
from data_sources.normalization import clamp_0_100, decay_normalize_0_100, safe_divide
from logging_config import get_logger, log_metric_calculation
from .street_connectivity import estimate_intersection_density

logger = get_logger(__name__)

METRIC_ID = "walkability_proxy"
PROFILE = get_benchmark_profile(METRIC_ID)


def _score_categories(context: AreaContext, breakdown: Dict[str, float]):
    """Returns (weighted category average, categories with data)."""
    area_km2 = context.safe_area_km2
    total_weighted_score = 0.0
    total_weight = 0
    categories_with_data = 0

    for category_id, layer_ids, weight, max_count in PROFILE["categories"]:
        category_count = sum(context.count(layer_id) for layer_id in layer_ids)
        density = safe_divide(category_count, area_km2)
        max_density = max_count * PROFILE["density_per_count"]
        category_score = decay_normalize_0_100(density, max_density=max_density)

        breakdown[f"{category_id}_count"] = float(category_count)
        breakdown[f"{category_id}_score"] = category_score
        breakdown[f"{category_id}_weighted"] = category_score * weight

        total_weighted_score += category_score * weight
        total_weight += weight
        if category_count > 0:
            categories_with_data += 1

    average = total_weighted_score / total_weight if total_weight > 0 else 0.0
    return average, categories_with_data


def calculate_walkability_proxy(context: AreaContext) -> DerivedMetricValue:
    breakdown: Dict[str, float] = {}

    average, categories_with_data = _score_categories(context, breakdown)
    amenity_component = average * PROFILE["amenity_share"]

    intersection_density = estimate_intersection_density(context)
    bonus_max = PROFILE["pedestrian_bonus_max"]
    pedestrian_bonus = min(
        bonus_max,
        intersection_density / PROFILE["intersection_benchmark"] * bonus_max,
    )

    value = clamp_0_100(amenity_component + pedestrian_bonus)

    breakdown["amenity_component"] = amenity_component
    breakdown["intersection_density"] = intersection_density
    breakdown["pedestrian_bonus"] = pedestrian_bonus
    breakdown["categories_with_data"] = float(categories_with_data)

    if context.safe_area_km2 == 0:
        confidence = "low"
    else:
        confidence = grade_by_count(
            categories_with_data,
            high_min=PROFILE["high_confidence_categories"],
            medium_min=PROFILE["medium_confidence_categories"],
        )

    log_metric_calculation(logger, METRIC_ID, value, confidence, area_name=context.name,
                           categories_with_data=categories_with_data)
    return DerivedMetricValue(METRIC_ID, value, confidence, breakdown)
