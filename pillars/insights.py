"""
Insight Generator
Short, conservative observations from one or two areas' POI metrics

Rules run in a fixed order and each adds at most one insight. Wording avoids
causal claims ("suggests", "may indicate").
"""

from typing import List, Sequence

from data_sources.models import AreaMetrics, Insight
from logging_config import get_logger

logger = get_logger(__name__)

MAX_INSIGHTS = 4

HIGH_DENSITY = 200.0
LOW_DENSITY = 50.0
HIGH_DIVERSITY = 1.5

DENSITY_DIFF_PCT = 50.0
COVERAGE_DIFF_POINTS = 20.0
DIVERSITY_DIFF = 0.3
SIZE_DIFF_PCT = 100.0
FOOD_DIFF_PCT = 75.0

CONFIDENCE_EXPLANATIONS = {
    "high": "Based on clear quantitative differences",
    "medium": "Interpretation may depend on context",
    "low": "Limited data; interpret with caution",
}


def _relative_diff(value_a: float, value_b: float) -> float:
    """(a - b) / b × 100, or 0 when b is not positive."""
    if value_b <= 0:
        return 0.0
    return (value_a - value_b) / value_b * 100


def _single_area_insights(area: AreaMetrics) -> List[Insight]:
    insights = []
    density = area.metrics.density

    if density >= HIGH_DENSITY:
        insights.append(Insight(
            title="High Amenity Density",
            description=f"{area.area_name} has {round(density)} POIs per km², "
                        f"suggesting a service-rich environment.",
            confidence="high",
            related_metrics=["density"],
            type="positive",
        ))
    elif density < LOW_DENSITY:
        insights.append(Insight(
            title="Low Amenity Density",
            description=f"{area.area_name} has limited amenities ({round(density)} per km²). "
                        f"This may indicate a more residential or rural character.",
            confidence="high",
            related_metrics=["density"],
            type="caution",
        ))

    if area.metrics.diversity_index >= HIGH_DIVERSITY:
        insights.append(Insight(
            title="Diverse Amenity Mix",
            description="Good variety of amenity types, indicating a mixed-use character.",
            confidence="medium",
            related_metrics=["diversityIndex"],
            type="positive",
        ))

    return insights


def _food_density(area: AreaMetrics) -> float:
    food = area.metrics.category("food")
    return food.density if food else 0.0


def _comparison_insights(a: AreaMetrics, b: AreaMetrics) -> List[Insight]:
    insights = []

    density_diff = _relative_diff(a.metrics.density, b.metrics.density)
    if abs(density_diff) > DENSITY_DIFF_PCT:
        higher, lower = (a, b) if density_diff > 0 else (b, a)
        insights.append(Insight(
            title="Significant Density Difference",
            description=f"{higher.area_name} has {abs(round(density_diff))}% higher POI density "
                        f"than {lower.area_name}, suggesting a more service-rich environment.",
            confidence="high",
            related_metrics=["poiDensity"],
            type="neutral",
        ))

    coverage_diff = a.metrics.coverage_score - b.metrics.coverage_score
    if abs(coverage_diff) > COVERAGE_DIFF_POINTS:
        better, worse = (a, b) if coverage_diff > 0 else (b, a)
        insights.append(Insight(
            title="Data Coverage Difference",
            description=f"{better.area_name} has better data coverage than {worse.area_name}. "
                        f"Results for {worse.area_name} may be less complete.",
            confidence="medium",
            related_metrics=["coverage"],
            type="caution",
        ))

    diversity_diff = a.metrics.diversity_index - b.metrics.diversity_index
    if abs(diversity_diff) > DIVERSITY_DIFF:
        more, less = (a, b) if diversity_diff > 0 else (b, a)
        insights.append(Insight(
            title="Amenity Diversity",
            description=f"{more.area_name} has a more diverse mix of amenity types "
                        f"compared to {less.area_name}.",
            confidence="medium",
            related_metrics=["diversityIndex"],
            type="neutral",
        ))

    size_diff = _relative_diff(a.area_km2, b.area_km2)
    if abs(size_diff) > SIZE_DIFF_PCT:
        insights.append(Insight(
            title="Different Scale",
            description=f"The areas differ significantly in size ({abs(round(size_diff))}%). "
                        f"Per km² metrics provide fairer comparison.",
            confidence="high",
            related_metrics=["areaSize"],
            type="caution",
        ))

    food_a = a.metrics.category("food")
    food_b = b.metrics.category("food")
    if food_a and food_b and food_a.count > 0 and food_b.count > 0:
        food_diff = _relative_diff(_food_density(a), _food_density(b))
        if abs(food_diff) > FOOD_DIFF_PCT:
            more = a if food_diff > 0 else b
            insights.append(Insight(
                title="Dining Options",
                description=f"{more.area_name} has significantly more food & dining options per km².",
                confidence="medium",
                related_metrics=["food"],
                type="neutral",
            ))

    return insights


def generate_insights(areas: Sequence[AreaMetrics]) -> List[Insight]:
    """
    Generate up to four insights for one area or a pair of areas.

    Any other number of areas yields no insights.
    """
    if len(areas) == 1:
        insights = _single_area_insights(areas[0])
    elif len(areas) == 2:
        insights = _comparison_insights(areas[0], areas[1])
    else:
        return []

    logger.debug(f"Generated {len(insights)} insights for {len(areas)} area(s)")
    return insights[:MAX_INSIGHTS]


def get_confidence_explanation(confidence: str) -> str:
    return CONFIDENCE_EXPLANATIONS.get(confidence, "")
