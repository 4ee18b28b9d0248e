"""
POI Metrics Calculator
Per-category counts, densities and shares, Shannon diversity and data coverage
"""

from datetime import datetime, timezone
from typing import Dict, List, Tuple

from data_sources.models import AreaContext, CategoryMetric, POIMetrics
from data_sources.normalization import safe_divide, shannon_entropy
from logging_config import get_logger

logger = get_logger(__name__)


# Fixed category order; (id, name, layers, RGB colour)
POI_CATEGORIES: List[Tuple[str, str, Tuple[str, ...], Tuple[int, int, int]]] = [
    ("food", "Food & Dining", ("poi-food-drink",), (255, 87, 51)),
    ("shopping", "Retail & Shopping", ("poi-shopping",), (255, 195, 0)),
    ("grocery", "Grocery & Convenience", ("poi-grocery",), (76, 175, 80)),
    ("health", "Healthcare", ("poi-health",), (244, 67, 54)),
    ("education", "Education", ("poi-education",), (103, 58, 183)),
    ("bike", "Cycling Infrastructure", ("poi-bike-parking", "poi-bike-shops", "bike-lanes"), (0, 188, 212)),
    ("transit", "Public Transit", ("transit-stops", "rail-lines"), (0, 128, 255)),
    ("green", "Green Space", ("parks", "trees"), (34, 139, 34)),
]


def interpret_diversity_index(index: float) -> str:
    """
    Interpret a Shannon diversity index.

    0 → None, <0.5 Very Low, <1.0 Low, <1.5 Moderate, <2.0 High, else Very High.
    """
    if index == 0:
        return "None"
    if index < 0.5:
        return "Very Low"
    if index < 1.0:
        return "Low"
    if index < 1.5:
        return "Moderate"
    if index < 2.0:
        return "High"
    return "Very High"


def calculate_coverage_score(breakdown: List[CategoryMetric]) -> float:
    """Percentage of categories with at least one feature."""
    if not breakdown:
        return 0.0
    present = sum(1 for category in breakdown if category.count > 0)
    return present / len(breakdown) * 100


def interpret_coverage_score(score: float) -> str:
    if score >= 90:
        return "Excellent"
    if score >= 70:
        return "Good"
    if score >= 50:
        return "Partial"
    return "Limited"


def calculate_poi_metrics(context: AreaContext) -> POIMetrics:
    """
    Calculate POI metrics for one area.

    Never raises: an empty or zero-sized area yields all-zero metrics.

    Args:
        context: Area snapshot with per-layer statistics

    Returns:
        POIMetrics with the category breakdown in fixed order
    """
    area_km2 = context.safe_area_km2

    counts: Dict[str, int] = {}
    for category_id, _, layer_ids, _ in POI_CATEGORIES:
        counts[category_id] = sum(context.count(layer_id) for layer_id in layer_ids)
    total_count = sum(counts.values())

    breakdown: List[CategoryMetric] = []
    for category_id, name, _, color in POI_CATEGORIES:
        count = counts[category_id]
        breakdown.append(CategoryMetric(
            id=category_id,
            name=name,
            count=count,
            density=safe_divide(count, area_km2),
            share=count / total_count * 100 if total_count > 0 else 0.0,
            color=color,
        ))

    diversity_index = shannon_entropy([c.count for c in breakdown])
    coverage_score = calculate_coverage_score(breakdown)

    metrics = POIMetrics(
        total_count=total_count,
        density=safe_divide(total_count, area_km2),
        diversity_index=diversity_index,
        diversity_label=interpret_diversity_index(diversity_index),
        category_breakdown=breakdown,
        coverage_score=coverage_score,
        coverage_label=interpret_coverage_score(coverage_score),
        area_km2=area_km2,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )

    logger.info(
        f"📊 POI metrics: {total_count} features, {format_density(metrics.density)}, "
        f"H={diversity_index:.2f}, coverage {coverage_score:.0f}%",
        extra={"area_id": context.area_id, "area_name": context.name},
    )
    return metrics


def _format_compact(value: float, decimals: int = 1) -> str:
    """Compact display: thousands become "1.2k"."""
    if value >= 1000:
        return f"{value / 1000:.1f}k"
    return f"{value:.{decimals}f}"


def format_density(density: float) -> str:
    return _format_compact(density, 1) + "/km²"
