"""
Data Quality and Confidence Grading
Turns data completeness into reproducible confidence grades

A confidence grade describes how much of a metric's input actually had data,
not how good the area is. Calculators report "no data" through these grades
instead of raising.
"""

from typing import Dict, Iterable, List, Tuple

from logging_config import get_logger
from .benchmarks import COVERAGE_CONFIDENCE
from .models import AreaContext, KNOWN_LAYER_IDS

logger = get_logger(__name__)


# Layer attribute that counts as "having data"
_LAYER_ATTRIBUTES = {
    "count": "feature_count",
    "area": "total_area_m2",
    "length": "total_length_m",
}


def layers_with_data(context: AreaContext, layer_ids: Iterable[str],
                     measure: str = "count") -> List[str]:
    """
    Return the layer ids whose chosen measure is non-zero.

    Args:
        context: Area snapshot
        layer_ids: Layers to inspect
        measure: "count", "area" or "length"
    """
    attribute = _LAYER_ATTRIBUTES.get(measure, "feature_count")
    return [
        layer_id for layer_id in layer_ids
        if getattr(context.get_layer(layer_id), attribute) > 0
    ]


def grade_by_coverage(available: int, required: int) -> str:
    """
    Grade from the share of required inputs that had data.

    ≥80% → high, ≥50% → medium, otherwise low. No required inputs → low.
    """
    if required <= 0:
        return "low"
    share = available / required
    if share >= COVERAGE_CONFIDENCE["high"]:
        return "high"
    if share >= COVERAGE_CONFIDENCE["medium"]:
        return "medium"
    return "low"


def grade_by_count(available: int, high_min: int, medium_min: int) -> str:
    """Grade from an absolute number of inputs with data."""
    if available >= high_min:
        return "high"
    if available >= medium_min:
        return "medium"
    return "low"


def grade_by_presence(first: bool, second: bool) -> str:
    """Both signals present → high, exactly one → medium, neither → low."""
    if first and second:
        return "high"
    if first or second:
        return "medium"
    return "low"


class DataQualityManager:
    """Summarizes how complete an area's layer data is."""

    def __init__(self):
        self.quality_thresholds = {
            'excellent': 0.9,    # 90%+ of layers with data
            'good': 0.7,         # 70-89%
            'fair': 0.5,         # 50-69%
            'poor': 0.3,         # 30-49%
            'very_poor': 0.0     # <30%
        }

    def assess_layer_completeness(self, context: AreaContext) -> Tuple[float, str]:
        """
        Share of known layers that carry any data, with its quality tier.

        Returns:
            Tuple of (completeness 0-1, quality_tier)
        """
        populated = [
            layer_id for layer_id in KNOWN_LAYER_IDS
            if not context.get_layer(layer_id).is_empty
        ]
        completeness = len(populated) / len(KNOWN_LAYER_IDS)
        return completeness, self._get_quality_tier(completeness)

    def _get_quality_tier(self, completeness: float) -> str:
        """Get quality tier based on completeness score."""
        for tier, threshold in self.quality_thresholds.items():
            if completeness >= threshold:
                return tier
        return 'very_poor'


data_quality_manager = DataQualityManager()


def assess_area_data_quality(context: AreaContext) -> Dict:
    """
    Assess layer completeness for an area.

    Returns:
        Dictionary with completeness, quality tier and the empty layers
    """
    completeness, quality_tier = data_quality_manager.assess_layer_completeness(context)
    missing = sorted(
        layer_id for layer_id in KNOWN_LAYER_IDS
        if context.get_layer(layer_id).is_empty
    )
    if context.safe_area_km2 == 0:
        logger.warning("Area has zero size; densities will read as 0",
                       extra={"area_name": context.name})

    return {
        'completeness': round(completeness, 3),
        'quality_tier': quality_tier,
        'layers_with_data': len(KNOWN_LAYER_IDS) - len(missing),
        'layers_missing': missing,
    }
