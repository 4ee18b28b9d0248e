"""
Derived Index Calculator
Runs the nine derived scorers over one area snapshot
"""

from typing import Callable, Dict, List, Optional

from data_sources.metric_definitions import DERIVED_METRIC_DEFINITIONS
from data_sources.models import AreaContext, DerivedMetricValue
from logging_config import get_logger
from .bike_score import calculate_bike_score
from .building_density import calculate_building_density
from .diversity_index import calculate_diversity_index
from .fifteen_minute import calculate_fifteen_min_score
from .green_ratio import calculate_green_ratio
from .mixed_use import calculate_mixed_use_score
from .street_connectivity import calculate_street_connectivity
from .transit_coverage import calculate_transit_coverage
from .walkability import calculate_walkability_proxy

logger = get_logger(__name__)


SCORERS: Dict[str, Callable[[AreaContext], DerivedMetricValue]] = {
    "diversity_index": calculate_diversity_index,
    "green_ratio": calculate_green_ratio,
    "street_connectivity": calculate_street_connectivity,
    "building_density": calculate_building_density,
    "transit_coverage": calculate_transit_coverage,
    "mixed_use_score": calculate_mixed_use_score,
    "walkability_proxy": calculate_walkability_proxy,
    "fifteen_min_score": calculate_fifteen_min_score,
    "bike_score": calculate_bike_score,
}


def calculate_derived_metric(metric_id: str, context: AreaContext) -> Optional[DerivedMetricValue]:
    """Run a single scorer; unknown metric ids return None."""
    scorer = SCORERS.get(metric_id)
    if scorer is None:
        logger.warning(f"⚠️  Unknown derived metric {metric_id!r}")
        return None
    return scorer(context)


def calculate_derived_metrics(context: AreaContext) -> List[DerivedMetricValue]:
    """
    Calculate every derived metric for an area, in definition order.

    Never raises; missing data shows up as value 0 with "low" confidence.
    """
    metrics = [SCORERS[definition.id](context) for definition in DERIVED_METRIC_DEFINITIONS]

    low_confidence = [m.metric_id for m in metrics if m.confidence == "low"]
    if low_confidence:
        logger.info(f"📊 {len(low_confidence)}/{len(metrics)} derived metrics with low confidence: "
                    f"{', '.join(low_confidence)}",
                    extra={"area_id": context.area_id, "area_name": context.name})
    return metrics
