"""
Area scoring
Runs the calculators for a batch of areas and assembles the response payload

Areas are scored in parallel; every calculation has its own snapshot, so no
locking is needed.
"""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Sequence

from data_sources.data_quality import assess_area_data_quality
from data_sources.metric_definitions import get_metric_interpretation
from data_sources.models import AreaContext, AreaMetrics
from logging_config import get_logger, log_performance
from .comparison import compare_area_metrics, compare_derived_metrics
from .derived_metrics import calculate_derived_metrics
from .insights import generate_insights
from .poi_metrics import calculate_poi_metrics

logger = get_logger(__name__)


def score_area(context: AreaContext) -> Dict[str, Any]:
    """POI metrics, derived metrics and data quality for one area."""
    poi_metrics = calculate_poi_metrics(context)
    derived = calculate_derived_metrics(context)

    derived_payload = []
    for metric in derived:
        entry = metric.to_dict()
        entry["interpretation"] = get_metric_interpretation(metric.value, metric.metric_id)
        derived_payload.append(entry)

    return {
        "area_id": context.area_id,
        "name": context.name,
        "area_km2": context.safe_area_km2,
        "poi_metrics": poi_metrics,
        "derived_metrics": derived,
        "derived_payload": derived_payload,
        "data_quality": assess_area_data_quality(context),
    }


def _area_label(context: AreaContext, position: int) -> str:
    return context.name or context.area_id or f"Area {position + 1}"


def score_areas(contexts: Sequence[AreaContext], max_workers: int = 4) -> Dict[str, Any]:
    """
    Score every area and, for exactly two, add comparisons and insights.

    Results keep the input order.
    """
    start_time = time.time()
    results: List[Dict[str, Any]] = [None] * len(contexts)

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        future_to_position = {
            executor.submit(score_area, context): position
            for position, context in enumerate(contexts)
        }
        for future in as_completed(future_to_position):
            results[future_to_position[future]] = future.result()

    area_metrics = [
        AreaMetrics(
            area_id=context.area_id or f"area-{position + 1}",
            area_name=_area_label(context, position),
            metrics=result["poi_metrics"],
        )
        for position, (context, result) in enumerate(zip(contexts, results))
    ]

    response: Dict[str, Any] = {
        "areas": [
            {
                "area_id": result["area_id"],
                "name": result["name"],
                "area_km2": result["area_km2"],
                "poi_metrics": result["poi_metrics"].to_dict(),
                "derived_metrics": result["derived_payload"],
                "data_quality": result["data_quality"],
            }
            for result in results
        ],
        "insights": [insight.to_dict() for insight in generate_insights(area_metrics)],
    }

    if len(results) == 2:
        first, second = results
        response["comparison"] = {
            "poi_metrics": [
                c.to_dict() for c in compare_area_metrics(first["poi_metrics"], second["poi_metrics"])
            ],
            "derived_metrics": [
                c.to_dict() for c in compare_derived_metrics(first["derived_metrics"], second["derived_metrics"])
            ],
        }

    log_performance(logger, "score_areas", time.time() - start_time, area_count=len(contexts))
    return response
