"""
Plain data structures shared by the calculators, the importer and the API.

Everything here is a snapshot: calculators read these objects and build new
ones, they never modify them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from logging_config import get_logger

logger = get_logger(__name__)


# Closed set of layer ids the fetch/clip stage can deliver. Anything else is ignored.
KNOWN_LAYER_IDS = frozenset({
    # Buildings
    "buildings-residential",
    "buildings-commercial",
    "buildings-industrial",
    "buildings-other",
    # Streets and mobility
    "roads-primary",
    "roads-residential",
    "bike-lanes",
    "transit-stops",
    "rail-lines",
    "parking",
    "traffic-signals",
    "crosswalks",
    # Environment
    "parks",
    "water",
    "trees",
    # Amenities
    "poi-food-drink",
    "poi-shopping",
    "poi-grocery",
    "poi-health",
    "poi-education",
    "poi-bike-parking",
    "poi-bike-shops",
})


def _non_negative(value: Any) -> float:
    """Coerce a raw statistic to a finite, non-negative float (0 otherwise)."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _first_present(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


@dataclass(frozen=True)
class LayerStats:
    """Precomputed statistics for one layer clipped to the area of interest."""
    feature_count: int = 0
    total_area_m2: float = 0.0
    total_length_m: float = 0.0

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]]) -> "LayerStats":
        """Build from snake_case or camelCase keys; bad values become 0."""
        if not raw:
            return cls()
        count = _first_present(raw, "feature_count", "featureCount", "count")
        area = _first_present(raw, "total_area_m2", "totalAreaM2", "totalArea")
        length = _first_present(raw, "total_length_m", "totalLengthM", "totalLength")
        return cls(
            feature_count=int(_non_negative(count)),
            total_area_m2=_non_negative(area),
            total_length_m=_non_negative(length),
        )

    @property
    def is_empty(self) -> bool:
        return self.feature_count == 0 and self.total_area_m2 == 0 and self.total_length_m == 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


EMPTY_LAYER = LayerStats()


@dataclass(frozen=True)
class AreaContext:
    """Immutable input snapshot handed to every calculator call."""
    area_km2: float
    layers: Dict[str, LayerStats] = field(default_factory=dict)
    polygon: Optional[Dict[str, Any]] = None
    area_id: Optional[str] = None
    name: Optional[str] = None

    def get_layer(self, layer_id: str) -> LayerStats:
        """Stats for a layer; absent layers read as all-zero."""
        return self.layers.get(layer_id, EMPTY_LAYER)

    def count(self, layer_id: str) -> int:
        return self.get_layer(layer_id).feature_count

    @property
    def safe_area_km2(self) -> float:
        return _non_negative(self.area_km2)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AreaContext":
        """
        Build a context from a JSON-like payload.

        Accepts `area_km2`/`areaKm2`, `polygon`, `layers` (layer id -> stats dict),
        `area_id`/`id` and `name`. Unknown layer ids are dropped.
        """
        raw_layers = payload.get("layers") or {}
        layers: Dict[str, LayerStats] = {}
        for layer_id, raw_stats in raw_layers.items():
            if layer_id not in KNOWN_LAYER_IDS:
                logger.debug(f"Ignoring unknown layer id {layer_id!r}")
                continue
            if isinstance(raw_stats, LayerStats):
                layers[layer_id] = raw_stats
            else:
                layers[layer_id] = LayerStats.from_dict(raw_stats)

        area_km2 = _non_negative(_first_present(payload, "area_km2", "areaKm2"))
        return cls(
            area_km2=area_km2,
            layers=layers,
            polygon=payload.get("polygon"),
            area_id=_first_present(payload, "area_id", "id"),
            name=payload.get("name"),
        )


@dataclass
class CategoryMetric:
    id: str
    name: str
    count: int
    density: float  # per km²
    share: float  # percentage of total
    color: Tuple[int, int, int]

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["color"] = list(self.color)
        return payload


@dataclass
class POIMetrics:
    total_count: int
    density: float
    diversity_index: float
    diversity_label: str
    category_breakdown: List[CategoryMetric]
    coverage_score: float
    coverage_label: str
    area_km2: float
    timestamp: str = field(default="", compare=False)  # capture time, ISO 8601

    def category(self, category_id: str) -> Optional[CategoryMetric]:
        for category in self.category_breakdown:
            if category.id == category_id:
                return category
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_count": self.total_count,
            "density": self.density,
            "diversity_index": self.diversity_index,
            "diversity_label": self.diversity_label,
            "category_breakdown": [c.to_dict() for c in self.category_breakdown],
            "coverage_score": self.coverage_score,
            "coverage_label": self.coverage_label,
            "area_km2": self.area_km2,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class DerivedMetricDefinition:
    id: str
    name: str
    description: str
    formula: str
    unit: str
    required_layers: Tuple[str, ...]
    interpretation: Mapping[str, str]  # keys: low, medium, high
    thresholds: Tuple[float, float]  # (low, high) boundaries of the medium band

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "formula": self.formula,
            "unit": self.unit,
            "required_layers": list(self.required_layers),
            "interpretation": dict(self.interpretation),
            "thresholds": {"low": self.thresholds[0], "high": self.thresholds[1]},
        }


@dataclass
class DerivedMetricValue:
    metric_id: str
    value: float
    confidence: str
    breakdown: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AreaMetrics:
    """POI metrics paired with the area they describe (input to the insight rules)."""
    area_id: str
    area_name: str
    metrics: POIMetrics

    @property
    def area_km2(self) -> float:
        return self.metrics.area_km2


@dataclass
class Insight:
    title: str
    description: str
    confidence: str
    related_metrics: List[str]
    type: str  # positive | caution | neutral

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class MetricComparison:
    metric_id: str
    metric_name: str
    values: Tuple[float, float]
    delta: float
    delta_indicator: str
    unit: str

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["values"] = list(self.values)
        return payload


@dataclass(frozen=True)
class ExternalIndex:
    id: str
    name: str
    source: str
    values: Dict[str, float]
    min: float
    max: float
    imported_at: datetime
    unit: str = ""
    description: Optional[str] = None
    color_scale: str = "sequential"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "source": self.source,
            "description": self.description,
            "values": dict(self.values),
            "min": self.min,
            "max": self.max,
            "unit": self.unit,
            "color_scale": self.color_scale,
            "imported_at": self.imported_at.isoformat(),
        }
