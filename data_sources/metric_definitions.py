"""
Metric definitions with methodology

Static lookup tables the UI and exporters use to render names, units and
interpretation text. Nothing here is computed per area.
"""

import math
from typing import Dict, List, Optional

from .models import DerivedMetricDefinition


DIVERSITY_LAYERS = (
    "poi-food-drink",
    "poi-shopping",
    "poi-grocery",
    "poi-health",
    "poi-education",
)

BUILDING_LAYERS = (
    "buildings-residential",
    "buildings-commercial",
    "buildings-industrial",
    "buildings-other",
)

ROAD_LAYERS = ("roads-primary", "roads-residential")


# One canonical (low, high) threshold pair per metric; the interpretation text
# is written from the same numbers.
DERIVED_METRIC_DEFINITIONS: List[DerivedMetricDefinition] = [
    DerivedMetricDefinition(
        id="diversity_index",
        name="Diversity Index",
        description="Shannon entropy measuring variety of POI types. Higher = more diverse mix of amenities.",
        formula="H = -Σ(pᵢ × ln(pᵢ)) / ln(n) × 100",
        unit="",
        required_layers=DIVERSITY_LAYERS,
        interpretation={
            "low": "< 30: Limited variety, dominated by one type",
            "medium": "30-60: Moderate mix of amenities",
            "high": "≥ 60: High diversity, vibrant mixed-use area",
        },
        thresholds=(30, 60),
    ),
    DerivedMetricDefinition(
        id="green_ratio",
        name="Green Space Ratio",
        description="Percentage of area covered by parks, green spaces and water.",
        formula="(Park Area + Water Area) / Total Area × 100",
        unit="%",
        required_layers=("parks", "water"),
        interpretation={
            "low": "< 10%: Limited green space",
            "medium": "10-20%: Adequate green coverage",
            "high": "≥ 20%: Excellent green space access",
        },
        thresholds=(10, 20),
    ),
    DerivedMetricDefinition(
        id="street_connectivity",
        name="Street Connectivity",
        description="Estimated intersection density indicating walkable grid vs cul-de-sac patterns.",
        formula="(Road Length / 200 m) / km²",
        unit="per km²",
        required_layers=ROAD_LAYERS,
        interpretation={
            "low": "< 50: Disconnected, car-dependent",
            "medium": "50-100: Moderate connectivity",
            "high": "≥ 100: Highly connected, walkable grid",
        },
        thresholds=(50, 100),
    ),
    DerivedMetricDefinition(
        id="building_density",
        name="Building Density",
        description="Building footprint coverage as percentage of land area.",
        formula="(Building Footprint / Total Area) × 100",
        unit="%",
        required_layers=BUILDING_LAYERS,
        interpretation={
            "low": "< 20%: Low density, suburban",
            "medium": "20-40%: Medium density",
            "high": "≥ 40%: High density urban",
        },
        thresholds=(20, 40),
    ),
    DerivedMetricDefinition(
        id="transit_coverage",
        name="Transit Score (Proxy)",
        description=(
            "Estimates transit accessibility using mode-weighted stop density with "
            "logarithmic normalization. Rail stations weighted 2x, bus stops 1x."
        ),
        formula="100 × ln(1 + Σ(stops × mode_weight) / km²) / ln(51)",
        unit="",
        required_layers=("transit-stops", "rail-lines"),
        interpretation={
            "low": "< 25: Minimal Transit (few or no transit options)",
            "medium": "25-50: Some Transit (a few public transportation options)",
            "high": "≥ 50: Excellent Transit to Rider's Paradise",
        },
        thresholds=(25, 50),
    ),
    DerivedMetricDefinition(
        id="mixed_use_score",
        name="Mixed-Use Score",
        description="Measure of residential and commercial land use integration.",
        formula="(1 - |Residential share - Commercial share|) × 100",
        unit="",
        required_layers=("buildings-residential", "buildings-commercial"),
        interpretation={
            "low": "< 30: Segregated single-use",
            "medium": "30-60: Partial mixed-use",
            "high": "≥ 60: Well-integrated mixed-use",
        },
        thresholds=(30, 60),
    ),
    DerivedMetricDefinition(
        id="walkability_proxy",
        name="Walk Score (Proxy)",
        description=(
            "Estimates walkability from amenity categories with a distance-decay proxy, "
            "plus a pedestrian friendliness bonus from intersection density."
        ),
        formula="Σ(Category Score × Weight) / Σ Weight × 0.85 + Pedestrian Bonus (≤ 15)",
        unit="",
        required_layers=(
            "poi-food-drink",
            "poi-shopping",
            "poi-grocery",
            "poi-health",
            "poi-education",
            "parks",
            "transit-stops",
            "roads-primary",
            "roads-residential",
        ),
        interpretation={
            "low": "< 50: Car-Dependent (most errands require a car)",
            "medium": "50-70: Somewhat Walkable (some errands can be done on foot)",
            "high": "≥ 70: Very Walkable to Walker's Paradise",
        },
        thresholds=(50, 70),
    ),
    DerivedMetricDefinition(
        id="fifteen_min_score",
        name="15-Minute City Score",
        description="Share of essential amenity groups present within the area.",
        formula="Categories present / Total essential categories × 100",
        unit="%",
        required_layers=(
            "poi-food-drink",
            "poi-grocery",
            "poi-health",
            "poi-education",
            "parks",
            "transit-stops",
        ),
        interpretation={
            "low": "< 50%: Missing essential services",
            "medium": "50-80%: Most essentials accessible",
            "high": "≥ 80%: Complete 15-minute neighborhood",
        },
        thresholds=(50, 80),
    ),
    DerivedMetricDefinition(
        id="bike_score",
        name="Bike Score (Proxy)",
        description=(
            "Estimates bikeability from bike infrastructure density, bike facilities, "
            "and road connectivity for cycling."
        ),
        formula="Infrastructure (50%) + Amenities (30%) + Connectivity (20%)",
        unit="",
        required_layers=(
            "bike-lanes",
            "poi-bike-parking",
            "poi-bike-shops",
            "roads-primary",
            "roads-residential",
        ),
        interpretation={
            "low": "< 50: Minimal Bike Infrastructure (biking is inconvenient)",
            "medium": "50-70: Bikeable (biking is convenient for most trips)",
            "high": "≥ 70: Very Bikeable to Biker's Paradise",
        },
        thresholds=(50, 70),
    ),
]

_DEFINITIONS_BY_ID: Dict[str, DerivedMetricDefinition] = {
    definition.id: definition for definition in DERIVED_METRIC_DEFINITIONS
}


def get_metric_definition(metric_id: str) -> Optional[DerivedMetricDefinition]:
    """Get a derived metric definition by id."""
    return _DEFINITIONS_BY_ID.get(metric_id)


def get_metric_interpretation(value: float, metric_id: str) -> str:
    """
    Bucket a derived metric value into low / medium / high.

    value < low → low, value ≥ high → high, otherwise medium.
    Unknown metrics read as medium.
    """
    definition = get_metric_definition(metric_id)
    if definition is None:
        return "medium"

    low, high = definition.thresholds
    if value < low:
        return "low"
    if value >= high:
        return "high"
    return "medium"


def format_metric_value(value: float, metric_id: str) -> str:
    """Format a derived metric value with its unit."""
    definition = get_metric_definition(metric_id)
    unit = definition.unit if definition else ""

    if unit == "%":
        return f"{value:.1f}%"
    if unit == "per km²":
        return f"{value:.0f}/km²"
    return f"{value:.1f}"


# Reference table for the POI summary metrics (poiCount, poiDensity, ...).
# Ranges are [min, max); the last range is open-ended.
METRIC_DEFINITIONS: Dict[str, Dict] = {
    "poiCount": {
        "id": "poiCount",
        "name": "POI Count",
        "short_name": "Count",
        "formula": "n",
        "description": "Total number of points of interest within the selected area.",
        "interpretation": [
            {"min": 0, "max": 10, "label": "Very Low", "description": "Minimal amenities present"},
            {"min": 10, "max": 50, "label": "Low", "description": "Limited amenities"},
            {"min": 50, "max": 150, "label": "Moderate", "description": "Typical suburban density"},
            {"min": 150, "max": 500, "label": "High", "description": "Urban-level amenities"},
            {"min": 500, "max": math.inf, "label": "Very High", "description": "Dense urban core"},
        ],
        "unit": "count",
        "higher_means": "More amenities available in the area",
    },
    "poiDensity": {
        "id": "poiDensity",
        "name": "POI Density",
        "short_name": "Density",
        "formula": "count / area (km²)",
        "description": (
            "Number of points of interest per square kilometer. Normalizes for area size, "
            "enabling fair comparison between different-sized areas."
        ),
        "interpretation": [
            {"min": 0, "max": 25, "label": "Very Low", "description": "Rural or industrial area"},
            {"min": 25, "max": 75, "label": "Low", "description": "Low-density suburban"},
            {"min": 75, "max": 200, "label": "Moderate", "description": "Suburban or mixed-use"},
            {"min": 200, "max": 500, "label": "High", "description": "Urban neighborhood"},
            {"min": 500, "max": math.inf, "label": "Very High",
             "description": "Dense urban core or commercial district"},
        ],
        "unit": "per km²",
        "higher_means": "More concentrated amenities; typically indicates higher walkability",
    },
    "diversityIndex": {
        "id": "diversityIndex",
        "name": "Diversity Index (Shannon)",
        "short_name": "Diversity",
        "formula": "H = -Σ(pᵢ × ln(pᵢ))",
        "description": (
            "Shannon Diversity Index measures how evenly POIs are distributed across categories. "
            "A higher value indicates a more balanced mix of amenity types."
        ),
        "interpretation": [
            {"min": 0, "max": 0.5, "label": "Very Low",
             "description": "Dominated by 1-2 categories; monofunctional area"},
            {"min": 0.5, "max": 1.0, "label": "Low", "description": "Limited variety; few category types"},
            {"min": 1.0, "max": 1.5, "label": "Moderate", "description": "Some variety; typical residential area"},
            {"min": 1.5, "max": 2.0, "label": "High", "description": "Good mix; mixed-use neighborhood"},
            {"min": 2.0, "max": math.inf, "label": "Very High",
             "description": "Exceptional diversity; vibrant urban area"},
        ],
        "citation": {
            "author": "Shannon, C.E.",
            "year": 1948,
            "title": "A Mathematical Theory of Communication",
            "source": "Bell System Technical Journal, 27(3), 379-423",
        },
        "unit": "index",
        "higher_means": "More balanced mix of amenity types; typically indicates mixed-use character",
    },
    "categoryShare": {
        "id": "categoryShare",
        "name": "Category Share",
        "short_name": "Share",
        "formula": "(category count / total count) × 100",
        "description": "Percentage of total POIs belonging to a specific category.",
        "interpretation": [
            {"min": 0, "max": 5, "label": "Minimal", "description": "Category barely present"},
            {"min": 5, "max": 15, "label": "Minor", "description": "Secondary presence"},
            {"min": 15, "max": 30, "label": "Notable", "description": "Significant presence"},
            {"min": 30, "max": 50, "label": "Major", "description": "Dominant category"},
            {"min": 50, "max": 100, "label": "Dominant", "description": "Area defined by this category"},
        ],
        "unit": "%",
        "higher_means": "Category is more prevalent in the area's amenity mix",
    },
    "coverageScore": {
        "id": "coverageScore",
        "name": "Data Coverage Score",
        "short_name": "Coverage",
        "formula": "(categories with data / total categories) × 100",
        "description": (
            "Indicates the completeness of map data for this area. A lower score may "
            "indicate data gaps rather than actual absence of amenities."
        ),
        "interpretation": [
            {"min": 0, "max": 50, "label": "Limited",
             "description": "Significant data gaps likely; interpret with caution"},
            {"min": 50, "max": 70, "label": "Partial", "description": "Some categories may be undermapped"},
            {"min": 70, "max": 90, "label": "Good", "description": "Most categories represented"},
            {"min": 90, "max": 100, "label": "Excellent", "description": "Comprehensive coverage"},
        ],
        "unit": "%",
        "higher_means": "More complete data; higher confidence in results",
    },
    "areaSize": {
        "id": "areaSize",
        "name": "Area Size",
        "short_name": "Area",
        "formula": "Geodesic area calculation",
        "description": "Total area of the selected polygon in square kilometers.",
        "interpretation": [
            {"min": 0, "max": 0.1, "label": "Very Small", "description": "Block-level analysis"},
            {"min": 0.1, "max": 0.5, "label": "Small", "description": "Neighborhood pocket"},
            {"min": 0.5, "max": 2, "label": "Medium", "description": "Typical neighborhood"},
            {"min": 2, "max": 10, "label": "Large", "description": "District-level"},
            {"min": 10, "max": math.inf, "label": "Very Large", "description": "City-scale analysis"},
        ],
        "unit": "km²",
        "higher_means": "Larger analysis area",
    },
}


def get_interpretation(metric_id: str, value: float) -> Optional[Dict]:
    """
    Get the interpretation range a value falls into.

    Values past the last range map to the last range.
    """
    definition = METRIC_DEFINITIONS.get(metric_id)
    if not definition:
        return None

    ranges = definition["interpretation"]
    for interpretation_range in ranges:
        if interpretation_range["min"] <= value < interpretation_range["max"]:
            return interpretation_range

    return ranges[-1] if ranges else None


def interpret_metric_value(metric_id: str, value: float) -> str:
    """Interpretation text such as "High: Urban neighborhood"."""
    interpretation_range = get_interpretation(metric_id, value)
    if not interpretation_range:
        return ""
    return f"{interpretation_range['label']}: {interpretation_range['description']}"


def get_citation_text(metric_id: str) -> Optional[str]:
    definition = METRIC_DEFINITIONS.get(metric_id)
    citation = definition.get("citation") if definition else None
    if not citation:
        return None

    text = f'{citation["author"]} ({citation["year"]}). "{citation["title"]}"'
    if citation.get("source"):
        text += f'. {citation["source"]}'
    return text
