"""
Centralized benchmark profiles per derived metric.

These profiles hold the literal constants each scorer normalizes against,
so the calibration of every proxy lives in one place.

The returned keys are metric-specific:
- transit_coverage: {mode_weights, high_density, medium_density, low_density}
- walkability_proxy: {categories, amenity_share, pedestrian_bonus_max,
                      intersection_benchmark}
- bike_score: {weights, lane_density_km_per_km2, parking_density, shop_density,
               intersection_benchmark, parking_share, shop_share}
- street_connectivity / road network: {road_layers, meters_per_intersection}
"""

from typing import Dict


# Roughly one intersection per 200 m of road in a grid
ROAD_NETWORK = {
    "road_layers": ("roads-primary", "roads-residential"),
    "meters_per_intersection": 200.0,
}

# Mode weights stand in for service frequency, which OSM does not carry
TRANSIT_PROFILE = {
    "mode_weights": {
        "rail-lines": 2.0,     # Rail stations (heavy/light rail)
        "transit-stops": 1.0,  # Bus stops
    },
    "high_density": 50.0,    # Manhattan, SF, Chicago Loop (~100)
    "medium_density": 20.0,  # Boston, Portland, Seattle (~72)
    "low_density": 5.0,      # Suburban areas (~43)
}

# (category id, layers, weight, max_count); benchmark density = max_count × 2 per km²
WALKABILITY_CATEGORIES = (
    ("grocery", ("poi-grocery",), 3, 5),
    ("restaurants", ("poi-food-drink",), 3, 10),
    ("shopping", ("poi-shopping",), 2, 5),
    ("coffee", ("poi-food-drink",), 2, 4),
    ("parks", ("parks",), 2, 3),
    ("schools", ("poi-education",), 2, 3),
    ("healthcare", ("poi-health",), 1, 2),
)

WALKABILITY_PROFILE = {
    "categories": WALKABILITY_CATEGORIES,
    "density_per_count": 2.0,
    "amenity_share": 0.85,         # Amenities cap at 85 points
    "pedestrian_bonus_max": 15.0,  # Intersection density adds up to 15
    "intersection_benchmark": 100.0,
    "high_confidence_categories": 5,
    "medium_confidence_categories": 3,
}

BIKE_PROFILE = {
    "weights": {
        "infrastructure": 0.50,  # Bike lanes and paths
        "amenities": 0.30,       # Bike parking, shops, rentals
        "connectivity": 0.20,    # Road network connectivity
    },
    "lane_density_km_per_km2": 5.0,  # Copenhagen / Amsterdam
    "parking_density": 50.0,
    "shop_density": 2.0,
    "parking_share": 0.7,
    "shop_share": 0.3,
    "intersection_benchmark": 100.0,
}

# Share of required layers with data needed for each confidence grade
COVERAGE_CONFIDENCE = {
    "high": 0.8,
    "medium": 0.5,
}


def get_benchmark_profile(metric_id: str) -> Dict:
    """
    Return the benchmark constants for a derived metric.

    Unknown metric ids return an empty dict.
    """
    m = (metric_id or "").lower()

    if m == "transit_coverage":
        return dict(TRANSIT_PROFILE)

    if m == "walkability_proxy":
        return {**WALKABILITY_PROFILE, **ROAD_NETWORK}

    if m == "bike_score":
        return {**BIKE_PROFILE, **ROAD_NETWORK}

    if m == "street_connectivity":
        return dict(ROAD_NETWORK)

    return {}
