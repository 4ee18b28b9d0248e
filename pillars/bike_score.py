"""
Bike Score (Proxy)
Infrastructure, amenities and road connectivity for cycling

Components:
- Infrastructure (50%): bike lane km per km², log-normalized against 5 km/km²
  (Copenhagen / Amsterdam)
- Amenities (30%): 70% bike parking (vs 50/km²) + 30% bike shops (vs 2/km²)
- Connectivity (20%): estimated intersection density, linear up to 100/km²

Real Bike Score also accounts for hills; OSM data alone cannot.
"""

from data_sources.benchmarks import get_benchmark_profile
from data_sources.data_quality import grade_by_presence
from data_sources.models import AreaContext, DerivedMetricValue
from data_sources.normalization import clamp_0_100, linear_normalize_0_100, log_normalize_0_100
from logging_config import get_logger, log_metric_calculation
from .street_connectivity import estimate_intersection_density

logger = get_logger(__name__)

METRIC_ID = "bike_score"
PROFILE = get_benchmark_profile(METRIC_ID)

BREAKDOWN_KEYS = (
    "bike_lane_length_m",
    "bike_lane_density",
    "infrastructure_score",
    "bike_parking_count",
    "bike_shops_count",
    "parking_density",
    "shops_density",
    "parking_score",
    "shops_score",
    "amenities_score",
    "intersection_density",
    "connectivity_score",
    "weighted_infrastructure",
    "weighted_amenities",
    "weighted_connectivity",
)


def calculate_bike_score(context: AreaContext) -> DerivedMetricValue:
    area_km2 = context.safe_area_km2
    if area_km2 == 0:
        breakdown = {key: 0.0 for key in BREAKDOWN_KEYS}
        log_metric_calculation(logger, METRIC_ID, 0.0, "low", area_name=context.name)
        return DerivedMetricValue(METRIC_ID, 0.0, "low", breakdown)

    weights = PROFILE["weights"]
    breakdown = {}

    # Infrastructure
    lane_length_m = context.get_layer("bike-lanes").total_length_m
    lane_density = (lane_length_m / 1000) / area_km2
    infrastructure_score = log_normalize_0_100(
        lane_density, benchmark=PROFILE["lane_density_km_per_km2"]
    )
    breakdown["bike_lane_length_m"] = lane_length_m
    breakdown["bike_lane_density"] = lane_density
    breakdown["infrastructure_score"] = infrastructure_score

    # Amenities
    parking_count = context.count("poi-bike-parking")
    shops_count = context.count("poi-bike-shops")
    parking_density = parking_count / area_km2
    shops_density = shops_count / area_km2
    parking_score = log_normalize_0_100(parking_density, benchmark=PROFILE["parking_density"])
    shops_score = log_normalize_0_100(shops_density, benchmark=PROFILE["shop_density"])
    amenities_score = (
        parking_score * PROFILE["parking_share"] + shops_score * PROFILE["shop_share"]
    )
    breakdown["bike_parking_count"] = float(parking_count)
    breakdown["bike_shops_count"] = float(shops_count)
    breakdown["parking_density"] = parking_density
    breakdown["shops_density"] = shops_density
    breakdown["parking_score"] = parking_score
    breakdown["shops_score"] = shops_score
    breakdown["amenities_score"] = amenities_score

    # Connectivity
    intersection_density = estimate_intersection_density(context)
    connectivity_score = linear_normalize_0_100(
        intersection_density, benchmark=PROFILE["intersection_benchmark"]
    )
    breakdown["intersection_density"] = intersection_density
    breakdown["connectivity_score"] = connectivity_score

    weighted_infrastructure = infrastructure_score * weights["infrastructure"]
    weighted_amenities = amenities_score * weights["amenities"]
    weighted_connectivity = connectivity_score * weights["connectivity"]
    breakdown["weighted_infrastructure"] = weighted_infrastructure
    breakdown["weighted_amenities"] = weighted_amenities
    breakdown["weighted_connectivity"] = weighted_connectivity

    value = clamp_0_100(weighted_infrastructure + weighted_amenities + weighted_connectivity)
    confidence = grade_by_presence(
        lane_length_m > 0,
        parking_count > 0 or shops_count > 0,
    )

    log_metric_calculation(logger, METRIC_ID, value, confidence, area_name=context.name)
    return DerivedMetricValue(METRIC_ID, value, confidence, breakdown)
