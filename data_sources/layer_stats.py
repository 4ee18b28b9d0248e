"""
Layer Statistics Store helpers

The fetch/clip stage normally delivers LayerStats directly. These helpers
summarize already-clipped GeoJSON FeatureCollections into the same shape, and
assemble the AreaContext snapshot the calculators consume.
"""

from typing import Any, Dict, Mapping, Optional

from logging_config import get_logger
from .models import AreaContext, KNOWN_LAYER_IDS, LayerStats
from .utils import geometry_length_m, polygon_area_m2

logger = get_logger(__name__)


def layer_stats_from_features(feature_collection: Optional[Mapping[str, Any]]) -> LayerStats:
    """
    Summarize a clipped FeatureCollection into LayerStats.

    - feature_count: every feature, with or without geometry
    - total_length_m: geodesic length of LineString/MultiLineString features
    - total_area_m2: geodesic area of Polygon/MultiPolygon features
    """
    if not feature_collection:
        return LayerStats()

    features = feature_collection.get("features") or []
    total_length = 0.0
    total_area = 0.0

    for feature in features:
        geometry = (feature or {}).get("geometry")
        if not geometry:
            continue
        geometry_type = geometry.get("type")
        if geometry_type in ("LineString", "MultiLineString"):
            total_length += geometry_length_m(geometry)
        elif geometry_type in ("Polygon", "MultiPolygon"):
            total_area += polygon_area_m2(geometry)

    return LayerStats(
        feature_count=len(features),
        total_area_m2=total_area,
        total_length_m=total_length,
    )


def polygon_area_km2(geometry: Optional[Mapping[str, Any]]) -> float:
    """Geodesic area of a Polygon/MultiPolygon in km²."""
    if not geometry:
        return 0.0
    return polygon_area_m2(dict(geometry)) / 1_000_000


def build_area_context(polygon: Optional[Mapping[str, Any]],
                       feature_collections: Mapping[str, Mapping[str, Any]],
                       area_km2: Optional[float] = None,
                       area_id: Optional[str] = None,
                       name: Optional[str] = None) -> AreaContext:
    """
    Build an AreaContext from a polygon and per-layer clipped features.

    When area_km2 is not given it is computed from the polygon.
    Unknown layer ids are ignored.
    """
    layers: Dict[str, LayerStats] = {}
    for layer_id, collection in feature_collections.items():
        if layer_id not in KNOWN_LAYER_IDS:
            logger.debug(f"Ignoring unknown layer id {layer_id!r}")
            continue
        layers[layer_id] = layer_stats_from_features(collection)

    if area_km2 is None:
        area_km2 = polygon_area_km2(polygon)

    return AreaContext(
        area_km2=max(0.0, float(area_km2)),
        layers=layers,
        polygon=dict(polygon) if polygon else None,
        area_id=area_id,
        name=name,
    )
