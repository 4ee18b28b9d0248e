"""
Shared geometry utilities for the Urban Metrics engine
Geodesic line length and polygon area on WGS84 lon/lat GeoJSON geometries
"""

from typing import Any, Mapping, Optional

import pyproj
from shapely.errors import ShapelyError
from shapely.geometry import shape
from shapely.geometry.polygon import orient

from logging_config import get_logger

logger = get_logger(__name__)

# Lengths and areas are measured on the WGS84 ellipsoid
GEOD = pyproj.Geod(ellps="WGS84")

AREA_TYPES = ("Polygon", "MultiPolygon")
LINE_TYPES = ("LineString", "MultiLineString")


def _to_shape(geometry: Optional[Mapping[str, Any]], allowed_types):
    """Shapely geometry for a GeoJSON mapping of an allowed type, else None."""
    if not geometry or geometry.get("type") not in allowed_types:
        return None
    if not geometry.get("coordinates"):
        return None
    try:
        geom = shape(geometry)
    except (ShapelyError, ValueError, TypeError, IndexError) as e:
        logger.debug(f"Skipping malformed {geometry.get('type')} geometry: {e}")
        return None
    return None if geom.is_empty else geom


def polygon_area_m2(geometry: Optional[Mapping[str, Any]]) -> float:
    """
    Geodesic area of a GeoJSON Polygon or MultiPolygon in square meters.

    Holes are subtracted. Other geometry types have no area.
    """
    geom = _to_shape(geometry, AREA_TYPES)
    if geom is None:
        return 0.0

    polygons = geom.geoms if geom.geom_type == "MultiPolygon" else [geom]
    total = 0.0
    for polygon in polygons:
        # Exterior counter-clockwise and holes clockwise, so holes come out negative
        area, _ = GEOD.geometry_area_perimeter(orient(polygon, sign=1.0))
        total += max(0.0, area)
    return total


def geometry_length_m(geometry: Optional[Mapping[str, Any]]) -> float:
    """Geodesic length of a GeoJSON LineString or MultiLineString in meters."""
    geom = _to_shape(geometry, LINE_TYPES)
    if geom is None:
        return 0.0
    return GEOD.geometry_length(geom)
