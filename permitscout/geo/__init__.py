"""
permitscout.geo - Geometry helpers over GeoJSON dicts.
"""
from .geometry import point_in_ring, point_in_region, centroid, bounding_box
from .osm_geojson import overpass_to_features, overpass_to_geojson

__all__ = [
    "point_in_ring",
    "point_in_region",
    "centroid",
    "bounding_box",
    "overpass_to_features",
    "overpass_to_geojson",
]
