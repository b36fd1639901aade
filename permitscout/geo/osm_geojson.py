"""
Overpass JSON to GeoJSON

Turns `out geom` elements (closed ways and multipolygon/boundary relations)
into polygon features. Elements with tags only, open ways, and nodes are not
converted; they still reach the reconciler through the raw element list.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from shapely.errors import GEOSException
from shapely.geometry import LineString, Polygon, mapping
from shapely.geometry.base import BaseGeometry
from shapely.ops import polygonize, unary_union

logger = logging.getLogger(__name__)

POLYGON_TYPES = ("Polygon", "MultiPolygon")


def _lonlat(points: Iterable[Optional[Dict[str, float]]]) -> List[tuple]:
    # Overpass emits null for member nodes outside the requested area
    return [(p["lon"], p["lat"]) for p in points if p]


def _as_lists(coords: Any) -> Any:
    if isinstance(coords, (list, tuple)):
        return [_as_lists(c) for c in coords]
    return coords


def _way_geometry(element: Dict[str, Any]) -> Optional[BaseGeometry]:
    coords = _lonlat(element.get("geometry") or [])
    if len(coords) < 4 or coords[0] != coords[-1]:
        return None
    return Polygon(coords)


def _rings_from_members(members: List[Dict[str, Any]], roles: tuple) -> List[Polygon]:
    lines = []
    for member in members:
        if member.get("type") != "way" or (member.get("role") or "") not in roles:
            continue
        coords = _lonlat(member.get("geometry") or [])
        if len(coords) >= 2:
            lines.append(LineString(coords))
    if not lines:
        return []
    return list(polygonize(unary_union(lines)))


def _relation_geometry(element: Dict[str, Any]) -> Optional[BaseGeometry]:
    members = element.get("members") or []
    outers = _rings_from_members(members, ("outer", ""))
    if not outers:
        return None
    geom = unary_union(outers)
    inners = _rings_from_members(members, ("inner",))
    if inners:
        geom = geom.difference(unary_union(inners))
    return geom


def element_to_feature(element: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Build a GeoJSON polygon feature from one Overpass element, or None if the
    element carries no polygonal geometry.
    """
    el_type = element.get("type")
    if el_type == "way":
        geom = _way_geometry(element)
    elif el_type == "relation":
        geom = _relation_geometry(element)
    else:
        return None

    if geom is None or geom.is_empty or geom.geom_type not in POLYGON_TYPES:
        return None

    geometry = mapping(geom)
    properties = dict(element.get("tags") or {})
    properties["id"] = f"{el_type}/{element.get('id')}"
    return {
        "type": "Feature",
        "id": properties["id"],
        "geometry": {"type": geometry["type"], "coordinates": _as_lists(geometry["coordinates"])},
        "properties": properties,
    }


def _has_shape(element: Dict[str, Any]) -> bool:
    return bool(element.get("geometry") or element.get("members"))


def _unique_elements(elements: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # `out tags` followed by `out geom` lists the same element twice; keep the
    # copy that carries geometry.
    by_key: Dict[tuple, Dict[str, Any]] = {}
    for el in elements:
        key = (el.get("type"), el.get("id"))
        current = by_key.get(key)
        if current is None or (_has_shape(el) and not _has_shape(current)):
            by_key[key] = el
    return list(by_key.values())


def overpass_to_features(payload: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Polygon features for every convertible element of an Overpass response."""
    if not payload:
        return []
    features = []
    for element in _unique_elements(payload.get("elements") or []):
        try:
            feature = element_to_feature(element)
        except (ValueError, GEOSException) as exc:
            logger.warning(f"Skipping unconvertible {element.get('type')}/{element.get('id')}: {exc}")
            continue
        if feature is not None:
            features.append(feature)
    return features


def overpass_to_geojson(payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": overpass_to_features(payload)}
