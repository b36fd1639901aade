"""
Plain-coordinate geometry helpers for GeoJSON Polygon/MultiPolygon dicts.

Inner rings (holes) are ignored throughout: containment tests only look at
each polygon's outer ring, and the centroid is a vertex average rather than an
area-weighted one. Both approximations are intended for synthetic/visual use.
"""
from __future__ import annotations

from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple

Point = Sequence[float]
Ring = Sequence[Sequence[float]]


def point_in_ring(point: Point, ring: Ring) -> bool:
    """
    Even-odd ray casting. Points exactly on an edge have undefined parity.
    """
    x, y = point[0], point[1]
    inside = False
    j = len(ring) - 1
    for i in range(len(ring)):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def _outer_rings(geometry: Optional[Mapping[str, Any]]) -> List[Ring]:
    if not geometry:
        return []
    coords = geometry.get("coordinates") or []
    geom_type = geometry.get("type")
    if geom_type == "Polygon":
        return [coords[0]] if coords else []
    if geom_type == "MultiPolygon":
        return [poly[0] for poly in coords if poly]
    return []


def point_in_region(point: Optional[Point], geometry: Optional[Mapping[str, Any]]) -> bool:
    if point is None:
        return False
    return any(point_in_ring(point, ring) for ring in _outer_rings(geometry))


def iter_positions(coords: Any) -> Iterator[Tuple[float, float]]:
    """Yield every [x, y] pair of an arbitrarily nested coordinate array."""
    if not coords:
        return
    if isinstance(coords[0], (int, float)):
        yield coords[0], coords[1]
        return
    for part in coords:
        yield from iter_positions(part)


def centroid(geometry: Optional[Mapping[str, Any]]) -> Optional[List[float]]:
    """Mean of all vertices as [lng, lat], or None for empty geometry."""
    if not geometry or not geometry.get("coordinates"):
        return None
    sx = sy = 0.0
    n = 0
    for x, y in iter_positions(geometry["coordinates"]):
        sx += x
        sy += y
        n += 1
    return [sx / n, sy / n] if n else None


def bounding_box(geometry: Optional[Mapping[str, Any]]) -> Optional[List[float]]:
    """
    [minLat, minLng, maxLat, maxLng] (south, west, north, east), the order
    Overpass expects for its bbox filter. None when empty or degenerate.
    """
    if not geometry or not geometry.get("coordinates"):
        return None
    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")
    for x, y in iter_positions(geometry["coordinates"]):
        min_x = min(min_x, x)
        min_y = min(min_y, y)
        max_x = max(max_x, x)
        max_y = max(max_y, y)
    if min_x > max_x or min_y > max_y:
        return None
    return [min_y, min_x, max_y, max_x]
