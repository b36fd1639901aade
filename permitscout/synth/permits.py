"""
Permit Point Fields

Scatters synthetic permit points inside a region by rejection sampling in its
bounding box. The generator is seeded from the region's FIPS code, so a region
always yields the same field.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from permitscout.geo.geometry import bounding_box, point_in_region
from .rng import generator_for

PERMIT_TYPES = ("Residential", "Commercial", "Industrial", "Mixed-Use")
ATTEMPTS_PER_POINT = 5
DEFAULT_APPROVAL_RATE = 0.7
DEFAULT_PENDING_RATE = 0.15
DEFAULT_FIPS = "00000"


def _empty_collection() -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": []}


def _status_rates(props: Optional[Mapping[str, Any]]) -> tuple:
    total = (props or {}).get("total") or 0
    if total > 0:
        return props.get("approved", 0) / total, props.get("pending", 0) / total
    return DEFAULT_APPROVAL_RATE, DEFAULT_PENDING_RATE


def generate_permit_points(region: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Generate 15-60 permit points inside `region`.

    At most 5 sampling attempts per requested point are made, so thin or
    concave regions can come back with fewer points than requested.
    """
    if not region or not region.get("geometry"):
        return _empty_collection()

    geometry = region["geometry"]
    bbox = bounding_box(geometry)
    if bbox is None:
        return _empty_collection()
    min_lat, min_lng, max_lat, max_lng = bbox

    props = region.get("properties") or {}
    rng = generator_for(props.get("fips") or DEFAULT_FIPS)
    n = rng.next_int(15, 60)
    approval_rate, pending_rate = _status_rates(props)

    features = []
    attempts = 0
    while len(features) < n and attempts < n * ATTEMPTS_PER_POINT:
        attempts += 1
        lng = min_lng + rng.next() * (max_lng - min_lng)
        lat = min_lat + rng.next() * (max_lat - min_lat)
        pt = [lng, lat]
        if not point_in_region(pt, geometry):
            continue

        r = rng.next()
        if r < approval_rate:
            status = "Approved"
        elif r < approval_rate + pending_rate:
            status = "Pending"
        else:
            status = "Denied"

        features.append({
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": pt},
            "properties": {
                "status": status,
                "type": PERMIT_TYPES[rng.next_int(0, 3)],
                "id": f"P-{rng.next_int(10000, 99999)}",
                "days": rng.next_int(5, 120),
            },
        })

    return {"type": "FeatureCollection", "features": features}
