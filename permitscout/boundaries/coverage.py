"""
Coverage listing for an address search: every administrative level that
covers the point, most general first.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

DEFAULT_LEVEL_RANK = 10

ADMIN_TYPE_LABELS = {
    "4": "State",
    "6": "County",
    "7": "Metropolitan Area",
    "8": "City/Town",
    "9": "Village",
    "10": "Neighborhood",
}

# Nominatim address keys checked when no boundary names the locality
POSTAL_LOCALITY_KEYS = ("city", "town", "village", "hamlet", "suburb")
POSTAL_TYPE_OVERRIDES = (("village", "Village"), ("hamlet", "Hamlet"), ("suburb", "Suburb"))


def admin_type_label(level: Optional[str], boundary: Optional[str]) -> str:
    if boundary == "census":
        return "Census Designated Place"
    return ADMIN_TYPE_LABELS.get(level, f"Level {level}")


def _level_rank(level: Any) -> int:
    try:
        return int(level) or DEFAULT_LEVEL_RANK
    except (TypeError, ValueError):
        return DEFAULT_LEVEL_RANK


def coverage_rows(
    boundaries: Optional[Mapping[str, Any]],
    address: Optional[Mapping[str, str]] = None,
) -> List[Dict[str, Any]]:
    """
    Rows of {name, type, level, postal}: the nation, then the reconciled
    boundaries by admin level, then any locality only the geocoded address
    knows about.
    """
    rows = [{"name": "United States", "type": "Federal (Level 2)", "level": "2", "postal": False}]

    features = list((boundaries or {}).get("features") or [])
    features.sort(key=lambda f: _level_rank(f["properties"].get("admin_level")))
    seen_names = set()
    for feature in features:
        props = feature["properties"]
        level = props.get("admin_level")
        boundary = props.get("boundary_type") or props.get("boundary")
        rows.append({
            "name": props.get("name"),
            "type": admin_type_label(level, boundary),
            "level": level,
            "postal": False,
        })
        seen_names.add(props.get("name"))

    address = address or {}
    for key in POSTAL_LOCALITY_KEYS:
        name = address.get(key)
        if not name or name in seen_names:
            continue
        label = "City/Town"
        for override_key, override_label in POSTAL_TYPE_OVERRIDES:
            if address.get(override_key) == name:
                label = override_label
        rows.append({"name": name, "type": label, "level": None, "postal": True})
        seen_names.add(name)
    return rows
