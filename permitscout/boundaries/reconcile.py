"""
Boundary Reconciliation

Merges boundary candidates from the local topology and from Overpass into one
deduplicated FeatureCollection:

- states (admin_level 4) and counties (admin_level 6) take the local polygon,
  tagged with the OSM id and boundary type;
- every other level starts as a tag-only placeholder and picks up geometry
  from the converted Overpass polygons when one matches;
- the result is collapsed on (admin_level, name, boundary type).
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from permitscout.config import (
    ADMIN_LEVEL_COUNTRY,
    ADMIN_LEVEL_COUNTY,
    ADMIN_LEVEL_STATE,
    ADMIN_LEVEL_UNKNOWN,
)
from permitscout.errors import ProviderUnavailable
from permitscout.geo.osm_geojson import overpass_to_features
from permitscout.regions import strip_county_suffix

logger = logging.getLogger(__name__)

LOCALLY_RESOLVED_LEVELS = (ADMIN_LEVEL_STATE, ADMIN_LEVEL_COUNTY)


class BoundaryMatcher:
    """Decides whether an incoming candidate describes an existing record."""

    def matches(self, existing: Mapping[str, Any], candidate: Mapping[str, Any], level: str) -> bool:
        raise NotImplementedError


class NameLevelMatcher(BoundaryMatcher):
    """
    Exact name equality plus level equality. With `allow_unknown`, an
    existing record whose level is unknown matches any level.
    """

    def __init__(self, allow_unknown: bool = False):
        self.allow_unknown = allow_unknown

    def matches(self, existing, candidate, level):
        if existing.get("name") != candidate.get("name"):
            return False
        existing_level = existing.get("admin_level")
        return existing_level == level or (self.allow_unknown and existing_level == ADMIN_LEVEL_UNKNOWN)


def _is_boundary_candidate(element: Mapping[str, Any]) -> bool:
    tags = element.get("tags") or {}
    return bool(tags.get("name") and (tags.get("boundary") or tags.get("place")))


def dedup_key(feature: Mapping[str, Any]) -> tuple:
    props = feature.get("properties") or {}
    return (
        props.get("admin_level"),
        props.get("name"),
        props.get("boundary_type") or props.get("boundary"),
    )


def dedupe_boundaries(features: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Keep the first feature per (admin_level, name, boundary type)."""
    unique = []
    seen = set()
    for feature in features:
        key = dedup_key(feature)
        if key in seen:
            continue
        seen.add(key)
        unique.append(feature)
    return unique


class BoundaryReconciler:
    """
    Reconciles Overpass boundary candidates against the local state/county
    regions. The placeholder and geometry-merge steps ask `placeholder_matcher`
    and `geometry_matcher` respectively, so stricter or fuzzier linkage can be
    swapped in without touching the pipeline.
    """

    def __init__(
        self,
        states: List[Mapping[str, Any]],
        counties: List[Mapping[str, Any]],
        placeholder_matcher: Optional[BoundaryMatcher] = None,
        geometry_matcher: Optional[BoundaryMatcher] = None,
    ):
        self._states_by_name = {}
        for region in states:
            self._states_by_name.setdefault((region.get("properties") or {}).get("name"), region)
        self._counties_by_name = {}
        for region in counties:
            self._counties_by_name.setdefault((region.get("properties") or {}).get("name"), region)
        self.placeholder_matcher = placeholder_matcher or NameLevelMatcher()
        self.geometry_matcher = geometry_matcher or NameLevelMatcher(allow_unknown=True)

    @classmethod
    def from_dataset(cls, dataset, **kwargs) -> "BoundaryReconciler":
        return cls(dataset.get_state_regions(), dataset.get_county_regions(), **kwargs)

    def _local_match(self, level: str, name: str, boundary: Optional[str]) -> Optional[Mapping[str, Any]]:
        if boundary != "administrative":
            return None
        if level == ADMIN_LEVEL_STATE:
            return self._states_by_name.get(name)
        if level == ADMIN_LEVEL_COUNTY:
            return self._counties_by_name.get(strip_county_suffix(name))
        return None

    def _find(self, features, candidate, level, matcher) -> int:
        for idx, existing in enumerate(features):
            if matcher.matches(existing["properties"], candidate, level):
                return idx
        return -1

    def reconcile(
        self,
        elements: Iterable[Mapping[str, Any]],
        geometry_features: Iterable[Mapping[str, Any]] = (),
    ) -> Dict[str, Any]:
        """
        Args:
            elements: raw Overpass elements (tags, optionally geometry)
            geometry_features: polygon features converted from the same response

        Returns:
            FeatureCollection of reconciled boundary records
        """
        features: List[Dict[str, Any]] = []

        for el in elements:
            if not _is_boundary_candidate(el):
                continue
            tags = el["tags"]
            level = tags.get("admin_level") or ADMIN_LEVEL_UNKNOWN
            name = tags["name"]
            boundary = tags.get("boundary")

            if level == ADMIN_LEVEL_COUNTRY:
                continue

            local = self._local_match(level, name, boundary)
            if local is not None:
                feat = copy.deepcopy(local)
                feat["properties"].update(admin_level=level, osm_id=el.get("id"), boundary_type=boundary)
                features.append(feat)
                continue

            if self._find(features, {"name": name}, level, self.placeholder_matcher) != -1:
                continue
            features.append({
                "type": "Feature",
                "geometry": None,
                "properties": {
                    "name": name,
                    "admin_level": level,
                    "osm_id": el.get("id"),
                    "boundary_type": boundary,
                    "place": tags.get("place"),
                },
            })

        for feat in geometry_features:
            props = feat.get("properties")
            if not props:
                continue
            level = props.get("admin_level") or ADMIN_LEVEL_UNKNOWN
            # local geometry stays authoritative
            if level in LOCALLY_RESOLVED_LEVELS:
                continue
            idx = self._find(features, props, level, self.geometry_matcher)
            if idx != -1:
                features[idx]["geometry"] = feat.get("geometry")
                features[idx]["properties"] = {**features[idx]["properties"], **props}
            else:
                features.append({
                    "type": "Feature",
                    "geometry": feat.get("geometry"),
                    "properties": dict(props),
                })

        return {"type": "FeatureCollection", "features": dedupe_boundaries(features)}

    def reconcile_payload(self, payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        payload = payload or {}
        return self.reconcile(payload.get("elements") or [], overpass_to_features(payload))


def is_valid_coordinate(lat: Any, lon: Any) -> bool:
    try:
        lat, lon = float(lat), float(lon)
    except (TypeError, ValueError):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


def fetch_boundaries(lat: float, lon: float, provider, reconciler: BoundaryReconciler) -> Optional[Dict[str, Any]]:
    """
    Boundaries covering a point. An unreachable provider counts as zero
    candidates; only an invalid coordinate returns None.
    """
    if not is_valid_coordinate(lat, lon):
        logger.error(f"Invalid coordinates for boundary fetch: {lat}, {lon}")
        return None
    lat, lon = float(lat), float(lon)
    try:
        payload = provider.query_boundaries_containing(lat, lon)
    except ProviderUnavailable as exc:
        logger.warning(f"Boundary provider unavailable, returning no remote boundaries: {exc}")
        payload = {}
    result = reconciler.reconcile_payload(payload)
    logger.info(f"Reconciled {len(result['features'])} boundaries at {lat:.5f}, {lon:.5f}")
    return result
