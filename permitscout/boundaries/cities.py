"""
County detail layer: the county's high-resolution outline from Nominatim and
its cities/census places from Overpass, each with name-seeded statistics.

Both are cached per county FIPS for the lifetime of the object.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from permitscout.config import FIPS_TO_ABBR, FIPS_TO_STATE
from permitscout.errors import ProviderUnavailable
from permitscout.geo.geometry import centroid, point_in_region
from permitscout.geo.osm_geojson import overpass_to_features
from permitscout.synth.rng import generator_for
from permitscout.synth.stats import synthesize_stats

logger = logging.getLogger(__name__)


class CountyOutlineLookup:
    def __init__(self, dataset, geocoder):
        self.dataset = dataset
        self.geocoder = geocoder
        self._cache: Dict[str, Dict[str, Any]] = {}

    def cached(self, county_fips: str) -> Optional[Dict[str, Any]]:
        return self._cache.get(county_fips)

    def fetch(self, county_fips: str) -> Optional[Dict[str, Any]]:
        """
        Outline feature with the OSM id/type Overpass can reuse, or None when
        the county is unknown or the geocoder has nothing.
        """
        if county_fips in self._cache:
            return self._cache[county_fips]

        county_name = self.dataset.get_region_name(county_fips)
        state_name = FIPS_TO_STATE.get(county_fips[:2])
        if not county_name or not state_name:
            return None

        try:
            hit = self.geocoder.lookup_polygon(f"{county_name}, {state_name}")
        except ProviderUnavailable as exc:
            logger.warning(f"Failed to fetch high-res boundary for {county_fips}: {exc}")
            return None
        if not hit:
            return None

        feature = {
            "type": "Feature",
            "geometry": hit["geojson"],
            "properties": {
                "fips": county_fips,
                "name": county_name,
                "osm_id": hit.get("osm_id"),
                "osm_type": hit.get("osm_type"),
            },
        }
        self._cache[county_fips] = feature
        return feature


class CountyCityLayer:
    def __init__(self, provider):
        self.provider = provider
        self._cache: Dict[str, Dict[str, Any]] = {}

    def cached(self, county_fips: str) -> Optional[Dict[str, Any]]:
        return self._cache.get(county_fips)

    def fetch(
        self,
        county_fips: str,
        county_name: Optional[str],
        osm_id: Optional[int] = None,
        osm_type: Optional[str] = None,
        bbox: Optional[Sequence[float]] = None,
        boundary_geometry: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        City polygons inside a county, or None if the county cannot be
        queried or the provider fails. A bbox query overshoots the county, so
        its results are kept only when their centroid falls inside
        `boundary_geometry`.
        """
        if county_fips in self._cache:
            return self._cache[county_fips]

        abbr = FIPS_TO_ABBR.get(county_fips[:2])
        if not abbr or not county_name:
            return None

        try:
            payload = self.provider.query_admin_areas_within(
                bbox=bbox,
                osm_id=osm_id,
                osm_type=osm_type,
                county_name=county_name,
                state_abbr=abbr,
            )
        except ProviderUnavailable as exc:
            logger.error(f"Failed to fetch city data for {county_fips}: {exc}")
            return None

        features = [f for f in overpass_to_features(payload) if f["properties"].get("name")]
        if bbox and boundary_geometry:
            features = [f for f in features if point_in_region(centroid(f["geometry"]), boundary_geometry)]

        for feature in features:
            rng = generator_for(feature["properties"]["name"])
            stats = synthesize_stats(rng.next() * 4 + 0.5, rng)
            feature["properties"].update(countyFips=county_fips, **stats.as_properties())

        result = {"type": "FeatureCollection", "features": features}
        self._cache[county_fips] = result
        logger.info(f"Cached {len(features)} cities for county {county_fips}")
        return result

    def cities_for_county(self, county_fips: str) -> List[Dict[str, Any]]:
        """Cached cities flattened to property maps with a vertex-average lng/lat."""
        data = self._cache.get(county_fips)
        if not data:
            return []
        cities = []
        for feature in data["features"]:
            center = centroid(feature["geometry"])
            if center is None:
                continue
            cities.append({
                **feature["properties"],
                "name": feature["properties"].get("name"),
                "lng": center[0],
                "lat": center[1],
                "countyFips": county_fips,
            })
        return cities
