"""
Local region dataset.

Loads the us-atlas state and county topologies, names counties from the
Census API, and attaches seeded permit statistics to every region at load
time. Statistics are never regenerated afterwards.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

import geopandas as gpd
import pandas as pd

from permitscout.config import (
    CENSUS_COUNTY_NAMES_URL,
    COUNTIES_TOPO_URL,
    COUNTY_STATS_SEED,
    COUNTY_SUFFIXES,
    FIPS_TO_STATE,
    STATE_POP,
    STATE_STATS_SEED,
    STATES_TOPO_URL,
)
from permitscout.errors import ProviderUnavailable
from permitscout.providers.http import get_json
from permitscout.synth.rng import SeededSequenceGenerator
from permitscout.synth.stats import synthesize_stats

logger = logging.getLogger(__name__)

_COUNTY_SUFFIX_RE = re.compile("(" + "|".join(re.escape(s) for s in COUNTY_SUFFIXES) + ")$")


def strip_county_suffix(name: str) -> str:
    """'Los Angeles County' -> 'Los Angeles'. Only one trailing suffix is removed."""
    return _COUNTY_SUFFIX_RE.sub("", name)


def _feature_id(feature: Mapping[str, Any]) -> str:
    fid = feature.get("id")
    if fid is None:
        fid = (feature.get("properties") or {}).get("id")
    return "" if fid is None else str(fid)


def _base_feature(feature: Mapping[str, Any], fips: str) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "id": fips,
        "geometry": feature.get("geometry"),
        "properties": dict(feature.get("properties") or {}),
    }


def build_state_regions(features: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Normalize state ids to two digits and attach statistics weighted by
    population. Features outside the 50 states keep no statistics and consume
    no draws.
    """
    rng = SeededSequenceGenerator(STATE_STATS_SEED)
    regions = []
    for feature in features:
        fips = _feature_id(feature).zfill(2)
        region = _base_feature(feature, fips)
        name = FIPS_TO_STATE.get(fips)
        if name:
            stats = synthesize_stats(STATE_POP.get(fips, 1), rng)
            region["properties"].update(name=name, fips=fips, **stats.as_properties())
        regions.append(region)
    return regions


def build_county_regions(
    features: Iterable[Mapping[str, Any]],
    county_names: Optional[Mapping[str, str]] = None,
) -> List[Dict[str, Any]]:
    rng = SeededSequenceGenerator(COUNTY_STATS_SEED)
    county_names = county_names or {}
    regions = []
    for feature in features:
        fips = _feature_id(feature).zfill(5)
        region = _base_feature(feature, fips)
        state_fips = fips[:2]
        if state_fips in FIPS_TO_STATE:
            name = county_names.get(fips) or f"County {fips[2:]}"
            stats = synthesize_stats(rng.next() * 3 + 0.3, rng)
            region["properties"].update(
                name=name, fips=fips, stateFips=state_fips, **stats.as_properties()
            )
        regions.append(region)
    return regions


def parse_county_names(rows: Any) -> Dict[str, str]:
    """
    Census rows ([["NAME", "state", "county"], ...]) -> {county fips: short name}.
    """
    if not isinstance(rows, list) or len(rows) < 2:
        return {}
    df = pd.DataFrame(rows[1:], columns=rows[0])
    df["fips"] = df["state"].astype(str).str.zfill(2) + df["county"].astype(str).str.zfill(3)
    df["short_name"] = df["NAME"].str.split(",").str[0].str.replace(_COUNTY_SUFFIX_RE, "", regex=True)
    return dict(zip(df["fips"], df["short_name"]))


def fetch_county_names(url: str = CENSUS_COUNTY_NAMES_URL, session=None) -> Dict[str, str]:
    try:
        rows = get_json(url, session=session)
    except ProviderUnavailable as exc:
        logger.warning(f"County names unavailable, using placeholders: {exc}")
        return {}
    names = parse_county_names(rows)
    logger.info(f"Loaded {len(names)} county names")
    return names


def read_topology_features(source: str, layer: str) -> List[Dict[str, Any]]:
    """Read one object of a TopoJSON file/URL as GeoJSON features."""
    try:
        gdf = gpd.read_file(source, layer=layer)
    except Exception as exc:
        raise ProviderUnavailable(f"failed to read {layer} from {source}: {exc}") from exc
    if gdf.crs is not None and gdf.crs != "EPSG:4326":
        gdf = gdf.to_crs("EPSG:4326")
    features = json.loads(gdf.to_json())["features"]
    for feature in features:
        # the TopoJSON id arrives as an attribute column
        feature["id"] = feature["properties"].pop("id", feature.get("id"))
    return features


class RegionDataset:
    """
    States and counties as GeoJSON features, read-only once built.
    """

    def __init__(
        self,
        states: List[Dict[str, Any]],
        counties: List[Dict[str, Any]],
        county_names: Optional[Mapping[str, str]] = None,
    ):
        self._states = states
        self._counties = counties
        self._county_names = dict(county_names or {})
        self._states_by_fips = {s["id"]: s for s in states}
        self._counties_by_fips = {c["id"]: c for c in counties}

    def get_state_regions(self) -> List[Dict[str, Any]]:
        return self._states

    def get_county_regions(self) -> List[Dict[str, Any]]:
        return self._counties

    def find_state(self, fips: str) -> Optional[Dict[str, Any]]:
        return self._states_by_fips.get(str(fips).zfill(2))

    def find_county(self, fips: str) -> Optional[Dict[str, Any]]:
        return self._counties_by_fips.get(str(fips).zfill(5))

    def counties_in_state(self, state_fips: str) -> List[Dict[str, Any]]:
        state_fips = str(state_fips).zfill(2)
        return [c for c in self._counties if c["properties"].get("stateFips") == state_fips]

    def get_region_name(self, region_id: str) -> Optional[str]:
        region_id = str(region_id)
        if len(region_id) <= 2:
            return FIPS_TO_STATE.get(region_id.zfill(2))
        fips = region_id.zfill(5)
        if fips in self._county_names:
            return self._county_names[fips]
        county = self._counties_by_fips.get(fips)
        return county["properties"].get("name") if county else None

    def as_collection(self, regions: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {"type": "FeatureCollection", "features": regions}


def build_region_dataset(
    state_features: Iterable[Mapping[str, Any]],
    county_features: Iterable[Mapping[str, Any]],
    county_names: Optional[Mapping[str, str]] = None,
) -> RegionDataset:
    return RegionDataset(
        build_state_regions(state_features),
        build_county_regions(county_features, county_names),
        county_names,
    )


def load_region_dataset(
    states_source: str = STATES_TOPO_URL,
    counties_source: str = COUNTIES_TOPO_URL,
    county_names_url: str = CENSUS_COUNTY_NAMES_URL,
) -> RegionDataset:
    logger.info(f"Loading state topology from {states_source}")
    state_features = read_topology_features(states_source, "states")
    logger.info(f"Loading county topology from {counties_source}")
    county_features = read_topology_features(counties_source, "counties")
    county_names = fetch_county_names(county_names_url)
    dataset = build_region_dataset(state_features, county_features, county_names)
    logger.info(
        f"Built {len(dataset.get_state_regions())} states and {len(dataset.get_county_regions())} counties"
    )
    return dataset
