"""
Overpass API client

Two query families: every boundary containing a point (address search), and
the city/census areas inside a county (county drill-down).
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from permitscout.config import (
    COUNTY_SUFFIXES,
    HTTP_TIMEOUT_SEC,
    OVERPASS_MAX_ATTEMPTS,
    OVERPASS_URLS,
)
from permitscout.errors import ProviderUnavailable
from .http import post_with_backoff

logger = logging.getLogger(__name__)

_CITY_SELECTORS = """
          relation["boundary"="administrative"]["admin_level"="8"]{area};
          way["boundary"="administrative"]["admin_level"="8"]{area};
          relation["boundary"="census"]{area};
          way["boundary"="census"]{area};"""


def quote_ql(value: str) -> str:
    """Escape a value for use inside a double-quoted Overpass QL string."""
    return str(value).replace("\\", "\\\\").replace('"', '\\"')


def boundaries_containing_query(lat: float, lon: float) -> str:
    """
    Tags for every administrative/census/political area around the point, then
    geometry only for the detailed levels (7-10 and census). States and
    counties are resolved locally, so their large polygons are never fetched.
    """
    return f"""
        [out:json][timeout:25];
        is_in({lat},{lon})->.a;
        (
          rel(pivot.a)["boundary"~"^(administrative|census|political)$"];
          way(pivot.a)["boundary"~"^(administrative|census|political)$"];
        );
        out tags;
        (
          rel(pivot.a)["boundary"="administrative"]["admin_level"~"^(7|8|9|10)$"];
          way(pivot.a)["boundary"="administrative"]["admin_level"~"^(7|8|9|10)$"];
          rel(pivot.a)["boundary"="census"];
          way(pivot.a)["boundary"="census"];
        );
        out geom;
    """


def admin_areas_query(
    bbox: Optional[Sequence[float]] = None,
    osm_id: Optional[int] = None,
    osm_type: Optional[str] = None,
    county_name: Optional[str] = None,
    state_abbr: Optional[str] = None,
) -> str:
    """
    City-level areas for one county, by the cheapest strategy available:
    a bbox (south, west, north, east), the county's OSM relation, or a name
    search inside the state.
    """
    if bbox:
        header = f"[out:json][timeout:30][bbox:{','.join(str(v) for v in bbox)}];"
        return f"""
        {header}
        ({_CITY_SELECTORS.format(area="")}
        );
        out geom;
        """
    if osm_id and osm_type == "relation":
        return f"""
        [out:json][timeout:90];
        relation({osm_id});
        map_to_area -> .county;
        ({_CITY_SELECTORS.format(area="(area.county)")}
        );
        out geom;
        """
    if not county_name or not state_abbr:
        raise ValueError("name search needs both county_name and state_abbr")
    names = [f"{county_name}{suffix}" for suffix in COUNTY_SUFFIXES[:3]] + [county_name]
    county_rels = "\n".join(
        f'          relation["boundary"="administrative"]["admin_level"="6"]["name"="{quote_ql(name)}"](area.state);'
        for name in names
    )
    return f"""
        [out:json][timeout:90];
        area["ISO3166-2"="US-{quote_ql(state_abbr)}"]->.state;
        (
{county_rels}
        )->.countyRel;
        .countyRel map_to_area -> .county;
        ({_CITY_SELECTORS.format(area="(area.county)")}
        );
        out geom;
        """


class OverpassClient:
    """Runs Overpass QL against each configured endpoint until one answers."""

    def __init__(
        self,
        urls: Optional[List[str]] = None,
        session: Optional[requests.Session] = None,
        max_attempts: int = OVERPASS_MAX_ATTEMPTS,
        timeout: float = HTTP_TIMEOUT_SEC,
    ):
        self.urls = list(urls or OVERPASS_URLS)
        self.session = session
        self.max_attempts = max_attempts
        self.timeout = timeout

    def run(self, query: str) -> Dict[str, Any]:
        for url in self.urls:
            resp = post_with_backoff(
                url,
                data={"data": query},
                session=self.session,
                max_attempts=self.max_attempts,
                timeout=self.timeout,
            )
            if resp is None:
                continue
            try:
                return resp.json()
            except ValueError as exc:
                logger.warning(f"{url} returned unparseable JSON: {exc}")
        raise ProviderUnavailable("Overpass request failed at all endpoints")

    def query_boundaries_containing(self, lat: float, lon: float) -> Dict[str, Any]:
        return self.run(boundaries_containing_query(lat, lon))

    def query_admin_areas_within(self, **strategy) -> Dict[str, Any]:
        return self.run(admin_areas_query(**strategy))
