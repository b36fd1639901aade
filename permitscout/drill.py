"""
Drill levels: national -> state -> county.

`DrillLevelResolver` validates and normalizes transitions. `DrillController`
adds the county detail fetch on top and drops results that arrive after the
user has already drilled somewhere else.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional

from permitscout.config import FIPS_TO_STATE
from permitscout.errors import DrillTransitionError
from permitscout.geo.geometry import bounding_box
from permitscout.synth.stats import aggregate_stats, top_hotspots

logger = logging.getLogger(__name__)

NATIONAL = "national"
STATE = "state"
COUNTY = "county"
LEVELS = (NATIONAL, STATE, COUNTY)


@dataclass(frozen=True)
class DrillState:
    level: str = NATIONAL
    state_id: Optional[str] = None
    county_id: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _given(identifier: Any) -> bool:
    return identifier is not None and str(identifier) != ""


class DrillLevelResolver:
    def __init__(self, state: Optional[DrillState] = None):
        self._state = state or DrillState()
        self._observers: List[Callable[[DrillState], None]] = []

    @property
    def state(self) -> DrillState:
        return self._state

    def subscribe(self, callback: Callable[[DrillState], None]) -> Callable[[], None]:
        """Register an observer; returns a function that unregisters it."""
        self._observers.append(callback)
        return lambda: self._observers.remove(callback)

    def go_to(self, level: str, identifier: Any = None) -> DrillState:
        """
        Move to `level`.

        State ids are padded to two characters and county ids to five. A
        missing id reuses the previous one of the same kind. A county's state
        id is always its FIPS prefix, replacing any other active state.

        Raises:
            DrillTransitionError: unknown level, or no id given and none to reuse
        """
        current = self._state
        if level == NATIONAL:
            new_state = DrillState()
        elif level == STATE:
            state_id = str(identifier).zfill(2) if _given(identifier) else current.state_id
            if not state_id:
                raise DrillTransitionError("state drill needs a state id and none is active")
            new_state = DrillState(STATE, state_id, None)
        elif level == COUNTY:
            county_id = str(identifier).zfill(5) if _given(identifier) else current.county_id
            if not county_id:
                raise DrillTransitionError("county drill needs a county id and none is active")
            state_id = county_id[:2]
            if current.state_id and current.state_id != state_id:
                logger.info(f"County {county_id} is outside state {current.state_id}; switching to {state_id}")
            new_state = DrillState(COUNTY, state_id, county_id)
        else:
            raise DrillTransitionError(f"unknown drill level {level!r}; expected one of {LEVELS}")

        self._state = new_state
        for callback in list(self._observers):
            callback(new_state)
        return new_state


class DrillController:
    """
    Owns the session's drill state and the county detail layer.

    Entering a county completes the transition first, then fetches the
    county outline and its cities. A fetch result is only applied if the
    session is still on the county it was issued for.

    Transitions and detail updates hold `_lock`; the remote fetch runs
    outside it, so API worker threads can share one controller.
    """

    def __init__(self, dataset, outlines, cities, resolver: Optional[DrillLevelResolver] = None):
        self.dataset = dataset
        self.outlines = outlines
        self.cities = cities
        self.resolver = resolver or DrillLevelResolver()
        self.county_detail: Optional[Dict[str, Any]] = None
        self._lock = threading.RLock()

    @property
    def state(self) -> DrillState:
        return self.resolver.state

    def drill_to(self, level: str, identifier: Any = None) -> DrillState:
        with self._lock:
            state = self.resolver.go_to(level, identifier)
            if state.level != COUNTY:
                self.county_detail = None
                return state
            # detail of the previous county never outlives the transition
            if self.county_detail and self.county_detail["countyFips"] != state.county_id:
                self.county_detail = None
        county_id = state.county_id
        detail = self.fetch_county_detail(county_id)
        self.apply_county_detail(county_id, detail)
        return self.resolver.state

    def fetch_county_detail(self, county_id: str) -> Dict[str, Any]:
        county_name = self.dataset.get_region_name(county_id)
        outline = self.outlines.fetch(county_id)
        osm_id = osm_type = bbox = boundary_geometry = None
        if outline:
            osm_id = outline["properties"].get("osm_id")
            osm_type = outline["properties"].get("osm_type")
            boundary_geometry = outline["geometry"]
            bbox = bounding_box(boundary_geometry)
        cities = self.cities.fetch(county_id, county_name, osm_id, osm_type, bbox, boundary_geometry)
        return {"countyFips": county_id, "boundary": outline, "cities": cities}

    def apply_county_detail(self, issued_for: str, detail: Dict[str, Any]) -> bool:
        with self._lock:
            current = self.resolver.state
            if current.level != COUNTY or current.county_id != issued_for:
                logger.info(f"Discarding stale county detail for {issued_for} (now at {current.level} {current.county_id})")
                return False
            self.county_detail = detail
            return True

    def breadcrumbs(self) -> List[Dict[str, Any]]:
        state = self.resolver.state
        crumbs = [{"level": NATIONAL, "id": None, "name": "United States"}]
        if state.level in (STATE, COUNTY):
            crumbs.append({"level": STATE, "id": state.state_id, "name": FIPS_TO_STATE.get(state.state_id)})
        if state.level == COUNTY:
            crumbs.append({
                "level": COUNTY,
                "id": state.county_id,
                "name": self.dataset.get_region_name(state.county_id),
            })
        return crumbs

    def level_items(self) -> List[Dict[str, Any]]:
        """Property maps of the regions listed at the current level."""
        state = self.resolver.state
        if state.level == NATIONAL:
            return [r["properties"] for r in self.dataset.get_state_regions()]
        if state.level == STATE:
            return [r["properties"] for r in self.dataset.counties_in_state(state.state_id)]
        cities = self.cities.cities_for_county(state.county_id)
        if cities:
            return cities
        county = self.dataset.find_county(state.county_id)
        return [county["properties"]] if county else []

    def summary(self, include_detail: bool = False) -> Dict[str, Any]:
        with self._lock:
            items = self.level_items()
            result = {
                "state": self.resolver.state.as_dict(),
                "breadcrumbs": self.breadcrumbs(),
                "aggregate": aggregate_stats(items),
                "hotspots": top_hotspots(items),
            }
            if include_detail:
                result["countyDetail"] = self.county_detail
            return result
