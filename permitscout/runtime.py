"""
Per-session wiring of the dataset, providers, caches and drill controller.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from permitscout.boundaries.cities import CountyCityLayer, CountyOutlineLookup
from permitscout.boundaries.coverage import coverage_rows
from permitscout.boundaries.reconcile import BoundaryReconciler, fetch_boundaries
from permitscout.drill import DrillController
from permitscout.errors import ProviderUnavailable
from permitscout.providers.nominatim import NominatimClient
from permitscout.providers.overpass import OverpassClient
from permitscout.synth.permits import generate_permit_points

logger = logging.getLogger(__name__)


class AtlasRuntime:
    def __init__(self, dataset, overpass=None, geocoder=None):
        self.dataset = dataset
        self.overpass = overpass or OverpassClient()
        self.geocoder = geocoder or NominatimClient()
        self.reconciler = BoundaryReconciler.from_dataset(dataset)
        self.outlines = CountyOutlineLookup(dataset, self.geocoder)
        self.cities = CountyCityLayer(self.overpass)
        self.drill = DrillController(dataset, self.outlines, self.cities)
        self._points: Dict[str, Dict[str, Any]] = {}

    def find_region(self, fips: str) -> Optional[Dict[str, Any]]:
        fips = str(fips)
        if len(fips) <= 2:
            return self.dataset.find_state(fips)
        return self.dataset.find_county(fips)

    def permit_points(self, fips: str) -> Optional[Dict[str, Any]]:
        region = self.find_region(fips)
        if region is None:
            return None
        if region["id"] not in self._points:
            self._points[region["id"]] = generate_permit_points(region)
        return self._points[region["id"]]

    def search(self, query: str) -> List[Dict[str, Any]]:
        try:
            return self.geocoder.search(query)
        except ProviderUnavailable as exc:
            logger.error(f"Geocoding error: {exc}")
            return []

    def boundaries_at(self, lat: float, lon: float) -> Optional[Dict[str, Any]]:
        return fetch_boundaries(lat, lon, self.overpass, self.reconciler)

    def coverage_for(self, query: str) -> Optional[Dict[str, Any]]:
        """Geocode `query`, then list the boundaries covering the best hit."""
        suggestions = self.search(query)
        if not suggestions:
            return None
        location = suggestions[0]
        boundaries = self.boundaries_at(location["lat"], location["lon"])
        return {
            "location": location,
            "boundaries": boundaries,
            "coverage": coverage_rows(boundaries, location.get("address")),
        }
