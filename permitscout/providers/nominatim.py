"""
Nominatim geocoding client

Address suggestions for the search box and polygon lookups for county
outlines.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from permitscout.config import HTTP_TIMEOUT_SEC, NOMINATIM_URL
from .http import get_json

MIN_QUERY_LENGTH = 3


class NominatimClient:
    def __init__(
        self,
        url: str = NOMINATIM_URL,
        session: Optional[requests.Session] = None,
        timeout: float = HTTP_TIMEOUT_SEC,
    ):
        self.url = url
        self.session = session
        self.timeout = timeout

    def search(self, query: str, limit: int = 5) -> List[Dict[str, Any]]:
        """
        US address suggestions as {name, lat, lon, type, importance, address}.

        Queries shorter than three characters return no suggestions.
        Raises ProviderUnavailable when the service cannot be reached.
        """
        if not query or len(query) < MIN_QUERY_LENGTH:
            return []
        params = {
            "q": query,
            "format": "json",
            "addressdetails": 1,
            "limit": limit,
            "countrycodes": "us",
        }
        data = get_json(self.url, params=params, session=self.session, timeout=self.timeout)
        return [
            {
                "name": item.get("display_name"),
                "lat": float(item["lat"]),
                "lon": float(item["lon"]),
                "type": item.get("type"),
                "importance": item.get("importance"),
                "address": item.get("address"),
            }
            for item in data or []
            if "lat" in item and "lon" in item
        ]

    def lookup_polygon(self, query: str) -> Optional[Dict[str, Any]]:
        """First hit for `query` with its GeoJSON outline, or None."""
        params = {"q": query, "polygon_geojson": 1, "format": "json", "limit": 1}
        data = get_json(self.url, params=params, session=self.session, timeout=self.timeout)
        if data and data[0].get("geojson"):
            return data[0]
        return None
