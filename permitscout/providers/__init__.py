"""
permitscout.providers - Remote boundary, city and geocoding sources.
"""
from .overpass import OverpassClient, boundaries_containing_query, admin_areas_query, quote_ql
from .nominatim import NominatimClient

__all__ = [
    "OverpassClient",
    "boundaries_containing_query",
    "admin_areas_query",
    "quote_ql",
    "NominatimClient",
]
