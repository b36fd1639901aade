"""Stand-ins for the Overpass and Nominatim clients."""
from permitscout.errors import ProviderUnavailable


class FakeOverpass:
    """Returns canned payloads; raises ProviderUnavailable when `fail` is set."""

    def __init__(self, boundary_payload=None, areas_payload=None, fail=False):
        self.boundary_payload = boundary_payload or {"elements": []}
        self.areas_payload = areas_payload or {"elements": []}
        self.fail = fail
        self.boundary_calls = []
        self.area_calls = []

    def query_boundaries_containing(self, lat, lon):
        self.boundary_calls.append((lat, lon))
        if self.fail:
            raise ProviderUnavailable("overpass down")
        return self.boundary_payload

    def query_admin_areas_within(self, **strategy):
        self.area_calls.append(strategy)
        if self.fail:
            raise ProviderUnavailable("overpass down")
        return self.areas_payload


class FakeGeocoder:
    def __init__(self, suggestions=None, polygon_hit=None, fail=False):
        self.suggestions = suggestions or []
        self.polygon_hit = polygon_hit
        self.fail = fail
        self.polygon_queries = []

    def search(self, query, limit=5):
        if self.fail:
            raise ProviderUnavailable("nominatim down")
        return self.suggestions if len(query) >= 3 else []

    def lookup_polygon(self, query):
        self.polygon_queries.append(query)
        if self.fail:
            raise ProviderUnavailable("nominatim down")
        return self.polygon_hit
