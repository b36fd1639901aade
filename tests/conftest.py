"""
Shared fixtures: a two-state, three-county dataset and canned Overpass payloads.
"""
import pytest

from geojson_builders import closed_way, rect
from permitscout.regions import build_region_dataset


STATE_FEATURES = [
    {"type": "Feature", "id": "06", "geometry": rect(-124.0, 32.0, -114.0, 42.0), "properties": {"name": "California"}},
    {"type": "Feature", "id": "22", "geometry": rect(-94.0, 29.0, -89.0, 33.0), "properties": {"name": "Louisiana"}},
]

COUNTY_FEATURES = [
    {"type": "Feature", "id": "06037", "geometry": rect(-119.0, 33.0, -117.0, 35.0), "properties": {}},
    {"type": "Feature", "id": "06075", "geometry": rect(-122.6, 37.6, -122.3, 37.9), "properties": {}},
    {"type": "Feature", "id": "22071", "geometry": rect(-90.2, 29.8, -89.9, 30.1), "properties": {}},
]

COUNTY_NAMES = {"06037": "Los Angeles", "06075": "San Francisco", "22071": "Orleans"}


@pytest.fixture
def dataset():
    return build_region_dataset(STATE_FEATURES, COUNTY_FEATURES, COUNTY_NAMES)


@pytest.fixture
def square_region():
    return {
        "type": "Feature",
        "id": "06037",
        "geometry": rect(0.0, 0.0, 10.0, 10.0),
        "properties": {"fips": "06037", "name": "Square", "total": 1000, "approved": 700, "pending": 150, "denied": 150},
    }


@pytest.fixture
def city_areas_payload():
    """Two city ways: one inside Los Angeles County's rectangle, one outside it."""
    return {
        "elements": [
            closed_way(101, {"name": "Pasadena", "boundary": "administrative", "admin_level": "8"},
                       -118.2, 34.1, -118.0, 34.2),
            closed_way(102, {"name": "Las Vegas", "boundary": "administrative", "admin_level": "8"},
                       -115.3, 36.0, -115.0, 36.3),
            {"type": "node", "id": 5, "lat": 34.0, "lon": -118.0, "tags": {"name": "A node"}},
        ]
    }


@pytest.fixture
def la_outline_hit():
    return {
        "osm_id": 396479,
        "osm_type": "relation",
        "geojson": rect(-119.0, 33.0, -117.0, 35.0),
    }
