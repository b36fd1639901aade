"""
Test County Detail Layers

Validates the county outline lookup and the city layer: caching per county,
the centroid filter for bbox queries, name-seeded statistics and provider
failures.
"""
import pytest

from fakes import FakeGeocoder, FakeOverpass
from geojson_builders import rect
from permitscout.boundaries.cities import CountyCityLayer, CountyOutlineLookup
from permitscout.synth.rng import generator_for
from permitscout.synth.stats import synthesize_stats

LA_BBOX = [33.0, -119.0, 35.0, -117.0]
LA_GEOMETRY = rect(-119.0, 33.0, -117.0, 35.0)


def _names(collection):
    return [f["properties"]["name"] for f in collection["features"]]


class TestCountyCityLayer:
    """Test suite for city polygons inside a county."""

    def test_bbox_results_filtered_by_centroid(self, city_areas_payload):
        layer = CountyCityLayer(FakeOverpass(areas_payload=city_areas_payload))
        result = layer.fetch("06037", "Los Angeles", 396479, "relation", LA_BBOX, LA_GEOMETRY)
        assert _names(result) == ["Pasadena"]

    def test_strategy_passed_to_provider(self, city_areas_payload):
        provider = FakeOverpass(areas_payload=city_areas_payload)
        CountyCityLayer(provider).fetch("06037", "Los Angeles", 396479, "relation", LA_BBOX, LA_GEOMETRY)
        assert provider.area_calls == [{
            "bbox": LA_BBOX,
            "osm_id": 396479,
            "osm_type": "relation",
            "county_name": "Los Angeles",
            "state_abbr": "CA",
        }]

    def test_name_strategy_keeps_everything(self, city_areas_payload):
        layer = CountyCityLayer(FakeOverpass(areas_payload=city_areas_payload))
        result = layer.fetch("06037", "Los Angeles")
        assert _names(result) == ["Pasadena", "Las Vegas"]

    def test_city_stats_seeded_by_name(self, city_areas_payload):
        layer = CountyCityLayer(FakeOverpass(areas_payload=city_areas_payload))
        city = layer.fetch("06037", "Los Angeles")["features"][0]["properties"]
        rng = generator_for("Pasadena")
        expected = synthesize_stats(rng.next() * 4 + 0.5, rng)
        assert city["total"] == expected.total
        assert city["approved"] == expected.approved
        assert city["countyFips"] == "06037"
        assert city["id"] == "way/101"

    def test_same_city_name_same_stats_across_counties(self, city_areas_payload):
        a = CountyCityLayer(FakeOverpass(areas_payload=city_areas_payload)).fetch("06037", "Los Angeles")
        b = CountyCityLayer(FakeOverpass(areas_payload=city_areas_payload)).fetch("06075", "San Francisco")
        assert a["features"][0]["properties"]["total"] == b["features"][0]["properties"]["total"]

    def test_cached_per_county(self, city_areas_payload):
        provider = FakeOverpass(areas_payload=city_areas_payload)
        layer = CountyCityLayer(provider)
        first = layer.fetch("06037", "Los Angeles")
        assert layer.fetch("06037", "Los Angeles") is first
        assert layer.cached("06037") is first
        assert len(provider.area_calls) == 1

    def test_provider_failure(self):
        provider = FakeOverpass(fail=True)
        layer = CountyCityLayer(provider)
        assert layer.fetch("06037", "Los Angeles") is None
        assert layer.cached("06037") is None
        layer.fetch("06037", "Los Angeles")
        assert len(provider.area_calls) == 2, "failures must not be cached"

    def test_unqueryable_county(self):
        provider = FakeOverpass()
        layer = CountyCityLayer(provider)
        assert layer.fetch("72001", "Adjuntas") is None
        assert layer.fetch("06037", None) is None
        assert provider.area_calls == []

    def test_cities_for_county(self, city_areas_payload):
        layer = CountyCityLayer(FakeOverpass(areas_payload=city_areas_payload))
        assert layer.cities_for_county("06037") == []
        layer.fetch("06037", "Los Angeles", bbox=LA_BBOX, boundary_geometry=LA_GEOMETRY)
        (city,) = layer.cities_for_county("06037")
        assert city["name"] == "Pasadena"
        assert city["countyFips"] == "06037"
        # vertex average of the closed rectangle counts the first corner twice
        assert city["lng"] == pytest.approx((-118.2 * 3 + -118.0 * 2) / 5)


class TestCountyOutlineLookup:
    def test_fetch(self, dataset, la_outline_hit):
        geocoder = FakeGeocoder(polygon_hit=la_outline_hit)
        outline = CountyOutlineLookup(dataset, geocoder).fetch("06037")
        assert geocoder.polygon_queries == ["Los Angeles, California"]
        assert outline["geometry"] == la_outline_hit["geojson"]
        assert outline["properties"] == {
            "fips": "06037",
            "name": "Los Angeles",
            "osm_id": 396479,
            "osm_type": "relation",
        }

    def test_cached(self, dataset, la_outline_hit):
        geocoder = FakeGeocoder(polygon_hit=la_outline_hit)
        lookup = CountyOutlineLookup(dataset, geocoder)
        first = lookup.fetch("06037")
        assert lookup.fetch("06037") is first
        assert lookup.cached("06037") is first
        assert len(geocoder.polygon_queries) == 1

    def test_no_hit(self, dataset):
        assert CountyOutlineLookup(dataset, FakeGeocoder()).fetch("06037") is None

    def test_geocoder_failure(self, dataset, la_outline_hit):
        lookup = CountyOutlineLookup(dataset, FakeGeocoder(polygon_hit=la_outline_hit, fail=True))
        assert lookup.fetch("06037") is None

    def test_unknown_county(self, dataset, la_outline_hit):
        geocoder = FakeGeocoder(polygon_hit=la_outline_hit)
        assert CountyOutlineLookup(dataset, geocoder).fetch("72001") is None
        assert geocoder.polygon_queries == []
