"""
Test Overpass to GeoJSON Conversion

Validates polygon assembly from closed ways and multipolygon/boundary
relations, and the de-duplication of elements listed by both `out tags`
and `out geom`.
"""
from shapely.geometry import shape

from geojson_builders import closed_way, geom_points, rect
from permitscout.geo.osm_geojson import element_to_feature, overpass_to_features, overpass_to_geojson

TAGS = {"name": "Springfield", "boundary": "administrative", "admin_level": "8"}


def _member(role, points):
    return {"type": "way", "role": role, "geometry": geom_points(points)}


class TestWays:
    def test_closed_way_becomes_polygon(self):
        feature = element_to_feature(closed_way(7, TAGS, 0, 0, 1, 1))
        assert feature["geometry"]["type"] == "Polygon"
        assert feature["id"] == "way/7"
        assert feature["properties"]["id"] == "way/7"
        assert feature["properties"]["name"] == "Springfield"
        assert shape(feature["geometry"]).area == 1.0

    def test_coordinates_are_lists(self):
        feature = element_to_feature(closed_way(7, TAGS, 0, 0, 1, 1))
        ring = feature["geometry"]["coordinates"][0]
        assert isinstance(ring, list) and isinstance(ring[0], list)

    def test_open_way_skipped(self):
        way = {"type": "way", "id": 8, "tags": TAGS, "geometry": geom_points([[0, 0], [1, 0], [1, 1], [0, 1]])}
        assert element_to_feature(way) is None

    def test_null_points_tolerated(self):
        way = closed_way(9, TAGS, 0, 0, 2, 2)
        way["geometry"].insert(2, None)
        assert element_to_feature(way)["geometry"]["type"] == "Polygon"

    def test_node_skipped(self):
        assert element_to_feature({"type": "node", "id": 1, "lat": 0, "lon": 0, "tags": TAGS}) is None


class TestRelations:
    """Test suite for relation assembly from member ways."""

    def test_outer_split_across_members(self):
        relation = {
            "type": "relation",
            "id": 11,
            "tags": TAGS,
            "members": [
                _member("outer", [[0, 0], [4, 0], [4, 4]]),
                _member("outer", [[4, 4], [0, 4], [0, 0]]),
            ],
        }
        feature = element_to_feature(relation)
        assert feature["id"] == "relation/11"
        assert feature["geometry"]["type"] == "Polygon"
        assert shape(feature["geometry"]).area == 16.0

    def test_inner_ring_becomes_hole(self):
        relation = {
            "type": "relation",
            "id": 12,
            "tags": TAGS,
            "members": [
                _member("outer", rect(0, 0, 4, 4)["coordinates"][0]),
                _member("inner", rect(1, 1, 2, 2)["coordinates"][0]),
            ],
        }
        geom = shape(element_to_feature(relation)["geometry"])
        assert geom.area == 15.0
        assert len(geom.interiors) == 1

    def test_disjoint_outers_become_multipolygon(self):
        relation = {
            "type": "relation",
            "id": 13,
            "tags": TAGS,
            "members": [
                _member("outer", rect(0, 0, 1, 1)["coordinates"][0]),
                _member("outer", rect(5, 5, 6, 6)["coordinates"][0]),
                {"type": "node", "role": "admin_centre", "lat": 0.5, "lon": 0.5},
            ],
        }
        assert element_to_feature(relation)["geometry"]["type"] == "MultiPolygon"

    def test_relation_without_members(self):
        assert element_to_feature({"type": "relation", "id": 14, "tags": TAGS}) is None


class TestPayload:
    def test_tags_then_geometry_deduplicated(self):
        payload = {
            "elements": [
                {"type": "way", "id": 7, "tags": TAGS},
                closed_way(7, TAGS, 0, 0, 1, 1),
            ]
        }
        features = overpass_to_features(payload)
        assert [f["id"] for f in features] == ["way/7"]

    def test_same_id_different_type_kept(self):
        payload = {"elements": [closed_way(7, TAGS, 0, 0, 1, 1), {
            "type": "relation", "id": 7, "tags": TAGS,
            "members": [_member("outer", rect(2, 2, 3, 3)["coordinates"][0])],
        }]}
        assert sorted(f["id"] for f in overpass_to_features(payload)) == ["relation/7", "way/7"]

    def test_empty_payloads(self):
        assert overpass_to_features(None) == []
        assert overpass_to_features({}) == []
        assert overpass_to_geojson({"elements": []}) == {"type": "FeatureCollection", "features": []}
