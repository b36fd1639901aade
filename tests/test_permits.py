"""
Test Permit Point Fields

Validates rejection sampling inside a region: containment, determinism per
FIPS code, the attempt cap and the status split.
"""
import re
from unittest import mock

from geojson_builders import rect
from permitscout.geo.geometry import point_in_region
from permitscout.synth.permits import ATTEMPTS_PER_POINT, PERMIT_TYPES, generate_permit_points
from permitscout.synth.rng import generator_for


def _region(geometry, fips="06037", **props):
    return {"type": "Feature", "id": fips, "geometry": geometry, "properties": {"fips": fips, **props}}


class TestPermitPoints:
    """Test suite for generate_permit_points."""

    def test_rectangle_accepts_every_sample(self, square_region):
        """A region that fills its bbox yields exactly the requested count."""
        requested = generator_for("06037").next_int(15, 60)
        result = generate_permit_points(square_region)
        assert result["type"] == "FeatureCollection"
        assert len(result["features"]) == requested

    def test_points_inside_concave_region(self):
        geometry = {
            "type": "Polygon",
            "coordinates": [[[0, 0], [10, 0], [10, 2], [2, 2], [2, 10], [0, 10], [0, 0]]],
        }
        result = generate_permit_points(_region(geometry))
        assert result["features"], "expected some points in the L-shaped region"
        for feature in result["features"]:
            assert point_in_region(feature["geometry"]["coordinates"], geometry)

    def test_deterministic(self, square_region):
        assert generate_permit_points(square_region) == generate_permit_points(square_region)

    def test_fips_changes_field(self):
        geometry = rect(0, 0, 10, 10)
        a = generate_permit_points(_region(geometry, "06037"))
        b = generate_permit_points(_region(geometry, "06075"))
        assert a != b

    def test_missing_fips_uses_default_identity(self):
        geometry = rect(0, 0, 10, 10)
        without = generate_permit_points({"geometry": geometry, "properties": {}})
        assert without == generate_permit_points(_region(geometry, "00000"))

    def test_attempt_cap(self):
        """A region nothing lands in stops after five attempts per point."""
        requested = generator_for("06037").next_int(15, 60)
        with mock.patch("permitscout.synth.permits.point_in_region", return_value=False) as contains:
            result = generate_permit_points(_region(rect(0, 0, 10, 10)))
        assert result["features"] == []
        assert contains.call_count == requested * ATTEMPTS_PER_POINT

    def test_thin_sliver_terminates(self):
        sliver = {"type": "Polygon", "coordinates": [[[0, 0], [100, 0], [100, 0.001], [0, 0]]]}
        result = generate_permit_points(_region(sliver))
        assert len(result["features"]) <= 60
        for feature in result["features"]:
            assert point_in_region(feature["geometry"]["coordinates"], sliver)

    def test_point_properties(self, square_region):
        for feature in generate_permit_points(square_region)["features"]:
            props = feature["properties"]
            assert feature["geometry"]["type"] == "Point"
            assert props["status"] in ("Approved", "Pending", "Denied")
            assert props["type"] in PERMIT_TYPES
            assert re.fullmatch(r"P-\d{5}", props["id"])
            assert 5 <= props["days"] <= 120

    def test_all_approved_region(self):
        region = _region(rect(0, 0, 10, 10), total=100, approved=100, pending=0)
        statuses = {f["properties"]["status"] for f in generate_permit_points(region)["features"]}
        assert statuses == {"Approved"}

    def test_no_stats_uses_default_rates(self):
        region = _region(rect(0, 0, 10, 10))
        statuses = {f["properties"]["status"] for f in generate_permit_points(region)["features"]}
        assert "Approved" in statuses

    def test_empty_region(self):
        empty = {"type": "FeatureCollection", "features": []}
        assert generate_permit_points(None) == empty
        assert generate_permit_points({"properties": {"fips": "06037"}}) == empty
        assert generate_permit_points(_region({"type": "Polygon", "coordinates": []})) == empty
