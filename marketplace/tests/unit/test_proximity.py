from types import SimpleNamespace

import pytest

from marketplace.discovery.domain.services.proximity_service import find_nearby


ORIGIN = (28.0, 77.0)
# ~15.0 km due north of ORIGIN
FIFTEEN_KM_NORTH = 28.0 + 15 / 111.19492664


def shop(name, lat=None, lng=None):
    return SimpleNamespace(name=name, latitude=lat, longitude=lng)


@pytest.mark.unit
class TestFindNearby:
    def setup_method(self):
        self.here = shop("here", *ORIGIN)
        self.far = shop("far", FIFTEEN_KM_NORTH, 77.0)
        self.unknown = shop("unknown")

    def test_sorted_nearest_first_with_unknown_last(self):
        result = find_nearby([self.unknown, self.far, self.here], *ORIGIN)

        assert [s.seller.name for s in result] == ["here", "far", "unknown"]
        assert result[0].distance_km == 0.0
        assert result[1].distance_km == pytest.approx(15.0, abs=0.01)
        assert result[2].distance_km is None

    def test_radius_excludes_farther_and_unknown(self):
        result = find_nearby([self.unknown, self.far, self.here], *ORIGIN, radius_km=10)

        assert [s.seller.name for s in result] == ["here"]

    def test_zero_distance_included_at_zero_radius(self):
        result = find_nearby([self.here], *ORIGIN, radius_km=0)

        assert len(result) == 1
        assert result[0].distance_km == 0.0

    def test_boundary_distance_included(self):
        result = find_nearby([self.far], *ORIGIN, radius_km=result_distance(self.far))

        assert len(result) == 1

    def test_no_origin_keeps_order_and_ignores_radius(self):
        result = find_nearby([self.unknown, self.far, self.here], None, None, radius_km=1)

        assert [s.seller.name for s in result] == ["unknown", "far", "here"]
        assert all(s.distance_km is None for s in result)

    def test_partial_origin_counts_as_no_origin(self):
        result = find_nearby([self.far, self.here], 28.0, None)

        assert [s.seller.name for s in result] == ["far", "here"]

    def test_ties_keep_input_order(self):
        twin_a = shop("a", *ORIGIN)
        twin_b = shop("b", *ORIGIN)

        result = find_nearby([twin_a, twin_b], *ORIGIN)

        assert [s.seller.name for s in result] == ["a", "b"]

    def test_empty_input(self):
        assert find_nearby([], *ORIGIN, radius_km=5) == []


def result_distance(seller):
    return find_nearby([seller], *ORIGIN)[0].distance_km
