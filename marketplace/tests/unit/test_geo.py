import math

import pytest

from marketplace.discovery.domain.services.geo import EARTH_RADIUS_KM, distance_km


ONE_DEGREE_KM = EARTH_RADIUS_KM * math.pi / 180


@pytest.mark.unit
class TestDistanceKm:
    def test_identical_points_are_zero(self):
        assert distance_km(12.9716, 77.5946, 12.9716, 77.5946) == 0.0

    def test_one_degree_of_latitude(self):
        assert distance_km(10.0, 76.0, 11.0, 76.0) == pytest.approx(ONE_DEGREE_KM, abs=0.01)

    def test_one_degree_of_longitude_on_equator(self):
        assert distance_km(0.0, 0.0, 0.0, 1.0) == pytest.approx(ONE_DEGREE_KM, abs=0.01)

    def test_antipodal_points_are_half_circumference(self):
        assert distance_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(math.pi * EARTH_RADIUS_KM, abs=0.01)

    def test_symmetric(self):
        forward = distance_km(28.6139, 77.2090, 19.0760, 72.8777)
        backward = distance_km(19.0760, 72.8777, 28.6139, 77.2090)
        assert forward == pytest.approx(backward)

    def test_accepts_numeric_strings(self):
        assert distance_km("10", "76", "11", "76") == pytest.approx(ONE_DEGREE_KM, abs=0.01)

    @pytest.mark.parametrize(
        "coords",
        [
            (None, 77.0, 28.0, 77.0),
            (28.0, None, 28.0, 77.0),
            (28.0, 77.0, None, 77.0),
            (28.0, 77.0, 28.0, None),
            (math.nan, 77.0, 28.0, 77.0),
            ("north", 77.0, 28.0, 77.0),
        ],
    )
    def test_missing_or_invalid_input_is_nan(self, coords):
        assert math.isnan(distance_km(*coords))
