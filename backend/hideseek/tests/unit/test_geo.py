import math

import pytest

from hideseek.logic.geo import EARTH_RADIUS_METERS, haversine_distance, offset_coordinate
from hideseek.logic.types import Coordinate
from hideseek.tests.helpers import ORIGIN


class TestHaversineDistance:
    def test_same_point_is_zero(self):
        assert haversine_distance(ORIGIN, ORIGIN) == 0

    def test_is_symmetric(self):
        other = Coordinate(latitude=35.69, longitude=139.70)
        assert haversine_distance(ORIGIN, other) == pytest.approx(haversine_distance(other, ORIGIN))

    def test_one_degree_of_latitude(self):
        a = Coordinate(latitude=0, longitude=0)
        b = Coordinate(latitude=1, longitude=0)
        assert haversine_distance(a, b) == pytest.approx(EARTH_RADIUS_METERS * math.pi / 180)

    def test_longitude_shrinks_towards_the_poles(self):
        at_equator = haversine_distance(Coordinate(latitude=0, longitude=0), Coordinate(latitude=0, longitude=1))
        at_60 = haversine_distance(Coordinate(latitude=60, longitude=0), Coordinate(latitude=60, longitude=1))
        assert at_60 == pytest.approx(at_equator / 2, rel=1e-3)

    def test_across_the_antimeridian(self):
        a = Coordinate(latitude=0, longitude=179.9999)
        b = Coordinate(latitude=0, longitude=-179.9999)
        assert haversine_distance(a, b) == pytest.approx(22.24, abs=0.01)

    def test_antipodal_points(self):
        a = Coordinate(latitude=0, longitude=0)
        b = Coordinate(latitude=0, longitude=180)
        assert haversine_distance(a, b) == pytest.approx(math.pi * EARTH_RADIUS_METERS)


class TestOffsetCoordinate:
    @pytest.mark.parametrize("meters", [1, 5, 100, 1000])
    @pytest.mark.parametrize("bearing", [0, math.pi / 4, math.pi, 3 * math.pi / 2])
    def test_offset_lands_at_requested_distance(self, meters, bearing):
        moved = offset_coordinate(ORIGIN, meters, bearing)
        assert haversine_distance(ORIGIN, moved) == pytest.approx(meters, rel=1e-6)

    def test_north_increases_latitude_only(self):
        moved = offset_coordinate(ORIGIN, 100, 0)
        assert moved.latitude > ORIGIN.latitude
        assert moved.longitude == pytest.approx(ORIGIN.longitude)

    def test_east_increases_longitude(self):
        moved = offset_coordinate(ORIGIN, 100, math.pi / 2)
        assert moved.longitude > ORIGIN.longitude

    def test_longitude_wraps_at_antimeridian(self):
        start = Coordinate(latitude=0, longitude=179.99999)
        moved = offset_coordinate(start, 100, math.pi / 2)
        assert -180 <= moved.longitude < -179.99
