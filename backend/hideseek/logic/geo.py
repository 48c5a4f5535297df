"""Great-circle distance and offset helpers on a spherical Earth."""

import math

from hideseek.logic.types import Coordinate

# IUGG mean Earth radius
EARTH_RADIUS_METERS = 6_371_008.8


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Return the great-circle distance between two coordinates in meters."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    # rounding can push h a hair past 1 for antipodal points
    h = min(1.0, h)
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(h))


def offset_coordinate(origin: Coordinate, distance_meters: float, bearing_radians: float) -> Coordinate:
    """Return the point reached by travelling distance_meters from origin along a bearing.

    Bearing is measured clockwise from true north. Longitude is normalized
    to [-180, 180).
    """
    angular = distance_meters / EARTH_RADIUS_METERS
    lat1 = math.radians(origin.latitude)
    lon1 = math.radians(origin.longitude)

    lat2 = math.asin(
        math.sin(lat1) * math.cos(angular) + math.cos(lat1) * math.sin(angular) * math.cos(bearing_radians),
    )
    lon2 = lon1 + math.atan2(
        math.sin(bearing_radians) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )
    longitude = (math.degrees(lon2) + 540) % 360 - 180
    return Coordinate(latitude=math.degrees(lat2), longitude=longitude)
