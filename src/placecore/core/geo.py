from __future__ import annotations
from dataclasses import dataclass
from math import asin, atan2, cos, degrees, isfinite, radians, sin, sqrt

"""
Geospatial helpers.

A tiny spherical-earth geometry layer: great-circle distance plus the bearing,
midpoint and bounding-box helpers the place screens use for "X km away" labels
and map framing. Nothing here validates coordinates; out-of-range values give
mathematically defined but meaningless results.
"""

EARTH_RADIUS_M = 6_371_000


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float

    def is_finite(self) -> bool:
        return isfinite(self.lat) and isfinite(self.lon)


def _normalize_lon(lon: float) -> float:
    return ((lon + 540.0) % 360.0) - 180.0


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    """Compute great-circle distance in meters between two points.

    Non-finite inputs yield `nan` instead of raising.
    """
    if not (a.is_finite() and b.is_finite()):
        return float("nan")
    r = EARTH_RADIUS_M
    lat1 = radians(a.lat)
    lat2 = radians(b.lat)

    dlat = radians(b.lat - a.lat)
    dlon = radians(b.lon - a.lon)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    s = sqrt(h)
    if s > 1.0:
        # Rounding can push antipodal points just past the asin domain.
        s = 1.0
    return 2 * r * asin(s)


def initial_bearing_deg(a: GeoPoint, b: GeoPoint) -> float:
    """Forward azimuth from `a` to `b` in degrees, normalized to [0, 360)."""
    lat1 = radians(a.lat)
    lat2 = radians(b.lat)
    dlon = radians(b.lon - a.lon)

    y = sin(dlon) * cos(lat2)
    x = cos(lat1) * sin(lat2) - sin(lat1) * cos(lat2) * cos(dlon)
    return (degrees(atan2(y, x)) + 360.0) % 360.0


def destination_point(origin: GeoPoint, *, bearing_deg: float, distance_m: float) -> GeoPoint:
    """Point reached from `origin` after `distance_m` along `bearing_deg`."""
    delta = distance_m / EARTH_RADIUS_M
    theta = radians(bearing_deg)
    lat1 = radians(origin.lat)
    lon1 = radians(origin.lon)

    lat2 = asin(sin(lat1) * cos(delta) + cos(lat1) * sin(delta) * cos(theta))
    lon2 = lon1 + atan2(sin(theta) * sin(delta) * cos(lat1), cos(delta) - sin(lat1) * sin(lat2))
    return GeoPoint(lat=degrees(lat2), lon=_normalize_lon(degrees(lon2)))


def midpoint(a: GeoPoint, b: GeoPoint) -> GeoPoint:
    """Great-circle midpoint between two points."""
    lat1 = radians(a.lat)
    lon1 = radians(a.lon)
    lat2 = radians(b.lat)
    dlon = radians(b.lon - a.lon)

    bx = cos(lat2) * cos(dlon)
    by = cos(lat2) * sin(dlon)
    lat3 = atan2(sin(lat1) + sin(lat2), sqrt((cos(lat1) + bx) ** 2 + by**2))
    lon3 = lon1 + atan2(by, cos(lat1) + bx)
    return GeoPoint(lat=degrees(lat3), lon=_normalize_lon(degrees(lon3)))


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, point: GeoPoint) -> bool:
        return within_bounds(point, self)


def bounding_box(center: GeoPoint, *, radius_m: float) -> BoundingBox:
    """Approximate lat/lon box enclosing a circle of `radius_m` around `center`."""
    deg_lat = degrees(radius_m / EARTH_RADIUS_M)
    deg_lon = degrees(radius_m / (EARTH_RADIUS_M * cos(radians(center.lat))))
    return BoundingBox(
        min_lat=center.lat - deg_lat,
        max_lat=center.lat + deg_lat,
        min_lon=center.lon - deg_lon,
        max_lon=center.lon + deg_lon,
    )


def within_bounds(point: GeoPoint, box: BoundingBox) -> bool:
    return box.min_lat <= point.lat <= box.max_lat and box.min_lon <= point.lon <= box.max_lon


def path_length_m(points: list[GeoPoint]) -> float:
    """Total haversine length of a polyline; fewer than two points is 0."""
    if len(points) < 2:
        return 0.0
    return sum(haversine_m(a, b) for a, b in zip(points, points[1:]))


def centroid(points: list[GeoPoint]) -> GeoPoint | None:
    """Spherical centroid (average of unit vectors), safe across the antimeridian."""
    if not points:
        return None
    if len(points) == 1:
        return points[0]

    x = y = z = 0.0
    for p in points:
        lat = radians(p.lat)
        lon = radians(p.lon)
        x += cos(lat) * cos(lon)
        y += cos(lat) * sin(lon)
        z += sin(lat)
    n = float(len(points))
    x, y, z = x / n, y / n, z / n

    lon_c = atan2(y, x)
    lat_c = atan2(z, sqrt(x * x + y * y))
    return GeoPoint(lat=degrees(lat_c), lon=degrees(lon_c))
