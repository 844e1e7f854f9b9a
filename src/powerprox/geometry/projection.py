"""
Geodetic -> local planar projection.

An equirectangular approximation around a single reference origin:

    x = R * cos(lat) * (lon - origin.lon)
    y = R * (lat - origin.lat)

The longitude scale uses the *input* latitude, not the origin's. Accuracy is only
adequate within tens of kilometres of the origin; there is no ellipsoid model here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from powerprox.geometry.basic import Point

EARTH_RADIUS_M = 6371.0710 * 1000.0


@dataclass(frozen=True)
class GeoPosition:
    """Latitude/longitude in radians."""

    latitude_radians: float
    longitude_radians: float

    @classmethod
    def from_degrees(cls, latitude_degrees: float, longitude_degrees: float) -> GeoPosition:
        return cls(
            latitude_radians=math.radians(float(latitude_degrees)),
            longitude_radians=math.radians(float(longitude_degrees)),
        )


class GeodeticProjector:
    """Projects positions onto the tangent plane anchored at `origin`."""

    def __init__(self, origin: GeoPosition, earth_radius_m: float = EARTH_RADIUS_M):
        self._origin = origin
        self._earth_radius_m = float(earth_radius_m)

    @property
    def origin(self) -> GeoPosition:
        return self._origin

    @property
    def earth_radius_m(self) -> float:
        return self._earth_radius_m

    def project(self, position: GeoPosition) -> Point:
        longitude_scale = self._earth_radius_m * math.cos(position.latitude_radians)
        x = longitude_scale * (position.longitude_radians - self._origin.longitude_radians)
        y = self._earth_radius_m * (position.latitude_radians - self._origin.latitude_radians)
        return Point(x=x, y=y)

    def project_degrees(self, latitude_degrees: float, longitude_degrees: float) -> Point:
        return self.project(GeoPosition.from_degrees(latitude_degrees, longitude_degrees))
