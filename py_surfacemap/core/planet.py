"""Planet properties consumed by the surface mapping core."""

import math
from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class Atmosphere:
    """Atmospheric limits used to scale normalized rasters."""

    max_precipitation: float = 0.5  # mm/hr
    max_snowfall: float = 5.0  # mm/hr


@dataclass(frozen=True)
class Planet:
    """
    The scalar properties of a mapped planet.

    Elevations are in meters relative to the planet's mean radius; the
    normalized sea level is the sea level as a fraction of the maximum
    elevation.
    """

    radius: float = 6_371_000.0
    sea_level: float = 0.0
    max_elevation: float = 20_000.0
    atmosphere: Atmosphere = field(default_factory=Atmosphere)

    @property
    def radius_squared(self) -> float:
        return self.radius * self.radius

    @property
    def normalized_sea_level(self) -> float:
        if self.max_elevation == 0:
            return 0.0
        return self.sea_level / self.max_elevation

    def lat_lon_to_vector(self, latitude: float, longitude: float) -> np.ndarray:
        """Unit vector pointing at a spherical position."""
        cos_lat = math.cos(latitude)
        return np.array(
            [cos_lat * math.cos(longitude), cos_lat * math.sin(longitude), math.sin(latitude)]
        )

    def vector_to_latitude(self, vector: np.ndarray) -> float:
        norm = float(np.linalg.norm(vector))
        if norm == 0:
            return 0.0
        return math.asin(min(max(float(vector[2]) / norm, -1.0), 1.0))

    def vector_to_longitude(self, vector: np.ndarray) -> float:
        return math.atan2(float(vector[1]), float(vector[0]))
