"""
Mapping helpers for a region of a planet's surface.

A region is a planetary position (meters, planet-centred) plus the angle of
its field of view. Its map projection is centred on the position and spans
the field of view; positions inside it are given relative to the region
centre ("local" positions).
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .classifier import SeaIceRange
from .planet import Planet
from .projection import (
    MapProjectionOptions,
    area_of_point,
    get_lat_lon_for_map_projection,
    get_projection_from_lat_lon,
    separation_of_point,
    x_length_for,
)
from .raster import SurfaceRaster, TEMPERATURE_SCALE_FACTOR, interpolate_seasons
from .taxonomy import TemperatureRange
from .weather_maps import WeatherMaps


@dataclass(frozen=True)
class SurfaceRegion:
    """A region of a planet's surface."""

    position: Tuple[float, float, float]
    field_of_view: float

    @classmethod
    def at(
        cls, planet: Planet, latitude: float, longitude: float, field_of_view: float
    ) -> "SurfaceRegion":
        """Region centred on a spherical position at the planet's surface."""
        vector = planet.lat_lon_to_vector(latitude, longitude) * planet.radius
        return cls(tuple(float(v) for v in vector), field_of_view)

    @property
    def vector(self) -> np.ndarray:
        return np.asarray(self.position, dtype=np.float64)

    def projection(self, planet: Planet, equal_area: bool = False) -> MapProjectionOptions:
        return MapProjectionOptions(
            central_meridian=planet.vector_to_longitude(self.vector),
            central_parallel=planet.vector_to_latitude(self.vector),
            range=self.field_of_view,
            equal_area=equal_area,
        )

    def contains(self, planet: Planet, latitude: float, longitude: float) -> bool:
        """Whether a spherical position lies within the field of view."""
        center = self.vector
        norm = np.linalg.norm(center)
        if norm == 0:
            return True
        target = planet.lat_lon_to_vector(latitude, longitude)
        cosine = float(np.dot(center / norm, target))
        angle = math.acos(min(max(cosine, -1.0), 1.0))
        return angle <= self.field_of_view / 2

    # Coordinate conversions

    def lat_lon_of_pixel(
        self, planet: Planet, x: int, y: int, resolution: int, equal_area: bool = False
    ) -> Tuple[float, float]:
        return get_lat_lon_for_map_projection(
            x, y, resolution, self.projection(planet, equal_area)
        )

    def lat_lon_of_local_position(
        self, planet: Planet, position: np.ndarray
    ) -> Tuple[float, float]:
        absolute = self.vector + np.asarray(position, dtype=np.float64)
        return planet.vector_to_latitude(absolute), planet.vector_to_longitude(absolute)

    def local_position_of_pixel(
        self, planet: Planet, x: int, y: int, resolution: int, equal_area: bool = False
    ) -> np.ndarray:
        latitude, longitude = self.lat_lon_of_pixel(planet, x, y, resolution, equal_area)
        return planet.lat_lon_to_vector(latitude, longitude) * planet.radius - self.vector

    def pixel_of_local_position(
        self,
        planet: Planet,
        position: np.ndarray,
        x_resolution: int,
        y_resolution: int,
        equal_area: bool = False,
    ) -> Tuple[int, int]:
        latitude, longitude = self.lat_lon_of_local_position(planet, position)
        return get_projection_from_lat_lon(
            latitude,
            longitude,
            x_resolution,
            y_resolution,
            self.projection(planet, equal_area),
        )

    # Geometry

    def area_of_pixel(
        self, planet: Planet, x: int, y: int, resolution: int, equal_area: bool = False
    ) -> float:
        """Surface area (m²) represented by a pixel of a regional map."""
        options = self.projection(planet, equal_area)
        return area_of_point(
            x, y, x_length_for(resolution, options), resolution, options, planet.radius_squared
        )

    def separation_of_pixel(
        self, planet: Planet, x: int, y: int, resolution: int, equal_area: bool = False
    ) -> float:
        """Average distance (m) from a pixel to the edges of its cell."""
        options = self.projection(planet, equal_area)
        return separation_of_point(
            x, y, x_length_for(resolution, options), resolution, options, planet.radius_squared
        )

    # Raster lookups (NaN outside the region)

    def elevation_at(
        self,
        planet: Planet,
        elevation_map: SurfaceRaster,
        latitude: float,
        longitude: float,
        equal_area: bool = False,
    ) -> float:
        """Elevation (m) relative to sea level."""
        if not self.contains(planet, latitude, longitude):
            return math.nan
        value = elevation_map.value_at(
            latitude, longitude, self.projection(planet, equal_area), pos_neg=True
        )
        return (value - planet.normalized_sea_level) * planet.max_elevation

    def precipitation_at(
        self,
        planet: Planet,
        precipitation_map: SurfaceRaster,
        latitude: float,
        longitude: float,
        equal_area: bool = False,
    ) -> float:
        """Precipitation rate (mm/hr)."""
        if not self.contains(planet, latitude, longitude):
            return math.nan
        value = precipitation_map.value_at(
            latitude, longitude, self.projection(planet, equal_area)
        )
        return value * planet.atmosphere.max_precipitation

    def snowfall_at(
        self,
        planet: Planet,
        snowfall_map: SurfaceRaster,
        latitude: float,
        longitude: float,
        equal_area: bool = False,
    ) -> float:
        """Snowfall rate (mm/hr)."""
        if not self.contains(planet, latitude, longitude):
            return math.nan
        value = snowfall_map.value_at(latitude, longitude, self.projection(planet, equal_area))
        return value * planet.atmosphere.max_snowfall

    def temperature_at(
        self,
        planet: Planet,
        temperature_map: SurfaceRaster,
        latitude: float,
        longitude: float,
        equal_area: bool = False,
    ) -> float:
        """Surface temperature (K)."""
        if not self.contains(planet, latitude, longitude):
            return math.nan
        return temperature_map.temperature_at(
            latitude, longitude, self.projection(planet, equal_area)
        )

    def temperature_range_at(
        self,
        planet: Planet,
        winter_temperature_map: SurfaceRaster,
        summer_temperature_map: SurfaceRaster,
        latitude: float,
        longitude: float,
        equal_area: bool = False,
    ) -> TemperatureRange:
        """Range between the winter and summer temperatures (K)."""
        options = self.projection(planet, equal_area)
        return TemperatureRange.of(
            winter_temperature_map.temperature_at(latitude, longitude, options),
            summer_temperature_map.temperature_at(latitude, longitude, options),
        )

    def temperature_at_time(
        self,
        planet: Planet,
        winter_temperature_map: SurfaceRaster,
        summer_temperature_map: SurfaceRaster,
        proportion_of_year: float,
        latitude: float,
        longitude: float,
        equal_area: bool = False,
    ) -> float:
        """Surface temperature (K) at a proportion of the year from midwinter."""
        x, y = get_projection_from_lat_lon(
            latitude,
            longitude,
            winter_temperature_map.width,
            winter_temperature_map.height,
            self.projection(planet, equal_area),
        )
        return (
            interpolate_seasons(
                winter_temperature_map, summer_temperature_map, proportion_of_year, x, y
            )
            * TEMPERATURE_SCALE_FACTOR
        )

    # Weather map lookups

    def sea_ice_range_at(
        self,
        planet: Planet,
        weather_maps: WeatherMaps,
        position: np.ndarray,
        equal_area: bool = False,
    ) -> SeaIceRange:
        x, y = self.pixel_of_local_position(
            planet, position, weather_maps.x_length, weather_maps.y_length, equal_area
        )
        return weather_maps.sea_ice_range_at(x, y)

    def has_sea_ice(
        self,
        planet: Planet,
        weather_maps: WeatherMaps,
        position: np.ndarray,
        proportion_of_year: float,
        equal_area: bool = False,
    ) -> bool:
        """Whether there is sea ice at a local position at a time of year."""
        return self.sea_ice_range_at(planet, weather_maps, position, equal_area).contains(
            proportion_of_year
        )

    def grid_value_at(
        self,
        planet: Planet,
        grid: np.ndarray,
        position: np.ndarray,
        equal_area: bool = False,
    ):
        """Value of an ``[x][y]`` grid (e.g. a climate map) at a local position."""
        x, y = self.pixel_of_local_position(
            planet, position, grid.shape[0], grid.shape[1], equal_area
        )
        return grid[x, y]
