"""
Map projection transforms between spherical and raster coordinates.

This module implements:
- Projection options (central meridian/parallel, standard parallel, range)
- Equirectangular forward and inverse transforms
- Cylindrical equal-area forward and inverse transforms
- Surface area and separation estimates for a projected pixel

Latitudes and longitudes are in radians. Pixel index ``i`` denotes the
sample point at continuous coordinate ``i``; forward transforms return
continuous coordinates, and the ``get_projection_from_lat_lon`` helper
rounds them to the nearest pixel.
"""

import math
from typing import Optional, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

HALF_PI = math.pi / 2
TWO_PI = math.pi * 2


class MapProjectionOptions(BaseModel):
    """Options for projecting a map.

    Values are clamped rather than rejected: the central meridian to -π..π,
    the central and standard parallels to -π/2..π/2, and the range to 0..π.
    A missing standard parallel means the central parallel; a missing or zero
    range means the full globe.
    """

    model_config = ConfigDict(frozen=True)

    central_meridian: float = Field(default=0.0, description="Longitude of the central meridian")
    central_parallel: float = Field(default=0.0, description="Latitude of the central parallel")
    standard_parallels: Optional[float] = Field(
        default=None, description="Latitude where the projection scale is 1:1"
    )
    range: Optional[float] = Field(
        default=None, description="Latitude span shown on the projection"
    )
    equal_area: bool = Field(
        default=False, description="Cylindrical equal-area rather than equirectangular"
    )

    @field_validator("central_meridian")
    @classmethod
    def _clamp_meridian(cls, value: float) -> float:
        return min(max(value, -math.pi), math.pi)

    @field_validator("central_parallel")
    @classmethod
    def _clamp_parallel(cls, value: float) -> float:
        return min(max(value, -HALF_PI), HALF_PI)

    @field_validator("standard_parallels")
    @classmethod
    def _clamp_standard_parallels(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            return None
        return min(max(value, -HALF_PI), HALF_PI)

    @field_validator("range")
    @classmethod
    def _clamp_range(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            return None
        return min(max(value, 0.0), math.pi)

    @property
    def standard_parallel(self) -> float:
        """The effective standard parallel."""
        if self.standard_parallels is None:
            return self.central_parallel
        return self.standard_parallels

    @property
    def scale_factor(self) -> float:
        """The cosine of the standard parallel."""
        return math.cos(self.standard_parallel)

    @property
    def aspect_ratio(self) -> float:
        """Width over height: 2 when equirectangular, π·cos²(φs) when equal-area."""
        if self.equal_area:
            return math.pi * self.scale_factor**2
        return 2.0

    def replace(self, **changes) -> "MapProjectionOptions":
        """Get a copy of these options with the given fields changed."""
        values = self.model_dump()
        values.update(changes)
        return MapProjectionOptions(**values)

    def is_compatible(self, other: "MapProjectionOptions") -> bool:
        """Whether two projections share parameters (standard parallel sign aside)."""
        return (
            math.isclose(self.central_meridian, other.central_meridian, abs_tol=1e-12)
            and math.isclose(self.central_parallel, other.central_parallel, abs_tol=1e-12)
            and math.isclose(
                abs(self.standard_parallel), abs(other.standard_parallel), abs_tol=1e-12
            )
            and math.isclose(self.range or 0.0, other.range or 0.0, abs_tol=1e-12)
            and self.equal_area == other.equal_area
        )


DEFAULT_PROJECTION = MapProjectionOptions()


def get_scale(resolution: int, latitude_range: Optional[float] = None) -> float:
    """Pixels per radian of latitude span for a vertical resolution."""
    return resolution / (latitude_range or math.pi)


def x_length_for(resolution: int, options: MapProjectionOptions) -> int:
    """Horizontal resolution of a map with the given vertical resolution."""
    return int(math.floor(options.aspect_ratio * resolution))


def wrap_longitude(longitude: float) -> float:
    """Wrap a longitude (or longitude offset) into -π..π (π maps to -π)."""
    return (longitude + math.pi) % TWO_PI - math.pi


def to_pixel(value: float, length: int) -> int:
    """Round a continuous coordinate to the nearest pixel index within 0..length-1."""
    if math.isnan(value):
        return 0
    index = int(math.floor(value + 0.5))
    return min(max(index, 0), max(length - 1, 0))


# Equirectangular


def equirectangular_y(
    latitude: float, resolution: int, scale: float, options: MapProjectionOptions
) -> float:
    return scale * (options.central_parallel - latitude) + resolution / 2


def equirectangular_x(
    longitude: float, x_resolution: int, scale: float, options: MapProjectionOptions
) -> float:
    if options.scale_factor == 0:
        return x_resolution / 2
    offset = wrap_longitude(longitude - options.central_meridian)
    return scale / options.scale_factor * offset + x_resolution / 2


def latitude_of_equirectangular(
    y: float, resolution: int, scale: float, options: MapProjectionOptions
) -> float:
    latitude = options.central_parallel - (y - resolution / 2) / scale
    return min(max(latitude, -HALF_PI), HALF_PI)


def longitude_of_equirectangular(
    x: float, x_resolution: int, scale: float, options: MapProjectionOptions
) -> float:
    stretch = scale / options.scale_factor if options.scale_factor else math.inf
    return wrap_longitude((x - x_resolution / 2) / stretch + options.central_meridian)


# Cylindrical equal-area


def _equal_area_scale(scale: float) -> float:
    # Pixels per unit of sin(latitude): a full globe spans 2 units over π radians.
    return scale * HALF_PI


def equal_area_y(
    latitude: float, resolution: int, scale: float, options: MapProjectionOptions
) -> float:
    k = _equal_area_scale(scale)
    return resolution / 2 - k * (math.sin(latitude) - math.sin(options.central_parallel))


def equal_area_x(
    longitude: float, x_resolution: int, scale: float, options: MapProjectionOptions
) -> float:
    offset = wrap_longitude(longitude - options.central_meridian)
    return _equal_area_scale(scale) * options.scale_factor**2 * offset + x_resolution / 2


def latitude_of_equal_area(
    y: float, resolution: int, scale: float, options: MapProjectionOptions
) -> float:
    k = _equal_area_scale(scale)
    sine = math.sin(options.central_parallel) + (resolution / 2 - y) / k
    return math.asin(min(max(sine, -1.0), 1.0))


def longitude_of_equal_area(
    x: float, x_resolution: int, scale: float, options: MapProjectionOptions
) -> float:
    stretch = _equal_area_scale(scale) * options.scale_factor**2
    if stretch == 0:
        return options.central_meridian
    return wrap_longitude((x - x_resolution / 2) / stretch + options.central_meridian)


# Dispatch on projection kind


def projection_y(
    latitude: float, resolution: int, scale: float, options: MapProjectionOptions
) -> float:
    """Continuous Y coordinate of a latitude."""
    if options.equal_area:
        return equal_area_y(latitude, resolution, scale, options)
    return equirectangular_y(latitude, resolution, scale, options)


def projection_x(
    longitude: float, x_resolution: int, scale: float, options: MapProjectionOptions
) -> float:
    """Continuous X coordinate of a longitude."""
    if options.equal_area:
        return equal_area_x(longitude, x_resolution, scale, options)
    return equirectangular_x(longitude, x_resolution, scale, options)


def latitude_of(
    y: float, resolution: int, scale: float, options: MapProjectionOptions
) -> float:
    """Latitude at a continuous Y coordinate."""
    if options.equal_area:
        return latitude_of_equal_area(y, resolution, scale, options)
    return latitude_of_equirectangular(y, resolution, scale, options)


def longitude_of(
    x: float, x_resolution: int, scale: float, options: MapProjectionOptions
) -> float:
    """Longitude at a continuous X coordinate."""
    if options.equal_area:
        return longitude_of_equal_area(x, x_resolution, scale, options)
    return longitude_of_equirectangular(x, x_resolution, scale, options)


def get_projection_from_lat_lon(
    latitude: float,
    longitude: float,
    x_resolution: int,
    y_resolution: int,
    options: Optional[MapProjectionOptions] = None,
) -> Tuple[int, int]:
    """
    Get the pixel nearest to a spherical position.

    Args:
        latitude: Latitude in radians
        longitude: Longitude in radians
        x_resolution: Width of the raster
        y_resolution: Height of the raster
        options: Projection the raster was produced with

    Returns:
        (x, y) pixel indices, clamped to the raster
    """
    options = options or DEFAULT_PROJECTION
    scale = get_scale(y_resolution, options.range)
    x = projection_x(longitude, x_resolution, scale, options)
    y = projection_y(latitude, y_resolution, scale, options)
    return to_pixel(x, x_resolution), to_pixel(y, y_resolution)


def get_lat_lon_for_map_projection(
    x: float,
    y: float,
    resolution: int,
    options: Optional[MapProjectionOptions] = None,
) -> Tuple[float, float]:
    """
    Get the spherical position of a (possibly fractional) pixel.

    Args:
        x: X coordinate
        y: Y coordinate
        resolution: Vertical resolution of the map
        options: Projection of the map

    Returns:
        (latitude, longitude) in radians
    """
    options = options or DEFAULT_PROJECTION
    scale = get_scale(resolution, options.range)
    x_resolution = x_length_for(resolution, options)
    return (
        latitude_of(y, resolution, scale, options),
        longitude_of(x, x_resolution, scale, options),
    )


# Area and separation


def _unit_vector(latitude: float, longitude: float) -> np.ndarray:
    cos_lat = math.cos(latitude)
    return np.array(
        [cos_lat * math.cos(longitude), cos_lat * math.sin(longitude), math.sin(latitude)]
    )


def _midpoint(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    total = a + b
    norm = np.linalg.norm(total)
    if norm == 0:
        return a
    return total / norm


def _triangle_excess(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> float:
    """Spherical excess of a unit-sphere triangle (Van Oosterom-Strackee)."""
    numerator = abs(float(np.dot(a, np.cross(b, c))))
    denominator = 1.0 + float(np.dot(a, b) + np.dot(b, c) + np.dot(c, a))
    return 2.0 * math.atan2(numerator, denominator)


def _neighbor_midpoints(
    x: int, y: int, x_resolution: int, y_resolution: int, options: MapProjectionOptions
) -> Tuple[np.ndarray, list]:
    scale = get_scale(y_resolution, options.range)

    def position(px: float, py: float) -> np.ndarray:
        return _unit_vector(
            latitude_of(py, y_resolution, scale, options),
            longitude_of(px, x_resolution, scale, options),
        )

    center = position(x, y)
    # North, east, south, west: ordered around the cell
    neighbors = [
        position(x, y - 1),
        position(x + 1, y),
        position(x, y + 1),
        position(x - 1, y),
    ]
    return center, [_midpoint(center, neighbor) for neighbor in neighbors]


def area_of_point(
    x: int,
    y: int,
    x_resolution: int,
    y_resolution: int,
    options: Optional[MapProjectionOptions] = None,
    radius_squared: float = 1.0,
) -> float:
    """
    Estimate the surface area represented by a pixel.

    The cell is bounded by the midpoints between the pixel and its four
    orthogonal neighbours; the enclosed spherical quadrilateral is scaled
    by the squared planetary radius.
    """
    options = options or DEFAULT_PROJECTION
    _, (north, east, south, west) = _neighbor_midpoints(
        x, y, x_resolution, y_resolution, options
    )
    excess = _triangle_excess(north, east, south) + _triangle_excess(north, south, west)
    return excess * radius_squared


def separation_of_point(
    x: int,
    y: int,
    x_resolution: int,
    y_resolution: int,
    options: Optional[MapProjectionOptions] = None,
    radius_squared: float = 1.0,
) -> float:
    """
    Estimate the average distance from a pixel to the midpoints between it
    and its four orthogonal neighbours.
    """
    options = options or DEFAULT_PROJECTION
    center, midpoints = _neighbor_midpoints(x, y, x_resolution, y_resolution, options)
    angles = [
        math.acos(min(max(float(np.dot(center, midpoint)), -1.0), 1.0))
        for midpoint in midpoints
    ]
    return sum(angles) / len(angles) * math.sqrt(radius_squared)
