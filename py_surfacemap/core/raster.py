"""
In-memory raster of normalized samples.

Rasters store one sample per cell in 0..1. Elevation-like rasters are read
with the bipolar convention (``2v - 1``); temperature rasters are scaled by
``TEMPERATURE_SCALE_FACTOR`` to Kelvin.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np
import structlog

from .projection import MapProjectionOptions, get_projection_from_lat_lon

logger = structlog.get_logger()

# Kelvin represented by a sample of 1.0
TEMPERATURE_SCALE_FACTOR = 5000.0

L16_MAX = 65535


@dataclass
class SurfaceRaster:
    """A single-channel raster indexed as ``values[y, x]``."""

    values: np.ndarray
    projection: Optional[MapProjectionOptions] = field(default=None)

    def __post_init__(self):
        self.values = np.asarray(self.values, dtype=np.float64)
        if self.values.ndim != 2:
            raise ValueError(f"Raster values must be 2-dimensional, got {self.values.ndim}")

    @classmethod
    def from_uint16(
        cls, samples: np.ndarray, projection: Optional[MapProjectionOptions] = None
    ) -> "SurfaceRaster":
        """Build a raster from 16-bit luminance samples."""
        return cls(np.asarray(samples, dtype=np.float64) / L16_MAX, projection)

    @classmethod
    def filled(
        cls,
        width: int,
        height: int,
        value: float,
        projection: Optional[MapProjectionOptions] = None,
    ) -> "SurfaceRaster":
        return cls(np.full((height, width), value, dtype=np.float64), projection)

    @classmethod
    def average(cls, rasters: Sequence["SurfaceRaster"]) -> "SurfaceRaster":
        """Average same-shaped rasters, e.g. seasonal precipitation maps."""
        if not rasters:
            raise ValueError("At least one raster is required")
        shapes = {raster.values.shape for raster in rasters}
        if len(shapes) != 1:
            raise ValueError(f"Rasters must share a shape, got {sorted(shapes)}")
        stacked = np.stack([raster.values for raster in rasters])
        logger.debug("Averaged rasters", count=len(rasters), shape=stacked.shape[1:])
        return cls(stacked.mean(axis=0), rasters[0].projection)

    @property
    def width(self) -> int:
        return self.values.shape[1]

    @property
    def height(self) -> int:
        return self.values.shape[0]

    def to_uint16(self) -> np.ndarray:
        return np.rint(np.clip(self.values, 0.0, 1.0) * L16_MAX).astype(np.uint16)

    def value(self, x: int, y: int) -> float:
        """Unsigned sample in 0..1."""
        return float(self.values[y, x])

    def value_pos_neg(self, x: int, y: int) -> float:
        """Bipolar sample in -1..1."""
        return 2.0 * float(self.values[y, x]) - 1.0

    def temperature(self, x: int, y: int) -> float:
        """Temperature sample in Kelvin."""
        return float(self.values[y, x]) * TEMPERATURE_SCALE_FACTOR

    def value_at(
        self,
        latitude: float,
        longitude: float,
        options: Optional[MapProjectionOptions] = None,
        pos_neg: bool = False,
    ) -> float:
        """Sample the pixel nearest to a spherical position."""
        x, y = get_projection_from_lat_lon(
            latitude, longitude, self.width, self.height, options or self.projection
        )
        return self.value_pos_neg(x, y) if pos_neg else self.value(x, y)

    def temperature_at(
        self,
        latitude: float,
        longitude: float,
        options: Optional[MapProjectionOptions] = None,
    ) -> float:
        return self.value_at(latitude, longitude, options) * TEMPERATURE_SCALE_FACTOR


def annual_range_value(minimum: float, maximum: float, proportion_of_year: float) -> float:
    """
    Interpolate a seasonal value at a time of year.

    The year starts and ends at midwinter (the minimum) and peaks at
    midsummer (the maximum).
    """
    proportion = proportion_of_year % 1.0
    weight = proportion * 2 if proportion <= 0.5 else (1 - proportion) * 2
    return minimum + (maximum - minimum) * weight


def interpolate_seasons(
    winter: SurfaceRaster,
    summer: SurfaceRaster,
    proportion_of_year: float,
    x: int,
    y: int,
) -> float:
    """Interpolate between a winter and a summer raster at a pixel."""
    return annual_range_value(winter.value(x, y), summer.value(x, y), proportion_of_year)
