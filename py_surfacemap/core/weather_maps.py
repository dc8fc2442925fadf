"""
Weather maps: yearlong climate classification of a projected surface.

This module implements:
- The WeatherMaps grid (climate, biome and sea-ice maps plus a summary)
- Generation from elevation, seasonal temperature and precipitation rasters
- Lossless dict/JSON round-tripping

Maps are indexed ``[x][y]``; the X extent is ``floor(aspect_ratio * resolution)``
and the Y extent is the resolution.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np
import structlog

from ..config import settings
from .aggregator import ClimateAccumulator, WeatherSummary, summarize
from .classifier import SeaIceRange, classify_row
from .exceptions import ShapeMismatchError
from .planet import Planet
from .projection import DEFAULT_PROJECTION, MapProjectionOptions
from .raster import SurfaceRaster
from .resampler import ResamplingPlan
from .taxonomy import BiomeType, ClimateType, HumidityType

logger = structlog.get_logger()


@dataclass(eq=False)
class WeatherMaps:
    """
    A collection of weather maps providing yearlong climate data.

    Attributes:
        biome_map: Biome ordinals, shape (x_length, y_length)
        climate_map: Climate ordinals, shape (x_length, y_length)
        sea_ice_range_map: (start, end) proportion of the year with persistent
            sea ice, shape (x_length, y_length, 2)
        summary: Overall climate, humidity and biome of the area
    """

    biome_map: np.ndarray
    climate_map: np.ndarray
    sea_ice_range_map: np.ndarray
    summary: WeatherSummary = field(default_factory=WeatherSummary)

    def __post_init__(self):
        x_length = len(self.biome_map)
        if len(self.climate_map) != x_length or len(self.sea_ice_range_map) != x_length:
            raise ShapeMismatchError("All X lengths must be the same")

        try:
            self.biome_map = np.asarray(self.biome_map, dtype=np.uint8)
            self.climate_map = np.asarray(self.climate_map, dtype=np.uint8)
            self.sea_ice_range_map = np.asarray(self.sea_ice_range_map, dtype=np.float64)
        except ValueError as error:
            # Jagged nested lists cannot form an array
            raise ShapeMismatchError("All Y lengths must be the same") from error

        if x_length == 0:
            self.biome_map = self.biome_map.reshape(0, 0)
            self.climate_map = self.climate_map.reshape(0, 0)
            self.sea_ice_range_map = self.sea_ice_range_map.reshape(0, 0, 2)
        elif self.sea_ice_range_map.ndim == 2 and self.sea_ice_range_map.shape[1] == 0:
            self.sea_ice_range_map = self.sea_ice_range_map.reshape(x_length, 0, 2)

        if (
            self.biome_map.ndim != 2
            or self.climate_map.ndim != 2
            or self.sea_ice_range_map.ndim != 3
        ):
            raise ShapeMismatchError("All Y lengths must be the same")

        y_length = self.biome_map.shape[1]
        if (
            self.climate_map.shape[1] != y_length
            or self.sea_ice_range_map.shape[1:] != (y_length, 2)
        ):
            raise ShapeMismatchError("All Y lengths must be the same")

    @property
    def x_length(self) -> int:
        return self.biome_map.shape[0]

    @property
    def y_length(self) -> int:
        return self.biome_map.shape[1]

    @property
    def climate(self) -> ClimateType:
        return self.summary.climate

    @property
    def humidity(self) -> HumidityType:
        return self.summary.humidity

    @property
    def biome(self) -> BiomeType:
        return self.summary.biome

    def biome_at(self, x: int, y: int) -> BiomeType:
        return BiomeType(int(self.biome_map[x, y]))

    def climate_at(self, x: int, y: int) -> ClimateType:
        return ClimateType(int(self.climate_map[x, y]))

    def sea_ice_range_at(self, x: int, y: int) -> SeaIceRange:
        start, end = self.sea_ice_range_map[x, y]
        return SeaIceRange(float(start), float(end))

    def __eq__(self, other) -> bool:
        if not isinstance(other, WeatherMaps):
            return NotImplemented
        return (
            self.summary == other.summary
            and np.array_equal(self.biome_map, other.biome_map)
            and np.array_equal(self.climate_map, other.climate_map)
            and np.array_equal(self.sea_ice_range_map, other.sea_ice_range_map)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "biome": int(self.summary.biome),
            "climate": int(self.summary.climate),
            "humidity": int(self.summary.humidity),
            "biome_map": self.biome_map.tolist(),
            "climate_map": self.climate_map.tolist(),
            "sea_ice_range_map": self.sea_ice_range_map.tolist(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeatherMaps":
        summary = WeatherSummary(
            climate=ClimateType(data.get("climate", ClimateType.NONE)),
            humidity=HumidityType(data.get("humidity", HumidityType.NONE)),
            biome=BiomeType(data.get("biome", BiomeType.NONE)),
        )
        return cls(
            biome_map=data.get("biome_map", []),
            climate_map=data.get("climate_map", []),
            sea_ice_range_map=data.get("sea_ice_range_map", []),
            summary=summary,
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> "WeatherMaps":
        return cls.from_dict(json.loads(text))


def generate_weather_maps(
    planet: Planet,
    elevation_map: SurfaceRaster,
    winter_temperature_map: SurfaceRaster,
    summer_temperature_map: SurfaceRaster,
    precipitation_map: SurfaceRaster,
    resolution: Optional[int] = None,
    options: Optional[MapProjectionOptions] = None,
    strict: Optional[bool] = None,
) -> WeatherMaps:
    """
    Generate weather maps from source rasters.

    All rasters must have been projected with the same options as the output,
    though their resolutions may differ.

    Args:
        planet: The planet being mapped
        elevation_map: Elevation raster (bipolar samples)
        winter_temperature_map: Winter temperature raster
        summer_temperature_map: Summer temperature raster
        precipitation_map: Average precipitation raster
        resolution: Vertical resolution of the output maps
        options: Projection of the output maps
        strict: Reject rasters declaring different projection parameters

    Returns:
        WeatherMaps for the whole projected area
    """
    projection = options or DEFAULT_PROJECTION
    resolution = settings.default_resolution if resolution is None else resolution
    if resolution <= 0:
        raise ShapeMismatchError(f"Resolution must be positive, got {resolution}")
    if resolution > settings.max_resolution:
        raise ValueError(
            f"Resolution {resolution} exceeds the maximum of {settings.max_resolution}"
        )

    logger.info(
        "Generating weather maps",
        resolution=resolution,
        equal_area=projection.equal_area,
    )

    sources = [
        elevation_map,
        winter_temperature_map,
        summer_temperature_map,
        precipitation_map,
    ]
    plan = ResamplingPlan.build(sources, resolution, projection, strict=strict)
    columns = [plan.column_indices(i) for i in range(len(sources))]

    x_length = plan.x_length
    climate_map = np.zeros((x_length, resolution), dtype=np.uint8)
    biome_map = np.zeros((x_length, resolution), dtype=np.uint8)
    sea_ice_range_map = np.zeros((x_length, resolution, 2), dtype=np.float64)

    totals = ClimateAccumulator()
    for y in range(resolution):
        row = classify_row(plan, columns, *sources, y, planet)
        climate_map[:, y] = row.climate
        biome_map[:, y] = row.biome
        sea_ice_range_map[:, y] = row.sea_ice
        totals = totals.merge(row.accumulator)

    summary = summarize(totals, planet)

    logger.info(
        "Weather maps generated",
        x_length=x_length,
        y_length=resolution,
        unique_biomes=len(np.unique(biome_map)),
        sea_ice_cells=int(np.count_nonzero(sea_ice_range_map[..., 0] != sea_ice_range_map[..., 1])),
    )

    return WeatherMaps(
        biome_map=biome_map,
        climate_map=climate_map,
        sea_ice_range_map=sea_ice_range_map,
        summary=summary,
    )
