"""
Aggregation of per-cell climate samples into an overall summary.

Accumulators hold running extremes and sums; they can be built per row and
merged, since every field combines associatively.
"""

from dataclasses import dataclass

import numpy as np
import structlog

from .planet import Planet
from .raster import TEMPERATURE_SCALE_FACTOR
from .taxonomy import (
    BiomeType,
    ClimateType,
    HumidityType,
    TemperatureRange,
    classify_biome,
    classify_climate,
    classify_humidity,
)

logger = structlog.get_logger()


@dataclass
class ClimateAccumulator:
    """Running totals over classified cells."""

    min_temperature: float = TEMPERATURE_SCALE_FACTOR
    max_temperature: float = 0.0
    total_temperature: float = 0.0
    total_precipitation: float = 0.0  # normalized samples, before scaling
    total_elevation: float = 0.0  # normalized, sea-level relative
    cell_count: int = 0

    def add(
        self,
        winter: np.ndarray,
        summer: np.ndarray,
        precipitation: np.ndarray,
        elevation: np.ndarray,
    ) -> None:
        """Add a batch of cells (temperatures in Kelvin)."""
        if len(winter) == 0:
            return
        cooler = np.minimum(winter, summer)
        warmer = np.maximum(winter, summer)
        self.min_temperature = min(self.min_temperature, float(cooler.min()))
        self.max_temperature = max(self.max_temperature, float(warmer.max()))
        self.total_temperature += float(((cooler + warmer) / 2).sum())
        self.total_precipitation += float(np.sum(precipitation))
        self.total_elevation += float(np.sum(elevation))
        self.cell_count += len(winter)

    def merge(self, other: "ClimateAccumulator") -> "ClimateAccumulator":
        return ClimateAccumulator(
            min_temperature=min(self.min_temperature, other.min_temperature),
            max_temperature=max(self.max_temperature, other.max_temperature),
            total_temperature=self.total_temperature + other.total_temperature,
            total_precipitation=self.total_precipitation + other.total_precipitation,
            total_elevation=self.total_elevation + other.total_elevation,
            cell_count=self.cell_count + other.cell_count,
        )


@dataclass(frozen=True)
class WeatherSummary:
    """Overall classification of a mapped area."""

    climate: ClimateType = ClimateType.NONE
    humidity: HumidityType = HumidityType.NONE
    biome: BiomeType = BiomeType.NONE


def summarize(accumulator: ClimateAccumulator, planet: Planet) -> WeatherSummary:
    """
    Classify the whole mapped area from its accumulated totals.

    Means are simple per-cell averages, not weighted by cell area.
    """
    if accumulator.cell_count == 0:
        return WeatherSummary()

    cells = accumulator.cell_count
    mean_temperature = accumulator.total_temperature / cells
    climate = classify_climate(
        TemperatureRange(
            accumulator.min_temperature, accumulator.max_temperature, mean_temperature
        )
    )
    humidity = classify_humidity(
        accumulator.total_precipitation / cells * planet.atmosphere.max_precipitation
    )
    biome = classify_biome(
        climate, humidity, accumulator.total_elevation / cells * planet.max_elevation
    )

    logger.info(
        "Weather summary computed",
        climate=climate.name,
        humidity=humidity.name,
        biome=biome.name,
        mean_temperature=round(mean_temperature, 2),
    )
    return WeatherSummary(climate=climate, humidity=humidity, biome=biome)
