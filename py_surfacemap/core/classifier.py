"""
Per-cell climate, humidity, biome and sea-ice classification.

Classification works one output row at a time over numpy arrays. Rows are
independent of each other once a resampling plan exists; each row returns
its own partial accumulator.
"""

from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from .aggregator import ClimateAccumulator
from .planet import Planet
from .raster import TEMPERATURE_SCALE_FACTOR, SurfaceRaster
from .resampler import ResamplingPlan
from .taxonomy import classify_biome_array, classify_climate_array, classify_humidity_array

# Melting point of seawater, K
SEAWATER_FREEZING_POINT = 271.35


class SeaIceRange(NamedTuple):
    """
    Proportion of the year with persistent sea ice.

    The year starts at the winter solstice; ``start`` may be later than
    ``end`` when the ice season spans the new year.
    """

    start: float = 0.0
    end: float = 0.0

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    @property
    def is_full_year(self) -> bool:
        return self.start == 0.0 and self.end == 1.0

    def contains(self, proportion_of_year: float) -> bool:
        """Whether there is sea ice at a time of year."""
        if self.is_empty:
            return False
        if self.is_full_year:
            return True
        proportion = proportion_of_year % 1.0
        if self.start < self.end:
            return self.start <= proportion <= self.end
        return proportion >= self.start or proportion <= self.end


NO_SEA_ICE = SeaIceRange(0.0, 0.0)
FULL_YEAR_SEA_ICE = SeaIceRange(0.0, 1.0)


def sea_ice_ranges(winter, summer, elevation, latitude: float) -> np.ndarray:
    """
    Estimate sea-ice ranges for a batch of cells at one latitude.

    Args:
        winter: Winter temperatures (K)
        summer: Summer temperatures (K)
        elevation: Normalized, sea-level relative elevations
        latitude: Latitude of the cells, radians

    Returns:
        Array of shape (n, 2) holding (start, end) per cell
    """
    winter = np.atleast_1d(np.asarray(winter, dtype=np.float64))
    summer = np.atleast_1d(np.asarray(summer, dtype=np.float64))
    elevation = np.atleast_1d(np.asarray(elevation, dtype=np.float64))
    ranges = np.zeros(winter.shape + (2,), dtype=np.float64)

    sea = ~(elevation > 0)
    frozen = (winter < SEAWATER_FREEZING_POINT) & (summer < SEAWATER_FREEZING_POINT)
    thawed = (winter >= SEAWATER_FREEZING_POINT) & (summer >= SEAWATER_FREEZING_POINT)

    ranges[sea & frozen] = FULL_YEAR_SEA_ICE

    cooler = np.minimum(winter, summer)
    warmer = np.maximum(winter, summer)
    with np.errstate(divide="ignore", invalid="ignore"):
        crossing = (SEAWATER_FREEZING_POINT - cooler) / (warmer - cooler)
    freeze_proportion = crossing * 0.8 - 0.1

    # NaN compares false, so it drops out here
    seasonal = sea & ~frozen & ~thawed & (freeze_proportion > 0)
    if not seasonal.any():
        return ranges

    freeze_start = 1 - freeze_proportion / 4
    ice_melt_finish = freeze_proportion * 0.75
    if latitude < 0:
        # Southern seasons are six months out of phase
        freeze_start = freeze_start + 0.5
        freeze_start = np.where(freeze_start > 1, freeze_start - 1, freeze_start)
        ice_melt_finish = ice_melt_finish + 0.5
        ice_melt_finish = np.where(ice_melt_finish > 1, ice_melt_finish - 1, ice_melt_finish)

    ranges[seasonal, 0] = freeze_start[seasonal]
    ranges[seasonal, 1] = ice_melt_finish[seasonal]
    return ranges


def estimate_sea_ice_range(
    winter_temperature: float,
    summer_temperature: float,
    normalized_elevation: float,
    latitude: float,
) -> SeaIceRange:
    """Estimate the sea-ice range of a single cell."""
    start, end = sea_ice_ranges(
        winter_temperature, summer_temperature, normalized_elevation, latitude
    )[0]
    return SeaIceRange(float(start), float(end))


@dataclass
class ClassifiedRow:
    """Classification of one output row."""

    climate: np.ndarray
    humidity: np.ndarray
    biome: np.ndarray
    sea_ice: np.ndarray
    accumulator: ClimateAccumulator


def classify_row(
    plan: ResamplingPlan,
    columns: list,
    elevation_map: SurfaceRaster,
    winter_temperature_map: SurfaceRaster,
    summer_temperature_map: SurfaceRaster,
    precipitation_map: SurfaceRaster,
    y: int,
    planet: Planet,
) -> ClassifiedRow:
    """
    Classify every cell of output row ``y``.

    Sources are expected in the plan's order: elevation, winter, summer,
    precipitation. ``columns`` holds each source's column indices.
    """
    elevation = (
        2.0 * plan.sample_row(0, elevation_map, y, columns[0]) - 1.0
        - planet.normalized_sea_level
    )
    winter = plan.sample_row(1, winter_temperature_map, y, columns[1]) * TEMPERATURE_SCALE_FACTOR
    summer = plan.sample_row(2, summer_temperature_map, y, columns[2]) * TEMPERATURE_SCALE_FACTOR
    precipitation_value = plan.sample_row(3, precipitation_map, y, columns[3])
    precipitation = precipitation_value * planet.atmosphere.max_precipitation

    climate = classify_climate_array(np.minimum(winter, summer), np.maximum(winter, summer))
    humidity = classify_humidity_array(precipitation)
    biome = classify_biome_array(climate, humidity, elevation)
    sea_ice = sea_ice_ranges(winter, summer, elevation, plan.latitudes[y])

    accumulator = ClimateAccumulator()
    accumulator.add(winter, summer, precipitation_value, elevation)
    return ClassifiedRow(climate, humidity, biome, sea_ice, accumulator)
