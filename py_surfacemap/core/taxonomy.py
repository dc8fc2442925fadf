"""
Climate, humidity and biome taxonomy.

This module implements:
- Climate bands from mean biotemperature (Kelvin)
- Humidity bands from annual precipitation
- Biome lookup from a climate/humidity matrix, with sea below zero elevation

Every classifier has a scalar form returning an enum member and an
``*_array`` form over numpy arrays returning ``uint8`` ordinals.
"""

from enum import IntEnum
from typing import NamedTuple, Optional

import numpy as np

HOURS_PER_YEAR = 8766.0


class ClimateType(IntEnum):
    """Temperature regimes, coldest first."""

    NONE = 0
    POLAR = 1
    SUBPOLAR = 2
    BOREAL = 3
    COOL_TEMPERATE = 4
    WARM_TEMPERATE = 5
    SUBTROPICAL = 6
    TROPICAL = 7
    SUPERTROPICAL = 8


class HumidityType(IntEnum):
    """Moisture regimes, driest first."""

    NONE = 0
    SUPERARID = 1
    PERARID = 2
    ARID = 3
    SEMIARID = 4
    SUBHUMID = 5
    HUMID = 6
    PERHUMID = 7
    SUPERHUMID = 8


class BiomeType(IntEnum):
    """Ecological regimes."""

    NONE = 0
    POLAR = 1
    TUNDRA = 2
    LICHEN_WOODLAND = 3
    CONIFEROUS_FOREST = 4
    MIXED_FOREST = 5
    STEPPE = 6
    COLD_DESERT = 7
    DECIDUOUS_FOREST = 8
    SHRUBLAND = 9
    HOT_DESERT = 10
    SAVANNA = 11
    MONSOON_FOREST = 12
    RAIN_FOREST = 13
    SEA = 14


BIOME_NAMES = {
    BiomeType.NONE: "None",
    BiomeType.POLAR: "Polar",
    BiomeType.TUNDRA: "Tundra",
    BiomeType.LICHEN_WOODLAND: "Lichen Woodland",
    BiomeType.CONIFEROUS_FOREST: "Coniferous Forest",
    BiomeType.MIXED_FOREST: "Mixed Forest",
    BiomeType.STEPPE: "Steppe",
    BiomeType.COLD_DESERT: "Cold Desert",
    BiomeType.DECIDUOUS_FOREST: "Deciduous Forest",
    BiomeType.SHRUBLAND: "Shrubland",
    BiomeType.HOT_DESERT: "Hot Desert",
    BiomeType.SAVANNA: "Savanna",
    BiomeType.MONSOON_FOREST: "Monsoon Forest",
    BiomeType.RAIN_FOREST: "Rain Forest",
    BiomeType.SEA: "Sea",
}

# Lower bounds (K) of SUBPOLAR..SUPERTROPICAL
CLIMATE_THRESHOLDS = np.array([274.65, 276.15, 279.15, 285.15, 291.15, 297.15, 309.15])

# Lower bounds (mm/year) of PERARID..SUPERHUMID
HUMIDITY_THRESHOLDS = np.array([125.0, 250.0, 500.0, 1000.0, 2000.0, 4000.0, 8000.0])


def _build_biome_matrix() -> np.ndarray:
    """
    Biome matrix [climate][humidity].

    Row and column 0 (NONE) classify as NONE.
    """
    B = BiomeType
    rows = {
        ClimateType.POLAR: [B.POLAR] * 8,
        ClimateType.SUBPOLAR: [B.TUNDRA] * 8,
        ClimateType.BOREAL: [
            B.COLD_DESERT, B.COLD_DESERT, B.LICHEN_WOODLAND, B.LICHEN_WOODLAND,
            B.CONIFEROUS_FOREST, B.CONIFEROUS_FOREST, B.CONIFEROUS_FOREST, B.CONIFEROUS_FOREST,
        ],
        ClimateType.COOL_TEMPERATE: [
            B.COLD_DESERT, B.COLD_DESERT, B.STEPPE, B.STEPPE,
            B.MIXED_FOREST, B.MIXED_FOREST, B.MIXED_FOREST, B.MIXED_FOREST,
        ],
        ClimateType.WARM_TEMPERATE: [
            B.HOT_DESERT, B.HOT_DESERT, B.SHRUBLAND, B.SHRUBLAND,
            B.DECIDUOUS_FOREST, B.DECIDUOUS_FOREST, B.DECIDUOUS_FOREST, B.RAIN_FOREST,
        ],
        ClimateType.SUBTROPICAL: [
            B.HOT_DESERT, B.HOT_DESERT, B.SHRUBLAND, B.SAVANNA,
            B.MONSOON_FOREST, B.MONSOON_FOREST, B.RAIN_FOREST, B.RAIN_FOREST,
        ],
        ClimateType.TROPICAL: [
            B.HOT_DESERT, B.HOT_DESERT, B.HOT_DESERT, B.SAVANNA,
            B.SAVANNA, B.MONSOON_FOREST, B.RAIN_FOREST, B.RAIN_FOREST,
        ],
        ClimateType.SUPERTROPICAL: [
            B.HOT_DESERT, B.HOT_DESERT, B.HOT_DESERT, B.HOT_DESERT,
            B.SAVANNA, B.MONSOON_FOREST, B.RAIN_FOREST, B.RAIN_FOREST,
        ],
    }
    matrix = np.zeros((len(ClimateType), len(HumidityType)), dtype=np.uint8)
    for climate, biomes in rows.items():
        matrix[climate, 1:] = biomes
    return matrix


BIOME_MATRIX = _build_biome_matrix()


class TemperatureRange(NamedTuple):
    """A temperature range in Kelvin, optionally with an explicit average."""

    minimum: float
    maximum: float
    average: Optional[float] = None

    @property
    def mean(self) -> float:
        if self.average is not None:
            return self.average
        return (self.minimum + self.maximum) / 2

    @classmethod
    def of(cls, first: float, second: float) -> "TemperatureRange":
        """Range spanning two temperatures in either order."""
        return cls(min(first, second), max(first, second))


def classify_climate_array(minimum, maximum, average=None) -> np.ndarray:
    minimum = np.asarray(minimum, dtype=np.float64)
    maximum = np.asarray(maximum, dtype=np.float64)
    mean = (minimum + maximum) / 2 if average is None else np.asarray(average, dtype=np.float64)
    bands = np.searchsorted(CLIMATE_THRESHOLDS, mean, side="right") + 1
    return np.where(np.isnan(mean), ClimateType.NONE, bands).astype(np.uint8)


def classify_humidity_array(precipitation) -> np.ndarray:
    """Humidity ordinals for precipitation rates in mm/hr."""
    annual = np.asarray(precipitation, dtype=np.float64) * HOURS_PER_YEAR
    bands = np.searchsorted(HUMIDITY_THRESHOLDS, annual, side="right") + 1
    invalid = np.isnan(annual) | (annual < 0)
    return np.where(invalid, HumidityType.NONE, bands).astype(np.uint8)


def classify_biome_array(climate, humidity, elevation) -> np.ndarray:
    """Biome ordinals; any elevation at or below zero is sea."""
    biomes = BIOME_MATRIX[np.asarray(climate, dtype=np.intp), np.asarray(humidity, dtype=np.intp)]
    return np.where(np.asarray(elevation) <= 0, BiomeType.SEA, biomes).astype(np.uint8)


def classify_climate(temperature_range: TemperatureRange) -> ClimateType:
    """Classify a temperature range (Kelvin) by its mean biotemperature."""
    return ClimateType(
        int(classify_climate_array(
            temperature_range.minimum, temperature_range.maximum, temperature_range.mean
        ))
    )


def classify_humidity(precipitation: float) -> HumidityType:
    """Classify a precipitation rate in mm/hr."""
    return HumidityType(int(classify_humidity_array(precipitation)))


def classify_biome(
    climate: ClimateType, humidity: HumidityType, elevation: float
) -> BiomeType:
    """Classify a biome from its climate, humidity and sea-level relative elevation."""
    return BiomeType(int(classify_biome_array(climate, humidity, elevation)))
