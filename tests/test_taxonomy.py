"""Tests for the climate, humidity and biome taxonomy."""

import math

import numpy as np
import pytest

from py_surfacemap.core.taxonomy import (
    BIOME_MATRIX,
    BIOME_NAMES,
    HOURS_PER_YEAR,
    BiomeType,
    ClimateType,
    HumidityType,
    TemperatureRange,
    classify_biome,
    classify_biome_array,
    classify_climate,
    classify_climate_array,
    classify_humidity,
    classify_humidity_array,
)


def mm_per_hour(mm_per_year: float) -> float:
    return mm_per_year / HOURS_PER_YEAR


class TestClimate:
    """Test climate classification."""

    @pytest.mark.parametrize(
        "kelvin, expected",
        [
            (250.0, ClimateType.POLAR),
            (274.65, ClimateType.SUBPOLAR),
            (277.0, ClimateType.BOREAL),
            (280.0, ClimateType.COOL_TEMPERATE),
            (288.0, ClimateType.WARM_TEMPERATE),
            (293.0, ClimateType.SUBTROPICAL),
            (300.0, ClimateType.TROPICAL),
            (315.0, ClimateType.SUPERTROPICAL),
        ],
    )
    def test_bands(self, kelvin, expected):
        """Test each climate band by its mean temperature."""
        assert classify_climate(TemperatureRange(kelvin, kelvin)) == expected

    def test_mean_of_range(self):
        """Test the midpoint of a range is used without an explicit average."""
        assert classify_climate(TemperatureRange(260.0, 300.0)) == ClimateType.COOL_TEMPERATE

    def test_explicit_average(self):
        """Test an explicit average overrides the midpoint."""
        temperatures = TemperatureRange(260.0, 300.0, average=295.0)
        assert classify_climate(temperatures) == ClimateType.SUBTROPICAL

    def test_nan_is_none(self):
        """Test a missing temperature classifies as none."""
        assert classify_climate(TemperatureRange(math.nan, math.nan)) == ClimateType.NONE

    def test_range_of(self):
        """Test ranges order their bounds."""
        temperatures = TemperatureRange.of(300.0, 260.0)
        assert temperatures.minimum == 260.0
        assert temperatures.maximum == 300.0
        assert temperatures.mean == pytest.approx(280.0)

    def test_array_form(self):
        """Test vectorised classification matches the scalar form."""
        minimum = np.array([250.0, 278.0, 300.0])
        maximum = np.array([260.0, 282.0, 320.0])
        result = classify_climate_array(minimum, maximum)
        assert result.dtype == np.uint8
        assert list(result) == [
            ClimateType.POLAR,
            ClimateType.COOL_TEMPERATE,
            ClimateType.SUPERTROPICAL,
        ]


class TestHumidity:
    """Test humidity classification."""

    @pytest.mark.parametrize(
        "annual, expected",
        [
            (0.0, HumidityType.SUPERARID),
            (130.0, HumidityType.PERARID),
            (300.0, HumidityType.ARID),
            (600.0, HumidityType.SEMIARID),
            (1500.0, HumidityType.SUBHUMID),
            (3000.0, HumidityType.HUMID),
            (5000.0, HumidityType.PERHUMID),
            (9000.0, HumidityType.SUPERHUMID),
        ],
    )
    def test_bands(self, annual, expected):
        """Test each humidity band by annual precipitation."""
        assert classify_humidity(mm_per_hour(annual)) == expected

    def test_invalid_is_none(self):
        """Test negative or missing precipitation classifies as none."""
        assert classify_humidity(-0.1) == HumidityType.NONE
        assert classify_humidity(math.nan) == HumidityType.NONE

    def test_array_form(self):
        """Test vectorised classification."""
        result = classify_humidity_array([mm_per_hour(0.0), mm_per_hour(600.0), -1.0])
        assert list(result) == [HumidityType.SUPERARID, HumidityType.SEMIARID, HumidityType.NONE]


class TestBiome:
    """Test biome classification."""

    def test_matrix_shape(self):
        """Test the matrix covers every climate and humidity."""
        assert BIOME_MATRIX.shape == (len(ClimateType), len(HumidityType))
        assert np.all(BIOME_MATRIX[ClimateType.NONE] == BiomeType.NONE)
        assert np.all(BIOME_MATRIX[:, HumidityType.NONE] == BiomeType.NONE)

    def test_every_biome_is_named(self):
        """Test display names exist for every biome."""
        assert set(BIOME_NAMES) == set(BiomeType)

    def test_land_lookup(self):
        """Test land biomes come from the matrix."""
        assert classify_biome(
            ClimateType.COOL_TEMPERATE, HumidityType.SUPERARID, 100.0
        ) == BiomeType.COLD_DESERT
        assert classify_biome(ClimateType.POLAR, HumidityType.HUMID, 10.0) == BiomeType.POLAR
        assert classify_biome(
            ClimateType.TROPICAL, HumidityType.SUPERHUMID, 10.0
        ) == BiomeType.RAIN_FOREST

    def test_sea_at_or_below_zero(self):
        """Test non-positive elevations are sea whatever the climate."""
        assert classify_biome(ClimateType.TROPICAL, HumidityType.HUMID, 0.0) == BiomeType.SEA
        assert classify_biome(ClimateType.NONE, HumidityType.NONE, -5.0) == BiomeType.SEA

    def test_none_on_land(self):
        """Test unknown climate on land is none."""
        assert classify_biome(ClimateType.NONE, HumidityType.HUMID, 10.0) == BiomeType.NONE

    def test_array_form(self):
        """Test vectorised classification."""
        result = classify_biome_array(
            [ClimateType.BOREAL, ClimateType.BOREAL],
            [HumidityType.HUMID, HumidityType.HUMID],
            [1.0, -1.0],
        )
        assert list(result) == [BiomeType.CONIFEROUS_FOREST, BiomeType.SEA]
