"""Tests for climate aggregation."""

import numpy as np
import pytest

from py_surfacemap.core.aggregator import ClimateAccumulator, WeatherSummary, summarize
from py_surfacemap.core.planet import Planet
from py_surfacemap.core.raster import TEMPERATURE_SCALE_FACTOR
from py_surfacemap.core.taxonomy import BiomeType, ClimateType, HumidityType


def accumulate(winter, summer, precipitation, elevation):
    accumulator = ClimateAccumulator()
    accumulator.add(
        np.asarray(winter, dtype=float),
        np.asarray(summer, dtype=float),
        np.asarray(precipitation, dtype=float),
        np.asarray(elevation, dtype=float),
    )
    return accumulator


class TestClimateAccumulator:
    """Test running totals."""

    def test_initial_extremes(self):
        """Test an empty accumulator starts with inverted extremes."""
        accumulator = ClimateAccumulator()
        assert accumulator.min_temperature == TEMPERATURE_SCALE_FACTOR
        assert accumulator.max_temperature == 0.0
        assert accumulator.cell_count == 0

    def test_add(self):
        """Test adding a batch updates extremes and totals."""
        accumulator = accumulate([260.0, 300.0], [280.0, 290.0], [0.5, 0.25], [0.5, -0.5])
        assert accumulator.min_temperature == 260.0
        assert accumulator.max_temperature == 300.0
        assert accumulator.total_temperature == pytest.approx(270.0 + 295.0)
        assert accumulator.total_precipitation == pytest.approx(0.75)
        assert accumulator.total_elevation == pytest.approx(0.0)
        assert accumulator.cell_count == 2

    def test_add_empty(self):
        """Test an empty batch changes nothing."""
        accumulator = accumulate([], [], [], [])
        assert accumulator == ClimateAccumulator()

    def test_merge_is_associative(self):
        """Test partial accumulators merge in any grouping."""
        a = accumulate([260.0], [270.0], [0.25], [0.5])
        b = accumulate([280.0, 250.0], [300.0, 256.0], [0.5, 0.0], [-0.25, 0.25])
        c = accumulate([310.0], [320.0], [1.0], [0.75])
        assert a.merge(b).merge(c) == a.merge(b.merge(c))

    def test_merge_matches_single_pass(self):
        """Test merging row partials equals accumulating everything at once."""
        whole = accumulate([260.0, 280.0], [270.0, 300.0], [0.25, 0.5], [0.5, -0.25])
        first = accumulate([260.0], [270.0], [0.25], [0.5])
        second = accumulate([280.0], [300.0], [0.5], [-0.25])
        assert first.merge(second) == whole


class TestSummarize:
    """Test overall classification."""

    @pytest.fixture
    def planet(self):
        """Create an Earth-like planet."""
        return Planet()

    def test_empty_is_none(self, planet):
        """Test no cells classify as none."""
        assert summarize(ClimateAccumulator(), planet) == WeatherSummary()

    def test_temperate_desert(self, planet):
        """Test a dry temperate land area."""
        accumulator = accumulate([280.0] * 4, [280.0] * 4, [0.0] * 4, [0.5] * 4)
        summary = summarize(accumulator, planet)
        assert summary.climate == ClimateType.COOL_TEMPERATE
        assert summary.humidity == HumidityType.SUPERARID
        assert summary.biome == BiomeType.COLD_DESERT

    def test_ocean(self, planet):
        """Test an area below sea level on average is sea."""
        accumulator = accumulate([290.0] * 3, [300.0] * 3, [0.5] * 3, [-0.5, -0.5, 0.25])
        summary = summarize(accumulator, planet)
        assert summary.biome == BiomeType.SEA

    def test_humidity_uses_max_precipitation(self, planet):
        """Test mean precipitation is scaled by the atmosphere's maximum."""
        # 0.25 * 0.5 mm/hr is about 1096 mm/year
        accumulator = accumulate([290.0], [300.0], [0.25], [0.5])
        assert summarize(accumulator, planet).humidity == HumidityType.SUBHUMID
