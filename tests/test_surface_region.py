"""Tests for surface region helpers."""

import math

import numpy as np
import pytest

from py_surfacemap.core.aggregator import WeatherSummary
from py_surfacemap.core.planet import Planet
from py_surfacemap.core.raster import TEMPERATURE_SCALE_FACTOR, SurfaceRaster
from py_surfacemap.core.surface_region import SurfaceRegion
from py_surfacemap.core.weather_maps import WeatherMaps


class TestSurfaceRegion:
    """Test mapping of a region of the surface."""

    @pytest.fixture
    def planet(self):
        """Create an Earth-like planet."""
        return Planet()

    @pytest.fixture
    def region(self, planet):
        """Create a region centred at 0.3N 0.2E spanning 0.5 radians."""
        return SurfaceRegion.at(planet, 0.3, 0.2, 0.5)

    def test_projection_is_centred(self, planet, region):
        """Test the region projection is centred on the region."""
        options = region.projection(planet)
        assert options.central_parallel == pytest.approx(0.3)
        assert options.central_meridian == pytest.approx(0.2)
        assert options.range == pytest.approx(0.5)
        assert region.projection(planet, equal_area=True).equal_area

    def test_contains(self, planet, region):
        """Test containment within the field of view."""
        assert region.contains(planet, 0.3, 0.2)
        assert region.contains(planet, 0.4, 0.2)
        assert not region.contains(planet, 1.2, 0.2)

    def test_centre_pixel(self, planet, region):
        """Test the region centre maps to the centre pixel and back."""
        assert region.pixel_of_local_position(planet, np.zeros(3), 200, 100) == (100, 50)
        position = region.local_position_of_pixel(planet, 100, 50, 100)
        np.testing.assert_allclose(position, np.zeros(3), atol=1e-3)

    def test_local_position_round_trip(self, planet, region):
        """Test local positions convert to latitude and longitude."""
        latitude, longitude = region.lat_lon_of_local_position(planet, np.zeros(3))
        assert latitude == pytest.approx(0.3)
        assert longitude == pytest.approx(0.2)
        assert region.lat_lon_of_pixel(planet, 100, 50, 100) == pytest.approx((0.3, 0.2))

    def test_pixel_geometry(self, planet, region):
        """Test pixel area and separation scale with the field of view."""
        area = region.area_of_pixel(planet, 100, 50, 100)
        pixel_angle = 0.5 / 100
        expected = 0.5 * pixel_angle * pixel_angle * math.cos(0.3) ** 2 * planet.radius_squared
        assert area == pytest.approx(expected, rel=2e-2)
        separation = region.separation_of_pixel(planet, 100, 50, 100)
        assert 0 < separation < pixel_angle * planet.radius

    def test_raster_lookups(self, planet, region):
        """Test raster values are scaled to physical units."""
        elevation = SurfaceRaster.filled(200, 100, 0.75)
        precipitation = SurfaceRaster.filled(200, 100, 0.5)
        snowfall = SurfaceRaster.filled(200, 100, 0.2)
        temperature = SurfaceRaster.filled(200, 100, 280.0 / TEMPERATURE_SCALE_FACTOR)
        assert region.elevation_at(planet, elevation, 0.3, 0.2) == pytest.approx(10_000.0)
        assert region.precipitation_at(planet, precipitation, 0.3, 0.2) == pytest.approx(0.25)
        assert region.snowfall_at(planet, snowfall, 0.3, 0.2) == pytest.approx(1.0)
        assert region.temperature_at(planet, temperature, 0.3, 0.2) == pytest.approx(280.0)

    def test_lookups_outside_are_nan(self, planet, region):
        """Test lookups outside the field of view are missing."""
        raster = SurfaceRaster.filled(200, 100, 0.75)
        assert math.isnan(region.elevation_at(planet, raster, -1.0, 2.0))
        assert math.isnan(region.precipitation_at(planet, raster, -1.0, 2.0))
        assert math.isnan(region.snowfall_at(planet, raster, -1.0, 2.0))
        assert math.isnan(region.temperature_at(planet, raster, -1.0, 2.0))

    def test_elevation_relative_to_sea_level(self, region):
        """Test elevations are relative to the planet's sea level."""
        planet = Planet(sea_level=2_000.0)
        raster = SurfaceRaster.filled(200, 100, 0.75)
        assert region.elevation_at(planet, raster, 0.3, 0.2) == pytest.approx(8_000.0)

    def test_seasonal_temperature(self, planet, region):
        """Test temperatures between the seasons."""
        winter = SurfaceRaster.filled(200, 100, 250.0 / TEMPERATURE_SCALE_FACTOR)
        summer = SurfaceRaster.filled(200, 100, 300.0 / TEMPERATURE_SCALE_FACTOR)
        temperatures = region.temperature_range_at(planet, winter, summer, 0.3, 0.2)
        assert temperatures.minimum == pytest.approx(250.0)
        assert temperatures.maximum == pytest.approx(300.0)
        assert region.temperature_at_time(
            planet, winter, summer, 0.5, 0.3, 0.2
        ) == pytest.approx(300.0)
        assert region.temperature_at_time(
            planet, winter, summer, 0.25, 0.3, 0.2
        ) == pytest.approx(275.0)

    def test_weather_map_lookups(self, planet, region):
        """Test sea ice and grid lookups at a local position."""
        sea_ice = np.zeros((200, 100, 2))
        sea_ice[100, 50] = (0.9, 0.2)
        maps = WeatherMaps(
            biome_map=np.full((200, 100), 14),
            climate_map=np.full((200, 100), 3),
            sea_ice_range_map=sea_ice,
            summary=WeatherSummary(),
        )
        centre = np.zeros(3)
        assert tuple(region.sea_ice_range_at(planet, maps, centre)) == pytest.approx((0.9, 0.2))
        assert region.has_sea_ice(planet, maps, centre, 0.0)
        assert not region.has_sea_ice(planet, maps, centre, 0.5)
        assert region.grid_value_at(planet, maps.climate_map, centre) == 3
