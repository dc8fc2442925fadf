"""
Core surface mapping functionality.
"""

from .aggregator import ClimateAccumulator, WeatherSummary, summarize
from .classifier import SeaIceRange, classify_row, estimate_sea_ice_range, sea_ice_ranges
from .exceptions import ProjectionMismatchError, ShapeMismatchError
from .planet import Atmosphere, Planet
from .projection import (
    DEFAULT_PROJECTION,
    MapProjectionOptions,
    area_of_point,
    get_lat_lon_for_map_projection,
    get_projection_from_lat_lon,
    separation_of_point,
)
from .raster import SurfaceRaster
from .resampler import ResamplingPlan
from .surface_region import SurfaceRegion
from .taxonomy import BiomeType, ClimateType, HumidityType, TemperatureRange
from .weather_maps import WeatherMaps, generate_weather_maps

__all__ = ['ClimateAccumulator', 'WeatherSummary', 'summarize',
           'SeaIceRange', 'classify_row', 'estimate_sea_ice_range', 'sea_ice_ranges',
           'ProjectionMismatchError', 'ShapeMismatchError', 'Atmosphere', 'Planet',
           'DEFAULT_PROJECTION', 'MapProjectionOptions', 'area_of_point',
           'get_lat_lon_for_map_projection', 'get_projection_from_lat_lon', 'separation_of_point',
           'SurfaceRaster', 'ResamplingPlan', 'SurfaceRegion',
           'BiomeType', 'ClimateType', 'HumidityType', 'TemperatureRange',
           'WeatherMaps', 'generate_weather_maps']
