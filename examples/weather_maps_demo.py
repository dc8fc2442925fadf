"""
Example demonstrating weather map generation.
"""

import numpy as np
import matplotlib.pyplot as plt
from py_surfacemap.config import configure_logging
from py_surfacemap.core import (
    MapProjectionOptions, Planet, SurfaceRaster, generate_weather_maps
)
from py_surfacemap.core.raster import TEMPERATURE_SCALE_FACTOR
from py_surfacemap.core.taxonomy import BIOME_NAMES, BiomeType


def synthetic_rasters(width, height, seed=7):
    """Build elevation, seasonal temperature and precipitation rasters."""
    rng = np.random.default_rng(seed)
    latitudes = np.linspace(np.pi / 2, -np.pi / 2, height)[:, None]
    longitudes = np.linspace(-np.pi, np.pi, width, endpoint=False)[None, :]

    # A few overlapping waves stand in for continents
    elevation = np.zeros((height, width))
    for _ in range(6):
        k_lat, k_lon = rng.integers(1, 5, size=2)
        phase = rng.uniform(0, 2 * np.pi)
        elevation += np.sin(k_lat * latitudes + phase) * np.cos(k_lon * longitudes - phase)
    elevation = 0.5 + 0.1 * elevation / np.abs(elevation).max()

    # Kelvin: warm equator, cold poles, seasons flipped between hemispheres
    base = 300 - 55 * np.abs(np.sin(latitudes))
    seasonal = 15 * np.sin(latitudes)
    winter = np.broadcast_to(base - seasonal, (height, width))
    summer = np.broadcast_to(base + seasonal, (height, width))

    precipitation = np.clip(
        0.5 * np.cos(latitudes * 3) ** 2 + rng.normal(0, 0.05, (height, width)), 0, 1
    )

    return (
        SurfaceRaster(elevation),
        SurfaceRaster(winter / TEMPERATURE_SCALE_FACTOR),
        SurfaceRaster(summer / TEMPERATURE_SCALE_FACTOR),
        SurfaceRaster(precipitation),
    )


def main():
    configure_logging()

    planet = Planet()
    options = MapProjectionOptions()

    # Sources at twice the output resolution
    sources = synthetic_rasters(720, 360)

    print("Generating weather maps...")
    maps = generate_weather_maps(planet, *sources, resolution=180, options=options)

    print(f"Map size: {maps.x_length} x {maps.y_length}")
    print(f"Overall climate: {maps.climate.name}")
    print(f"Overall humidity: {maps.humidity.name}")
    print(f"Overall biome: {BIOME_NAMES[maps.biome]}")

    fig, axes = plt.subplots(2, 2, figsize=(14, 8))

    ax = axes[0, 0]
    image = ax.imshow(sources[0].values, cmap='terrain')
    ax.set_title('Elevation (source)')
    plt.colorbar(image, ax=ax)

    ax = axes[0, 1]
    image = ax.imshow(maps.climate_map.T, cmap='RdBu_r', vmin=0, vmax=8)
    ax.set_title('Climate')
    plt.colorbar(image, ax=ax)

    ax = axes[1, 0]
    image = ax.imshow(maps.biome_map.T, cmap='tab20', vmin=0, vmax=len(BiomeType) - 1)
    ax.set_title('Biomes')
    cbar = plt.colorbar(image, ax=ax, ticks=range(len(BiomeType)))
    cbar.ax.set_yticklabels([BIOME_NAMES[biome] for biome in BiomeType])

    ax = axes[1, 1]
    start = maps.sea_ice_range_map[..., 0]
    end = maps.sea_ice_range_map[..., 1]
    duration = np.where(start <= end, end - start, 1 - start + end)
    image = ax.imshow(duration.T, cmap='Blues', vmin=0, vmax=1)
    ax.set_title('Sea ice (proportion of year)')
    plt.colorbar(image, ax=ax)

    plt.tight_layout()
    plt.savefig('weather_maps_demo.png', dpi=150)
    print("\nWeather map visualization saved to weather_maps_demo.png")

    print("\nBiome distribution:")
    total = maps.biome_map.size
    for biome in BiomeType:
        count = int(np.sum(maps.biome_map == biome))
        if count:
            print(f"  {BIOME_NAMES[biome]}: {count} cells ({count / total * 100:.1f}%)")


if __name__ == "__main__":
    main()
