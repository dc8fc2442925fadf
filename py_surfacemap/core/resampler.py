"""
Multi-resolution resampling onto a common output grid.

Source rasters may have different resolutions but must share the output's
projection parameters. For every output row and column the plan records the
pixel of each source raster that the output cell samples:

- Row indices are computed once per output row from the row's latitude.
- Column indices are memoized per source, keyed by output column, so each
  column's longitude is derived at most once no matter how many rows exist.
- A source matching the output height (or width) reuses the output index
  directly instead of round-tripping it through the transforms.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np
import structlog

from ..config import settings
from .exceptions import ProjectionMismatchError
from .projection import (
    MapProjectionOptions,
    get_scale,
    latitude_of,
    longitude_of,
    projection_x,
    projection_y,
    to_pixel,
    x_length_for,
)
from .raster import SurfaceRaster

logger = structlog.get_logger()


@dataclass
class ResamplingPlan:
    """Source pixel coordinates for every row and column of an output grid."""

    resolution: int
    x_length: int
    projection: MapProjectionOptions
    source_shapes: List[tuple]
    latitudes: np.ndarray
    row_indices: List[np.ndarray]
    column_memos: List[Dict[int, int]] = field(default_factory=list)
    column_computations: int = 0

    @classmethod
    def build(
        cls,
        sources: Sequence[SurfaceRaster],
        resolution: int,
        projection: MapProjectionOptions,
        strict: Optional[bool] = None,
    ) -> "ResamplingPlan":
        """
        Build the plan in a single pass over the output rows.

        Args:
            sources: Source rasters to sample
            resolution: Vertical resolution of the output grid
            projection: Projection of the output grid
            strict: Reject sources that declare a different projection
                (defaults to ``settings.strict_projection_check``)

        Returns:
            ResamplingPlan with row indices and column memos filled
        """
        if strict is None:
            strict = settings.strict_projection_check
        if strict:
            _check_projections(sources, projection)

        x_length = x_length_for(resolution, projection)
        plan = cls(
            resolution=resolution,
            x_length=x_length,
            projection=projection,
            source_shapes=[(source.width, source.height) for source in sources],
            latitudes=np.zeros(resolution, dtype=np.float64),
            row_indices=[np.zeros(resolution, dtype=np.intp) for _ in sources],
            column_memos=[{} for _ in sources],
        )

        scale = get_scale(resolution, projection.range)
        for y in range(resolution):
            latitude = latitude_of(y, resolution, scale, projection)
            plan.latitudes[y] = latitude
            for i, (_, height) in enumerate(plan.source_shapes):
                plan.row_indices[i][y] = plan._source_row(y, latitude, height)
            if not sources:
                continue
            # Memos are filled together, so the first one tracks all of them
            memo = plan.column_memos[0]
            for x in range(x_length):
                if x not in memo:
                    plan._memoize_column(x, scale)

        logger.debug(
            "Resampling plan built",
            resolution=resolution,
            x_length=x_length,
            sources=len(sources),
            column_computations=plan.column_computations,
        )
        return plan

    def _source_row(self, y: int, latitude: float, height: int) -> int:
        if height == self.resolution:
            return y
        source_scale = get_scale(height, self.projection.range)
        return to_pixel(projection_y(latitude, height, source_scale, self.projection), height)

    def _memoize_column(self, x: int, scale: float) -> None:
        longitude = longitude_of(x, self.x_length, scale, self.projection)
        for i, (width, height) in enumerate(self.source_shapes):
            if width == self.x_length:
                self.column_memos[i][x] = x
            else:
                source_scale = get_scale(height, self.projection.range)
                self.column_memos[i][x] = to_pixel(
                    projection_x(longitude, width, source_scale, self.projection), width
                )
            self.column_computations += 1

    def column_indices(self, source: int) -> np.ndarray:
        """Source columns for every output column, in output order."""
        memo = self.column_memos[source]
        return np.fromiter((memo[x] for x in range(self.x_length)), dtype=np.intp, count=self.x_length)

    def sample_row(self, source: int, raster: SurfaceRaster, y: int, columns: np.ndarray) -> np.ndarray:
        """Samples of a source raster for output row ``y``."""
        return raster.values[self.row_indices[source][y], columns]


def _check_projections(
    sources: Sequence[SurfaceRaster], projection: MapProjectionOptions
) -> None:
    for i, source in enumerate(sources):
        if source.projection is not None and not source.projection.is_compatible(projection):
            raise ProjectionMismatchError(
                f"Source raster {i} was projected with {source.projection!r}, "
                f"which does not match the output projection {projection!r}"
            )
