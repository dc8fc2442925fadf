"""Errors raised by the surface mapping core."""


class ShapeMismatchError(ValueError):
    """Component grids of a weather map disagree in their X or Y extent."""


class ProjectionMismatchError(ValueError):
    """A source raster was projected with different parameters than the output."""
