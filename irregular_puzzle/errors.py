"""Exceptions raised by puzzle generation.

Every error is fatal to the generation call that raised it; no partial
puzzle is ever returned.
"""


class PuzzleGenerationError(Exception):
    """Base class for all puzzle generation failures."""


class InvalidParameterError(PuzzleGenerationError, ValueError):
    """Raised when generation parameters are out of range or missing."""


class ImageLoadError(PuzzleGenerationError):
    """Raised when the source image cannot be fetched or decoded."""


class RenderingContextError(PuzzleGenerationError):
    """Raised when the raster backend is unavailable in this environment."""
