"""Irregular jigsaw puzzle generation.

Turns a source image and a grid size into interlocking, non-rectangular
puzzle pieces, each with a sliced bitmap, knob/hole edge descriptors and a
CSS clip-path polygon.
"""

from .errors import ImageLoadError, InvalidParameterError, PuzzleGenerationError, RenderingContextError
from .models import GridSize, PuzzleConfig, PuzzlePiece
from .services import IrregularPuzzleGenerator, get_puzzle_generator

__all__ = [
    "GridSize",
    "ImageLoadError",
    "InvalidParameterError",
    "IrregularPuzzleGenerator",
    "PuzzleConfig",
    "PuzzleGenerationError",
    "PuzzlePiece",
    "RenderingContextError",
    "get_puzzle_generator",
]
