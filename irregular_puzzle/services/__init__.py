"""Irregular jigsaw piece generation engine."""

from .clip_path import generate_clip_path, generate_rectangle_clip_path, parse_clip_path, validate_clip_path
from .edge_patterns import EdgePatternGenerator, EdgePatternMap, are_edges_compatible, generate_shape_points
from .image_slicer import ImageSlicer, PillowSurface, load_image, validate_image_for_slicing
from .masking import apply_clip_path, render_masked_piece
from .puzzle_generator import (
    GRID_PRESETS,
    CompletionStatus,
    IrregularPuzzleGenerator,
    calculate_difficulty,
    get_puzzle_generator,
)
from .seeded_random import SeededRandom

__all__ = [
    # Randomness
    "SeededRandom",
    # Edges
    "EdgePatternGenerator",
    "EdgePatternMap",
    "are_edges_compatible",
    "generate_shape_points",
    # Clip paths
    "generate_clip_path",
    "generate_rectangle_clip_path",
    "parse_clip_path",
    "validate_clip_path",
    # Images
    "ImageSlicer",
    "PillowSurface",
    "load_image",
    "validate_image_for_slicing",
    "apply_clip_path",
    "render_masked_piece",
    # Orchestration
    "GRID_PRESETS",
    "CompletionStatus",
    "IrregularPuzzleGenerator",
    "calculate_difficulty",
    "get_puzzle_generator",
]
