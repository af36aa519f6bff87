"""Value types for irregular puzzle generation."""

from .geometry import (
    DIRECTIONS,
    FLAT_EDGE,
    OPPOSITE_DIRECTION,
    Adjacency,
    Direction,
    EdgePattern,
    EdgePatterns,
    EdgeType,
    ExpansionInfo,
    GridLayout,
    GridSize,
    Position,
    Size,
    SnapTarget,
)
from .puzzle_model import (
    Difficulty,
    EdgeTypeCounts,
    GeneratePuzzleRequest,
    PuzzleConfig,
    PuzzlePiece,
    PuzzleStatsResponse,
)

__all__ = [
    # Geometry
    "DIRECTIONS",
    "FLAT_EDGE",
    "OPPOSITE_DIRECTION",
    "Adjacency",
    "Direction",
    "EdgePattern",
    "EdgePatterns",
    "EdgeType",
    "ExpansionInfo",
    "GridLayout",
    "GridSize",
    "Position",
    "Size",
    "SnapTarget",
    # Puzzle
    "Difficulty",
    "EdgeTypeCounts",
    "GeneratePuzzleRequest",
    "PuzzleConfig",
    "PuzzlePiece",
    "PuzzleStatsResponse",
]
