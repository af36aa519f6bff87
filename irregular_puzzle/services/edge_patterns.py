"""Complementary knob/hole edge generation for a puzzle grid.

Each interior edge of the grid is generated exactly once from its own seed
and stored under the keys of both pieces that share it, so the two sides
always interlock: one piece gets a knob where its neighbor gets a hole.
Border edges are always flat.
"""

import logging
from typing import Dict, List, Literal, Optional, Tuple

from irregular_puzzle.models.geometry import (
    DIRECTIONS,
    FLAT_EDGE,
    OPPOSITE_DIRECTION,
    Direction,
    EdgePattern,
    EdgePatterns,
    EdgeType,
    GridSize,
)
from irregular_puzzle.services.seeded_random import SeededRandom

logger = logging.getLogger(__name__)

EdgePatternMap = Dict[str, EdgePattern]

MIN_INTENSITY = 0.3
MAX_INTENSITY = 0.7

# Extra intensity granted to the cell at the grid center
CENTER_INTENSITY_BOOST = 0.2

# Fraction of the edge length covered by the tab
KNOB_WIDTH_RATIO = 0.4

# Jitter range applied to tab width and height
SHAPE_VARIATION = (0.8, 1.2)

# Edge seeds are spaced so that puzzles with different seeds never share one
PUZZLE_SEED_STRIDE = 100_000

Point = Tuple[float, float]


def edge_key(index: int, direction: Direction) -> str:
    """Return the map key of one side of a piece."""
    return f"{index}-{direction}"


def normalize_intensity(intensity: float) -> float:
    """Clamp an intensity into the supported 0.3-0.7 range."""
    return max(MIN_INTENSITY, min(MAX_INTENSITY, intensity))


def generate_edge_seed(row: int, col: int, side: Literal["right", "bottom"], puzzle_seed: int = 0) -> int:
    """Return the seed of the edge on the right or bottom side of a cell.

    Args:
        row: Row of the cell owning the edge.
        col: Column of the cell owning the edge.
        side: Which side of the cell the edge lies on.
        puzzle_seed: Per-puzzle seed offset.

    Returns:
        A non-negative integer seed unique to this edge within the puzzle.
    """
    base = puzzle_seed * PUZZLE_SEED_STRIDE + row * 1000 + col * 100
    return base + 1 if side == "right" else base + 2


def calculate_dynamic_intensity(base_intensity: float, row: int, col: int, grid_size: GridSize) -> float:
    """Scale intensity up for cells close to the grid center.

    Uses the Manhattan distance to the center cell relative to the largest
    possible distance, so border tabs are subtler than interior ones.
    """
    center_row = grid_size.rows // 2
    center_col = grid_size.cols // 2

    distance = abs(row - center_row) + abs(col - center_col)
    max_distance = grid_size.rows // 2 + grid_size.cols // 2

    distance_ratio = 1 - distance / max_distance if max_distance else 1.0
    return normalize_intensity(base_intensity + distance_ratio * CENTER_INTENSITY_BOOST)


def generate_shape_points(
    edge_type: EdgeType,
    intensity: float,
    seed_value: int,
    edge_length: float = 100.0,
    max_height: Optional[float] = None,
) -> List[Point]:
    """Generate the tab profile of an edge in edge-local coordinates.

    The edge runs from (0, 0) to (edge_length, 0). Positive y points away
    from the piece: knobs have positive heights, holes negative ones.

    Args:
        edge_type: 'flat', 'knob' or 'hole'.
        intensity: Tab height relative to the edge length.
        seed_value: Seed of the edge; both sides of a shared edge use the same one.
        edge_length: Length of the edge.
        max_height: Optional cap on the absolute tab height.

    Returns:
        Two points for a flat edge, seven points for a knob or hole.
    """
    if edge_type == "flat":
        return [(0.0, 0.0), (edge_length, 0.0)]

    random = SeededRandom(seed_value)
    height_variation = random.next_float(*SHAPE_VARIATION)
    width_variation = random.next_float(*SHAPE_VARIATION)

    knob_width = edge_length * KNOB_WIDTH_RATIO * width_variation
    height = edge_length * intensity * height_variation
    if max_height is not None:
        height = min(height, max_height)
    if edge_type == "hole":
        height = -height

    mid = edge_length / 2
    start = mid - knob_width / 2
    end = mid + knob_width / 2
    shoulder = knob_width * 0.2

    return [
        (0.0, 0.0),
        (start, 0.0),
        (start + shoulder, height * 0.7),
        (mid, height),
        (end - shoulder, height * 0.7),
        (end, 0.0),
        (edge_length, 0.0),
    ]


def are_edges_compatible(pattern1: EdgePattern, pattern2: EdgePattern) -> bool:
    """Check whether two facing edges interlock.

    Two flat edges are compatible; otherwise both must share a seed and be
    one knob and one hole.
    """
    if pattern1.is_flat and pattern2.is_flat:
        return True

    return (
        pattern1.seed_value == pattern2.seed_value
        and not pattern1.is_flat
        and not pattern2.is_flat
        and pattern1.type != pattern2.type
    )


class EdgePatternGenerator:
    """Generate the complementary edge patterns of a whole puzzle."""

    def __init__(self, base_intensity: float = 0.5, knob_probability: float = 0.7, puzzle_seed: int = 0):
        """Initialize the generator.

        Args:
            base_intensity: Intensity of the outermost cells before clamping.
            knob_probability: Chance that an interior edge interlocks instead of staying flat.
            puzzle_seed: Non-negative seed offset distinguishing puzzles of the same grid.
        """
        if puzzle_seed < 0:
            raise ValueError(f"Puzzle seed must be non-negative, got {puzzle_seed}")
        self.base_intensity = base_intensity
        self.knob_probability = knob_probability
        self.puzzle_seed = puzzle_seed

    def generate_complementary_pair(self, seed_value: int, intensity: float = 0.5) -> Tuple[EdgePattern, EdgePattern]:
        """Generate the two facing patterns of one shared edge.

        Args:
            seed_value: Seed of the edge.
            intensity: Requested tab intensity.

        Returns:
            (primary, complement): a knob/hole pair in either order, or two flat edges.
        """
        random = SeededRandom(seed_value)

        if random.next() < self.knob_probability:
            primary_is_knob = random.next() < 0.5
            normalized = normalize_intensity(intensity)
            primary = EdgePattern(type="knob" if primary_is_knob else "hole", intensity=normalized, seed_value=seed_value)
            complement = EdgePattern(
                type="hole" if primary_is_knob else "knob", intensity=normalized, seed_value=seed_value
            )
            return primary, complement

        flat = EdgePattern(type="flat", intensity=0.0, seed_value=seed_value)
        return flat, flat

    def generate_puzzle_edges(self, grid_size: GridSize) -> EdgePatternMap:
        """Generate the edge map for every cell of a grid.

        Keys are ``"{index}-{direction}"``. Each interior edge is drawn once
        and recorded under both pieces that share it.
        """
        edge_map: EdgePatternMap = {}

        for row in range(grid_size.rows):
            for col in range(grid_size.cols):
                index = row * grid_size.cols + col

                shared_sides: Tuple[Tuple[Literal["right", "bottom"], bool, int], ...] = (
                    ("right", col < grid_size.cols - 1, index + 1),
                    ("bottom", row < grid_size.rows - 1, index + grid_size.cols),
                )
                for side, has_neighbor, neighbor in shared_sides:
                    if not has_neighbor or edge_key(index, side) in edge_map:
                        continue
                    seed = generate_edge_seed(row, col, side, self.puzzle_seed)
                    intensity = calculate_dynamic_intensity(self.base_intensity, row, col, grid_size)
                    primary, complement = self.generate_complementary_pair(seed, intensity)
                    edge_map[edge_key(index, side)] = primary
                    edge_map[edge_key(neighbor, OPPOSITE_DIRECTION[side])] = complement

                # Outward edges
                if row == 0:
                    edge_map[edge_key(index, "top")] = FLAT_EDGE
                if col == 0:
                    edge_map[edge_key(index, "left")] = FLAT_EDGE
                if row == grid_size.rows - 1:
                    edge_map[edge_key(index, "bottom")] = FLAT_EDGE
                if col == grid_size.cols - 1:
                    edge_map[edge_key(index, "right")] = FLAT_EDGE

        logger.debug("Generated %d edge patterns for %dx%d grid", len(edge_map), grid_size.rows, grid_size.cols)
        return edge_map

    @staticmethod
    def extract_piece_edges(index: int, edge_map: EdgePatternMap, strict: bool = False) -> EdgePatterns:
        """Look up the four edges of one piece.

        Args:
            index: Row-major piece index.
            edge_map: Map produced by ``generate_puzzle_edges``.
            strict: Assert that every side is present instead of falling back to flat.

        Returns:
            The piece's edge patterns.
        """
        patterns = {}
        for direction in DIRECTIONS:
            key = edge_key(index, direction)
            if strict:
                assert key in edge_map, f"Missing edge pattern {key}"
            patterns[direction] = edge_map.get(key, FLAT_EDGE)
        return EdgePatterns(**patterns)
