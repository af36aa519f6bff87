"""Grid geometry for irregular pieces.

A piece's base box is its exact grid cell. Its expanded box grows into each
neighboring cell by the expansion ratio, rounded down to whole pixels so the
box lines up with the sliced bitmap, giving the clip path room to carve
knobs without running out of pixels. Nothing ever expands past the outer
grid border.
"""

import math
from typing import List, Tuple

from irregular_puzzle.models.geometry import (
    Adjacency,
    ExpansionInfo,
    GridLayout,
    GridSize,
    Position,
    Size,
    SnapTarget,
)

DEFAULT_SNAP_TOLERANCE = 20.0


def index_to_grid_coord(index: int, grid_size: GridSize) -> Tuple[int, int]:
    """Convert a row-major index to (row, col)."""
    return index // grid_size.cols, index % grid_size.cols


def grid_coord_to_index(row: int, col: int, grid_size: GridSize) -> int:
    """Convert (row, col) to a row-major index."""
    return row * grid_size.cols + col


def calculate_center_index(grid_size: GridSize) -> int:
    """Index of the center cell, rounding toward the top-left on even grids."""
    return grid_coord_to_index(grid_size.rows // 2, grid_size.cols // 2, grid_size)


def is_edge_piece(row: int, col: int, grid_size: GridSize) -> bool:
    """Whether the cell touches the grid border."""
    return row == 0 or row == grid_size.rows - 1 or col == 0 or col == grid_size.cols - 1


def is_corner_piece(row: int, col: int, grid_size: GridSize) -> bool:
    """Whether the cell sits in a grid corner."""
    return (row == 0 or row == grid_size.rows - 1) and (col == 0 or col == grid_size.cols - 1)


def get_adjacent_indices(index: int, grid_size: GridSize) -> Adjacency:
    """Return the indices of the up to four neighbors of a cell."""
    row, col = index_to_grid_coord(index, grid_size)
    return Adjacency(
        top=grid_coord_to_index(row - 1, col, grid_size) if row > 0 else None,
        right=grid_coord_to_index(row, col + 1, grid_size) if col < grid_size.cols - 1 else None,
        bottom=grid_coord_to_index(row + 1, col, grid_size) if row < grid_size.rows - 1 else None,
        left=grid_coord_to_index(row, col - 1, grid_size) if col > 0 else None,
    )


def calculate_expansions(row: int, col: int, grid_size: GridSize, expansion_ratio: float = 0.4) -> ExpansionInfo:
    """Expansion ratio per side: the ratio where a neighbor exists, else 0."""
    return ExpansionInfo(
        top=expansion_ratio if row > 0 else 0.0,
        right=expansion_ratio if col < grid_size.cols - 1 else 0.0,
        bottom=expansion_ratio if row < grid_size.rows - 1 else 0.0,
        left=expansion_ratio if col > 0 else 0.0,
    )


def expansion_pixels(length: float, ratio: float) -> int:
    """Whole pixels a side grows by: ``floor(length * ratio)``."""
    # The epsilon absorbs products such as 100 * 0.29 == 28.999999999999996
    return math.floor(length * ratio + 1e-9)


def calculate_expanded_size(base_size: Size, expansions: ExpansionInfo) -> Size:
    """Size of the base box grown by the per-side expansions, in whole pixels."""
    return Size(
        width=base_size.width
        + expansion_pixels(base_size.width, expansions.left)
        + expansion_pixels(base_size.width, expansions.right),
        height=base_size.height
        + expansion_pixels(base_size.height, expansions.top)
        + expansion_pixels(base_size.height, expansions.bottom),
    )


def calculate_expanded_position(base_position: Position, base_size: Size, expansions: ExpansionInfo) -> Position:
    """Top-left corner of the expanded box."""
    offset = calculate_canvas_offset(expansions, base_size)
    return Position(x=base_position.x - offset.x, y=base_position.y - offset.y)


def calculate_canvas_offset(expansions: ExpansionInfo, base_size: Size) -> Position:
    """Offset of the base box inside the expanded box."""
    return Position(
        x=float(expansion_pixels(base_size.width, expansions.left)),
        y=float(expansion_pixels(base_size.height, expansions.top)),
    )


def create_grid_layout(grid_size: GridSize, target_size: int = 400, expansion_ratio: float = 0.4) -> GridLayout:
    """Lay a grid out on a square board of ``target_size`` pixels.

    Cell sizes are whole pixels so that the grid divides the board evenly.
    """
    base_size = Size(width=float(target_size // grid_size.cols), height=float(target_size // grid_size.rows))
    return GridLayout(grid_size=grid_size, base_size=base_size, expansion_ratio=expansion_ratio)


def calculate_base_position(index: int, layout: GridLayout) -> Position:
    """Top-left corner of a cell on the board."""
    row, col = index_to_grid_coord(index, layout.grid_size)
    return Position(x=col * layout.base_size.width, y=row * layout.base_size.height)


def calculate_snap_targets(base_position: Position, tolerance: float = DEFAULT_SNAP_TOLERANCE) -> List[SnapTarget]:
    """Snap targets of a piece: its own cell, within ``tolerance`` pixels."""
    return [SnapTarget(position=base_position, tolerance=tolerance)]


def is_within_tolerance(pos1: Position, pos2: Position, tolerance: float) -> bool:
    """Whether two positions differ by at most ``tolerance`` on each axis."""
    return abs(pos1.x - pos2.x) <= tolerance and abs(pos1.y - pos2.y) <= tolerance


def calculate_distance(pos1: Position, pos2: Position) -> float:
    """Euclidean distance between two positions."""
    return math.hypot(pos1.x - pos2.x, pos1.y - pos2.y)
