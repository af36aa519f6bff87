"""CSS clip-path polygons for irregular pieces.

The polygon is expressed in percentages of the piece's expanded bounding box
and traces the carved silhouette clockwise: top edge left to right, right
edge downwards, bottom edge right to left, left edge upwards.
"""

import re
from typing import List, Optional, Tuple

from irregular_puzzle.models.geometry import EdgePattern, EdgePatterns, ExpansionInfo, Size
from irregular_puzzle.services.edge_patterns import generate_shape_points
from irregular_puzzle.services.positions import calculate_canvas_offset, expansion_pixels

Point = Tuple[float, float]

# Tabs never reach deeper than this fraction of the piece, so that two
# holes on opposite sides cannot cross
MAX_TAB_DEPTH_RATIO = 0.45

MIN_POLYGON_POINTS = 4

_NUMBER = r"-?\d+(?:\.\d+)?"
_POINT_PATTERN = re.compile(rf"\s*({_NUMBER})%\s+({_NUMBER})%\s*")
_POLYGON_PATTERN = re.compile(rf"^polygon\(((?:\s*{_NUMBER}%\s+{_NUMBER}%\s*,)*\s*{_NUMBER}%\s+{_NUMBER}%\s*)\)$")


def _format_percent(value: float) -> str:
    # Adding 0.0 turns a rounded -0.0 into 0.0
    return f"{round(value, 2) + 0.0:.2f}"


def _to_percent(point: Point, expanded_size: Size) -> str:
    x = point[0] / expanded_size.width * 100
    y = point[1] / expanded_size.height * 100
    return f"{_format_percent(x)}% {_format_percent(y)}%"


def _base_offset(expanded_size: Size, base_size: Size, expansions: Optional[ExpansionInfo]) -> Point:
    if expansions is None:
        return (expanded_size.width - base_size.width) / 2, (expanded_size.height - base_size.height) / 2
    offset = calculate_canvas_offset(expansions, base_size)
    return offset.x, offset.y


def _max_depth(ratio: Optional[float], perpendicular_length: float) -> Optional[float]:
    if ratio is None:
        return None
    # Knobs may not reach past the whole pixels the box grew by on that side
    return min(float(expansion_pixels(perpendicular_length, ratio)), MAX_TAB_DEPTH_RATIO * perpendicular_length)


def _horizontal_edge_points(
    edge: EdgePattern,
    left: float,
    y: float,
    length: float,
    outward: int,
    max_depth: Optional[float],
) -> List[Point]:
    """Points of a horizontal edge from left to right; ``outward`` is -1 (up) or 1 (down)."""
    profile = generate_shape_points(edge.type, edge.intensity, edge.seed_value, length, max_depth)
    return [(left + along, y + outward * offset) for along, offset in profile]


def _vertical_edge_points(
    edge: EdgePattern,
    x: float,
    top: float,
    length: float,
    outward: int,
    max_depth: Optional[float],
) -> List[Point]:
    """Points of a vertical edge from top to bottom; ``outward`` is -1 (left) or 1 (right)."""
    profile = generate_shape_points(edge.type, edge.intensity, edge.seed_value, length, max_depth)
    return [(x + outward * offset, top + along) for along, offset in profile]


def generate_polygon_points(
    edges: EdgePatterns,
    expanded_size: Size,
    base_size: Size,
    expansions: Optional[ExpansionInfo] = None,
) -> List[Point]:
    """Trace a piece's silhouette in pixel coordinates of its expanded box.

    Every edge profile is generated in the same orientation as the matching
    edge of the neighboring piece (left to right, top to bottom), so two
    pieces sharing a seed trace exactly the same curve.

    Args:
        edges: The piece's four edge patterns.
        expanded_size: Size of the expanded box.
        base_size: Size of the grid cell.
        expansions: Per-side expansion; when omitted the cell is assumed
            centered in the expanded box and tab depth is not capped.

    Returns:
        Clockwise polygon points with no repeated corners.
    """
    offset_x, offset_y = _base_offset(expanded_size, base_size, expansions)
    left, top = offset_x, offset_y
    right, bottom = left + base_size.width, top + base_size.height

    def depth(side: str, perpendicular: float) -> Optional[float]:
        return _max_depth(getattr(expansions, side) if expansions is not None else None, perpendicular)

    top_points = _horizontal_edge_points(edges.top, left, top, base_size.width, -1, depth("top", base_size.height))
    right_points = _vertical_edge_points(
        edges.right, right, top, base_size.height, 1, depth("right", base_size.width)
    )
    bottom_points = _horizontal_edge_points(
        edges.bottom, left, bottom, base_size.width, 1, depth("bottom", base_size.height)
    )
    left_points = _vertical_edge_points(edges.left, left, top, base_size.height, -1, depth("left", base_size.width))

    # Bottom and left edges are walked backwards; drop corners shared with the previous edge
    points: List[Point] = list(top_points)
    points.extend(right_points[1:])
    points.extend(list(reversed(bottom_points))[1:])
    points.extend(list(reversed(left_points))[1:-1])
    return points


def generate_clip_path(
    edges: EdgePatterns,
    expanded_size: Size,
    base_size: Size,
    expansions: Optional[ExpansionInfo] = None,
) -> str:
    """Generate the CSS ``polygon(...)`` clip path of a piece.

    Identical inputs always produce an identical string.
    """
    points = generate_polygon_points(edges, expanded_size, base_size, expansions)
    return f"polygon({', '.join(_to_percent(p, expanded_size) for p in points)})"


def generate_rectangle_clip_path(
    expanded_size: Size,
    base_size: Size,
    expansions: Optional[ExpansionInfo] = None,
) -> str:
    """Clip path of the un-carved grid cell, useful for debugging."""
    left, top = _base_offset(expanded_size, base_size, expansions)
    right, bottom = left + base_size.width, top + base_size.height
    corners = [(left, top), (right, top), (right, bottom), (left, bottom)]
    return f"polygon({', '.join(_to_percent(p, expanded_size) for p in corners)})"


def parse_clip_path(clip_path: str) -> List[Point]:
    """Parse a ``polygon(x% y%, ...)`` string into percentage points.

    Raises:
        ValueError: If the string is not a polygon of at least four points.
    """
    match = _POLYGON_PATTERN.match(clip_path.strip())
    if match is None:
        raise ValueError(f"Not a polygon clip path: {clip_path[:60]!r}")

    points = [(float(x), float(y)) for x, y in _POINT_PATTERN.findall(match.group(1))]
    if len(points) < MIN_POLYGON_POINTS:
        raise ValueError(f"Polygon needs at least {MIN_POLYGON_POINTS} points, got {len(points)}")
    return points


def validate_clip_path(clip_path: str) -> bool:
    """Whether a string is a valid polygon clip path with at least four points."""
    try:
        parse_clip_path(clip_path)
    except ValueError:
        return False
    return True
