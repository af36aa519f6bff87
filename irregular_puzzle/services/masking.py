"""Render pieces with their clip path baked into the alpha channel.

This is an alternate renderer layered on the generated geometry: instead of
leaving the silhouette to a CSS clip path, it produces a PNG whose pixels
outside the polygon are transparent.
"""

from typing import List, Tuple

from PIL import Image, ImageDraw

from irregular_puzzle.models.puzzle_model import PuzzlePiece
from irregular_puzzle.services.clip_path import parse_clip_path
from irregular_puzzle.services.image_slicer import decode_data_url, image_to_data_url

Point = Tuple[float, float]


def percent_to_pixels(points: List[Point], width: int, height: int) -> List[Point]:
    """Convert percentage polygon points to pixel coordinates."""
    return [(x / 100 * width, y / 100 * height) for x, y in points]


def create_piece_mask(
    polygon: List[Point],
    width: int,
    height: int,
    antialias_scale: int = 4,
) -> Image.Image:
    """Create a mask image for a puzzle piece with anti-aliased edges.

    Uses supersampling for anti-aliasing: renders at higher resolution
    then downsamples.

    Args:
        polygon: List of (x, y) points in pixel coordinates.
        width: Output mask width in pixels.
        height: Output mask height in pixels.
        antialias_scale: Supersampling factor (4 = render at 4x, then downsample).

    Returns:
        Grayscale PIL Image where white=inside, black=outside.
    """
    hi_res_mask = Image.new("L", (width * antialias_scale, height * antialias_scale), 0)
    draw = ImageDraw.Draw(hi_res_mask)

    scaled_polygon = [(x * antialias_scale, y * antialias_scale) for x, y in polygon]
    if len(scaled_polygon) >= 3:
        draw.polygon(scaled_polygon, fill=255)

    return hi_res_mask.resize((width, height), Image.Resampling.LANCZOS)


def apply_clip_path(image: Image.Image, clip_path: str, antialias_scale: int = 4) -> Image.Image:
    """Mask an image down to the polygon described by ``clip_path``.

    Returns:
        RGBA image, transparent outside the polygon.
    """
    polygon = percent_to_pixels(parse_clip_path(clip_path), image.width, image.height)
    mask = create_piece_mask(polygon, image.width, image.height, antialias_scale)

    result = Image.new("RGBA", image.size, (0, 0, 0, 0))
    result.paste(image.convert("RGB"), mask=mask)
    return result


def render_masked_piece(piece: PuzzlePiece, antialias_scale: int = 4) -> str:
    """Render a piece's bitmap with its silhouette cut out.

    Args:
        piece: A generated piece.
        antialias_scale: Supersampling factor of the mask.

    Returns:
        PNG data URL with a transparent background.
    """
    image = decode_data_url(piece.image_data)
    return image_to_data_url(apply_clip_path(image, piece.clip_path, antialias_scale))
