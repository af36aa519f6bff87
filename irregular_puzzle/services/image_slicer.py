"""Slice a source image into the expanded bitmaps of irregular pieces.

The source is center-cropped to a square and resampled onto the board so
the grid divides it evenly. Each piece's expanded box is then copied out of
the board; any part of the box that falls outside the board is filled by
replicating the nearest board pixel row or column, so no piece bitmap ever
contains transparent pixels.
"""

import asyncio
import base64
import binascii
import io
import logging
from pathlib import Path
from typing import List, Optional, Tuple, Type, Union
from urllib.parse import unquote_to_bytes

import numpy as np
import requests
from PIL import Image, UnidentifiedImageError

from irregular_puzzle.errors import ImageLoadError, RenderingContextError
from irregular_puzzle.models.geometry import GridLayout, GridSize, Position, Size
from irregular_puzzle.services.positions import (
    calculate_base_position,
    calculate_expanded_position,
    calculate_expanded_size,
    calculate_expansions,
    index_to_grid_coord,
)

logger = logging.getLogger(__name__)

ImageSource = Union[str, bytes]

DEFAULT_FETCH_TIMEOUT = 30.0
DEFAULT_MAX_IMAGE_BYTES = 10 * 1024 * 1024
FETCH_CHUNK_SIZE = 64 * 1024


class PillowSurface:
    """Opaque RGBA raster surface backed by a Pillow image.

    Provides the small set of raster operations slicing needs: create a
    surface, copy a region out of it with edge clamping, read a pixel and
    encode the result as PNG.
    """

    def __init__(self, image: Image.Image):
        """Wrap a Pillow image, converting it to fully opaque RGBA."""
        if image.mode != "RGB":
            image = image.convert("RGB")
        self.image = image.convert("RGBA")
        self._pixels: Optional[np.ndarray] = None

    @classmethod
    def create(cls, width: int, height: int, color: Tuple[int, int, int] = (0, 0, 0)) -> "PillowSurface":
        """Create a blank surface filled with a solid color."""
        return cls(Image.new("RGB", (width, height), color))

    @property
    def width(self) -> int:
        """Surface width in pixels."""
        return self.image.width

    @property
    def height(self) -> int:
        """Surface height in pixels."""
        return self.image.height

    @property
    def pixels(self) -> np.ndarray:
        """Pixel data as an (height, width, 4) uint8 array."""
        if self._pixels is None:
            self._pixels = np.asarray(self.image, dtype=np.uint8)
        return self._pixels

    def read_pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        """Return the RGBA value at (x, y)."""
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def extract_region(self, x: int, y: int, width: int, height: int) -> "PillowSurface":
        """Copy a region that may extend past the surface bounds.

        Coordinates outside the surface are clamped to the nearest edge
        pixel, which replicates the border rows and columns outward.

        Args:
            x: Left of the region, may be negative.
            y: Top of the region, may be negative.
            width: Region width, at least 1.
            height: Region height, at least 1.

        Returns:
            A new surface of exactly ``width`` x ``height`` pixels.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Region must be non-empty, got {width}x{height}")

        xs = np.clip(np.arange(x, x + width), 0, self.width - 1)
        ys = np.clip(np.arange(y, y + height), 0, self.height - 1)
        region = np.ascontiguousarray(self.pixels[np.ix_(ys, xs)])
        return PillowSurface(Image.fromarray(region))

    def to_data_url(self) -> str:
        """Encode the surface as a base64 PNG data URL."""
        return image_to_data_url(self.image)


def image_to_data_url(image: Image.Image) -> str:
    """Convert a PIL Image to a base64 PNG data URL.

    Args:
        image: The image to convert.

    Returns:
        Base64 encoded data URL string.
    """
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    base64_data = base64.b64encode(buffer.getvalue()).decode("utf-8")
    return f"data:image/png;base64,{base64_data}"


RASTER_BACKENDS = {"pillow": PillowSurface}


def get_raster_backend(name: str = "pillow") -> Type[PillowSurface]:
    """Return the raster surface class registered under ``name``.

    Raises:
        RenderingContextError: If the backend is unknown or cannot encode PNG.
    """
    backend = RASTER_BACKENDS.get(name)
    if backend is None:
        raise RenderingContextError(f"Unsupported raster backend: {name!r}")

    Image.init()
    if "PNG" not in Image.SAVE:
        raise RenderingContextError("PNG encoding is not available in this Pillow build")
    return backend


def _fetch_url(url: str, timeout: float, max_bytes: int) -> bytes:
    """Stream a remote image, giving up as soon as it exceeds ``max_bytes``."""
    response = requests.get(url, timeout=timeout, stream=True)
    try:
        response.raise_for_status()
        buffer = bytearray()
        for chunk in response.iter_content(chunk_size=FETCH_CHUNK_SIZE):
            buffer.extend(chunk)
            if len(buffer) > max_bytes:
                raise ImageLoadError(f"Image is too large: more than {max_bytes} bytes")
        return bytes(buffer)
    finally:
        response.close()


def _read_image_bytes(source: ImageSource, timeout: float, max_bytes: int, allow_local_paths: bool) -> bytes:
    if isinstance(source, bytes):
        return source

    if source.startswith("data:"):
        header, _, payload = source.partition(",")
        if ";base64" in header:
            return base64.b64decode(payload, validate=True)
        return unquote_to_bytes(payload)

    if source.startswith(("http://", "https://")):
        return _fetch_url(source, timeout, max_bytes)

    if not allow_local_paths:
        raise ImageLoadError("Unsupported image source: expected a data URI or an http(s) URL")
    return Path(source).read_bytes()


def load_image(
    source: ImageSource,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    max_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
    allow_local_paths: bool = False,
) -> Image.Image:
    """Fetch and fully decode a source image.

    Args:
        source: A ``data:`` URI, an http(s) URL, raw bytes or, when
            ``allow_local_paths`` is set, a local file path.
        timeout: Network timeout in seconds for URLs.
        max_bytes: Largest accepted encoded image.
        allow_local_paths: Read plain strings as files on this machine.
            Never enable this for untrusted input.

    Returns:
        The decoded RGB image.

    Raises:
        ImageLoadError: If the image cannot be read or decoded.
    """
    if not source:
        raise ImageLoadError("Image source is empty")

    try:
        data = _read_image_bytes(source, timeout, max_bytes, allow_local_paths)
    except (binascii.Error, requests.RequestException, OSError, ValueError) as e:
        raise ImageLoadError(f"Failed to read image: {e}") from e

    if len(data) > max_bytes:
        raise ImageLoadError(f"Image is too large: {len(data)} bytes (limit {max_bytes})")

    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        logger.error("Failed to decode image: %s", e)
        raise ImageLoadError(f"Failed to decode image: {e}") from e

    return image.convert("RGB")


async def load_image_async(
    source: ImageSource,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    max_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
    allow_local_paths: bool = False,
) -> Image.Image:
    """Load an image without blocking the event loop."""
    return await asyncio.to_thread(load_image, source, timeout, max_bytes, allow_local_paths)


def calculate_source_dimensions(width: int, height: int) -> Tuple[int, int, int]:
    """Return (size, offset_x, offset_y) of the centered square crop."""
    size = min(width, height)
    return size, (width - size) // 2, (height - size) // 2


def validate_image_for_slicing(
    width: int,
    height: int,
    grid_size: GridSize,
    min_piece_size: int = 50,
) -> Tuple[bool, Optional[str]]:
    """Check whether a source image has enough pixels for the grid.

    Returns:
        (valid, message); ``message`` explains why the image is undersized.
    """
    min_dimension = min(width, height)
    estimated_piece_size = min_dimension / max(grid_size.rows, grid_size.cols)

    if estimated_piece_size < min_piece_size:
        return False, (
            f"Image is small: pieces will be about {int(estimated_piece_size)}px, "
            f"at least {min_piece_size}px is recommended"
        )

    if min_dimension < 200:
        return False, "Image is small: at least 200x200 pixels is recommended"

    return True, None


class ImageSlicer:
    """Cut expanded piece bitmaps out of a source image."""

    def __init__(self, backend: str = "pillow"):
        """Initialize the slicer.

        Args:
            backend: Name of the raster surface backend.

        Raises:
            RenderingContextError: If the backend is unavailable.
        """
        self.surface_class = get_raster_backend(backend)

    def prepare_source(self, image: Image.Image, layout: GridLayout) -> PillowSurface:
        """Crop the image to a centered square and resample it onto the board.

        The board measures exactly ``cols * base width`` by ``rows * base height``
        pixels so every cell boundary lands on a whole pixel.
        """
        size, offset_x, offset_y = calculate_source_dimensions(image.width, image.height)
        if size <= 0:
            raise ImageLoadError("Image has no pixels")

        board_width = int(layout.base_size.width * layout.grid_size.cols)
        board_height = int(layout.base_size.height * layout.grid_size.rows)

        cropped = image.crop((offset_x, offset_y, offset_x + size, offset_y + size))
        if cropped.size != (board_width, board_height):
            cropped = cropped.resize((board_width, board_height), Image.Resampling.LANCZOS)

        try:
            return self.surface_class(cropped)
        except (OSError, ValueError) as e:
            raise RenderingContextError(f"Cannot create raster surface: {e}") from e

    def slice_piece(self, source: PillowSurface, expanded_position: Position, expanded_size: Size) -> str:
        """Render one expanded box of the board as a PNG data URL.

        Expanded boxes are laid out in whole pixels, so the bitmap measures
        exactly ``expanded_size``.
        """
        x = int(expanded_position.x)
        y = int(expanded_position.y)
        width = max(1, int(expanded_size.width))
        height = max(1, int(expanded_size.height))

        piece = source.extract_region(x, y, width, height)
        return piece.to_data_url()

    def slice_image(self, image: Image.Image, layout: GridLayout) -> List[str]:
        """Slice every piece of the grid in row-major order."""
        source = self.prepare_source(image, layout)
        grid_size = layout.grid_size
        pieces: List[str] = []

        for index in range(grid_size.total):
            row, col = index_to_grid_coord(index, grid_size)
            expansions = calculate_expansions(row, col, grid_size, layout.expansion_ratio)
            base_position = calculate_base_position(index, layout)
            expanded_position = calculate_expanded_position(base_position, layout.base_size, expansions)
            expanded_size = calculate_expanded_size(layout.base_size, expansions)
            pieces.append(self.slice_piece(source, expanded_position, expanded_size))

        logger.debug("Sliced %d pieces", len(pieces))
        return pieces


def decode_data_url(data_url: str) -> Image.Image:
    """Decode a PNG data URL produced by the slicer."""
    return load_image_bytes(_read_image_bytes(data_url, DEFAULT_FETCH_TIMEOUT, DEFAULT_MAX_IMAGE_BYTES, False))


def load_image_bytes(data: bytes) -> Image.Image:
    """Decode raw image bytes, keeping the alpha channel."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageLoadError(f"Failed to decode image: {e}") from e
    return image.convert("RGBA")
