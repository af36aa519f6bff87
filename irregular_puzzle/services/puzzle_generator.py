"""Generate complete irregular puzzles from an image.

Ties the engine together: validates the request, decodes the image once,
builds the shared edge map, then slices and clip-paths every piece
concurrently before assembling an immutable PuzzleConfig.
"""

import asyncio
import base64
import functools
import logging
import math
import random
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional

from irregular_puzzle.config import Settings, get_settings
from irregular_puzzle.errors import InvalidParameterError
from irregular_puzzle.models.geometry import GridLayout, GridSize, Position
from irregular_puzzle.models.puzzle_model import (
    Difficulty,
    EdgeTypeCounts,
    PuzzleConfig,
    PuzzlePiece,
    PuzzleStatsResponse,
)
from irregular_puzzle.services.clip_path import generate_clip_path
from irregular_puzzle.services.edge_patterns import EdgePatternGenerator, EdgePatternMap
from irregular_puzzle.services.image_slicer import (
    ImageSlicer,
    ImageSource,
    PillowSurface,
    load_image_async,
    validate_image_for_slicing,
)
from irregular_puzzle.services.positions import (
    calculate_base_position,
    calculate_expanded_position,
    calculate_expanded_size,
    calculate_expansions,
    calculate_snap_targets,
    create_grid_layout,
    grid_coord_to_index,
    index_to_grid_coord,
    is_within_tolerance,
)

logger = logging.getLogger(__name__)

# Named grid presets
GRID_PRESETS: Dict[str, GridSize] = {
    "3x3": GridSize(rows=3, cols=3),
    "4x4": GridSize(rows=4, cols=4),
    "5x5": GridSize(rows=5, cols=5),
    "6x6": GridSize(rows=6, cols=6),
}

RIGHT_ANGLES = (0, 90, 180, 270)

# Size of the off-board area pieces are scattered over
SCATTER_SPAN = 200.0


@dataclass(frozen=True)
class CompletionStatus:
    """How many pieces sit on their own cell."""

    is_complete: bool
    correct_pieces: int
    total_pieces: int
    # Integer percentage
    completion_rate: int


def bytes_to_data_uri(data: bytes) -> str:
    """Embed raw image bytes so the puzzle can be re-sliced later."""
    return "data:application/octet-stream;base64," + base64.b64encode(data).decode("utf-8")


def calculate_difficulty(grid_size: GridSize) -> Difficulty:
    """Classify a grid by its piece count."""
    total_pieces = grid_size.total
    if total_pieces <= 9:
        return "easy"
    if total_pieces <= 16:
        return "medium"
    if total_pieces <= 25:
        return "hard"
    return "expert"


def format_estimated_time(total_seconds: int) -> str:
    """Render a duration as ``"N minutes"`` or ``"H hours M minutes"``."""
    minutes = math.ceil(total_seconds / 60)
    if minutes < 60:
        return f"{minutes} minutes"
    return f"{minutes // 60} hours {minutes % 60} minutes"


class IrregularPuzzleGenerator:
    """Generate irregular jigsaw puzzles and answer play-loop queries about them."""

    def __init__(self, config: Optional[Settings] = None):
        """Initialize the generator.

        Args:
            config: Settings to use; the cached application settings by default.
        """
        self.settings = config or get_settings()

    def validate_params(
        self,
        image: ImageSource,
        grid_size: GridSize,
        name: str,
        expansion_ratio: float,
    ) -> None:
        """Reject out-of-range generation parameters.

        Raises:
            InvalidParameterError: On an empty image or name, a grid outside
                the supported range or an expansion ratio outside its range.
        """
        s = self.settings
        if not image:
            raise InvalidParameterError("Image must not be empty")

        if not name or not name.strip():
            raise InvalidParameterError("Puzzle name must not be empty")

        if grid_size.rows < s.MIN_GRID_DIMENSION or grid_size.cols < s.MIN_GRID_DIMENSION:
            raise InvalidParameterError(
                f"Grid must be at least {s.MIN_GRID_DIMENSION}x{s.MIN_GRID_DIMENSION}, "
                f"got {grid_size.rows}x{grid_size.cols}"
            )

        if grid_size.rows > s.MAX_GRID_DIMENSION or grid_size.cols > s.MAX_GRID_DIMENSION:
            raise InvalidParameterError(
                f"Grid must be at most {s.MAX_GRID_DIMENSION}x{s.MAX_GRID_DIMENSION}, "
                f"got {grid_size.rows}x{grid_size.cols}"
            )

        if not s.MIN_EXPANSION_RATIO <= expansion_ratio <= s.MAX_EXPANSION_RATIO:
            raise InvalidParameterError(
                f"Expansion ratio must be between {s.MIN_EXPANSION_RATIO} and {s.MAX_EXPANSION_RATIO}, "
                f"got {expansion_ratio}"
            )

    async def generate(
        self,
        image: ImageSource,
        grid_size: GridSize,
        name: str,
        expansion_ratio: Optional[float] = None,
        seed: int = 0,
    ) -> PuzzleConfig:
        """Generate a complete irregular puzzle.

        Args:
            image: Image URL, ``data:`` URI or raw bytes; a local path only when
                ``ALLOW_LOCAL_PATHS`` is enabled.
            grid_size: Rows and columns, each between 2 and 8.
            name: Display name.
            expansion_ratio: Growth of each piece into its neighbors, 0.2-0.8.
            seed: Non-negative puzzle seed; the same seed reproduces the same geometry.

        Returns:
            The generated puzzle.

        Raises:
            InvalidParameterError: If any parameter is out of range.
            ImageLoadError: If the image cannot be fetched or decoded.
            RenderingContextError: If the raster backend is unavailable.
        """
        s = self.settings
        if expansion_ratio is None:
            expansion_ratio = s.DEFAULT_EXPANSION_RATIO
        self.validate_params(image, grid_size, name, expansion_ratio)
        if seed < 0:
            raise InvalidParameterError(f"Seed must be non-negative, got {seed}")

        started = time.perf_counter()
        slicer = ImageSlicer(backend=s.RASTER_BACKEND)

        source_image = await load_image_async(
            image, s.IMAGE_FETCH_TIMEOUT, s.MAX_IMAGE_BYTES, allow_local_paths=s.ALLOW_LOCAL_PATHS
        )
        valid, message = validate_image_for_slicing(
            source_image.width, source_image.height, grid_size, s.MIN_PIECE_SIZE
        )
        if not valid:
            logger.warning("Source image %dx%d: %s", source_image.width, source_image.height, message)

        layout = create_grid_layout(grid_size, s.TARGET_SIZE, expansion_ratio)
        edge_map = EdgePatternGenerator(
            base_intensity=s.BASE_INTENSITY,
            knob_probability=s.KNOB_PROBABILITY,
            puzzle_seed=seed,
        ).generate_puzzle_edges(grid_size)

        source = await asyncio.to_thread(slicer.prepare_source, source_image, layout)
        # Materialize pixel data before worker threads share the surface
        _ = source.pixels

        loop = asyncio.get_running_loop()
        with ThreadPoolExecutor(max_workers=s.MAX_WORKERS) as executor:
            tasks = [
                loop.run_in_executor(
                    executor,
                    functools.partial(self._build_piece, index, layout, edge_map, slicer, source),
                )
                for index in range(grid_size.total)
            ]
            pieces = await asyncio.gather(*tasks)

        self.reset_puzzle(pieces, rng=random.Random(seed))

        now = datetime.now(timezone.utc)
        config = PuzzleConfig(
            id=str(uuid.uuid4()),
            name=name,
            original_image=image if isinstance(image, str) else bytes_to_data_uri(image),
            grid_size=grid_size,
            difficulty=calculate_difficulty(grid_size),
            pieces=tuple(pieces),
            grid_layout=layout,
            seed=seed,
            created_at=now,
            updated_at=now,
        )

        logger.info(
            "Generated %s puzzle %r: %dx%d grid, %d pieces in %.2fs",
            config.difficulty,
            name,
            grid_size.rows,
            grid_size.cols,
            len(pieces),
            time.perf_counter() - started,
        )
        return config

    async def generate_simple(self, image: ImageSource, preset: str = "3x3", seed: int = 0) -> PuzzleConfig:
        """Generate a puzzle from a named grid preset such as ``"4x4"``."""
        grid_size = GRID_PRESETS.get(preset)
        if grid_size is None:
            raise InvalidParameterError(f"Unknown grid preset {preset!r}, expected one of {sorted(GRID_PRESETS)}")
        return await self.generate(image, grid_size, f"Irregular puzzle {preset}", seed=seed)

    def _build_piece(
        self,
        index: int,
        layout: GridLayout,
        edge_map: EdgePatternMap,
        slicer: ImageSlicer,
        source: PillowSurface,
    ) -> PuzzlePiece:
        """Compute the geometry, bitmap and clip path of one piece."""
        grid_size = layout.grid_size
        row, col = index_to_grid_coord(index, grid_size)

        edges = EdgePatternGenerator.extract_piece_edges(index, edge_map, strict=__debug__)
        expansions = calculate_expansions(row, col, grid_size, layout.expansion_ratio)
        base_position = calculate_base_position(index, layout)
        expanded_size = calculate_expanded_size(layout.base_size, expansions)
        expanded_position = calculate_expanded_position(base_position, layout.base_size, expansions)

        image_data = slicer.slice_piece(source, expanded_position, expanded_size)
        clip_path = generate_clip_path(edges, expanded_size, layout.base_size, expansions)
        logger.debug("Built piece %d at (%d, %d)", index, row, col)

        return PuzzlePiece(
            id=str(index),
            grid_row=row,
            grid_col=col,
            correct_slot=grid_coord_to_index(row, col, grid_size),
            base_position=base_position,
            base_size=layout.base_size,
            expanded_position=expanded_position,
            expanded_size=expanded_size,
            expansions=expansions,
            edges=edges,
            clip_path=clip_path,
            image_data=image_data,
            snap_targets=calculate_snap_targets(base_position, self.settings.SNAP_TOLERANCE),
        )

    def validate_completion(
        self,
        pieces: Iterable[PuzzlePiece],
        tolerance: Optional[float] = None,
    ) -> CompletionStatus:
        """Count pieces placed within ``tolerance`` of their own cell.

        Updates each piece's ``is_correct`` flag as a side effect.
        """
        if tolerance is None:
            tolerance = self.settings.COMPLETION_TOLERANCE

        correct_pieces = 0
        total_pieces = 0
        for piece in pieces:
            total_pieces += 1
            piece.is_correct = is_within_tolerance(piece.base_position, Position(x=piece.x, y=piece.y), tolerance)
            if piece.is_correct:
                correct_pieces += 1

        completion_rate = round(correct_pieces / total_pieces * 100) if total_pieces else 0
        return CompletionStatus(
            is_complete=total_pieces > 0 and correct_pieces == total_pieces,
            correct_pieces=correct_pieces,
            total_pieces=total_pieces,
            completion_rate=completion_rate,
        )

    def reset_puzzle(self, pieces: Iterable[PuzzlePiece], rng: Optional[random.Random] = None) -> None:
        """Scatter pieces off the board with random right-angle rotations.

        Only play state changes; geometry and bitmaps are untouched.
        """
        rng = rng or random.Random()
        board = float(self.settings.TARGET_SIZE)

        for piece in pieces:
            piece.x = board + rng.random() * SCATTER_SPAN
            piece.y = board * 0.75 + rng.random() * SCATTER_SPAN
            piece.rotation = rng.choice(RIGHT_ANGLES)
            piece.is_correct = False
            piece.is_draggable = True

    def get_puzzle_stats(self, config: PuzzleConfig) -> PuzzleStatsResponse:
        """Summarize a puzzle's pieces, edge types and expected solve time."""
        counts = {"flat": 0, "knob": 0, "hole": 0}
        for piece in config.pieces:
            for edge in piece.edges.as_tuple():
                counts[edge.type] += 1

        total_pieces = len(config.pieces)
        return PuzzleStatsResponse(
            total_pieces=total_pieces,
            draggable_pieces=sum(1 for p in config.pieces if p.is_draggable),
            fixed_pieces=0,
            edge_types=EdgeTypeCounts(**counts),
            difficulty=config.difficulty,
            estimated_time=format_estimated_time(total_pieces * self.settings.SECONDS_PER_PIECE),
        )


# Singleton instance
_puzzle_generator: Optional[IrregularPuzzleGenerator] = None


def get_puzzle_generator() -> IrregularPuzzleGenerator:
    """Get the singleton IrregularPuzzleGenerator instance."""
    global _puzzle_generator
    if _puzzle_generator is None:
        _puzzle_generator = IrregularPuzzleGenerator()
    return _puzzle_generator
