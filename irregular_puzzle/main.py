"""Main FastAPI application module for irregular puzzle generation."""

import base64
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from irregular_puzzle.config import settings
from irregular_puzzle.errors import (
    ImageLoadError,
    InvalidParameterError,
    PuzzleGenerationError,
    RenderingContextError,
)
from irregular_puzzle.models.geometry import GridSize
from irregular_puzzle.models.puzzle_model import GeneratePuzzleRequest, PuzzleConfig, PuzzleStatsResponse
from irregular_puzzle.services.puzzle_generator import get_puzzle_generator

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(title=settings.PROJECT_NAME)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _to_http_error(error: PuzzleGenerationError) -> HTTPException:
    """Map a generation failure to an HTTP error."""
    if isinstance(error, InvalidParameterError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, ImageLoadError):
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, RenderingContextError):
        logger.error("Raster backend unavailable: %s", error)
        return HTTPException(status_code=500, detail=str(error))
    return HTTPException(status_code=500, detail="Puzzle generation failed")


async def _generate(
    image: str,
    name: str,
    rows: int,
    cols: int,
    expansion_ratio: Optional[float],
    seed: int,
) -> PuzzleConfig:
    generator = get_puzzle_generator()
    try:
        return await generator.generate(
            image,
            GridSize(rows=rows, cols=cols),
            name,
            expansion_ratio=expansion_ratio,
            seed=seed,
        )
    except PuzzleGenerationError as e:
        raise _to_http_error(e) from e


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post(f"{settings.API_V1_STR}/puzzle/irregular")
async def generate_puzzle(request: GeneratePuzzleRequest) -> Dict[str, Any]:
    """Generate an irregular puzzle from an image reference.

    Args:
        request: Image reference, name, grid and optional expansion ratio and seed.

    Returns:
        The serialized puzzle configuration.

    Raises:
        HTTPException: If parameters are invalid or the image cannot be loaded.
    """
    config = await _generate(
        request.image, request.name, request.rows, request.cols, request.expansion_ratio, request.seed
    )
    return config.to_dict()


@app.post(f"{settings.API_V1_STR}/puzzle/irregular/upload")
async def upload_puzzle(
    file: Optional[UploadFile] = File(None),
    name: str = Form(...),
    rows: int = Form(...),
    cols: int = Form(...),
    expansion_ratio: Optional[float] = Form(None),
    seed: int = Form(0),
) -> Dict[str, Any]:
    """Generate an irregular puzzle from an uploaded image file.

    Raises:
        HTTPException: If no file is given, it is too large, or generation fails.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")

    if file.size and file.size > settings.MAX_IMAGE_BYTES:
        raise HTTPException(status_code=413, detail="File too large")

    contents = await file.read()
    content_type = file.content_type or "application/octet-stream"
    image = f"data:{content_type};base64,{base64.b64encode(contents).decode('utf-8')}"

    config = await _generate(image, name, rows, cols, expansion_ratio, seed)
    return config.to_dict()


@app.post(f"{settings.API_V1_STR}/puzzle/irregular/stats", response_model=PuzzleStatsResponse)
async def puzzle_stats(request: GeneratePuzzleRequest) -> PuzzleStatsResponse:
    """Generate a puzzle and report its piece and edge statistics."""
    config = await _generate(
        request.image, request.name, request.rows, request.cols, request.expansion_ratio, request.seed
    )
    return get_puzzle_generator().get_puzzle_stats(config)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
