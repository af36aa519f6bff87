from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings configuration."""

    # API settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Irregular Puzzle API"

    # CORS settings
    BACKEND_CORS_ORIGINS: list[str] = ["*"]

    # Board layout
    TARGET_SIZE: int = 400
    DEFAULT_EXPANSION_RATIO: float = 0.4
    MIN_EXPANSION_RATIO: float = 0.2
    MAX_EXPANSION_RATIO: float = 0.8
    MIN_GRID_DIMENSION: int = 2
    MAX_GRID_DIMENSION: int = 8

    # Edge pattern settings
    BASE_INTENSITY: float = 0.5
    KNOB_PROBABILITY: float = 0.7

    # Play-loop tolerances (pixels)
    SNAP_TOLERANCE: float = 20.0
    COMPLETION_TOLERANCE: float = 20.0

    # Source image settings
    MIN_PIECE_SIZE: int = 50
    IMAGE_FETCH_TIMEOUT: float = 30.0
    MAX_IMAGE_BYTES: int = 10 * 1024 * 1024  # 10MB
    RASTER_BACKEND: str = "pillow"
    # Read plain image strings as server-side files; off for the HTTP surface
    ALLOW_LOCAL_PATHS: bool = False

    # Generation
    MAX_WORKERS: int = 4
    SECONDS_PER_PIECE: int = 30

    class Config:
        """Pydantic configuration class."""

        case_sensitive = True
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Create instance
settings = get_settings()
