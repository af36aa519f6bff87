"""Data models for generated puzzles and the HTTP surface."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from irregular_puzzle.models.geometry import (
    EdgePatterns,
    ExpansionInfo,
    GridLayout,
    GridSize,
    Position,
    Size,
    SnapTarget,
)

Difficulty = Literal["easy", "medium", "hard", "expert"]


@dataclass
class PuzzlePiece:
    """A single irregular puzzle piece.

    Geometry fields are fixed at generation time. Only ``x``, ``y``,
    ``rotation`` and ``is_correct`` are mutated afterwards, by the play loop.
    """

    id: str
    grid_row: int
    grid_col: int
    correct_slot: int
    base_position: Position
    base_size: Size
    expanded_position: Position
    expanded_size: Size
    expansions: ExpansionInfo
    edges: EdgePatterns
    clip_path: str
    # PNG data URL of the expanded bounding box
    image_data: str
    snap_targets: List[SnapTarget] = field(default_factory=list)

    # Runtime play state
    x: float = 0.0
    y: float = 0.0
    rotation: int = 0
    is_correct: bool = False
    is_draggable: bool = True

    @property
    def width(self) -> float:
        """Rendered width (the expanded width)."""
        return self.expanded_size.width

    @property
    def height(self) -> float:
        """Rendered height (the expanded height)."""
        return self.expanded_size.height

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "gridRow": self.grid_row,
            "gridCol": self.grid_col,
            "correctSlot": self.correct_slot,
            "basePosition": self.base_position.to_dict(),
            "baseSize": self.base_size.to_dict(),
            "expandedPosition": self.expanded_position.to_dict(),
            "expandedSize": self.expanded_size.to_dict(),
            "expansions": self.expansions.to_dict(),
            "edges": self.edges.to_dict(),
            "clipPath": self.clip_path,
            "imageData": self.image_data,
            "snapTargets": [t.to_dict() for t in self.snap_targets],
            "width": self.width,
            "height": self.height,
            "x": self.x,
            "y": self.y,
            "rotation": self.rotation,
            "isCorrect": self.is_correct,
            "isDraggable": self.is_draggable,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PuzzlePiece":
        """Create from dictionary; ``width`` and ``height`` are derived and ignored."""
        return cls(
            id=str(data["id"]),
            grid_row=int(data["gridRow"]),
            grid_col=int(data["gridCol"]),
            correct_slot=int(data["correctSlot"]),
            base_position=Position.from_dict(data["basePosition"]),
            base_size=Size.from_dict(data["baseSize"]),
            expanded_position=Position.from_dict(data["expandedPosition"]),
            expanded_size=Size.from_dict(data["expandedSize"]),
            expansions=ExpansionInfo.from_dict(data["expansions"]),
            edges=EdgePatterns.from_dict(data["edges"]),
            clip_path=data["clipPath"],
            image_data=data["imageData"],
            snap_targets=[SnapTarget.from_dict(t) for t in data.get("snapTargets", [])],
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            rotation=int(data.get("rotation", 0)),
            is_correct=bool(data.get("isCorrect", False)),
            is_draggable=bool(data.get("isDraggable", True)),
        )


@dataclass(frozen=True)
class PuzzleConfig:
    """An immutable, fully generated irregular puzzle."""

    id: str
    name: str
    original_image: str
    grid_size: GridSize
    difficulty: Difficulty
    pieces: Tuple[PuzzlePiece, ...]
    grid_layout: GridLayout
    seed: int
    created_at: datetime
    updated_at: datetime
    piece_shape: str = "irregular"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-safe dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "originalImage": self.original_image,
            "gridSize": self.grid_size.to_dict(),
            "pieceShape": self.piece_shape,
            "difficulty": self.difficulty,
            "pieces": [p.to_dict() for p in self.pieces],
            "gridLayout": self.grid_layout.to_dict(),
            "seed": self.seed,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PuzzleConfig":
        """Reload a puzzle serialized with ``to_dict``."""
        return cls(
            id=data["id"],
            name=data["name"],
            original_image=data["originalImage"],
            grid_size=GridSize.from_dict(data["gridSize"]),
            difficulty=data["difficulty"],
            pieces=tuple(PuzzlePiece.from_dict(p) for p in data["pieces"]),
            grid_layout=GridLayout.from_dict(data["gridLayout"]),
            seed=int(data["seed"]),
            created_at=datetime.fromisoformat(data["createdAt"]),
            updated_at=datetime.fromisoformat(data["updatedAt"]),
            piece_shape=data.get("pieceShape", "irregular"),
        )


class GeneratePuzzleRequest(BaseModel):
    """Request model for generating an irregular puzzle."""

    image: str = Field(..., description="Image http(s) URL or data URI")
    name: str = Field(..., description="Display name of the puzzle")
    rows: int = Field(..., description="Number of grid rows (2-8)")
    cols: int = Field(..., description="Number of grid columns (2-8)")
    expansion_ratio: Optional[float] = Field(default=None, description="Expansion into neighbor cells (0.2-0.8)")
    seed: int = Field(default=0, ge=0, description="Puzzle seed for reproducible edges")


class EdgeTypeCounts(BaseModel):
    """Counts of each edge type across all pieces."""

    flat: int
    knob: int
    hole: int


class PuzzleStatsResponse(BaseModel):
    """Response model for puzzle statistics."""

    total_pieces: int
    draggable_pieces: int
    fixed_pieces: int
    edge_types: EdgeTypeCounts
    difficulty: str
    estimated_time: str
