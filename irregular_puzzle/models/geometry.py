"""Value types describing puzzle grid geometry and edge shapes."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Literal, Optional, Tuple

EdgeType = Literal["flat", "knob", "hole"]
Direction = Literal["top", "right", "bottom", "left"]

DIRECTIONS: Tuple[Direction, ...] = ("top", "right", "bottom", "left")

# Mirror side of a shared edge as seen from the neighboring piece
OPPOSITE_DIRECTION: Dict[str, Direction] = {
    "top": "bottom",
    "right": "left",
    "bottom": "top",
    "left": "right",
}


@dataclass(frozen=True)
class GridSize:
    """Number of rows and columns in a puzzle grid."""

    rows: int
    cols: int

    @property
    def total(self) -> int:
        """Total number of cells in the grid."""
        return self.rows * self.cols

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GridSize":
        """Create from dictionary."""
        return cls(rows=int(data["rows"]), cols=int(data["cols"]))


@dataclass(frozen=True)
class Position:
    """A point in board pixel space."""

    x: float
    y: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Position":
        """Create from dictionary."""
        return cls(x=float(data["x"]), y=float(data["y"]))


@dataclass(frozen=True)
class Size:
    """A width/height pair in board pixel space."""

    width: float
    height: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Size":
        """Create from dictionary."""
        return cls(width=float(data["width"]), height=float(data["height"]))


@dataclass(frozen=True)
class EdgePattern:
    """Shape of a single piece edge.

    Two adjacent pieces see the same shared edge as patterns with identical
    ``seed_value`` and ``intensity`` but opposite knob/hole types.
    """

    # 'flat', 'knob' (protrudes) or 'hole' (indents)
    type: EdgeType
    # Relative tab height, 0.3-0.7 for knob/hole, 0 for flat
    intensity: float
    # Seed shared by both sides of an edge so their tab shapes match
    seed_value: int

    @property
    def is_flat(self) -> bool:
        """Whether this edge has no tab."""
        return self.type == "flat"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"type": self.type, "intensity": self.intensity, "seedValue": self.seed_value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EdgePattern":
        """Create from dictionary."""
        return cls(
            type=data["type"],
            intensity=float(data.get("intensity", 0.0)),
            seed_value=int(data.get("seedValue", data.get("seed_value", 0))),
        )


FLAT_EDGE = EdgePattern(type="flat", intensity=0.0, seed_value=0)


@dataclass(frozen=True)
class EdgePatterns:
    """The four edge patterns of one piece."""

    top: EdgePattern
    right: EdgePattern
    bottom: EdgePattern
    left: EdgePattern

    def get(self, direction: Direction) -> EdgePattern:
        """Return the pattern on the given side."""
        return getattr(self, direction)

    def as_tuple(self) -> Tuple[EdgePattern, EdgePattern, EdgePattern, EdgePattern]:
        """Return the patterns in clockwise order starting at the top."""
        return (self.top, self.right, self.bottom, self.left)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {d: self.get(d).to_dict() for d in DIRECTIONS}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EdgePatterns":
        """Create from dictionary."""
        return cls(**{d: EdgePattern.from_dict(data[d]) for d in DIRECTIONS})


@dataclass(frozen=True)
class ExpansionInfo:
    """Per-side expansion ratio of a piece into its neighboring cells."""

    top: float
    right: float
    bottom: float
    left: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExpansionInfo":
        """Create from dictionary."""
        return cls(**{d: float(data[d]) for d in DIRECTIONS})


@dataclass(frozen=True)
class SnapTarget:
    """Position and radius within which a dragged piece counts as placed."""

    position: Position
    tolerance: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"position": self.position.to_dict(), "tolerance": self.tolerance}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SnapTarget":
        """Create from dictionary."""
        return cls(position=Position.from_dict(data["position"]), tolerance=float(data["tolerance"]))


@dataclass(frozen=True)
class Adjacency:
    """Indices of the neighboring cells, None where the grid ends."""

    top: Optional[int] = None
    right: Optional[int] = None
    bottom: Optional[int] = None
    left: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Adjacency":
        """Create from dictionary."""
        return cls(**{d: data.get(d) for d in DIRECTIONS})


@dataclass(frozen=True)
class GridLayout:
    """Grid descriptor shared by every piece of a puzzle."""

    grid_size: GridSize
    base_size: Size
    expansion_ratio: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "gridSize": self.grid_size.to_dict(),
            "baseSize": self.base_size.to_dict(),
            "expansionRatio": self.expansion_ratio,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GridLayout":
        """Create from dictionary."""
        return cls(
            grid_size=GridSize.from_dict(data["gridSize"]),
            base_size=Size.from_dict(data["baseSize"]),
            expansion_ratio=float(data["expansionRatio"]),
        )
