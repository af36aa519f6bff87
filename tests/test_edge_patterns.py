"""Tests for complementary edge pattern generation."""

import pytest

from irregular_puzzle.models.geometry import DIRECTIONS, FLAT_EDGE, EdgePattern, GridSize
from irregular_puzzle.services.edge_patterns import (
    MAX_INTENSITY,
    MIN_INTENSITY,
    EdgePatternGenerator,
    are_edges_compatible,
    calculate_dynamic_intensity,
    edge_key,
    generate_edge_seed,
    generate_shape_points,
)


class TestComplementaryPair:
    """Tests for generating the two sides of one edge."""

    def test_interlocking_pair(self) -> None:
        """An interlocking pair is one knob and one hole sharing seed and intensity."""
        primary, complement = EdgePatternGenerator(knob_probability=1.0).generate_complementary_pair(102, 0.5)
        assert {primary.type, complement.type} == {"knob", "hole"}
        assert primary.seed_value == complement.seed_value == 102
        assert primary.intensity == complement.intensity == 0.5

    def test_flat_pair(self) -> None:
        """A non-interlocking pair is two flat edges with the same seed."""
        primary, complement = EdgePatternGenerator(knob_probability=0.0).generate_complementary_pair(102, 0.5)
        assert primary.type == complement.type == "flat"
        assert primary.seed_value == complement.seed_value == 102

    def test_intensity_is_clamped(self) -> None:
        """Requested intensities are clamped to the supported range."""
        generator = EdgePatternGenerator(knob_probability=1.0)
        high, _ = generator.generate_complementary_pair(5, 2.0)
        low, _ = generator.generate_complementary_pair(5, 0.0)
        assert high.intensity == MAX_INTENSITY
        assert low.intensity == MIN_INTENSITY

    def test_pair_is_deterministic(self) -> None:
        """The same seed always yields the same pair."""
        generator = EdgePatternGenerator()
        assert generator.generate_complementary_pair(1101) == generator.generate_complementary_pair(1101)

    def test_negative_puzzle_seed_rejected(self) -> None:
        """Puzzle seeds must be non-negative."""
        with pytest.raises(ValueError):
            EdgePatternGenerator(puzzle_seed=-3)


class TestPuzzleEdges:
    """Tests for the whole-grid edge map."""

    @pytest.mark.parametrize("rows,cols", [(2, 2), (3, 3), (4, 4), (2, 5), (8, 8)])
    @pytest.mark.parametrize("seed", [0, 1, 17])
    def test_every_side_is_covered(self, rows: int, cols: int, seed: int) -> None:
        """Every side of every piece has exactly one entry."""
        grid = GridSize(rows=rows, cols=cols)
        edge_map = EdgePatternGenerator(puzzle_seed=seed).generate_puzzle_edges(grid)
        assert len(edge_map) == 4 * rows * cols
        for index in range(rows * cols):
            for direction in DIRECTIONS:
                assert edge_key(index, direction) in edge_map

    @pytest.mark.parametrize("rows,cols", [(2, 2), (3, 3), (4, 6), (8, 8)])
    @pytest.mark.parametrize("seed", [0, 3, 42])
    def test_shared_edges_are_complementary(self, rows: int, cols: int, seed: int) -> None:
        """Facing sides of neighbors are knob/hole with one seed, or both flat."""
        grid = GridSize(rows=rows, cols=cols)
        edge_map = EdgePatternGenerator(puzzle_seed=seed).generate_puzzle_edges(grid)

        for row in range(rows):
            for col in range(cols):
                index = row * cols + col
                if col < cols - 1:
                    assert are_edges_compatible(edge_map[f"{index}-right"], edge_map[f"{index + 1}-left"])
                if row < rows - 1:
                    assert are_edges_compatible(edge_map[f"{index}-bottom"], edge_map[f"{index + cols}-top"])

    @pytest.mark.parametrize("rows,cols", [(2, 2), (3, 4), (8, 8)])
    def test_border_edges_are_flat(self, rows: int, cols: int) -> None:
        """Every outward-facing side is flat."""
        grid = GridSize(rows=rows, cols=cols)
        edge_map = EdgePatternGenerator().generate_puzzle_edges(grid)

        for col in range(cols):
            assert edge_map[f"{col}-top"] == FLAT_EDGE
            assert edge_map[f"{(rows - 1) * cols + col}-bottom"] == FLAT_EDGE
        for row in range(rows):
            assert edge_map[f"{row * cols}-left"] == FLAT_EDGE
            assert edge_map[f"{row * cols + cols - 1}-right"] == FLAT_EDGE

    def test_center_of_3x3_interlocks_on_all_sides(self) -> None:
        """With the default seed the center piece of a 3x3 grid has four tabs."""
        edge_map = EdgePatternGenerator().generate_puzzle_edges(GridSize(rows=3, cols=3))
        center = EdgePatternGenerator.extract_piece_edges(4, edge_map)
        assert all(not edge.is_flat for edge in center.as_tuple())

    def test_corner_of_3x3_has_two_flat_sides(self) -> None:
        """With the default seed the top-left corner is flat on top and left only."""
        edge_map = EdgePatternGenerator().generate_puzzle_edges(GridSize(rows=3, cols=3))
        corner = EdgePatternGenerator.extract_piece_edges(0, edge_map)
        assert corner.top.is_flat
        assert corner.left.is_flat
        assert not corner.right.is_flat
        assert not corner.bottom.is_flat

    def test_puzzle_seed_changes_edges(self) -> None:
        """Different puzzle seeds give different edge seeds."""
        grid = GridSize(rows=4, cols=4)
        first = EdgePatternGenerator(puzzle_seed=0).generate_puzzle_edges(grid)
        second = EdgePatternGenerator(puzzle_seed=1).generate_puzzle_edges(grid)
        assert first["5-right"].seed_value != second["5-right"].seed_value


class TestExtractPieceEdges:
    """Tests for looking up a piece's edges."""

    def test_missing_key_falls_back_to_flat(self) -> None:
        """Missing sides default to flat when not strict."""
        edges = EdgePatternGenerator.extract_piece_edges(0, {})
        assert edges.as_tuple() == (FLAT_EDGE, FLAT_EDGE, FLAT_EDGE, FLAT_EDGE)

    def test_missing_key_asserts_when_strict(self) -> None:
        """Missing sides are a programming error in strict mode."""
        with pytest.raises(AssertionError):
            EdgePatternGenerator.extract_piece_edges(0, {}, strict=True)


class TestIntensityAndSeeds:
    """Tests for per-cell intensity and edge seeds."""

    def test_center_is_more_intense_than_corner(self) -> None:
        """Intensity grows toward the grid center."""
        grid = GridSize(rows=3, cols=3)
        assert calculate_dynamic_intensity(0.5, 1, 1, grid) == pytest.approx(0.7)
        assert calculate_dynamic_intensity(0.5, 0, 0, grid) == pytest.approx(0.5)

    @pytest.mark.parametrize("base", [0.0, 0.5, 1.0])
    def test_intensity_in_range(self, base: float) -> None:
        """Dynamic intensity always lies in [0.3, 0.7]."""
        grid = GridSize(rows=5, cols=7)
        for row in range(grid.rows):
            for col in range(grid.cols):
                assert MIN_INTENSITY <= calculate_dynamic_intensity(base, row, col, grid) <= MAX_INTENSITY

    def test_edge_seeds(self) -> None:
        """Right and bottom edges of a cell get distinct seeds."""
        assert generate_edge_seed(0, 1, "bottom") == 102
        assert generate_edge_seed(1, 1, "right") == 1101
        assert generate_edge_seed(1, 1, "right", puzzle_seed=2) == 201101


class TestShapePoints:
    """Tests for the tab profile of a single edge."""

    def test_flat_edge(self) -> None:
        """A flat edge is just its two end points."""
        assert generate_shape_points("flat", 0.0, 0, 100.0) == [(0.0, 0.0), (100.0, 0.0)]

    def test_knob_protrudes_and_hole_indents(self) -> None:
        """Knobs have positive heights, holes the mirrored negative ones."""
        knob = generate_shape_points("knob", 0.5, 1101, 100.0)
        hole = generate_shape_points("hole", 0.5, 1101, 100.0)
        assert len(knob) == len(hole) == 7
        assert max(y for _, y in knob) > 0
        assert min(y for _, y in hole) < 0
        assert [(x, -y) for x, y in hole] == [(x, y + 0.0) for x, y in knob]

    def test_peak_height_jitter(self) -> None:
        """The peak lies within 20% of edge length times intensity."""
        for seed in range(1, 200, 7):
            points = generate_shape_points("knob", 0.5, seed, 100.0)
            assert 40.0 <= points[3][1] < 60.0

    def test_endpoints_are_fixed(self) -> None:
        """Tabs start and end on the straight edge."""
        points = generate_shape_points("knob", 0.6, 33, 80.0)
        assert points[0] == (0.0, 0.0)
        assert points[-1] == (80.0, 0.0)

    def test_max_height_caps_tab(self) -> None:
        """A height cap limits the peak."""
        points = generate_shape_points("hole", 0.7, 33, 100.0, max_height=10.0)
        assert min(y for _, y in points) == -10.0


class TestCompatibility:
    """Tests for are_edges_compatible."""

    def test_flat_pair_is_compatible(self) -> None:
        """Two flat edges are compatible."""
        assert are_edges_compatible(FLAT_EDGE, FLAT_EDGE)

    def test_knob_hole_same_seed(self) -> None:
        """A knob and hole with the same seed interlock."""
        assert are_edges_compatible(EdgePattern("knob", 0.5, 9), EdgePattern("hole", 0.5, 9))

    @pytest.mark.parametrize(
        "first,second",
        [
            (EdgePattern("knob", 0.5, 9), EdgePattern("hole", 0.5, 10)),
            (EdgePattern("knob", 0.5, 9), EdgePattern("knob", 0.5, 9)),
            (EdgePattern("knob", 0.5, 9), EdgePattern("flat", 0.0, 9)),
        ],
    )
    def test_incompatible(self, first: EdgePattern, second: EdgePattern) -> None:
        """Mismatched seeds, equal types or knob-against-flat do not interlock."""
        assert not are_edges_compatible(first, second)
