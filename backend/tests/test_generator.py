"""Tests for maze generation algorithms."""

import logging
import random
from collections import Counter, deque

import pytest

from labyrinth.core import (
    GENERATION_ALGORITHMS,
    CellType,
    InvalidDimensionsError,
    Maze,
    MazeGenerator,
    Position,
    UnknownAlgorithmError,
    has_valid_path,
)
from labyrinth.core.generator import DisjointSet
from labyrinth.core.grid import DIRECTIONS, can_move

SIZES = [(5, 5), (7, 7), (11, 11), (15, 11), (21, 21), (31, 31)]
LATTICE_ALGORITHMS = ["kruskal", "wilson"]
FULL_GRID_ALGORITHMS = ["recursive", "prim"]


def generate(width: int, height: int, algorithm: str, seed: int = 7) -> Maze:
    return MazeGenerator(width, height, rng=random.Random(seed)).generate(algorithm)


def open_passages(maze: Maze) -> int:
    """Count open walls between neighboring cells (each counted once)."""
    count = 0
    for row in maze.cells:
        for cell in row:
            count += (not cell.walls.east) + (not cell.walls.south)
    return count


def reachable(maze: Maze) -> set[Position]:
    seen = {maze.start}
    queue = deque([maze.start])
    while queue:
        position = queue.popleft()
        cell = maze.cell_at(position)
        for direction in DIRECTIONS:
            nxt = position.move(direction)
            if maze.is_valid(nxt.x, nxt.y) and nxt not in seen and can_move(cell, direction):
                seen.add(nxt)
                queue.append(nxt)
    return seen


def rooms(maze: Maze) -> list[Position]:
    return [
        Position(x, y)
        for y in range(1, maze.height - 1, 2)
        for x in range(1, maze.width - 1, 2)
    ]


class TestShape:
    """Tests for dimensions, start and end."""

    @pytest.mark.parametrize("algorithm", GENERATION_ALGORITHMS)
    @pytest.mark.parametrize("width,height", SIZES)
    def test_dimensions_and_endpoints(self, algorithm, width, height):
        """Test that the maze matches the requested size with fixed endpoints."""
        maze = generate(width, height, algorithm)

        assert maze.width == width
        assert maze.height == height
        assert len(maze.cells) == height
        assert all(len(row) == width for row in maze.cells)
        assert maze.start == Position(1, 1)
        assert maze.end == Position(width - 2, height - 2)
        assert maze.cell_at(maze.start).type == CellType.START
        assert maze.cell_at(maze.end).type == CellType.END
        assert maze.truncated is False

    @pytest.mark.parametrize("algorithm", GENERATION_ALGORITHMS)
    def test_tiny_maze_start_equals_end(self, algorithm):
        """Test that on 3x3 start and end coincide and the cell ends as 'end'."""
        maze = generate(3, 3, algorithm)

        assert maze.start == Position(1, 1)
        assert maze.end == Position(1, 1)
        assert maze.cells[1][1].type == CellType.END
        assert has_valid_path(maze) is True

    @pytest.mark.parametrize(
        "width,height",
        [(2, 5), (5, 2), (1, 1), (0, 7), (-3, 5)],
    )
    def test_invalid_dimensions(self, width, height):
        """Test that sizes below 3 fail fast."""
        with pytest.raises(InvalidDimensionsError, match="at least 3x3"):
            MazeGenerator(width, height)

    def test_unknown_algorithm(self):
        """Test that an unknown algorithm name is rejected."""
        generator = MazeGenerator(5, 5)
        with pytest.raises(UnknownAlgorithmError, match="Unknown generation algorithm"):
            generator.generate("eller")
        with pytest.raises(UnknownAlgorithmError):
            generator.generate_step_by_step("eller")


class TestWalls:
    """Tests for wall structure invariants."""

    @pytest.mark.parametrize("algorithm", GENERATION_ALGORITHMS)
    @pytest.mark.parametrize("width,height", [(11, 11), (15, 11)])
    def test_walls_are_booleans_and_symmetric(self, algorithm, width, height):
        """Test that neighboring cells agree on the wall between them."""
        maze = generate(width, height, algorithm)

        for y in range(height):
            for x in range(width):
                walls = maze.cells[y][x].walls
                for flag in (walls.north, walls.south, walls.east, walls.west):
                    assert isinstance(flag, bool)
                if y > 0:
                    assert walls.north == maze.cells[y - 1][x].walls.south
                if x > 0:
                    assert walls.west == maze.cells[y][x - 1].walls.east

    @pytest.mark.parametrize("algorithm", GENERATION_ALGORITHMS)
    def test_boundary_walls(self, algorithm):
        """Test that outward-facing walls on the boundary are never removed."""
        maze = generate(15, 11, algorithm)

        for x in range(maze.width):
            assert maze.cells[0][x].walls.north is True
            assert maze.cells[maze.height - 1][x].walls.south is True
        for y in range(maze.height):
            assert maze.cells[y][0].walls.west is True
            assert maze.cells[y][maze.width - 1].walls.east is True

    @pytest.mark.parametrize("algorithm", LATTICE_ALGORITHMS)
    def test_lattice_algorithms_leave_frame_and_pillars(self, algorithm):
        """Test that only rooms and the wall cells between them are carved."""
        maze = generate(15, 11, algorithm)

        for y in range(maze.height):
            for x in range(maze.width):
                on_frame = x in (0, maze.width - 1) or y in (0, maze.height - 1)
                pillar = x % 2 == 0 and y % 2 == 0
                if on_frame or pillar:
                    assert maze.cells[y][x].type == CellType.WALL


class TestConnectivity:
    """Tests for spanning-tree connectivity."""

    @pytest.mark.parametrize("algorithm", GENERATION_ALGORITHMS)
    @pytest.mark.parametrize("width,height", SIZES)
    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_has_valid_path(self, algorithm, width, height, seed):
        """Test that end is always reachable from start."""
        maze = generate(width, height, algorithm, seed)
        assert has_valid_path(maze) is True

    @pytest.mark.parametrize("algorithm", FULL_GRID_ALGORITHMS)
    @pytest.mark.parametrize("width,height", [(5, 5), (11, 11), (15, 11)])
    def test_full_grid_spanning_tree(self, algorithm, width, height):
        """Test that every cell is reached through exactly width*height - 1 passages."""
        maze = generate(width, height, algorithm)

        assert len(reachable(maze)) == width * height
        assert open_passages(maze) == width * height - 1

    @pytest.mark.parametrize("algorithm", LATTICE_ALGORITHMS)
    @pytest.mark.parametrize("width,height", [(5, 5), (11, 11), (15, 11), (31, 31)])
    def test_lattice_spanning_tree(self, algorithm, width, height):
        """Test that every room is reachable and the rooms form a tree."""
        maze = generate(width, height, algorithm)
        room_cells = rooms(maze)

        assert set(room_cells) <= reachable(maze)
        # Each room-to-room link opens two walls
        assert open_passages(maze) == 2 * (len(room_cells) - 1)


class TestDeterminism:
    """Tests for the injected random source."""

    @pytest.mark.parametrize("algorithm", GENERATION_ALGORITHMS)
    def test_same_seed_same_maze(self, algorithm):
        """Test that identical seeds and config give identical mazes."""
        first = generate(21, 15, algorithm, seed=99)
        second = generate(21, 15, algorithm, seed=99)
        assert first.to_dict() == second.to_dict()

    @pytest.mark.parametrize("algorithm", GENERATION_ALGORITHMS)
    def test_different_seeds_differ(self, algorithm):
        """Test that the random source actually drives the layout."""
        first = generate(21, 21, algorithm, seed=1)
        second = generate(21, 21, algorithm, seed=2)
        assert first.to_dict() != second.to_dict()

    def test_unseeded_generator_works(self):
        """Test that omitting the random source still builds a valid maze."""
        maze = MazeGenerator(11, 11).generate("prim")
        assert has_valid_path(maze) is True


class TestWilson:
    """Tests specific to Wilson's algorithm."""

    def test_uniform_spanning_trees(self):
        """Test that the four spanning trees of a 2x2 room lattice are equally likely.

        On 5x5 the rooms form a 4-cycle; each spanning tree leaves exactly one
        of the four connecting cells uncarved.
        """
        generator = MazeGenerator(5, 5, rng=random.Random(2024))
        connectors = [Position(2, 1), Position(1, 2), Position(3, 2), Position(2, 3)]
        counts: Counter = Counter()

        trials = 2000
        for _ in range(trials):
            maze = generator.generate("wilson")
            closed = [c for c in connectors if maze.cell_at(c).type == CellType.WALL]
            assert len(closed) == 1
            counts[closed[0]] += 1

        assert set(counts) == set(connectors)
        for connector in connectors:
            # Expected 500 each; standard deviation is about 19
            assert 400 < counts[connector] < 600

    def test_iteration_cap_truncates(self, caplog):
        """Test that exhausting the walk cap returns a flagged partial maze."""
        generator = MazeGenerator(
            11, 11, rng=random.Random(5), wilson_walk_factor=0, wilson_iteration_factor=1
        )

        with caplog.at_level(logging.WARNING, logger="labyrinth.core.generator"):
            maze = generator.generate("wilson")

        assert maze.truncated is True
        assert maze.cell_at(maze.start).type == CellType.START
        assert maze.cell_at(maze.end).type == CellType.END
        assert has_valid_path(maze) is False
        assert "iteration cap" in caplog.text

    def test_no_walks_allowed(self):
        """Test a zero walk cap leaves only the start carved."""
        generator = MazeGenerator(7, 7, rng=random.Random(5), wilson_iteration_factor=0)
        maze = generator.generate("wilson")

        assert maze.truncated is True
        assert open_passages(maze) == 0


class TestKruskal:
    """Tests specific to Kruskal's algorithm."""

    def test_produces_varied_trees(self):
        """Test that different draws produce different spanning trees on 5x5."""
        generator = MazeGenerator(5, 5, rng=random.Random(11))
        connectors = [Position(2, 1), Position(1, 2), Position(3, 2), Position(2, 3)]
        seen = set()
        for _ in range(200):
            maze = generator.generate("kruskal")
            closed = tuple(c for c in connectors if maze.cell_at(c).type == CellType.WALL)
            assert len(closed) == 1
            seen.add(closed)
        assert len(seen) == 4


class TestDisjointSet:
    """Tests for the union-find helper."""

    def test_union_and_find(self):
        """Test merging sets and component counting."""
        sets = DisjointSet(5)
        assert sets.components == 5

        assert sets.union(0, 1) is True
        assert sets.union(3, 4) is True
        assert sets.union(1, 0) is False
        assert sets.components == 3

        assert sets.find(0) == sets.find(1)
        assert sets.find(3) == sets.find(4)
        assert sets.find(0) != sets.find(3)

        assert sets.union(1, 4) is True
        assert sets.components == 2
        assert len({sets.find(i) for i in (0, 1, 3, 4)}) == 1
        assert sets.find(2) == 2

    def test_long_chain_compresses(self):
        """Test that find flattens the path it walks."""
        sets = DisjointSet(6)
        for i in range(5):
            sets.union(i, i + 1)

        root = sets.find(5)
        for i in range(6):
            assert sets.find(i) == root
            assert sets.parent[i] == root
