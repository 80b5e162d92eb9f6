"""
Labyrinth Maze Generator

Carves connectivity into a closed grid using one of four algorithms:
- recursive: depth-first backtracking over neighbors at distance 1
- prim: randomized frontier growth over neighbors at distance 1
- kruskal: shuffled edges + union-find over the odd/odd room lattice
- wilson: loop-erased random walks over the odd/odd room lattice

Every algorithm is written once as a carving routine that yields lightweight
(type, position, direction) events while it mutates a private working maze.
generate() drains those events; generate_step_by_step() wraps each one in a
GenerationStep carrying a snapshot of the maze. Both consume the injected
random source identically, so they finish with the same maze.
"""

import logging
import random
from dataclasses import dataclass
from typing import Callable, Iterator, Literal, Optional

from labyrinth.core.errors import InvalidDimensionsError, UnknownAlgorithmError
from labyrinth.core.grid import (
    DIRECTIONS,
    CellType,
    Direction,
    Maze,
    Position,
    initialize,
    remove_wall_between,
)

logger = logging.getLogger(__name__)

GenerationAlgorithm = Literal["recursive", "prim", "kruskal", "wilson"]
GENERATION_ALGORITHMS: tuple[str, ...] = ("recursive", "prim", "kruskal", "wilson")

MIN_DIMENSION = 3

StepType = Literal["visit", "carve", "complete"]
CarveEvent = tuple[StepType, Position, Optional[Direction]]


@dataclass
class GenerationStep:
    """One step of an animated generation run."""
    type: StepType
    position: Position
    maze: Optional[Maze]
    direction: Optional[Direction] = None

    def to_dict(self, include_maze: bool = True) -> dict:
        """Convert to dictionary."""
        result = {
            "type": self.type,
            "position": self.position.to_dict(),
            "direction": self.direction.value if self.direction else None,
        }
        if include_maze and self.maze is not None:
            result["maze"] = self.maze.to_dict()
        return result


class DisjointSet:
    """Index-addressed union-find with path compression and union by size."""

    def __init__(self, size: int):
        self.parent = list(range(size))
        self.size = [1] * size
        self.components = size

    def find(self, index: int) -> int:
        root = index
        while self.parent[root] != root:
            root = self.parent[root]
        # Path compression
        while self.parent[index] != root:
            self.parent[index], index = root, self.parent[index]
        return root

    def union(self, a: int, b: int) -> bool:
        """Merge the sets holding a and b. Returns False if already merged."""
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return False
        if self.size[root_a] < self.size[root_b]:
            root_a, root_b = root_b, root_a
        self.parent[root_b] = root_a
        self.size[root_a] += self.size[root_b]
        self.components -= 1
        return True


class GenerationTrace:
    """
    Pull-based iterator over the steps of one generation run.

    Each step carries an independent copy of the maze at that instant. The
    last step is always "complete" with the finished maze. The trace is not
    restartable; a caller cancels it by simply not pulling any further.

    With snapshots=False the intermediate steps carry maze=None; the
    "complete" step still carries a copy of the finished maze.
    """

    def __init__(
        self,
        maze: Maze,
        events: Iterator[CarveEvent],
        finish: Callable[[Maze], None],
        snapshots: bool = True,
    ):
        self._maze = maze
        self._events = events
        self._finish = finish
        self._snapshots = snapshots
        self._done = False

    def __iter__(self) -> "GenerationTrace":
        return self

    def __next__(self) -> GenerationStep:
        if self._done:
            raise StopIteration

        try:
            step_type, position, direction = next(self._events)
        except StopIteration:
            self._done = True
            self._finish(self._maze)
            return GenerationStep(
                type="complete",
                position=self._maze.end,
                maze=self._maze.copy(),
            )

        return GenerationStep(
            type=step_type,
            position=position,
            direction=direction,
            maze=self._maze.copy() if self._snapshots else None,
        )


class MazeGenerator:
    """
    Maze generator supporting multiple algorithms.

    Example usage:
        generator = MazeGenerator(21, 21, rng=random.Random(7))
        maze = generator.generate("prim")

        # Or, for animation
        for step in generator.generate_step_by_step("wilson"):
            draw(step.maze)
    """

    def __init__(
        self,
        width: int,
        height: int,
        rng: Optional[random.Random] = None,
        wilson_walk_factor: int = 100,
        wilson_iteration_factor: int = 10,
    ):
        """
        Initialize the generator.

        Args:
            width: Maze width in cells (odd, >= 3).
            height: Maze height in cells (odd, >= 3).
            rng: Random source. A fresh unseeded one is used if omitted.
            wilson_walk_factor: Max steps per random walk, times width * height.
            wilson_iteration_factor: Max random walks, times width * height.

        Raises:
            InvalidDimensionsError: If width or height is below 3.
        """
        if width < MIN_DIMENSION or height < MIN_DIMENSION:
            raise InvalidDimensionsError(
                f"Maze must be at least {MIN_DIMENSION}x{MIN_DIMENSION}, "
                f"got {width}x{height}"
            )

        self.width = width
        self.height = height
        self.rng = rng if rng is not None else random.Random()
        self.wilson_walk_factor = wilson_walk_factor
        self.wilson_iteration_factor = wilson_iteration_factor

        self._carvers: dict[str, Callable[[Maze], Iterator[CarveEvent]]] = {
            "recursive": self._carve_recursive,
            "prim": self._carve_prim,
            "kruskal": self._carve_kruskal,
            "wilson": self._carve_wilson,
        }

    def generate(self, algorithm: str = "recursive") -> Maze:
        """Generate a complete maze."""
        maze = self._new_maze()
        carved = 0
        for step_type, _, _ in self._carver(algorithm)(maze):
            if step_type == "carve":
                carved += 1
        self._finish(maze)

        logger.debug(
            f"Generated {self.width}x{self.height} maze with {algorithm} "
            f"({carved} passages carved)"
        )
        return maze

    def generate_step_by_step(
        self, algorithm: str = "recursive", snapshots: bool = True
    ) -> GenerationTrace:
        """Generate a maze as a sequence of snapshot steps."""
        carver = self._carver(algorithm)
        maze = self._new_maze()
        return GenerationTrace(maze, carver(maze), self._finish, snapshots=snapshots)

    def _carver(self, algorithm: str) -> Callable[[Maze], Iterator[CarveEvent]]:
        carver = self._carvers.get(algorithm)
        if carver is None:
            raise UnknownAlgorithmError(
                f"Unknown generation algorithm '{algorithm}'. "
                f"Must be one of: {', '.join(GENERATION_ALGORITHMS)}"
            )
        return carver

    def _new_maze(self) -> Maze:
        return Maze(
            cells=initialize(self.width, self.height),
            width=self.width,
            height=self.height,
            start=Position(1, 1),
            end=Position(self.width - 2, self.height - 2),
        )

    @staticmethod
    def _finish(maze: Maze) -> None:
        """Assign start and end roles. End is written last and wins on 3x3."""
        maze.cell_at(maze.start).type = CellType.START
        maze.cell_at(maze.end).type = CellType.END

    @staticmethod
    def _mark(maze: Maze, position: Position) -> None:
        cell = maze.cell_at(position)
        cell.type = CellType.PATH
        cell.visited = True

    def _shuffled_directions(self) -> list[Direction]:
        directions = list(DIRECTIONS)
        self.rng.shuffle(directions)
        return directions

    # Recursive backtracking

    def _carve_recursive(self, maze: Maze) -> Iterator[CarveEvent]:
        """
        Depth-first carve from start.

        The call stack of the textbook version is replaced by an explicit stack
        of (position, remaining shuffled directions). Directions are shuffled
        when a cell is entered, so random draws happen in the same order as the
        recursive formulation.
        """
        self._mark(maze, maze.start)
        stack = [(maze.start, iter(self._shuffled_directions()))]
        yield ("visit", maze.start, None)

        while stack:
            position, directions = stack[-1]
            for direction in directions:
                nxt = position.move(direction)
                if maze.is_valid(nxt.x, nxt.y) and not maze.cell_at(nxt).visited:
                    remove_wall_between(maze.cells, position.x, position.y, direction)
                    yield ("carve", position, direction)

                    self._mark(maze, nxt)
                    stack.append((nxt, iter(self._shuffled_directions())))
                    yield ("visit", nxt, None)
                    break
            else:
                stack.pop()

    # Prim's algorithm

    def _frontier_walls(self, maze: Maze, position: Position) -> list[tuple[Position, Direction]]:
        walls = []
        for direction in DIRECTIONS:
            nxt = position.move(direction)
            if maze.is_valid(nxt.x, nxt.y):
                walls.append((position, direction))
        return walls

    def _carve_prim(self, maze: Maze) -> Iterator[CarveEvent]:
        """Grow the maze from start by opening random frontier walls."""
        self._mark(maze, maze.start)
        yield ("visit", maze.start, None)

        frontier = self._frontier_walls(maze, maze.start)
        while frontier:
            index = self.rng.randrange(len(frontier))
            frontier[index], frontier[-1] = frontier[-1], frontier[index]
            position, direction = frontier.pop()

            nxt = position.move(direction)
            if maze.cell_at(nxt).type != CellType.WALL:
                continue

            self._mark(maze, position)
            self._mark(maze, nxt)
            remove_wall_between(maze.cells, position.x, position.y, direction)
            yield ("carve", position, direction)

            frontier.extend(self._frontier_walls(maze, nxt))

    # Room lattice helpers (Kruskal, Wilson)

    def _rooms(self) -> list[Position]:
        return [
            Position(x, y)
            for y in range(1, self.height - 1, 2)
            for x in range(1, self.width - 1, 2)
        ]

    def _is_room(self, position: Position) -> bool:
        return (
            position.x % 2 == 1
            and position.y % 2 == 1
            and 0 < position.x < self.width - 1
            and 0 < position.y < self.height - 1
        )

    def _carve_through(self, maze: Maze, room: Position, direction: Direction) -> None:
        """Join room with the room two cells away, opening the wall cell between."""
        between = room.move(direction)
        remove_wall_between(maze.cells, room.x, room.y, direction)
        remove_wall_between(maze.cells, between.x, between.y, direction)
        self._mark(maze, room)
        self._mark(maze, between)
        self._mark(maze, between.move(direction))

    # Kruskal's algorithm

    def _carve_kruskal(self, maze: Maze) -> Iterator[CarveEvent]:
        """
        Union-find over the room lattice.

        Each edge between rooms is listed once (south and east only), shuffled,
        and carved when its rooms are in different components. The edge list
        bounds the loop; it also stops as soon as one component remains.
        """
        rooms = self._rooms()
        index = {room: i for i, room in enumerate(rooms)}

        edges = []
        for room in rooms:
            for direction in (Direction.SOUTH, Direction.EAST):
                if room.move(direction, 2) in index:
                    edges.append((room, direction))
        self.rng.shuffle(edges)

        sets = DisjointSet(len(rooms))
        for room, direction in edges:
            if sets.components == 1:
                break
            if sets.union(index[room], index[room.move(direction, 2)]):
                self._carve_through(maze, room, direction)
                yield ("carve", room, direction)

    # Wilson's algorithm

    def _carve_wilson(self, maze: Maze) -> Iterator[CarveEvent]:
        """
        Loop-erased random walks over the room lattice.

        Only the last exit taken from each cell is remembered, so retracing the
        walk from its origin follows the loop-erased path into the tree. Walk
        length and walk count are capped in proportion to the grid area; hitting
        the outer cap leaves a partial maze flagged as truncated.
        """
        self._mark(maze, maze.start)
        yield ("visit", maze.start, None)

        area = self.width * self.height
        max_steps = area * self.wilson_walk_factor
        max_walks = area * self.wilson_iteration_factor

        remaining = [room for room in self._rooms() if room != maze.start]
        walks = 0

        while remaining and walks < max_walks:
            walks += 1
            origin = remaining[self.rng.randrange(len(remaining))]

            exits: dict[Position, Direction] = {}
            current = origin
            steps = 0
            while not maze.cell_at(current).visited and steps < max_steps:
                options = [d for d in DIRECTIONS if self._is_room(current.move(d, 2))]
                if not options:
                    # Nowhere to go: force the cell into the tree so the loop ends
                    self._mark(maze, current)
                    break
                direction = options[self.rng.randrange(len(options))]
                exits[current] = direction
                current = current.move(direction, 2)
                steps += 1

            if maze.cell_at(current).visited and current != origin:
                path = []
                cursor = origin
                while not maze.cell_at(cursor).visited:
                    path.append((cursor, exits[cursor]))
                    cursor = cursor.move(exits[cursor], 2)

                for room, direction in path:
                    self._carve_through(maze, room, direction)
                    yield ("carve", room, direction)

            remaining = [room for room in remaining if not maze.cell_at(room).visited]

        if remaining:
            maze.truncated = True
            logger.warning(
                f"Wilson's algorithm hit its iteration cap after {walks} walks; "
                f"{len(remaining)} rooms left unconnected"
            )
