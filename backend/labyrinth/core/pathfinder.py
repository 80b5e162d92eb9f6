"""
Labyrinth Pathfinder

Searches a generated maze for a route from start to end:
- bfs: FIFO queue, shortest path in edge count
- dfs: LIFO stack, any path
- astar: binary heap on f = g + h, h = Manhattan distance to end

All three share one search loop and differ only in the frontier. The maze is
never mutated. Visited cells are recorded on discovery; steps counts frontier
pops.
"""

import heapq
import itertools
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Iterator, Literal, Optional

from labyrinth.core.errors import UnknownAlgorithmError
from labyrinth.core.grid import DIRECTIONS, Maze, Position, can_move

logger = logging.getLogger(__name__)

PathfindingAlgorithm = Literal["bfs", "dfs", "astar"]
PATHFINDING_ALGORITHMS: tuple[str, ...] = ("bfs", "dfs", "astar")


@dataclass
class PathfindingResult:
    """Result of a search."""
    path: list[Position]
    visited: list[Position]
    found: bool
    algorithm: str
    steps: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "path": [p.to_dict() for p in self.path],
            "visited": [p.to_dict() for p in self.visited],
            "found": self.found,
            "algorithm": self.algorithm,
            "steps": self.steps,
        }


@dataclass
class PathfindingStep:
    """One step of an animated search."""
    type: Literal["visit", "path", "complete"]
    position: Position
    path: list[Position]
    visited: list[Position]
    found: bool
    result: Optional[PathfindingResult] = field(default=None)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "type": self.type,
            "position": self.position.to_dict(),
            "path": [p.to_dict() for p in self.path],
            "visited": [p.to_dict() for p in self.visited],
            "found": self.found,
            "result": self.result.to_dict() if self.result else None,
        }


# Frontier disciplines. Entries are (position, path-so-far).

class QueueFrontier:
    """FIFO frontier for breadth-first search."""

    def __init__(self, end: Position):
        self._items: deque = deque()

    def push(self, position: Position, path: list[Position]) -> None:
        self._items.append((position, path))

    def pop(self) -> tuple[Position, list[Position]]:
        return self._items.popleft()

    def __len__(self) -> int:
        return len(self._items)


class StackFrontier(QueueFrontier):
    """LIFO frontier for depth-first search."""

    def pop(self) -> tuple[Position, list[Position]]:
        return self._items.pop()


class PriorityFrontier:
    """
    Min-heap frontier for A*.

    Ordered by f = g + h; ties go to the earliest pushed entry.
    g is the path length so far, h the Manhattan distance to end.
    """

    def __init__(self, end: Position):
        self._end = end
        self._heap: list = []
        self._counter = itertools.count()

    def push(self, position: Position, path: list[Position]) -> None:
        g = len(path) - 1
        f = g + position.manhattan(self._end)
        heapq.heappush(self._heap, (f, next(self._counter), position, path))

    def pop(self) -> tuple[Position, list[Position]]:
        _, _, position, path = heapq.heappop(self._heap)
        return position, path

    def __len__(self) -> int:
        return len(self._heap)


FRONTIERS = {
    "bfs": QueueFrontier,
    "dfs": StackFrontier,
    "astar": PriorityFrontier,
}

SearchEvent = tuple[Position, list[Position], dict[Position, None]]


def _frontier_for(algorithm: str, end: Position):
    frontier_cls = FRONTIERS.get(algorithm)
    if frontier_cls is None:
        raise UnknownAlgorithmError(
            f"Unknown pathfinding algorithm '{algorithm}'. "
            f"Must be one of: {', '.join(PATHFINDING_ALGORITHMS)}"
        )
    return frontier_cls(end)


def _search(maze: Maze, algorithm: str, frontier) -> Iterator[SearchEvent]:
    """
    Shared search loop.

    Yields (position, path, visited) after every pop and returns the final
    PathfindingResult as the generator's return value.
    """
    visited: dict[Position, None] = {maze.start: None}
    frontier.push(maze.start, [maze.start])
    steps = 0

    while frontier:
        position, path = frontier.pop()
        steps += 1
        yield position, path, visited

        if position == maze.end:
            return PathfindingResult(
                path=path,
                visited=list(visited),
                found=True,
                algorithm=algorithm,
                steps=steps,
            )

        cell = maze.cell_at(position)
        for direction in DIRECTIONS:
            nxt = position.move(direction)
            if (
                maze.is_valid(nxt.x, nxt.y)
                and nxt not in visited
                and can_move(cell, direction)
            ):
                visited[nxt] = None
                frontier.push(nxt, path + [nxt])

    return PathfindingResult(
        path=[],
        visited=list(visited),
        found=False,
        algorithm=algorithm,
        steps=steps,
    )


def find_path(maze: Maze, algorithm: str = "astar") -> PathfindingResult:
    """
    Find a path from maze.start to maze.end.

    An unreachable end is a normal outcome: found is False and path is empty.

    Raises:
        UnknownAlgorithmError: If algorithm is not bfs, dfs or astar.
    """
    frontier = _frontier_for(algorithm, maze.end)
    search = _search(maze, algorithm, frontier)
    while True:
        try:
            next(search)
        except StopIteration as done:
            result = done.value
            break

    logger.debug(
        f"{algorithm} search on {maze.width}x{maze.height} maze: "
        f"found={result.found} path={len(result.path)} "
        f"visited={len(result.visited)} steps={result.steps}"
    )
    return result


class PathfindingTrace:
    """
    Pull-based iterator over the steps of one search.

    Yields a "visit" step per frontier pop; when the end is reached, one "path"
    step per cell of the final path with the growing prefix; and finally a
    "complete" step carrying the PathfindingResult.
    """

    def __init__(self, maze: Maze, algorithm: str):
        frontier = _frontier_for(algorithm, maze.end)
        self._maze = maze
        self._search = _search(maze, algorithm, frontier)
        self._pending: deque[PathfindingStep] = deque()
        self._done = False

    def __iter__(self) -> "PathfindingTrace":
        return self

    def __next__(self) -> PathfindingStep:
        if self._pending:
            return self._pending.popleft()
        if self._done:
            raise StopIteration

        try:
            position, path, visited = next(self._search)
        except StopIteration as done:
            self._done = True
            self._queue_ending(done.value)
            return self._pending.popleft()

        return PathfindingStep(
            type="visit",
            position=position,
            path=list(path),
            visited=list(visited),
            found=False,
        )

    def _queue_ending(self, result: PathfindingResult) -> None:
        for i, position in enumerate(result.path):
            self._pending.append(
                PathfindingStep(
                    type="path",
                    position=position,
                    path=result.path[: i + 1],
                    visited=list(result.visited),
                    found=True,
                )
            )

        self._pending.append(
            PathfindingStep(
                type="complete",
                position=result.path[-1] if result.found else self._maze.end,
                path=list(result.path),
                visited=list(result.visited),
                found=result.found,
                result=result,
            )
        )


def find_path_step_by_step(maze: Maze, algorithm: str = "astar") -> PathfindingTrace:
    """Search as a sequence of steps for animation."""
    return PathfindingTrace(maze, algorithm)


def has_valid_path(maze: Maze) -> bool:
    """BFS reachability check from start to end."""
    visited = {maze.start}
    queue = deque([maze.start])

    while queue:
        position = queue.popleft()
        if position == maze.end:
            return True

        cell = maze.cell_at(position)
        for direction in DIRECTIONS:
            nxt = position.move(direction)
            if (
                maze.is_valid(nxt.x, nxt.y)
                and nxt not in visited
                and can_move(cell, direction)
            ):
                visited.add(nxt)
                queue.append(nxt)

    return False
