"""
Labyrinth Maze Engine

In-process API consumed by the presentation layer:
- generate(config) -> Maze
- find_path(maze, algorithm) -> PathfindingResult
- generate_step_by_step(config) -> iterator of GenerationStep
- find_path_step_by_step(maze, algorithm) -> iterator of PathfindingStep
- has_valid_path(maze) -> bool

Every call works on its own freshly allocated grid; nothing is shared between
calls, so independent mazes may be built in parallel without locking.
"""

import random
from dataclasses import dataclass
from typing import Optional

from labyrinth.core import pathfinder
from labyrinth.core.generator import GenerationTrace, MazeGenerator
from labyrinth.core.grid import Maze
from labyrinth.core.pathfinder import PathfindingResult, PathfindingTrace


def normalize_dimension(value: int) -> int:
    """Coerce an even size up to the next odd value."""
    return value + 1 if value % 2 == 0 else value


@dataclass
class MazeConfig:
    """Maze generation configuration."""
    width: int
    height: int
    algorithm: str = "recursive"


class MazeEngine:
    """
    Maze generation and pathfinding engine.

    Example usage:
        engine = MazeEngine(MazeConfig(21, 21, "kruskal"), rng=random.Random(42))
        maze = engine.generate()

        result = engine.find_path(maze, "bfs")
        if not result.found:
            ...  # unreachable, not an error

        # Animated variants yield snapshot steps
        for step in engine.generate_step_by_step():
            draw(step.maze)
    """

    def __init__(
        self,
        config: MazeConfig,
        rng: Optional[random.Random] = None,
        wilson_walk_factor: int = 100,
        wilson_iteration_factor: int = 10,
    ):
        """
        Initialize maze engine.

        Args:
            config: Dimensions and generation algorithm.
            rng: Random source. Pass a seeded random.Random for reproducible mazes.
            wilson_walk_factor: Max steps per Wilson walk, times width * height.
            wilson_iteration_factor: Max Wilson walks, times width * height.

        Raises:
            InvalidDimensionsError: If width or height is below 3.
        """
        self.config = config
        self.generator = MazeGenerator(
            config.width,
            config.height,
            rng=rng,
            wilson_walk_factor=wilson_walk_factor,
            wilson_iteration_factor=wilson_iteration_factor,
        )

    def generate(self) -> Maze:
        """Generate a maze with the configured algorithm."""
        return self.generator.generate(self.config.algorithm)

    def generate_step_by_step(self, snapshots: bool = True) -> GenerationTrace:
        """Generate a maze step by step for animation."""
        return self.generator.generate_step_by_step(self.config.algorithm, snapshots=snapshots)

    def find_path(self, maze: Maze, algorithm: str = "astar") -> PathfindingResult:
        """Find a path from start to end."""
        return pathfinder.find_path(maze, algorithm)

    def find_path_step_by_step(self, maze: Maze, algorithm: str = "astar") -> PathfindingTrace:
        """Find a path step by step for animation."""
        return pathfinder.find_path_step_by_step(maze, algorithm)

    def has_valid_path(self, maze: Maze) -> bool:
        """Check that end is reachable from start."""
        return pathfinder.has_valid_path(maze)


def generate(config: MazeConfig, rng: Optional[random.Random] = None) -> Maze:
    """Generate a maze."""
    return MazeEngine(config, rng=rng).generate()


def generate_step_by_step(
    config: MazeConfig, rng: Optional[random.Random] = None
) -> GenerationTrace:
    """Generate a maze as a sequence of steps."""
    return MazeEngine(config, rng=rng).generate_step_by_step()


find_path = pathfinder.find_path
find_path_step_by_step = pathfinder.find_path_step_by_step
has_valid_path = pathfinder.has_valid_path
