# Core module
from .errors import InvalidDimensionsError, UnknownAlgorithmError
from .grid import Cell, CellType, CellWalls, Direction, Maze, Position
from .generator import (
    GENERATION_ALGORITHMS,
    GenerationStep,
    GenerationTrace,
    MazeGenerator,
)
from .pathfinder import (
    PATHFINDING_ALGORITHMS,
    PathfindingResult,
    PathfindingStep,
    PathfindingTrace,
)
from .engine import (
    MazeConfig,
    MazeEngine,
    find_path,
    find_path_step_by_step,
    generate,
    generate_step_by_step,
    has_valid_path,
    normalize_dimension,
)

__all__ = [
    "InvalidDimensionsError",
    "UnknownAlgorithmError",
    "Cell",
    "CellType",
    "CellWalls",
    "Direction",
    "Maze",
    "Position",
    "GENERATION_ALGORITHMS",
    "GenerationStep",
    "GenerationTrace",
    "MazeGenerator",
    "PATHFINDING_ALGORITHMS",
    "PathfindingResult",
    "PathfindingStep",
    "PathfindingTrace",
    "MazeConfig",
    "MazeEngine",
    "find_path",
    "find_path_step_by_step",
    "generate",
    "generate_step_by_step",
    "has_valid_path",
    "normalize_dimension",
]
