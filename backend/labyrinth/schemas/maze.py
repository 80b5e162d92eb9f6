"""Maze schemas for request/response validation."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from labyrinth.config import get_settings
from labyrinth.core import (
    GENERATION_ALGORITHMS,
    PATHFINDING_ALGORITHMS,
    GenerationStep,
    Maze,
    PathfindingResult,
    normalize_dimension,
)

settings = get_settings()

GENERATION_PATTERN = f"^({'|'.join(GENERATION_ALGORITHMS)})$"
PATHFINDING_PATTERN = f"^({'|'.join(PATHFINDING_ALGORITHMS)})$"


class MazePosition(BaseModel):
    """Schema for a position in the maze."""

    x: int
    y: int


class CellWallsSchema(BaseModel):
    """Schema for the four wall flags of a cell."""

    north: bool
    south: bool
    east: bool
    west: bool


class CellSchema(BaseModel):
    """Schema for one maze cell."""

    type: str
    walls: CellWallsSchema


class MazeGenerateRequest(BaseModel):
    """Schema for a maze generation request.

    Even dimensions are coerced up to the next odd value.
    """

    width: int = Field(21, ge=settings.min_dimension, le=settings.max_dimension)
    height: int = Field(21, ge=settings.min_dimension, le=settings.max_dimension)
    algorithm: str = Field(
        settings.default_generation_algorithm,
        pattern=GENERATION_PATTERN,
    )
    seed: Optional[int] = None

    @field_validator("width", "height")
    @classmethod
    def ensure_odd(cls, v: int) -> int:
        """Ensure odd dimensions."""
        return normalize_dimension(v)

    @model_validator(mode="after")
    def check_upper_bound(self) -> "MazeGenerateRequest":
        """Coercion must not push a dimension past the configured maximum."""
        limit = settings.max_dimension
        if self.width > limit or self.height > limit:
            raise ValueError(f"Dimensions must not exceed {limit}")
        return self


class MazeResponse(BaseModel):
    """Schema for a generated maze."""

    width: int
    height: int
    algorithm: str
    seed: Optional[int] = None
    start: MazePosition
    end: MazePosition
    truncated: bool
    has_valid_path: bool
    cells: list[list[CellSchema]]

    @classmethod
    def from_maze(
        cls,
        maze: Maze,
        algorithm: str,
        seed: Optional[int],
        has_valid_path: bool,
    ) -> "MazeResponse":
        """Build the response from an engine maze."""
        data = maze.to_dict()
        return cls(
            width=maze.width,
            height=maze.height,
            algorithm=algorithm,
            seed=seed,
            start=data["start"],
            end=data["end"],
            truncated=maze.truncated,
            has_valid_path=has_valid_path,
            cells=data["cells"],
        )


class SolveRequest(BaseModel):
    """Schema for a solve request.

    The maze is regenerated from its seed, so the same request always solves
    the same maze.
    """

    maze: MazeGenerateRequest
    algorithm: str = Field(
        settings.default_pathfinding_algorithm,
        pattern=PATHFINDING_PATTERN,
    )


class CompareRequest(BaseModel):
    """Schema for comparing every pathfinding algorithm on one maze."""

    maze: MazeGenerateRequest


class PathfindingResultResponse(BaseModel):
    """Schema for a pathfinding result."""

    algorithm: str
    found: bool
    steps: int
    path_length: int
    visited_count: int
    path: list[MazePosition]
    visited: list[MazePosition]

    @classmethod
    def from_result(cls, result: PathfindingResult) -> "PathfindingResultResponse":
        """Build the response from an engine result."""
        data = result.to_dict()
        return cls(
            algorithm=result.algorithm,
            found=result.found,
            steps=result.steps,
            path_length=len(result.path),
            visited_count=len(result.visited),
            path=data["path"],
            visited=data["visited"],
        )


class SolveResponse(BaseModel):
    """Schema for a solve response."""

    seed: Optional[int] = None
    result: PathfindingResultResponse


class CompareResponse(BaseModel):
    """Schema for a comparison response."""

    seed: Optional[int] = None
    results: list[PathfindingResultResponse]


class GenerationStepResponse(BaseModel):
    """Schema for one generation step (snapshot omitted)."""

    type: str
    position: MazePosition
    direction: Optional[str] = None

    @classmethod
    def from_step(cls, step: GenerationStep) -> "GenerationStepResponse":
        """Build the response from an engine step."""
        return cls(**step.to_dict(include_maze=False))


class GenerationTraceResponse(BaseModel):
    """Schema for a generation trace."""

    seed: Optional[int] = None
    steps: list[GenerationStepResponse]
    total: int
    complete: bool
