"""Maze routes for generating and solving mazes."""

import logging
import random
from itertools import islice
from typing import Optional

from fastapi import APIRouter, HTTPException, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from labyrinth.api.deps import AppSettings
from labyrinth.config import Settings, get_settings
from labyrinth.core import (
    PATHFINDING_ALGORITHMS,
    InvalidDimensionsError,
    Maze,
    MazeConfig,
    MazeEngine,
    UnknownAlgorithmError,
)
from labyrinth.schemas.maze import (
    CompareRequest,
    CompareResponse,
    GenerationStepResponse,
    GenerationTraceResponse,
    MazeGenerateRequest,
    MazeResponse,
    PathfindingResultResponse,
    SolveRequest,
    SolveResponse,
)

logger = logging.getLogger(__name__)

settings = get_settings()
limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/maze", tags=["Mazes"])


def _resolve_seed(seed: Optional[int]) -> int:
    """Use the caller's seed or pick one, and echo it back in the response."""
    return seed if seed is not None else random.randrange(2**32)


def _build_engine(request: MazeGenerateRequest, seed: int, app_settings: Settings) -> MazeEngine:
    try:
        return MazeEngine(
            MazeConfig(request.width, request.height, request.algorithm),
            rng=random.Random(seed),
            wilson_walk_factor=app_settings.wilson_walk_factor,
            wilson_iteration_factor=app_settings.wilson_iteration_factor,
        )
    except (InvalidDimensionsError, UnknownAlgorithmError) as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e


def _generate(request: MazeGenerateRequest, seed: int, app_settings: Settings) -> tuple[MazeEngine, Maze]:
    engine = _build_engine(request, seed, app_settings)
    maze = engine.generate()
    if maze.truncated:
        logger.warning(
            f"Maze {request.width}x{request.height} ({request.algorithm}, seed={seed}) "
            f"was truncated by the iteration cap"
        )
    return engine, maze


# Handlers are plain functions so FastAPI runs the maze work in its threadpool
@router.post(
    "/generate",
    response_model=MazeResponse,
)
@limiter.limit(f"{settings.rate_limit_requests}/minute")
def generate_maze(
    request: Request,
    maze_request: MazeGenerateRequest,
    app_settings: AppSettings,
) -> MazeResponse:
    """Generate a maze.

    The seed is echoed back (or chosen) so the same maze can be rebuilt later.
    """
    seed = _resolve_seed(maze_request.seed)
    engine, maze = _generate(maze_request, seed, app_settings)

    return MazeResponse.from_maze(
        maze,
        algorithm=maze_request.algorithm,
        seed=seed,
        has_valid_path=engine.has_valid_path(maze),
    )


@router.post(
    "/solve",
    response_model=SolveResponse,
)
@limiter.limit(f"{settings.rate_limit_requests}/minute")
def solve_maze(
    request: Request,
    solve_request: SolveRequest,
    app_settings: AppSettings,
) -> SolveResponse:
    """Generate a seeded maze and search it.

    An unreachable end is returned with found=false, not as an error.
    """
    seed = _resolve_seed(solve_request.maze.seed)
    engine, maze = _generate(solve_request.maze, seed, app_settings)

    try:
        result = engine.find_path(maze, solve_request.algorithm)
    except UnknownAlgorithmError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e

    return SolveResponse(
        seed=seed,
        result=PathfindingResultResponse.from_result(result),
    )


@router.post(
    "/compare",
    response_model=CompareResponse,
)
@limiter.limit(f"{settings.rate_limit_requests}/minute")
def compare_pathfinding(
    request: Request,
    compare_request: CompareRequest,
    app_settings: AppSettings,
) -> CompareResponse:
    """Search one seeded maze with every pathfinding algorithm."""
    seed = _resolve_seed(compare_request.maze.seed)
    engine, maze = _generate(compare_request.maze, seed, app_settings)

    results = [
        PathfindingResultResponse.from_result(engine.find_path(maze, algorithm))
        for algorithm in PATHFINDING_ALGORITHMS
    ]

    return CompareResponse(seed=seed, results=results)


@router.post(
    "/generate/trace",
    response_model=GenerationTraceResponse,
)
@limiter.limit(f"{settings.rate_limit_requests}/minute")
def trace_generation(
    request: Request,
    maze_request: MazeGenerateRequest,
    app_settings: AppSettings,
) -> GenerationTraceResponse:
    """Return the generation steps of a seeded maze.

    Maze snapshots are omitted. At most MAX_TRACE_STEPS steps are returned.
    """
    seed = _resolve_seed(maze_request.seed)
    engine = _build_engine(maze_request, seed, app_settings)

    limit = app_settings.max_trace_steps
    steps = [
        GenerationStepResponse.from_step(step)
        for step in islice(engine.generate_step_by_step(snapshots=False), limit)
    ]
    complete = bool(steps) and steps[-1].type == "complete"

    if not complete:
        logger.info(
            f"Generation trace for seed={seed} cut at {limit} steps"
        )

    return GenerationTraceResponse(
        seed=seed,
        steps=steps,
        total=len(steps),
        complete=complete,
    )
