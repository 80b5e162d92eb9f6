"""
Labyrinth Grid Model

A fixed-size rectangular array of cells. Each cell carries a role and four
wall flags. Everything else in the engine operates on this model.

Grid encoding:
    Odd/odd coordinates are "room" cells. The generators treat those as
    carvable path centres; start is always (1, 1) and end is always
    (width - 2, height - 2).

Text view (see Maze.to_text):
    # = Wall cell (never carved)
    S = Start
    E = End
    . = Carved cell
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional


class CellType(Enum):
    """Semantic role of a cell."""
    WALL = "wall"
    PATH = "path"
    START = "start"
    END = "end"


class Direction(Enum):
    """Movement directions."""
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    @property
    def delta(self) -> tuple[int, int]:
        """Get (dx, dy) for this direction."""
        deltas = {
            Direction.NORTH: (0, -1),
            Direction.SOUTH: (0, 1),
            Direction.EAST: (1, 0),
            Direction.WEST: (-1, 0),
        }
        return deltas[self]

    @property
    def opposite(self) -> "Direction":
        """Get the opposite direction."""
        opposites = {
            Direction.NORTH: Direction.SOUTH,
            Direction.SOUTH: Direction.NORTH,
            Direction.EAST: Direction.WEST,
            Direction.WEST: Direction.EAST,
        }
        return opposites[self]


# Fixed order used wherever directions are enumerated or shuffled
DIRECTIONS: tuple[Direction, ...] = (
    Direction.NORTH,
    Direction.SOUTH,
    Direction.EAST,
    Direction.WEST,
)


@dataclass(frozen=True)
class Position:
    """2D position in the maze."""
    x: int
    y: int

    def move(self, direction: Direction, distance: int = 1) -> "Position":
        """Return new position after moving in direction."""
        dx, dy = direction.delta
        return Position(self.x + dx * distance, self.y + dy * distance)

    def manhattan(self, other: "Position") -> int:
        """Manhattan distance to another position."""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"x": self.x, "y": self.y}


@dataclass
class CellWalls:
    """Wall flags for a cell. True means impassable in that direction."""
    north: bool = True
    south: bool = True
    east: bool = True
    west: bool = True

    def has(self, direction: Direction) -> bool:
        return getattr(self, direction.value)

    def clear(self, direction: Direction) -> None:
        setattr(self, direction.value, False)

    def to_dict(self) -> dict:
        return {
            "north": self.north,
            "south": self.south,
            "east": self.east,
            "west": self.west,
        }


@dataclass
class Cell:
    """One grid position."""
    type: CellType = CellType.WALL
    visited: bool = False
    walls: CellWalls = field(default_factory=CellWalls)

    def copy(self) -> "Cell":
        return Cell(
            type=self.type,
            visited=self.visited,
            walls=CellWalls(**self.walls.to_dict()),
        )

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "visited": self.visited,
            "walls": self.walls.to_dict(),
        }


Cells = list[list[Cell]]


def initialize(width: int, height: int) -> Cells:
    """
    Allocate a fully closed grid.

    Every cell starts as a wall with all four walls present. No validation is
    done here; size constraints belong to the caller.
    """
    return [[Cell() for _ in range(width)] for _ in range(height)]


def is_valid(width: int, height: int, x: int, y: int) -> bool:
    """Bounds check."""
    return 0 <= x < width and 0 <= y < height


def neighbor_position(x: int, y: int, direction: Direction) -> Position:
    """Position one step away in direction. No bounds check."""
    return Position(x, y).move(direction)


def remove_wall_between(cells: Cells, x: int, y: int, direction: Direction) -> None:
    """
    Carve between (x, y) and its neighbor in direction.

    Clears both facing walls in one call so wall state stays symmetric.
    The neighbor must be in bounds.
    """
    nxt = neighbor_position(x, y, direction)
    cells[y][x].walls.clear(direction)
    cells[nxt.y][nxt.x].walls.clear(direction.opposite)


def can_move(cell: Cell, direction: Direction) -> bool:
    """True if the cell has no wall in direction."""
    return not cell.walls.has(direction)


@dataclass
class Maze:
    """A generated maze. Cells are row-major: cells[y][x]."""
    cells: Cells
    width: int
    height: int
    start: Position
    end: Position
    # Set when an iteration cap cut generation short
    truncated: bool = False

    def is_valid(self, x: int, y: int) -> bool:
        return is_valid(self.width, self.height, x, y)

    def cell_at(self, position: Position) -> Cell:
        return self.cells[position.y][position.x]

    def copy(self) -> "Maze":
        """Deep snapshot. Later mutation of this maze never shows through."""
        return Maze(
            cells=[[cell.copy() for cell in row] for row in self.cells],
            width=self.width,
            height=self.height,
            start=self.start,
            end=self.end,
            truncated=self.truncated,
        )

    def to_dict(self) -> dict:
        """Convert to plain data."""
        return {
            "width": self.width,
            "height": self.height,
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "truncated": self.truncated,
            "cells": [[cell.to_dict() for cell in row] for row in self.cells],
        }

    def to_text(self, path: Optional[list[Position]] = None) -> str:
        """
        ASCII view of the maze for debugging.

        Each cell maps to a 2x2 block so the gaps between cells show the wall flags.
        Cells on the optional path are marked with '*'.
        """
        on_path = set(path or [])
        rows = 2 * self.height + 1
        cols = 2 * self.width + 1
        canvas = [["#"] * cols for _ in range(rows)]

        for y, row in enumerate(self.cells):
            for x, cell in enumerate(row):
                cy, cx = 2 * y + 1, 2 * x + 1
                if cell.type == CellType.WALL:
                    continue
                if cell.type == CellType.START:
                    canvas[cy][cx] = "S"
                elif cell.type == CellType.END:
                    canvas[cy][cx] = "E"
                elif Position(x, y) in on_path:
                    canvas[cy][cx] = "*"
                else:
                    canvas[cy][cx] = "."
                if not cell.walls.east:
                    canvas[cy][cx + 1] = "."
                if not cell.walls.south:
                    canvas[cy + 1][cx] = "."

        return "\n".join("".join(line) for line in canvas)
