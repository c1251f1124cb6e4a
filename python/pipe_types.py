"""
Shared type definitions for the pipe-loop solver.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Direction(Enum):
    """Cardinal direction for traversal."""

    N = "N"  # Up (decreasing row)
    S = "S"  # Down (increasing row)
    E = "E"  # Right (increasing col)
    W = "W"  # Left (decreasing col)

    @property
    def opposite(self) -> Direction:
        return OPPOSITES[self]

    @property
    def delta(self) -> tuple[int, int]:
        """(row_delta, col_delta) of one step in this direction."""
        return DELTAS[self]


OPPOSITES: dict[Direction, Direction] = {
    Direction.N: Direction.S,
    Direction.S: Direction.N,
    Direction.E: Direction.W,
    Direction.W: Direction.E,
}

# Clockwise from north; the order neighbours are inspected in
COMPASS_ORDER: tuple[Direction, ...] = (Direction.N, Direction.E, Direction.S, Direction.W)

DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.N: (-1, 0),
    Direction.S: (1, 0),
    Direction.E: (0, 1),
    Direction.W: (0, -1),
}


class Tile(Enum):
    """The pipe shape occupying one cell, keyed by its puzzle character."""

    START = "S"
    GROUND = "."
    VERTICAL = "|"
    HORIZONTAL = "-"
    BEND_NE = "L"
    BEND_NW = "J"
    BEND_SW = "7"
    BEND_SE = "F"

    @property
    def connections(self) -> frozenset[Direction]:
        """Compass directions the pipe connects. Empty for Start and Ground."""
        return CONNECTIONS[self]


CONNECTIONS: dict[Tile, frozenset[Direction]] = {
    Tile.START: frozenset(),
    Tile.GROUND: frozenset(),
    Tile.VERTICAL: frozenset({Direction.N, Direction.S}),
    Tile.HORIZONTAL: frozenset({Direction.E, Direction.W}),
    Tile.BEND_NE: frozenset({Direction.N, Direction.E}),
    Tile.BEND_NW: frozenset({Direction.N, Direction.W}),
    Tile.BEND_SW: frozenset({Direction.S, Direction.W}),
    Tile.BEND_SE: frozenset({Direction.S, Direction.E}),
}

TILE_CHARS = "".join(tile.value for tile in Tile)


# =============================================================================
# Errors
# =============================================================================


class PipeLoopError(ValueError):
    """Base class for every unrecoverable pipe-loop input problem."""

    def __init__(self, message: str, position: Coordinate | None = None) -> None:
        super().__init__(message)
        self.position = position


class StructuralError(PipeLoopError):
    """Non-rectangular input, unknown tile character, or not exactly one Start."""


class AmbiguousStartError(PipeLoopError):
    """Start has other than exactly two connecting neighbours."""

    def __init__(
        self,
        message: str,
        position: Coordinate | None = None,
        directions: tuple[Direction, ...] = (),
    ) -> None:
        super().__init__(message, position)
        self.directions = directions


class BrokenLoopError(PipeLoopError):
    """A walker left the grid, hit a dead end, or the loop never closed."""


class InvalidTransitionError(PipeLoopError):
    """Transition table queried with a pair outside its domain."""

    def __init__(self, tile: Tile, heading: Direction, position: Coordinate | None = None) -> None:
        super().__init__(
            f"Tile '{tile.value}' ({tile.name}) cannot be entered heading {heading.value}",
            position,
        )
        self.tile = tile
        self.heading = heading


# =============================================================================
# Grid Definition Types
# =============================================================================


@dataclass(frozen=True, order=True)
class Coordinate:
    """A (row, col) position within a grid."""

    row: int
    col: int

    def moved(self, direction: Direction) -> Coordinate:
        dr, dc = direction.delta
        return Coordinate(self.row + dr, self.col + dc)

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


@dataclass(frozen=True)
class PipeGrid:
    """A rectangular 2D grid of tiles with exactly one Start."""

    tiles: tuple[tuple[Tile, ...], ...]
    start: Coordinate = field(init=False)

    def __post_init__(self) -> None:
        if not self.tiles or not self.tiles[0]:
            raise StructuralError("Grid must have at least one row and one column")

        cols = len(self.tiles[0])
        for row_idx, row in enumerate(self.tiles):
            if len(row) != cols:
                raise StructuralError(
                    f"Inconsistent row lengths\n"
                    f"  Expected: {cols} columns (from row 0)\n"
                    f"  Row {row_idx}: {len(row)} columns",
                    Coordinate(row_idx, min(len(row), cols)),
                )

        starts = [
            Coordinate(r, c)
            for r, row in enumerate(self.tiles)
            for c, tile in enumerate(row)
            if tile is Tile.START
        ]
        if not starts:
            raise StructuralError("Grid has no Start tile 'S'")
        if len(starts) > 1:
            raise StructuralError(
                f"Grid has {len(starts)} Start tiles, expected exactly one: "
                + ", ".join(str(pos) for pos in starts),
                starts[1],
            )
        object.__setattr__(self, "start", starts[0])

    @property
    def rows(self) -> int:
        return len(self.tiles)

    @property
    def cols(self) -> int:
        return len(self.tiles[0])

    def contains(self, pos: Coordinate) -> bool:
        return 0 <= pos.row < self.rows and 0 <= pos.col < self.cols

    def tile_at(self, pos: Coordinate) -> Tile | None:
        """Tile at `pos`, or None when `pos` lies outside the grid."""
        if not self.contains(pos):
            return None
        return self.tiles[pos.row][pos.col]

    def neighbour(self, pos: Coordinate, direction: Direction) -> Coordinate | None:
        """Adjacent in-bounds coordinate in `direction`, or None at the edge."""
        candidate = pos.moved(direction)
        return candidate if self.contains(candidate) else None

    def neighbours(self, pos: Coordinate) -> dict[Direction, Coordinate | None]:
        """Neighbours of `pos` in COMPASS_ORDER; None for those off the edge."""
        return {direction: self.neighbour(pos, direction) for direction in COMPASS_ORDER}

    def __str__(self) -> str:
        return "\n".join("".join(tile.value for tile in row) for row in self.tiles)
