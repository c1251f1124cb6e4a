"""
Test rotation framework for systematic directional testing.

This module provides utilities to write a loop test once and run it in all
4 rotations (0°, 90°, 180°, 270°) and their mirror images, ensuring
comprehensive directional coverage.
"""

from __future__ import annotations

from dataclasses import dataclass

from pipe_parser import parse_pipe_grid
from pipe_types import CONNECTIONS, Coordinate, Direction, PipeGrid, Tile


# =============================================================================
# Rotation Utilities
# =============================================================================


def rotate_direction_90(direction: Direction) -> Direction:
    """Rotate a direction 90° clockwise."""
    rotation_map = {
        Direction.N: Direction.E,
        Direction.E: Direction.S,
        Direction.S: Direction.W,
        Direction.W: Direction.N,
    }
    return rotation_map[direction]


def mirror_direction(direction: Direction) -> Direction:
    """Mirror a direction left-right (E <-> W)."""
    mirror_map = {
        Direction.N: Direction.N,
        Direction.S: Direction.S,
        Direction.E: Direction.W,
        Direction.W: Direction.E,
    }
    return mirror_map[direction]


def tile_from_connections(directions: frozenset[Direction]) -> Tile:
    """The pipe tile connecting exactly `directions`."""
    for tile, connected in CONNECTIONS.items():
        if connected and connected == directions:
            return tile
    raise ValueError(f"No pipe connects {sorted(d.value for d in directions)}")


def rotate_tile_90(tile: Tile) -> Tile:
    """Rotate a tile's pipe 90° clockwise. Start and Ground are unchanged."""
    if not tile.connections:
        return tile
    return tile_from_connections(frozenset(rotate_direction_90(d) for d in tile.connections))


def mirror_tile(tile: Tile) -> Tile:
    """Mirror a tile's pipe left-right. Start and Ground are unchanged."""
    if not tile.connections:
        return tile
    return tile_from_connections(frozenset(mirror_direction(d) for d in tile.connections))


def rotate_grid_90(grid: PipeGrid) -> PipeGrid:
    """
    Rotate a PipeGrid 90° clockwise.

    In an N×M grid rotated 90° clockwise, it becomes M×N.
    Position (row, col) → (col, N - 1 - row)
    """
    original_rows = grid.rows
    original_cols = grid.cols

    new_tiles: list[list[Tile]] = [[Tile.GROUND] * original_rows for _ in range(original_cols)]

    for row in range(original_rows):
        for col in range(original_cols):
            new_tiles[col][original_rows - 1 - row] = rotate_tile_90(grid.tiles[row][col])

    return PipeGrid(tuple(tuple(row) for row in new_tiles))


def mirror_grid(grid: PipeGrid) -> PipeGrid:
    """Mirror a PipeGrid left-right. Position (row, col) → (row, M - 1 - col)"""
    return PipeGrid(tuple(tuple(mirror_tile(tile) for tile in reversed(row)) for row in grid.tiles))


def rotate_position_90(pos: Coordinate, grid: PipeGrid) -> Coordinate:
    """Rotate a position 90° clockwise within `grid` (the grid before rotation)."""
    return Coordinate(pos.col, grid.rows - 1 - pos.row)


# =============================================================================
# Test Case Data Structures
# =============================================================================


@dataclass
class RotationalLoopCase:
    """
    A loop test case that will be checked in all 4 rotations, mirrored and not.

    Example usage:
        case = RotationalLoopCase(
            name="square",
            text="S7|LJ".replace("|", "\\n"),
            loop_length=4,
        )
        for label, grid in case.get_all_orientations():
            assert measure_loop(grid).loop_length == case.loop_length, label
    """

    name: str
    text: str
    loop_length: int

    __test__ = False

    def get_all_orientations(self) -> list[tuple[str, PipeGrid]]:
        """
        Generate the 8 orientations of this case's grid.

        Returns:
            List of (label, grid) tuples, e.g. ("square at 90° mirrored", grid)
        """
        results: list[tuple[str, PipeGrid]] = []
        current = parse_pipe_grid(self.text)

        for rotation in [0, 90, 180, 270]:
            results.append((f"{self.name} at {rotation}°", current))
            results.append((f"{self.name} at {rotation}° mirrored", mirror_grid(current)))
            current = rotate_grid_90(current)

        return results


# =============================================================================
# Tests for the utilities themselves
# =============================================================================


class TestRotationUtilities:
    """Sanity checks for the rotation helpers."""

    def test_four_rotations_are_identity(self) -> None:
        """Rotating a grid four times returns the original grid."""
        grid = parse_pipe_grid("..F7.\n.FJ|.\nSJ.L7\n|F--J\nLJ...")
        rotated = grid
        for _ in range(4):
            rotated = rotate_grid_90(rotated)
        assert rotated == grid

    def test_rotate_swaps_dimensions(self) -> None:
        """A 2x3 grid becomes 3x2 and the start moves accordingly."""
        grid = parse_pipe_grid("S-7\nL-J")
        rotated = rotate_grid_90(grid)
        assert (rotated.rows, rotated.cols) == (3, 2)
        assert rotated.start == rotate_position_90(grid.start, grid)
        assert str(rotated) == "FS\n||\nLJ"

    def test_rotate_tiles(self) -> None:
        """Bends rotate L -> F -> 7 -> J -> L; straights swap."""
        assert rotate_tile_90(Tile.BEND_NE) is Tile.BEND_SE
        assert rotate_tile_90(Tile.BEND_SE) is Tile.BEND_SW
        assert rotate_tile_90(Tile.BEND_SW) is Tile.BEND_NW
        assert rotate_tile_90(Tile.BEND_NW) is Tile.BEND_NE
        assert rotate_tile_90(Tile.VERTICAL) is Tile.HORIZONTAL
        assert rotate_tile_90(Tile.HORIZONTAL) is Tile.VERTICAL
        assert rotate_tile_90(Tile.START) is Tile.START
        assert rotate_tile_90(Tile.GROUND) is Tile.GROUND

    def test_mirror_tiles(self) -> None:
        """Mirroring swaps east and west bends."""
        assert mirror_tile(Tile.BEND_NE) is Tile.BEND_NW
        assert mirror_tile(Tile.BEND_SE) is Tile.BEND_SW
        assert mirror_tile(Tile.VERTICAL) is Tile.VERTICAL
        assert mirror_tile(Tile.HORIZONTAL) is Tile.HORIZONTAL

    def test_mirror_grid(self) -> None:
        """Mirroring reverses each row and mirrors each tile."""
        grid = parse_pipe_grid("S-7\nL-J")
        assert str(mirror_grid(grid)) == "F-S\nL-J"

    def test_eight_orientations(self) -> None:
        """A case produces eight labelled orientations."""
        case = RotationalLoopCase(name="square", text="S7\nLJ", loop_length=4)
        orientations = case.get_all_orientations()
        assert len(orientations) == 8
        assert orientations[0][0] == "square at 0°"
        assert orientations[-1][0] == "square at 270° mirrored"
