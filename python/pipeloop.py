"""
Pipe-loop solver.
Two walkers leave Start in opposite senses around the loop and step in lock-step;
the round in which they meet is the farthest distance, and twice that is the loop length.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from pipe_parser import parse_pipe_grid
from pipe_types import (
    AmbiguousStartError,
    BrokenLoopError,
    Coordinate,
    Direction,
    InvalidTransitionError,
    PipeGrid,
    PipeLoopError,
    StructuralError,
    Tile,
)

logger = logging.getLogger(__name__)


class FailureReason(Enum):
    """Reason why a loop could not be measured."""

    STRUCTURAL = "structural"  # Bad character, ragged rows, Start count != 1
    AMBIGUOUS_START = "ambiguous_start"  # Start has != 2 connecting neighbours
    BROKEN_LOOP = "broken_loop"  # Left the grid, dead end, or never closed
    INVALID_TRANSITION = "invalid_transition"  # Transition table misuse


@dataclass(frozen=True)
class LoopRules:
    """Rules governing loop measurement."""

    step_limit: int | None = None  # None = rows * cols + 1 rounds

    def __post_init__(self) -> None:
        if self.step_limit is not None and self.step_limit < 1:
            raise ValueError(f"step_limit must be a positive number of rounds, got {self.step_limit}")

    def limit_for(self, grid: PipeGrid) -> int:
        if self.step_limit is not None:
            return self.step_limit
        return grid.rows * grid.cols + 1


# =============================================================================
# Tile Transition Table
# =============================================================================


def _build_transitions() -> dict[tuple[Tile, Direction], Direction]:
    """
    Build the (tile, heading) -> exit heading table from tile connections.

    A tile entered while heading `d` must connect back towards `d.opposite`;
    the walker leaves through the tile's other connection.
    """
    table: dict[tuple[Tile, Direction], Direction] = {}
    for tile in Tile:
        connected = tile.connections
        for heading in Direction:
            if heading.opposite in connected:
                (exit_heading,) = connected - {heading.opposite}
                table[(tile, heading)] = exit_heading
    return table


TRANSITIONS: dict[tuple[Tile, Direction], Direction] = _build_transitions()


def accepts(tile: Tile, heading: Direction) -> bool:
    """Whether `tile` can be entered while moving in `heading`."""
    return (tile, heading) in TRANSITIONS


def exit_direction(tile: Tile, heading: Direction, position: Coordinate | None = None) -> Direction:
    """
    Heading a walker takes when leaving `tile`, having entered it moving in `heading`.

    Start preserves the heading: the start directions are resolved up front,
    so its real pipe shape is never needed.

    Raises:
        InvalidTransitionError: If `tile` cannot be entered with `heading`
    """
    if tile is Tile.START:
        return heading
    try:
        return TRANSITIONS[(tile, heading)]
    except KeyError:
        raise InvalidTransitionError(tile, heading, position) from None


# =============================================================================
# Start Resolution
# =============================================================================


def resolve_start(grid: PipeGrid) -> tuple[Direction, Direction]:
    """
    Find the two directions leading from Start onto the loop.

    A direction qualifies when the neighbour that way can be entered while
    heading in that direction. Neighbours outside the grid are skipped.

    Raises:
        AmbiguousStartError: If other than exactly two directions qualify
    """
    found: list[Direction] = []
    for direction, neighbour in grid.neighbours(grid.start).items():
        if neighbour is None:
            continue
        tile = grid.tile_at(neighbour)
        if tile is not None and accepts(tile, direction):
            found.append(direction)

    if len(found) != 2:
        names = ", ".join(d.value for d in found) or "none"
        raise AmbiguousStartError(
            f"Start at {grid.start} connects to {len(found)} neighbours ({names}), expected exactly 2",
            grid.start,
            tuple(found),
        )

    logger.debug("resolve_start: start=%s directions=%s,%s", grid.start, found[0].value, found[1].value)
    return found[0], found[1]


# =============================================================================
# Walker
# =============================================================================


class Walker:
    """
    Cursor that follows the pipe one cell per step.

    Usage:
        walker = Walker(grid, Direction.E)
        for pos in walker:
            print(pos)  # every loop cell after Start, Start itself excluded

    Iteration ends when the walker re-enters Start. A finished walker stays
    finished; build a new one to walk again.
    """

    def __init__(self, grid: PipeGrid, heading: Direction, position: Coordinate | None = None) -> None:
        self.grid = grid
        self.heading = heading
        self.position = grid.start if position is None else position
        self.steps = 0
        self.finished = False

    def __iter__(self) -> Iterator[Coordinate]:
        return self

    def __next__(self) -> Coordinate:
        pos = self.step()
        if pos is None:
            raise StopIteration
        return pos

    def step(self) -> Coordinate | None:
        """
        Turn according to the current tile and move one cell.

        Returns:
            The new position, or None once the walker is back on Start

        Raises:
            BrokenLoopError: If the move leaves the grid or lands on a tile
                that does not connect back
        """
        if self.finished:
            return None

        tile = self.grid.tile_at(self.position)
        if tile is None:
            raise BrokenLoopError(f"Walker is outside the grid at {self.position}", self.position)
        heading = exit_direction(tile, self.heading, self.position)

        target = self.grid.neighbour(self.position, heading)
        if target is None:
            raise BrokenLoopError(
                f"Loop leaves the grid heading {heading.value} from {self.position}",
                self.position,
            )

        target_tile = self.grid.tiles[target.row][target.col]
        if target_tile is not Tile.START and not accepts(target_tile, heading):
            raise BrokenLoopError(
                f"Pipe broken at {target}: tile '{target_tile.value}' does not connect "
                f"when entered heading {heading.value}",
                target,
            )

        self.heading = heading
        self.position = target
        self.steps += 1

        if target_tile is Tile.START:
            self.finished = True
            return None
        return target


# =============================================================================
# Loop Measurement
# =============================================================================


@dataclass(frozen=True)
class LoopMeasurement:
    """Successful measurement of the loop through Start."""

    start: Coordinate
    start_directions: tuple[Direction, Direction]
    meeting_point: Coordinate
    farthest_distance: int  # Rounds until the walkers met

    @property
    def loop_length(self) -> int:
        return 2 * self.farthest_distance


@dataclass(frozen=True)
class LoopFailure:
    """Why a loop could not be measured."""

    reason: FailureReason
    position: Coordinate | None
    details: str


def measure_loop(grid: PipeGrid, rules: LoopRules | None = None) -> LoopMeasurement:
    """
    Walk the loop from Start in both senses until the walkers meet.

    Walkers on a closed loop of even length L meet at the cell L / 2 steps
    away from Start in both directions. Loops on a square grid always have
    even length, so no odd-length case exists.

    Args:
        grid: The parsed grid
        rules: LoopRules; the round bound defaults to rows * cols + 1

    Returns:
        LoopMeasurement describing the meeting point and distances

    Raises:
        AmbiguousStartError: If Start does not have exactly two connections
        BrokenLoopError: If the loop is open, leaves the grid, or does not
            close within the round bound
    """
    if rules is None:
        rules = LoopRules()

    first, second = resolve_start(grid)
    walker_a = Walker(grid, first)
    walker_b = Walker(grid, second)
    limit = rules.limit_for(grid)

    rounds = 0
    while rounds < limit:
        pos_a = walker_a.step()
        pos_b = walker_b.step()
        rounds += 1

        if pos_a is None or pos_b is None:
            raise BrokenLoopError(
                f"Walkers returned to Start after {rounds} rounds without meeting",
                grid.start,
            )

        if pos_a == pos_b:
            result = LoopMeasurement(grid.start, (first, second), pos_a, rounds)
            logger.info(
                "measure_loop: walkers met at %s after %d rounds, loop length=%d",
                pos_a,
                rounds,
                result.loop_length,
            )
            return result

    raise BrokenLoopError(
        f"Loop did not close within {limit} rounds (walkers at {walker_a.position} and {walker_b.position})",
        walker_a.position,
    )


def trace_loop(grid: PipeGrid) -> list[Coordinate]:
    """
    Every coordinate on the loop, Start first, in the first resolved direction.

    Raises:
        AmbiguousStartError, BrokenLoopError: As for measure_loop
    """
    first, _ = resolve_start(grid)
    return [grid.start, *Walker(grid, first)]


# =============================================================================
# Text-in, integer-out entry points
# =============================================================================


_FAILURE_REASONS: tuple[tuple[type[PipeLoopError], FailureReason], ...] = (
    (StructuralError, FailureReason.STRUCTURAL),
    (AmbiguousStartError, FailureReason.AMBIGUOUS_START),
    (BrokenLoopError, FailureReason.BROKEN_LOOP),
    (InvalidTransitionError, FailureReason.INVALID_TRANSITION),
)


def failure_from_error(error: PipeLoopError) -> LoopFailure:
    """Convert a raised PipeLoopError into a LoopFailure value."""
    for error_type, reason in _FAILURE_REASONS:
        if isinstance(error, error_type):
            return LoopFailure(reason, error.position, str(error))
    raise TypeError(f"Unknown pipe-loop error type: {type(error).__name__}")


def solve(text: str, rules: LoopRules | None = None) -> LoopMeasurement | LoopFailure:
    """
    Parse `text` and measure its loop, returning a failure value instead of raising.

    Returns:
        LoopMeasurement on success, LoopFailure describing the first problem otherwise
    """
    try:
        return measure_loop(parse_pipe_grid(text), rules)
    except PipeLoopError as error:
        failure = failure_from_error(error)
        logger.info("solve: %s at %s", failure.reason.value, failure.position)
        return failure


def loop_length(text: str, rules: LoopRules | None = None) -> int:
    """Length of the loop through Start in the grid described by `text`."""
    return measure_loop(parse_pipe_grid(text), rules).loop_length


def farthest_distance(text: str, rules: LoopRules | None = None) -> int:
    """Steps from Start to the farthest point of the loop (loop_length // 2)."""
    return measure_loop(parse_pipe_grid(text), rules).farthest_distance
