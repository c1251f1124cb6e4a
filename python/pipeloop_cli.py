#!/usr/bin/env python3
"""
Command-line harness for the pipe-loop solver.

Reads a puzzle grid from a file (or stdin) and prints the loop length,
or the farthest distance from Start with --distance.
"""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from pipe_parser import parse_pipe_grid
from pipe_types import PipeLoopError
from pipeloop import LoopFailure, LoopRules, failure_from_error, measure_loop, trace_loop

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    """argparse type accepting integers >= 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="pipeloop",
        description="Measure the pipe loop passing through the Start tile 'S'",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default="-",
        help="Puzzle file to read (default: '-' for stdin)",
    )
    parser.add_argument(
        "--distance", "-d",
        action="store_true",
        help="Print the farthest distance from Start instead of the loop length",
    )
    parser.add_argument(
        "--trace", "-t",
        action="store_true",
        help="Also print every coordinate on the loop, starting at Start",
    )
    parser.add_argument(
        "--step-limit",
        type=positive_int,
        default=None,
        metavar="N",
        help="Give up after N rounds (default: rows * cols + 1)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v for INFO, -vv for DEBUG)",
    )
    return parser.parse_args(argv)


def configure_logging(verbosity: int, console: Console) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def read_puzzle(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def print_failure(console: Console, failure: LoopFailure) -> None:
    message = Text()
    message.append(f"✗ {failure.reason.value}", style="bold red")
    if failure.position is not None:
        message.append(f" at {failure.position}", style="red")
    message.append("\n")
    message.append(failure.details)
    console.print(message)


def main(argv: list[str] | None = None) -> int:
    """Run the solver; returns the process exit status."""
    args = parse_args(argv)
    console = Console(highlight=False)
    err_console = Console(stderr=True, highlight=False)
    configure_logging(args.verbose, err_console)

    try:
        text = read_puzzle(args.path)
    except OSError as e:
        err_console.print(f"[bold red]Cannot read {args.path}:[/bold red] {e.strerror}")
        return 2

    rules = LoopRules(step_limit=args.step_limit)
    try:
        grid = parse_pipe_grid(text)
        logger.info("Parsed %dx%d grid, start at %s", grid.rows, grid.cols, grid.start)
        measurement = measure_loop(grid, rules)
        path = trace_loop(grid) if args.trace else []
    except PipeLoopError as e:
        print_failure(err_console, failure_from_error(e))
        return 1

    for i, pos in enumerate(path):
        console.print(f"  Step {i}: [{pos.row},{pos.col}] {grid.tiles[pos.row][pos.col].value}", markup=False)

    answer = measurement.farthest_distance if args.distance else measurement.loop_length
    console.print(str(answer))
    return 0


if __name__ == "__main__":
    sys.exit(main())
