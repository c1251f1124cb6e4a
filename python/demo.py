"""
Demonstration scripts for the pipe-loop solver.
"""

from pipe_parser import parse_pipe_grid
from pipeloop import LoopFailure, Walker, measure_loop, resolve_start, solve

SIMPLE_LOOP = """\
.....
.S-7.
.|.|.
.L-J.
....."""

COMPLEX_LOOP = """\
..F7.
.FJ|.
SJ.L7
|F--J
LJ..."""

NOISY_LOOP = """\
7-F7-
.FJ|7
SJLL7
|F--J
LJ.LJ"""


def demo() -> None:
    """Measure each sample loop."""
    for name, text in [("Simple", SIMPLE_LOOP), ("Complex", COMPLEX_LOOP), ("Noisy", NOISY_LOOP)]:
        grid = parse_pipe_grid(text)
        result = measure_loop(grid)

        print("=" * 40)
        print(f"{name} loop ({grid.rows}x{grid.cols}):")
        print("=" * 40)
        print(grid)
        print()
        print(f"  Start:             {result.start}")
        print(f"  Start directions:  {result.start_directions[0].value}, {result.start_directions[1].value}")
        print(f"  Walkers meet at:   {result.meeting_point}")
        print(f"  Farthest distance: {result.farthest_distance}")
        print(f"  Loop length:       {result.loop_length}")
        print()


def walker_demo() -> None:
    """Show both walkers' paths around the complex loop."""
    grid = parse_pipe_grid(COMPLEX_LOOP)
    first, second = resolve_start(grid)

    print("=" * 60)
    print("Walker demo: two walkers leave Start in opposite senses")
    print("=" * 60)
    print()

    walker_a = Walker(grid, first)
    walker_b = Walker(grid, second)
    for i, (pos_a, pos_b) in enumerate(zip(walker_a, walker_b), start=1):
        marker = "  <- meet" if pos_a == pos_b else ""
        print(f"  Round {i}: A{pos_a} heading {walker_a.heading.value}   B{pos_b} heading {walker_b.heading.value}{marker}")
        if pos_a == pos_b:
            break
    print()


def failure_demo() -> None:
    """Show failure values for malformed grids."""
    broken = {
        "Unknown character": ".S-7.\n.|X|.\n.L-J.",
        "Two starts": "S-7\n|.|\nL-S",
        "Dead-end start": "...\n.S-\n...",
        "Open loop": "S-7\n|.|\nL-.",
    }

    print("=" * 60)
    print("Failure demo")
    print("=" * 60)
    for name, text in broken.items():
        result = solve(text)
        if isinstance(result, LoopFailure):
            print(f"  {name}: {result.reason.value} at {result.position}")
        else:
            print(f"  {name}: loop length {result.loop_length}")


if __name__ == "__main__":
    demo()
    walker_demo()
    failure_demo()
