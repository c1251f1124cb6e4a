"""
Grid parsing utilities for the pipe-loop solver.

Turns puzzle text (one row per line, one tile per character) into a PipeGrid.
"""

from __future__ import annotations

from pipe_types import TILE_CHARS, Coordinate, PipeGrid, StructuralError, Tile

__all__ = ["parse_pipe_grid", "parse_tile"]


def parse_tile(char: str, row: int = 0, col: int = 0, line: int | None = None) -> Tile:
    """
    Parse a single tile character, citing (row, col) if it is unrecognized.

    `line` is the 1-based line of the raw input holding the character, when known.
    """
    try:
        return Tile(char)
    except ValueError:
        where = f"  Row {row}, column {col}"
        if line is not None:
            where += f" (input line {line})"
        raise StructuralError(
            f"Invalid tile character {char!r}\n"
            f"{where}\n"
            f"  Valid characters: {' '.join(TILE_CHARS)}",
            Coordinate(row, col),
        ) from None


def parse_pipe_grid(text: str) -> PipeGrid:
    """
    Parse a pipe grid from its puzzle text.

    Format:
    - One row per line, rows top to bottom
    - One tile per character:
      * 'S': Start (exactly one per grid)
      * '.': Ground
      * '|', '-': Vertical / Horizontal pipe
      * 'L', 'J', '7', 'F': bends connecting N-E, N-W, S-W, S-E

    Leading/trailing blank lines and trailing whitespace on each line
    (including '\\r' from CRLF input) are ignored. Error positions are grid
    coordinates, so rows count from the first non-blank line; messages also
    cite the 1-based line of the raw input.

    Example:
        .....
        .S-7.
        .|.|.
        .L-J.
        .....

    Args:
        text: Newline-delimited grid rows

    Returns:
        The parsed PipeGrid

    Raises:
        StructuralError: On an unknown character, ragged rows, or not exactly one Start
    """
    lines = [line.rstrip() for line in text.split("\n")]
    while lines and not lines[-1]:
        lines.pop()
    skipped = 0  # Leading blank lines
    while lines and not lines[0]:
        lines.pop(0)
        skipped += 1

    if not lines:
        raise StructuralError("Empty input: expected at least one row of tiles")

    rows: list[tuple[Tile, ...]] = []
    for row_idx, line in enumerate(lines):
        line_no = skipped + row_idx + 1
        rows.append(tuple(parse_tile(char, row_idx, col_idx, line_no) for col_idx, char in enumerate(line)))

    # Validate all rows have same length
    cols = len(rows[0])
    mismatched = [(i, len(row)) for i, row in enumerate(rows) if len(row) != cols]
    if mismatched:
        error_msg = (
            f"Inconsistent row lengths\n"
            f"  Expected: {cols} columns (from row 0)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual_cols in mismatched:
            error_msg += (
                f"    Row {row_idx} (input line {skipped + row_idx + 1}): "
                f"{actual_cols} columns - \"{lines[row_idx]}\"\n"
            )
        error_msg += "  All rows must have the same number of tiles"
        first_row, first_cols = mismatched[0]
        raise StructuralError(error_msg, Coordinate(first_row, min(first_cols, cols)))

    return PipeGrid(tuple(rows))
