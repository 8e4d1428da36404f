"""Fixed-width text rendering of grids."""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .grid import Grid


EMPTY_CHAR = "-"
PUZZLE_DISPLAY_WIDTH = 25


def render_grid(grid: Grid, initial: bool = False) -> str:
    """
    Render a grid as boxed line art.

    Args:
        grid: The grid to draw.
        initial: Draw the values the grid started with instead of the
                 current ones.

    Returns:
        Multi-line string, 25 columns wide, with EMPTY_CHAR for unset cells.
    """
    horizontal_line = "-" * PUZZLE_DISPLAY_WIDTH
    lines = []

    for row in range(grid.size):
        if row % grid.box_size == 0:
            lines.append(horizontal_line)

        row_str = ""
        for col in range(grid.size):
            if col % grid.box_size == 0:
                row_str += "| "
            value = grid.initial_value_at(row, col) if initial else grid.value_at(row, col)
            row_str += EMPTY_CHAR if value == 0 else str(value)
            row_str += " |" if col == grid.size - 1 else " "

        lines.append(row_str)

    lines.append(horizontal_line)
    return "\n".join(lines)


def render_candidates(grid: Grid) -> str:
    """List the remaining candidates of every unsolved cell, one per line."""
    return "\n".join(
        f"\t({cell.row},{cell.col}): {sorted(cell.candidates)}"
        for cell in grid.unsolved_cells()
    )
