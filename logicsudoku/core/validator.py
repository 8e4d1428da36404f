"""Validation utilities for Sudoku grids."""

from __future__ import annotations
from collections import Counter
from typing import List, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .grid import Grid


def find_conflicts(grid: Grid) -> List[Tuple[str, int, int]]:
    """
    List digits placed more than once in a row, column or box.

    Args:
        grid: The grid to inspect.

    Returns:
        List of (group kind, group number, digit) tuples, e.g. ("row", 0, 5).
    """
    conflicts = []
    for num in range(grid.size):
        for kind, cells in (("row", grid.row(num)), ("column", grid.column(num)), ("box", grid.box(num))):
            counts = Counter(c.value for c in cells if c.value != 0)
            conflicts.extend((kind, num, digit) for digit, n in sorted(counts.items()) if n > 1)
    return conflicts


def is_valid_grid(grid: Grid) -> bool:
    """Check that no digit is placed twice in any group."""
    return not find_conflicts(grid)


def validate_solution(puzzle: Grid, solution: Grid) -> bool:
    """
    Validate that a solution correctly solves the puzzle.

    Args:
        puzzle: The original puzzle.
        solution: The proposed solution.

    Returns:
        True if solution is solved and keeps every clue of the puzzle.
    """
    for row in range(puzzle.size):
        for col in range(puzzle.size):
            clue = puzzle.initial_value_at(row, col)
            if clue != 0 and solution.value_at(row, col) != clue:
                return False

    return solution.is_solved()
