"""Core module for grid representation, parsing and validation."""

from .exceptions import (
    SudokuError,
    InputDataError,
    ImpossibleValueError,
    UnsolvableError,
    StalledError,
    IterationLimitError,
    GuessesExhaustedError,
)
from .grid import Cell, Grid
from .reader import PuzzleEntry, read_puzzles, parse_puzzles
from .render import render_grid, render_candidates, EMPTY_CHAR
from .validator import find_conflicts, is_valid_grid, validate_solution

__all__ = [
    "SudokuError",
    "InputDataError",
    "ImpossibleValueError",
    "UnsolvableError",
    "StalledError",
    "IterationLimitError",
    "GuessesExhaustedError",
    "Cell",
    "Grid",
    "PuzzleEntry",
    "read_puzzles",
    "parse_puzzles",
    "render_grid",
    "render_candidates",
    "EMPTY_CHAR",
    "find_conflicts",
    "is_valid_grid",
    "validate_solution",
]
