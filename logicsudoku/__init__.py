"""Sudoku solver combining deduction rules with backtracking search."""

from .core import Grid, Cell, read_puzzles
from .solvers import RuleSolver, SolveStatus

__version__ = "1.0.0"

__all__ = ["Grid", "Cell", "read_puzzles", "RuleSolver", "SolveStatus"]
