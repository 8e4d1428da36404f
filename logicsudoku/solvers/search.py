"""Guess-and-recurse search used when deduction stalls."""

from __future__ import annotations
import logging
from typing import Callable, Optional, TYPE_CHECKING

from ..core.grid import Grid
from ..core.exceptions import ImpossibleValueError, GuessesExhaustedError
from .base_solver import SolverStats

if TYPE_CHECKING:
    from .rule_solver import RuleSolver


class BacktrackingSearch:
    """
    Guesses a value for the first unsolved cell and solves the rest recursively.

    Every guess runs on its own clone of the grid with a fresh solver, so a
    branch that fails leaves the caller's grid exactly as it was. Once every
    candidate of that cell has failed the grid has no solution: any solution
    would have to give the cell one of those values.
    """

    def __init__(self, spawn: Callable[[], RuleSolver], stats: SolverStats,
                 logger: Optional[logging.Logger] = None):
        """
        Args:
            spawn: Builds the solver for one level deeper.
            stats: Statistics of the current level; nested levels are merged in.
            logger: Where guess progress is reported.
        """
        self.spawn = spawn
        self.stats = stats
        self.logger = logger or logging.getLogger(__name__)

    def search(self, grid: Grid) -> Grid:
        """
        Find a solution by guessing.

        Returns:
            The solved grid (a clone, not ``grid`` itself).

        Raises:
            GuessesExhaustedError: If every guess led to a contradiction.
            IterationLimitError: If a branch hit the iteration ceiling.
        """
        cell = next(grid.unsolved_cells(), None)
        if cell is None:
            raise GuessesExhaustedError("No unsolved cell left to guess")

        candidates = sorted(cell.candidates)
        self.logger.info("Guessing values for (%d,%d): %s", cell.row, cell.col, candidates)

        for value in candidates:
            branch = grid.copy()
            branch.cell(cell.row, cell.col).set_value(value)
            self.stats.nodes_explored += 1

            solver = self.spawn()
            try:
                solution = solver.run(branch)
            except (ImpossibleValueError, GuessesExhaustedError) as e:
                self.logger.info("Guessing value FAILED: (%d,%d) = %d: %s", cell.row, cell.col, value, e)
                self.stats.backtracks += 1
                continue
            finally:
                self.stats.merge_search(solver.stats)

            self.logger.info("Guess (%d,%d) = %d led to a solution", cell.row, cell.col, value)
            return solution

        raise GuessesExhaustedError(
            f"Exhausted all guesses for ({cell.row},{cell.col}): {candidates}"
        )
