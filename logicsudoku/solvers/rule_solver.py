"""Rule-based solver: deduction first, guessing when deduction stalls."""

from __future__ import annotations
import logging
from typing import Optional, Sequence

from ..core.grid import Grid
from ..core.exceptions import StalledError
from .base_solver import BaseSolver, SolverStats
from .engine import RuleEngine
from .propagator import Propagator, PropagationResult, MAX_ITERATIONS
from .rules import Rule, DEFAULT_RULES
from .search import BacktrackingSearch


class RuleSolver(BaseSolver):
    """
    Sudoku solver built from human-style deduction rules.

    Features:
    - Candidate tracking for every cell
    - Singles, hidden singles, locked candidates, naked pairs/triples/quads
      and hidden pairs, applied in a fixed order until nothing changes
    - Optional brute force: guess and recurse on a cloned grid when stuck
    """

    name = "Rule-based"

    def __init__(
        self,
        brute_force: bool = False,
        max_iterations: int = MAX_ITERATIONS,
        rules: Sequence[Rule] = DEFAULT_RULES,
        logger: Optional[logging.Logger] = None,
        depth: int = 0,
    ):
        """
        Initialize the solver.

        Args:
            brute_force: Fall back to guessing when no rule makes progress.
            max_iterations: Ceiling on rule cycles per search level.
            rules: Rule order for each cycle.
            logger: Logger shared with the engine and nested levels.
            depth: Recursion depth of this solver within a search.
        """
        super().__init__(logger)
        self.brute_force = brute_force
        self.max_iterations = max_iterations
        self.rules = tuple(rules)
        self.depth = depth

    def run(self, grid: Grid) -> Grid:
        """
        Solve ``grid`` in place, raising on failure.

        Used for nested search levels; ``solve`` wraps it with timing and
        classification.
        """
        self.stats = SolverStats(algorithm=self.name, max_depth=self.depth)
        return self._solve(grid)

    def _solve(self, grid: Grid) -> Grid:
        engine = RuleEngine(self.rules, logger=self.logger)
        propagator = Propagator(engine, self.max_iterations, logger=self.logger)
        self.stats.max_depth = max(self.stats.max_depth, self.depth)
        self.logger.debug("Solving at depth %d, brute force %s", self.depth,
                          "ON" if self.brute_force else "OFF")

        try:
            result = propagator.propagate(grid)
        finally:
            self.stats.iterations = propagator.iterations
            self.stats.rule_stats = engine.stats

        if result is PropagationResult.SOLVED:
            self.logger.info("Solved at depth %d in %d iterations", self.depth, propagator.iterations)
            return grid

        if not self.brute_force:
            raise StalledError(
                "Update iteration ran with no changes made: "
                "no deduction rule can make further progress"
            )

        search = BacktrackingSearch(self._spawn, self.stats, logger=self.logger)
        return search.search(grid)

    def _spawn(self) -> RuleSolver:
        return RuleSolver(
            brute_force=self.brute_force,
            max_iterations=self.max_iterations,
            rules=self.rules,
            logger=self.logger,
            depth=self.depth + 1,
        )
