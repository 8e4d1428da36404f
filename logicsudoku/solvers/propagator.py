"""Repeated rule application until the grid is solved or stops changing."""

from __future__ import annotations
import logging
from enum import Enum
from typing import Optional

from ..core.grid import Grid
from ..core.exceptions import IterationLimitError
from .engine import RuleEngine


MAX_ITERATIONS = 1000


class PropagationResult(Enum):
    SOLVED = "solved"
    STALLED = "stalled"


class Propagator:
    """Drives a RuleEngine to a fixed point."""

    def __init__(self, engine: RuleEngine, max_iterations: int = MAX_ITERATIONS,
                 logger: Optional[logging.Logger] = None):
        self.engine = engine
        self.max_iterations = max_iterations
        self.logger = logger or logging.getLogger(__name__)
        self.iterations = 0

    def propagate(self, grid: Grid) -> PropagationResult:
        """
        Apply rule cycles until the grid is solved or a cycle changes nothing.

        Raises:
            IterationLimitError: If the grid is still changing after
                ``max_iterations`` cycles.
            ImpossibleValueError: If a rule empties a cell's candidates.
        """
        while True:
            if grid.is_solved():
                return PropagationResult.SOLVED

            self.logger.debug("*** beginning update iteration %d ***", self.iterations)
            changed = self.engine.run_cycle(grid)
            self.logger.debug("*** update iteration %d complete ***", self.iterations)

            if not changed:
                return PropagationResult.STALLED

            self.iterations += 1
            if grid.is_solved():
                return PropagationResult.SOLVED
            if self.iterations >= self.max_iterations:
                raise IterationLimitError(
                    f"Could not solve puzzle in {self.max_iterations} iterations"
                )
