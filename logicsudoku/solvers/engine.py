"""Ordered application of deduction rules with per-rule statistics."""

from __future__ import annotations
import logging
from typing import Dict, Optional, Sequence

from ..core.grid import Grid
from .base_solver import RuleStats
from .rules import Rule, DEFAULT_RULES


class RuleEngine:
    """
    Applies a fixed sequence of rules to a grid.

    One cycle runs ``update_candidates`` once, then walks the rule sequence,
    draining ``singles`` before every rule so cascades are caught at once.
    """

    def __init__(self, rules: Sequence[Rule] = DEFAULT_RULES,
                 logger: Optional[logging.Logger] = None):
        self.rules = tuple(rules)
        self.logger = logger or logging.getLogger(__name__)
        self.stats: Dict[str, RuleStats] = {}

    def apply(self, rule: Rule, grid: Grid) -> bool:
        """Apply one rule and record whether it advanced the grid."""
        changed = rule.apply(grid, self.logger)
        self.stats.setdefault(rule.value, RuleStats()).record(changed)
        return changed

    def run_cycle(self, grid: Grid) -> bool:
        """
        Run every rule once, in order.

        Returns:
            True if the grid's candidates or values changed.
        """
        before = grid.state()
        self.apply(Rule.UPDATE_CANDIDATES, grid)
        for rule in self.rules:
            while self.apply(Rule.SINGLES, grid):
                pass
            if grid.is_solved():
                break
            self.apply(rule, grid)
            if grid.is_solved():
                break
        return before != grid.state()
