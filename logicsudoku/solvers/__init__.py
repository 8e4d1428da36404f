"""Solvers module: deduction rules, propagation and backtracking search."""

from .base_solver import BaseSolver, SolverStats, RuleStats, SolveStatus
from .rules import Rule, DEFAULT_RULES
from .engine import RuleEngine
from .propagator import Propagator, PropagationResult, MAX_ITERATIONS
from .search import BacktrackingSearch
from .rule_solver import RuleSolver

__all__ = [
    "BaseSolver",
    "SolverStats",
    "RuleStats",
    "SolveStatus",
    "Rule",
    "DEFAULT_RULES",
    "RuleEngine",
    "Propagator",
    "PropagationResult",
    "MAX_ITERATIONS",
    "BacktrackingSearch",
    "RuleSolver",
]
