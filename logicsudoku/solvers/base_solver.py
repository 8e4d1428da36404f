"""Base solver interface and common utilities."""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any
import logging
import time
import tracemalloc

from ..core.grid import Grid
from ..core.exceptions import (
    SudokuError,
    ImpossibleValueError,
    StalledError,
    IterationLimitError,
    GuessesExhaustedError,
)


class SolveStatus(Enum):
    """Outcome of one puzzle attempt."""
    SOLVED = "solved"
    STALLED = "stalled"
    ITERATION_LIMIT = "iteration_limit"
    EXHAUSTED = "exhausted"
    CONTRADICTION = "contradiction"
    UNSOLVABLE = "unsolvable"

    @classmethod
    def from_error(cls, error: SudokuError) -> SolveStatus:
        """Classify the error that ended a solve attempt."""
        if isinstance(error, StalledError):
            return cls.STALLED
        if isinstance(error, IterationLimitError):
            return cls.ITERATION_LIMIT
        if isinstance(error, GuessesExhaustedError):
            return cls.EXHAUSTED
        if isinstance(error, ImpossibleValueError):
            return cls.CONTRADICTION
        return cls.UNSOLVABLE


@dataclass
class RuleStats:
    """How often a rule ran, and how often it changed nothing."""
    invocations: int = 0
    no_effect: int = 0

    def record(self, changed: bool) -> None:
        self.invocations += 1
        if not changed:
            self.no_effect += 1

    def merge(self, other: RuleStats) -> None:
        self.invocations += other.invocations
        self.no_effect += other.no_effect


@dataclass
class SolverStats:
    """Statistics from a solver run."""
    # Core metrics
    solved: bool = False
    status: Optional[SolveStatus] = None
    time_seconds: float = 0.0
    memory_bytes: int = 0
    iterations: int = 0

    # Search metrics
    backtracks: int = 0
    nodes_explored: int = 0
    max_depth: int = 0

    # Additional metadata
    algorithm: str = ""
    error: str = ""
    rule_stats: Dict[str, RuleStats] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    def merge_search(self, other: SolverStats) -> None:
        """Fold the statistics of a nested search level into this one."""
        self.backtracks += other.backtracks
        self.nodes_explored += other.nodes_explored
        self.max_depth = max(self.max_depth, other.max_depth)
        self.extra["nested_iterations"] = (
            self.extra.get("nested_iterations", 0)
            + other.iterations
            + other.extra.get("nested_iterations", 0)
        )
        for name, stats in other.rule_stats.items():
            self.rule_stats.setdefault(name, RuleStats()).merge(stats)

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            "solved": self.solved,
            "status": self.status.value if self.status else None,
            "time_seconds": self.time_seconds,
            "memory_bytes": self.memory_bytes,
            "iterations": self.iterations,
            "backtracks": self.backtracks,
            "nodes_explored": self.nodes_explored,
            "max_depth": self.max_depth,
            "algorithm": self.algorithm,
            "error": self.error,
            "rule_stats": {
                name: {"invocations": s.invocations, "no_effect": s.no_effect}
                for name, s in self.rule_stats.items()
            },
            **self.extra
        }


class BaseSolver(ABC):
    """Abstract base class for Sudoku solvers."""

    name: str = "BaseSolver"

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.stats = SolverStats(algorithm=self.name)
        self.last_grid: Optional[Grid] = None

    def solve(self, grid: Grid) -> tuple[Optional[Grid], SolverStats]:
        """
        Solve a Sudoku puzzle with timing and memory tracking.

        Puzzle-level failures never escape: they are classified in the
        returned stats, and the grid as it stood when solving stopped is kept
        in ``last_grid``.

        Args:
            grid: The puzzle to solve. It is not modified.

        Returns:
            Tuple of (solution or None, stats).
        """
        self.stats = SolverStats(algorithm=self.name)
        self.last_grid = grid.copy()

        # Start memory tracking
        tracemalloc.start()

        # Start timing
        start_time = time.perf_counter()

        solution = None
        try:
            solution = self._solve(self.last_grid)
            self.stats.solved = solution.is_solved()
            self.stats.status = SolveStatus.SOLVED if self.stats.solved else SolveStatus.UNSOLVABLE
            self.last_grid = solution
        except SudokuError as e:
            self.stats.error = str(e)
            self.stats.status = SolveStatus.from_error(e)
            self.logger.warning("Solve failed (%s): %s", self.stats.status.value, e)
        finally:
            # End timing
            self.stats.time_seconds = time.perf_counter() - start_time

            # Get memory usage
            current, peak = tracemalloc.get_traced_memory()
            tracemalloc.stop()
            self.stats.memory_bytes = peak

        return (solution if self.stats.solved else None), self.stats

    @abstractmethod
    def _solve(self, grid: Grid) -> Grid:
        """
        Internal solve method to be implemented by subclasses.

        Args:
            grid: A copy of the puzzle to solve (can be modified).

        Returns:
            The solved grid.

        Raises:
            SudokuError: If the puzzle cannot be solved.
        """
        pass
