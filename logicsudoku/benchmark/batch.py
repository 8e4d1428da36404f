"""Batch solving of puzzle files with aggregate reporting."""

from __future__ import annotations
import json
import logging
import os
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from ..core.grid import Grid
from ..core.reader import PuzzleEntry, read_puzzles
from ..core.validator import validate_solution
from ..solvers import RuleSolver, RuleStats, MAX_ITERATIONS


@dataclass
class BatchResult:
    """Result of solving one puzzle of a batch."""
    puzzle_id: int
    puzzle: str
    solved: bool
    status: str
    time_seconds: float
    memory_bytes: int
    iterations: int
    backtracks: int
    nodes_explored: int
    max_depth: int
    final_state: str = ""
    error: str = ""
    rule_stats: Dict[str, Dict[str, int]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "puzzle_id": self.puzzle_id,
            "puzzle": self.puzzle,
            "solved": self.solved,
            "status": self.status,
            "time_seconds": self.time_seconds,
            "memory_bytes": self.memory_bytes,
            "memory_mb": self.memory_bytes / (1024 * 1024),
            "iterations": self.iterations,
            "backtracks": self.backtracks,
            "nodes_explored": self.nodes_explored,
            "max_depth": self.max_depth,
            "final_state": self.final_state,
            "error": self.error,
            "rule_stats": self.rule_stats,
        }


class BatchRunner:
    """
    Solves every puzzle of a file, one at a time.

    A puzzle that fails to parse or to solve is recorded and the run moves
    on to the next one.
    """

    def __init__(
        self,
        brute_force: bool = False,
        max_iterations: int = MAX_ITERATIONS,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the runner.

        Args:
            brute_force: Let the solver guess when deduction stalls.
            max_iterations: Rule-cycle ceiling per search level.
            logger: Logger handed to every solver.
        """
        self.brute_force = brute_force
        self.max_iterations = max_iterations
        self.logger = logger or logging.getLogger(__name__)
        self.results: List[BatchResult] = []
        self.total_time_seconds = 0.0

    def run_file(self, path: str, show_progress: bool = True) -> List[BatchResult]:
        """Read and solve every puzzle in a file."""
        self.logger.info("Reading %s", path)
        return self.run(read_puzzles(path), show_progress=show_progress)

    def run(self, entries: List[PuzzleEntry], show_progress: bool = True) -> List[BatchResult]:
        """
        Solve parsed puzzle entries.

        Returns:
            List of BatchResult objects, one per entry.
        """
        self.results = []
        start_time = time.perf_counter()

        for entry in tqdm(entries, desc="Solving", disable=not show_progress):
            if entry.ok:
                self.results.append(self._run_single(entry.index, entry.text, entry.grid))
            else:
                self.logger.warning("Puzzle %d rejected: %s", entry.index, entry.error)
                self.results.append(BatchResult(
                    puzzle_id=entry.index,
                    puzzle=entry.text,
                    solved=False,
                    status="input_error",
                    time_seconds=0.0,
                    memory_bytes=0,
                    iterations=0,
                    backtracks=0,
                    nodes_explored=0,
                    max_depth=0,
                    error=str(entry.error),
                ))

        self.total_time_seconds = time.perf_counter() - start_time
        return self.results

    def _run_single(self, puzzle_id: int, text: str, grid: Grid) -> BatchResult:
        """Run the solver on a single puzzle."""
        solver = RuleSolver(
            brute_force=self.brute_force,
            max_iterations=self.max_iterations,
            logger=self.logger,
        )
        solution, stats = solver.solve(grid)
        solved = solution is not None and validate_solution(grid, solution)

        return BatchResult(
            puzzle_id=puzzle_id,
            puzzle=text,
            solved=solved,
            status=stats.status.value,
            time_seconds=stats.time_seconds,
            memory_bytes=stats.memory_bytes,
            iterations=stats.iterations,
            backtracks=stats.backtracks,
            nodes_explored=stats.nodes_explored,
            max_depth=stats.max_depth,
            final_state=solver.last_grid.serialize(),
            error=stats.error,
            rule_stats={
                name: {"invocations": s.invocations, "no_effect": s.no_effect}
                for name, s in stats.rule_stats.items()
            },
        )

    def failed_ids(self) -> List[int]:
        return [r.puzzle_id for r in self.results if not r.solved]

    def rule_totals(self) -> Dict[str, RuleStats]:
        """Sum rule statistics over every puzzle of the batch."""
        totals: Dict[str, RuleStats] = {}
        for result in self.results:
            for name, counts in result.rule_stats.items():
                totals.setdefault(name, RuleStats()).merge(
                    RuleStats(counts["invocations"], counts["no_effect"])
                )
        return totals

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics from batch results."""
        solved = [r for r in self.results if r.solved]
        times = [r.time_seconds for r in self.results]
        statuses: Dict[str, int] = {}
        for r in self.results:
            statuses[r.status] = statuses.get(r.status, 0) + 1

        return {
            "total_puzzles": len(self.results),
            "total_solved": len(solved),
            "accuracy": len(solved) / len(self.results) * 100 if self.results else 0.0,
            "total_time_seconds": self.total_time_seconds,
            "avg_time_seconds": sum(times) / len(times) if times else 0.0,
            "brute_force": self.brute_force,
            "failed_puzzles": self.failed_ids(),
            "statuses": statuses,
            "rule_stats": {
                name: {"invocations": s.invocations, "no_effect": s.no_effect}
                for name, s in self.rule_totals().items()
            },
        }

    def save_results(self, output_dir: str) -> None:
        """Save batch results and summary as JSON."""
        os.makedirs(output_dir, exist_ok=True)

        results_file = os.path.join(output_dir, "batch_results.json")
        with open(results_file, "w") as f:
            json.dump([r.to_dict() for r in self.results], f, indent=2)

        summary_file = os.path.join(output_dir, "batch_summary.json")
        with open(summary_file, "w") as f:
            json.dump(self.get_summary(), f, indent=2)

        self.logger.info("Results saved to %s", output_dir)
