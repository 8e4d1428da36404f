"""Unit tests for propagation and the rule-based solver."""

import pytest

from logicsudoku.core.grid import Grid
from logicsudoku.core.exceptions import (
    GuessesExhaustedError,
    ImpossibleValueError,
    IterationLimitError,
    StalledError,
    UnsolvableError,
)
from logicsudoku.core.validator import validate_solution
from logicsudoku.solvers import (
    RuleSolver,
    RuleEngine,
    Propagator,
    PropagationResult,
    SolveStatus,
)

from puzzles import (
    EASY_PUZZLE,
    EASY_SOLUTION,
    BLANK_BAND_PUZZLE,
    DUPLICATE_PUZZLE,
    EMPTY_PUZZLE,
)


# Project Euler problem 96, grid 01
EULER_PUZZLE = (
    "003020600"
    "900305001"
    "001806400"
    "008102900"
    "700000008"
    "006708200"
    "002609500"
    "800203009"
    "005010300"
)


class TestPropagator:
    """Tests for the fixed-point driver."""

    def test_solves_easy_puzzle(self, silent_logger):
        grid = Grid.from_string(EASY_PUZZLE)
        propagator = Propagator(RuleEngine(logger=silent_logger), logger=silent_logger)

        assert propagator.propagate(grid) is PropagationResult.SOLVED
        assert grid.serialize() == EASY_SOLUTION
        assert propagator.iterations > 0

    def test_empty_grid_stalls_immediately(self, silent_logger):
        propagator = Propagator(RuleEngine(logger=silent_logger), logger=silent_logger)
        grid = Grid.from_string(EMPTY_PUZZLE)

        assert propagator.propagate(grid) is PropagationResult.STALLED
        assert propagator.iterations == 0
        assert grid.serialize_with_candidates() == Grid().serialize_with_candidates()

    def test_already_solved(self, silent_logger):
        propagator = Propagator(RuleEngine(logger=silent_logger), logger=silent_logger)
        assert propagator.propagate(Grid.from_string(EASY_SOLUTION)) is PropagationResult.SOLVED
        assert propagator.iterations == 0

    def test_iteration_ceiling(self, silent_logger):
        propagator = Propagator(RuleEngine(logger=silent_logger), max_iterations=1,
                                logger=silent_logger)
        with pytest.raises(IterationLimitError):
            propagator.propagate(Grid.from_string(BLANK_BAND_PUZZLE))


class TestRuleSolver:
    """Tests for the rule-based solver without guessing."""

    def test_solve_puzzle(self, silent_logger):
        """Deduction alone solves an easy puzzle."""
        board = Grid.from_string(EASY_PUZZLE)
        solver = RuleSolver(logger=silent_logger)

        solution, stats = solver.solve(board)

        assert stats.solved
        assert stats.status is SolveStatus.SOLVED
        assert solution is not None
        assert solution.is_solved()
        assert solution.serialize() == EASY_SOLUTION
        assert stats.nodes_explored == 0

    def test_solve_another_puzzle(self, silent_logger):
        board = Grid.from_string(EULER_PUZZLE)
        solution, stats = RuleSolver(logger=silent_logger).solve(board)

        assert stats.solved
        assert validate_solution(board, solution)

    def test_input_not_modified(self, silent_logger):
        board = Grid.from_string(EASY_PUZZLE)
        RuleSolver(logger=silent_logger).solve(board)
        assert board.serialize() == EASY_PUZZLE

    def test_deterministic(self, silent_logger):
        """Repeated solves give the identical grid."""
        first, _ = RuleSolver(logger=silent_logger).solve(Grid.from_string(EASY_PUZZLE))
        second, _ = RuleSolver(logger=silent_logger).solve(Grid.from_string(EASY_PUZZLE))
        assert first == second
        assert first.serialize_with_candidates() == second.serialize_with_candidates()

    def test_stats_collected(self, silent_logger):
        """Test that stats are collected."""
        solver = RuleSolver(logger=silent_logger)
        solution, stats = solver.solve(Grid.from_string(EASY_PUZZLE))

        assert stats.time_seconds > 0
        assert stats.iterations > 0
        assert stats.rule_stats["update_candidates"].invocations == stats.iterations
        assert stats.rule_stats["singles"].invocations > 0
        assert stats.to_dict()["status"] == "solved"

    def test_empty_puzzle_stalls(self, silent_logger):
        """Without guessing, an empty grid cannot be solved."""
        solver = RuleSolver(logger=silent_logger)
        with pytest.raises(StalledError):
            solver.run(Grid.from_string(EMPTY_PUZZLE))

        solution, stats = solver.solve(Grid.from_string(EMPTY_PUZZLE))
        assert solution is None
        assert stats.status is SolveStatus.STALLED
        assert stats.error

    def test_stall_is_unsolvable_error(self, silent_logger):
        with pytest.raises(UnsolvableError):
            RuleSolver(logger=silent_logger).run(Grid.from_string(BLANK_BAND_PUZZLE))

    def test_last_grid_kept_on_failure(self, silent_logger):
        solver = RuleSolver(logger=silent_logger)
        solution, stats = solver.solve(Grid.from_string(BLANK_BAND_PUZZLE))

        assert solution is None
        assert solver.last_grid.serialize()[27:] == BLANK_BAND_PUZZLE[27:]
        assert solver.last_grid.cell(0, 0).candidates == {1, 5, 6}

    def test_duplicate_digit_is_contradiction(self, silent_logger):
        """Two 5s in a row: propagation empties a candidate set."""
        with pytest.raises(ImpossibleValueError):
            RuleSolver(logger=silent_logger).run(Grid.from_string(DUPLICATE_PUZZLE))

        for brute_force in (False, True):
            solver = RuleSolver(brute_force=brute_force, logger=silent_logger)
            solution, stats = solver.solve(Grid.from_string(DUPLICATE_PUZZLE))
            assert not stats.solved
            assert stats.status is SolveStatus.CONTRADICTION

    @pytest.mark.parametrize("error, status", [
        (StalledError(), SolveStatus.STALLED),
        (IterationLimitError(), SolveStatus.ITERATION_LIMIT),
        (GuessesExhaustedError(), SolveStatus.EXHAUSTED),
        (ImpossibleValueError(), SolveStatus.CONTRADICTION),
        (UnsolvableError(), SolveStatus.UNSOLVABLE),
    ])
    def test_error_classification(self, error, status):
        assert SolveStatus.from_error(error) is status

    def test_iteration_limit_classified(self, silent_logger):
        solver = RuleSolver(brute_force=True, max_iterations=1, logger=silent_logger)
        solution, stats = solver.solve(Grid.from_string(BLANK_BAND_PUZZLE))

        assert solution is None
        assert stats.status is SolveStatus.ITERATION_LIMIT


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
