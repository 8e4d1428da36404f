"""Unit tests for the deduction rules and the rule engine."""

import pytest

from logicsudoku.core.grid import Grid
from logicsudoku.core.exceptions import ImpossibleValueError
from logicsudoku.solvers.rules import Rule, DEFAULT_RULES
from logicsudoku.solvers.engine import RuleEngine

from puzzles import EASY_PUZZLE, EMPTY_PUZZLE, snapshot


def candidate_sets(grid):
    return [cell.candidates for cell in grid.cells]


class TestUpdateCandidates:

    def test_removes_fixed_peer_digits(self):
        grid = Grid.from_string(EASY_PUZZLE)
        assert Rule.UPDATE_CANDIDATES.apply(grid)
        # 3, 5, 6, 7, 8 and 9 are fixed among the peers of (0,2)
        assert grid.cell(0, 2).candidates <= {1, 2, 4}
        assert 4 in grid.cell(0, 2).candidates

    def test_cell_fixed_by_pruning_clears_earlier_peers(self):
        """(8,8) is only fixed late in the sweep; (8,0) must still lose its 9."""
        column = "".join("0" * 8 + str(digit) for digit in range(1, 9))
        grid = Grid.from_string(column + "0" * 9)

        assert Rule.UPDATE_CANDIDATES.apply(grid)

        assert grid.value_at(8, 8) == 9
        assert 9 not in grid.cell(8, 0).candidates
        assert not Rule.UPDATE_CANDIDATES.apply(grid)

    def test_idempotent(self):
        """A second pass with no new fixed values prunes nothing."""
        grid = Grid.from_string(EASY_PUZZLE)
        Rule.UPDATE_CANDIDATES.apply(grid)
        before = candidate_sets(grid)
        assert not Rule.UPDATE_CANDIDATES.apply(grid)
        assert candidate_sets(grid) == before

    def test_empty_grid_makes_no_progress(self):
        assert not Rule.UPDATE_CANDIDATES.apply(Grid.from_string(EMPTY_PUZZLE))


class TestSingles:

    def test_fixed_value_removed_from_peers(self):
        grid = Grid.from_string("5" + "0" * 80)
        assert Rule.SINGLES.apply(grid)
        assert 5 not in grid.cell(0, 8).candidates
        assert 5 not in grid.cell(8, 0).candidates
        assert 5 not in grid.cell(2, 2).candidates
        assert 5 in grid.cell(4, 4).candidates

    def test_duplicate_givens_contradict(self):
        grid = Grid.from_string("55" + "0" * 79)
        with pytest.raises(ImpossibleValueError):
            Rule.SINGLES.apply(grid)


class TestHiddenSingles:

    def test_only_place_in_row(self):
        others = "1,2,3,5,6,7,8,9/0"
        grid = Grid.from_candidate_snapshot(snapshot(
            r0c0=others, r0c1=others, r0c2=others, r0c3="1,4/0",
            r0c4=others, r0c5=others, r0c6=others, r0c7=others, r0c8=others,
        ))
        assert Rule.HIDDEN_SINGLES.apply(grid)
        assert grid.value_at(0, 3) == 4
        assert grid.cell(0, 3).is_solved()
        assert 4 not in grid.cell(5, 3).candidates
        assert 4 not in grid.cell(1, 4).candidates


class TestLockedCandidates:

    def test_pointing_removes_from_row(self):
        no_seven = "1,2,3,4,5,6,8,9/0"
        grid = Grid.from_candidate_snapshot(snapshot(
            r1c0=no_seven, r1c1=no_seven, r1c2=no_seven,
            r2c0=no_seven, r2c1=no_seven, r2c2=no_seven,
        ))
        assert Rule.LOCKED_CANDIDATES_1.apply(grid)
        for col in range(3, 9):
            assert 7 not in grid.cell(0, col).candidates
        assert 7 in grid.cell(0, 1).candidates
        assert 7 in grid.cell(1, 5).candidates

    def test_box_line_reduction_removes_from_box(self):
        no_seven = "1,2,3,4,5,6,8,9/0"
        grid = Grid.from_candidate_snapshot(snapshot(**{
            f"r0c{col}": no_seven for col in range(3, 9)
        }))
        assert Rule.LOCKED_CANDIDATES_2.apply(grid)
        for row in (1, 2):
            for col in range(3):
                assert 7 not in grid.cell(row, col).candidates
        assert 7 in grid.cell(0, 0).candidates
        assert 7 in grid.cell(1, 4).candidates


class TestNakedSubsets:

    def test_naked_pair(self):
        """Two cells sharing {2, 7} clear 2 and 7 from the rest of the row."""
        grid = Grid.from_candidate_snapshot(snapshot(r0c0="2,7/0", r0c1="2,7/0"))
        assert Rule.NAKED_PAIRS.apply(grid)
        for col in range(2, 9):
            assert not {2, 7} & grid.cell(0, col).candidates
        assert grid.cell(0, 0).candidates == {2, 7}
        assert grid.cell(0, 1).candidates == {2, 7}
        assert 2 in grid.cell(4, 4).candidates

    def test_naked_pair_when_rest_of_row_already_clear(self):
        rest = "1,3,4,5,6,8,9/0"
        grid = Grid.from_candidate_snapshot(snapshot(
            r0c0="2,7/0", r0c1="2,7/0",
            **{f"r0c{col}": rest for col in range(2, 9)}
        ))
        Rule.NAKED_PAIRS.apply(grid)
        for col in range(2, 9):
            assert not {2, 7} & grid.cell(0, col).candidates

    def test_naked_triple(self):
        grid = Grid.from_candidate_snapshot(snapshot(
            r0c0="1,2/0", r0c1="2,3/0", r0c2="1,3/0",
        ))
        assert Rule.NAKED_TRIPLES.apply(grid)
        assert grid.cell(0, 5).candidates == {4, 5, 6, 7, 8, 9}
        assert grid.cell(1, 1).candidates == {4, 5, 6, 7, 8, 9}
        assert grid.cell(0, 0).candidates == {1, 2}

    def test_no_naked_pair_without_match(self):
        grid = Grid.from_candidate_snapshot(snapshot(r0c0="2,7/0", r0c1="2,8/0"))
        assert not Rule.NAKED_PAIRS.apply(grid)


class TestHiddenPairs:

    def test_hidden_pair_restricts_both_cells(self):
        rest = "3,4,5,6,7,8,9/0"
        grid = Grid.from_candidate_snapshot(snapshot(
            r0c0="1,2,3/0", r0c1="1,2,4/0",
            **{f"r0c{col}": rest for col in range(2, 9)}
        ))
        assert Rule.HIDDEN_PAIRS.apply(grid)
        assert grid.cell(0, 0).candidates == {1, 2}
        assert grid.cell(0, 1).candidates == {1, 2}
        assert grid.cell(0, 2).candidates == {3, 4, 5, 6, 7, 8, 9}

    def test_second_pair_sees_first_restriction(self):
        """{3, 4} only becomes a hidden pair once (0,0) has given up its 3."""
        rest = "5,6,7,8,9/0"
        grid = Grid.from_candidate_snapshot(snapshot(
            r0c0="1,2,3/0", r0c1="1,2,5/0", r0c2="3,4,6/0", r0c3="3,4,7/0",
            **{f"r0c{col}": rest for col in range(4, 9)}
        ))
        assert Rule.HIDDEN_PAIRS.apply(grid)
        assert grid.cell(0, 0).candidates == {1, 2}
        assert grid.cell(0, 1).candidates == {1, 2}
        assert grid.cell(0, 2).candidates == {3, 4}
        assert grid.cell(0, 3).candidates == {3, 4}
        assert grid.cell(0, 4).candidates == {5, 6, 7, 8, 9}

    def test_no_hidden_pair_when_value_appears_elsewhere(self):
        grid = Grid.from_candidate_snapshot(snapshot(r0c0="1,2,3/0", r0c1="1,2,4/0"))
        assert not Rule.HIDDEN_PAIRS.apply(grid)


class TestRuleProperties:

    @pytest.mark.parametrize("rule", list(Rule))
    def test_monotonic(self, rule):
        """No rule ever adds a candidate back."""
        grid = Grid.from_string(EASY_PUZZLE)
        Rule.UPDATE_CANDIDATES.apply(grid)
        before = candidate_sets(grid)

        rule.apply(grid)

        for old, new in zip(before, candidate_sets(grid)):
            assert new <= old
            assert new

    def test_default_order(self):
        assert DEFAULT_RULES[0] is Rule.SINGLES
        assert DEFAULT_RULES[-1] is Rule.HIDDEN_PAIRS
        assert Rule.UPDATE_CANDIDATES not in DEFAULT_RULES


class TestRuleEngine:

    def test_cycle_on_empty_grid_stalls(self, silent_logger):
        engine = RuleEngine(logger=silent_logger)
        assert not engine.run_cycle(Grid())
        assert engine.stats["update_candidates"].invocations == 1
        assert engine.stats["update_candidates"].no_effect == 1

    def test_cycle_progress_and_stats(self, silent_logger):
        engine = RuleEngine(logger=silent_logger)
        grid = Grid.from_string(EASY_PUZZLE)
        assert engine.run_cycle(grid)
        assert engine.stats["singles"].invocations >= 1
        assert engine.stats["update_candidates"].no_effect == 0
