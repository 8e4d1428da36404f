"""Deduction rules that prune candidates and fix values."""

from __future__ import annotations
import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from ..core.grid import Cell, Grid, DIGITS, GROUP_ARRAYS, PEER_ARRAY


_null_logger = logging.getLogger(__name__ + ".null")
_null_logger.addHandler(logging.NullHandler())
_null_logger.propagate = False


def eliminate_from_peers(grid: Grid, cell: Cell, value: int) -> None:
    """Remove a freshly fixed value from every peer that still lists it."""
    peers = PEER_ARRAY[cell.index]
    for index in peers[grid.mask[peers, value]]:
        grid.cells[index].remove_candidates((value,))


def update_candidates(grid: Grid, log: logging.Logger) -> None:
    """
    For each unsolved cell, drop every digit already fixed among its peers.

    Pruning can leave a cell with one candidate, fixing it; that digit must
    then leave cells the sweep already passed, so sweeps repeat until one
    removes nothing.
    """
    log.debug("Applying rule: Update Candidate Values")
    removed = True
    while removed:
        removed = False
        for index in np.flatnonzero(grid.values == 0):
            if grid.values[index]:
                continue
            fixed = grid.values[PEER_ARRAY[index]]
            doomed = np.unique(fixed[grid.mask[index, fixed]])
            if doomed.size:
                grid.cells[index].remove_candidates(doomed.tolist())
                removed = True


def singles(grid: Grid, log: logging.Logger) -> None:
    """Propagate every cell that is down to one candidate to its peers."""
    log.debug("Applying rule: Singles")
    for index in np.flatnonzero(np.count_nonzero(grid.mask, axis=1) == 1):
        cell = grid.cells[index]
        value = int(np.flatnonzero(grid.mask[index])[0])
        if cell.value == 0:
            cell.set_value(value)
        eliminate_from_peers(grid, cell, value)


def hidden_singles(grid: Grid, log: logging.Logger) -> None:
    """
    Assign a candidate that no other cell of one of the cell's groups can hold.
    """
    log.debug("Applying rule: Hidden Singles")
    for cell in grid.unsolved_cells():
        for group in GROUP_ARRAYS[cell.index]:
            only_here = np.flatnonzero(grid.mask[cell.index] & ~grid.mask[group].any(axis=0))
            if only_here.size:
                value = int(only_here[0])
                log.debug("Hidden single %d at (%d,%d)", value, cell.row, cell.col)
                cell.set_value(value)
                eliminate_from_peers(grid, cell, value)
                break


def _locked_candidates(group: Sequence[Cell], region: Sequence[Cell], value: int) -> None:
    """
    If every cell of ``region`` holding ``value`` also lies in ``group``,
    remove ``value`` from the part of ``group`` outside ``region``.
    """
    group_indices = {c.index for c in group}
    region_indices = {c.index for c in region}
    holders = [c for c in region if c.has_candidate(value)]
    if not holders or any(c.index not in group_indices for c in holders):
        return
    for c in group:
        if c.index not in region_indices:
            c.remove_candidates((value,))


def locked_candidates_1(grid: Grid, log: logging.Logger) -> None:
    """Pointing: a box candidate confined to one line is removed from the rest of the line."""
    log.debug("Applying rule: Locked Candidates 1")
    for cell in grid.unsolved_cells():
        row, col, box = grid.groups(cell, include_self=True)
        for value in sorted(cell.candidates):
            for line in (row, col):
                _locked_candidates(line, box, value)


def locked_candidates_2(grid: Grid, log: logging.Logger) -> None:
    """Box/line reduction: a line candidate confined to one box is removed from the rest of the box."""
    log.debug("Applying rule: Locked Candidates 2")
    for cell in grid.unsolved_cells():
        row, col, box = grid.groups(cell, include_self=True)
        for value in sorted(cell.candidates):
            for line in (row, col):
                _locked_candidates(box, line, value)


def _grow_naked_subset(subset: List[Cell], union: set, pool: List[Cell],
                       size: int, start: int = 0) -> Optional[List[Cell]]:
    """
    Extend ``subset`` one pool cell at a time while the candidate union stays
    within ``size``; undo the last step when it cannot reach a full subset.
    """
    if len(subset) == size:
        return subset if len(union) == size else None
    for position in range(start, len(pool)):
        member = pool[position]
        grown = union | member.candidates
        if len(grown) > size:
            continue
        found = _grow_naked_subset(subset + [member], grown, pool, size, position + 1)
        if found is not None:
            return found
    return None


def _check_group_naked_n(cell: Cell, group: List[Cell], size: int, log: logging.Logger) -> None:
    pool = [c for c in group if not c.is_solved() and c.candidate_count <= size]
    if len(pool) < size - 1:
        return
    subset = _grow_naked_subset([cell], cell.candidates, pool, size)
    if subset is None:
        return

    members = {c.index for c in subset}
    values = set().union(*(c.candidates for c in subset))
    log.debug("Found naked %d: %s in %s", size, sorted(values),
              [(c.row, c.col) for c in subset])
    for other in group:
        if other.index not in members and not other.is_solved():
            other.remove_candidates(values)


def naked_n(grid: Grid, size: int, log: logging.Logger) -> None:
    """Find ``size`` cells of a group sharing exactly ``size`` candidates."""
    for cell in grid.unsolved_cells():
        if cell.candidate_count > size:
            continue
        for group in grid.groups(cell):
            if cell.is_solved():
                break
            _check_group_naked_n(cell, group, size, log)


def naked_pairs(grid: Grid, log: logging.Logger) -> None:
    log.debug("Applying rule: Naked Pairs")
    naked_n(grid, 2, log)


def naked_triples(grid: Grid, log: logging.Logger) -> None:
    log.debug("Applying rule: Naked Triples")
    naked_n(grid, 3, log)


def naked_quads(grid: Grid, log: logging.Logger) -> None:
    log.debug("Applying rule: Naked Quads")
    naked_n(grid, 4, log)


def hidden_pairs(grid: Grid, log: logging.Logger) -> None:
    """
    Restrict two cells to the two values only they can hold within a group.

    Each restriction is applied as soon as it is found; later pairs in the
    same group are evaluated against the updated candidates.
    """
    log.debug("Applying rule: Hidden Pairs")
    for cell in grid.unsolved_cells():
        for group in grid.groups(cell):
            for partner in group:
                if cell.is_solved():
                    break
                overlap = cell.candidates & partner.candidates
                if len(overlap) != 2:
                    continue
                elsewhere = set().union(*(c.candidates for c in group if c.index != partner.index))
                if overlap & elsewhere:
                    continue
                for member in (cell, partner):
                    if member.remove_candidates(DIGITS - overlap):
                        log.debug("Hidden pair %s at (%d,%d)", sorted(overlap), member.row, member.col)


class Rule(Enum):
    """The closed set of deduction rules."""

    UPDATE_CANDIDATES = "update_candidates"
    SINGLES = "singles"
    HIDDEN_SINGLES = "hidden_singles"
    LOCKED_CANDIDATES_1 = "locked_candidates_1"
    LOCKED_CANDIDATES_2 = "locked_candidates_2"
    NAKED_PAIRS = "naked_pairs"
    NAKED_TRIPLES = "naked_triples"
    NAKED_QUADS = "naked_quads"
    HIDDEN_PAIRS = "hidden_pairs"

    def apply(self, grid: Grid, log: Optional[logging.Logger] = None) -> bool:
        """
        Run the rule once over the grid.

        Returns:
            True if the rule changed any candidate or value.
        """
        log = log or _null_logger
        before = grid.state()
        RULE_FUNCTIONS[self](grid, log)
        changed = before != grid.state()
        log.debug("Application of rule %s did %sadvance state.", self.value, "" if changed else "not ")
        return changed


RULE_FUNCTIONS: Dict[Rule, Callable[[Grid, logging.Logger], None]] = {
    Rule.UPDATE_CANDIDATES: update_candidates,
    Rule.SINGLES: singles,
    Rule.HIDDEN_SINGLES: hidden_singles,
    Rule.LOCKED_CANDIDATES_1: locked_candidates_1,
    Rule.LOCKED_CANDIDATES_2: locked_candidates_2,
    Rule.NAKED_PAIRS: naked_pairs,
    Rule.NAKED_TRIPLES: naked_triples,
    Rule.NAKED_QUADS: naked_quads,
    Rule.HIDDEN_PAIRS: hidden_pairs,
}

DEFAULT_RULES = (
    Rule.SINGLES,
    Rule.HIDDEN_SINGLES,
    Rule.LOCKED_CANDIDATES_1,
    Rule.LOCKED_CANDIDATES_2,
    Rule.NAKED_PAIRS,
    Rule.NAKED_TRIPLES,
    Rule.NAKED_QUADS,
    Rule.HIDDEN_PAIRS,
)
