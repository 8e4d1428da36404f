"""Sudoku grid representation with per-cell candidate tracking."""

from __future__ import annotations
import numpy as np
from typing import Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from .exceptions import ImpossibleValueError, InputDataError
from .render import render_grid


PUZZLE_WIDTH = 9
BOX_WIDTH = 3
CELL_COUNT = PUZZLE_WIDTH * PUZZLE_WIDTH
DIGITS = frozenset(range(1, PUZZLE_WIDTH + 1))

# Candidate snapshot delimiters: "<c>,<c>,.../<value>;<c>,.../<value>;..."
CELL_DELIMITER = ";"
CANDIDATE_DELIMITER = ","
VALUE_DELIMITER = "/"


def index_to_coords(index: int) -> Tuple[int, int, int]:
    """Convert a row-major cell index into (row, col, box)."""
    row, col = divmod(index, PUZZLE_WIDTH)
    box = (row // BOX_WIDTH) * BOX_WIDTH + col // BOX_WIDTH
    return row, col, box


ROW_INDICES: Tuple[Tuple[int, ...], ...] = tuple(
    tuple(r * PUZZLE_WIDTH + c for c in range(PUZZLE_WIDTH))
    for r in range(PUZZLE_WIDTH)
)
COLUMN_INDICES: Tuple[Tuple[int, ...], ...] = tuple(
    tuple(r * PUZZLE_WIDTH + c for r in range(PUZZLE_WIDTH))
    for c in range(PUZZLE_WIDTH)
)
BOX_INDICES: Tuple[Tuple[int, ...], ...] = tuple(
    tuple(i for i in range(CELL_COUNT) if index_to_coords(i)[2] == b)
    for b in range(PUZZLE_WIDTH)
)
PEER_INDICES: Tuple[Tuple[int, ...], ...] = tuple(
    tuple(sorted(
        (set(ROW_INDICES[index_to_coords(i)[0]])
         | set(COLUMN_INDICES[index_to_coords(i)[1]])
         | set(BOX_INDICES[index_to_coords(i)[2]])) - {i}
    ))
    for i in range(CELL_COUNT)
)

# Array forms of the index tables, for fancy indexing into the grid arrays
PEER_ARRAY = np.array(PEER_INDICES)
GROUP_ARRAYS: Tuple[Tuple[np.ndarray, np.ndarray, np.ndarray], ...] = tuple(
    tuple(
        np.array([j for j in group if j != i])
        for group in (
            ROW_INDICES[index_to_coords(i)[0]],
            COLUMN_INDICES[index_to_coords(i)[1]],
            BOX_INDICES[index_to_coords(i)[2]],
        )
    )
    for i in range(CELL_COUNT)
)


class Cell:
    """
    A single puzzle position.

    Cells hold no state of their own: they are views onto one slot of the
    owning grid's arrays, so cloning a grid never shares cells between copies.
    """

    __slots__ = ("grid", "index", "row", "col", "box")

    def __init__(self, grid: Grid, index: int):
        self.grid = grid
        self.index = index
        self.row, self.col, self.box = index_to_coords(index)

    @property
    def value(self) -> int:
        """Fixed value, 0 when unset."""
        return int(self.grid.values[self.index])

    @property
    def initial_value(self) -> int:
        return int(self.grid.initial[self.index])

    @property
    def candidates(self) -> Set[int]:
        return set(np.flatnonzero(self.grid.mask[self.index]).tolist())

    @property
    def candidate_count(self) -> int:
        return int(np.count_nonzero(self.grid.mask[self.index]))

    def has_candidate(self, value: int) -> bool:
        return bool(self.grid.mask[self.index, value])

    def is_solved(self) -> bool:
        return self.value != 0 and self.candidate_count == 1

    def set_value(self, value: int) -> None:
        """
        Fix the cell to a value.

        Raises:
            ImpossibleValueError: If the value is not one of the candidates.
        """
        if not 1 <= value <= PUZZLE_WIDTH or not self.has_candidate(value):
            raise ImpossibleValueError(
                f"Not a possible value for ({self.row},{self.col}): "
                f"{value}, {sorted(self.candidates)}"
            )
        self.grid.values[self.index] = value
        self.grid.mask[self.index] = False
        self.grid.mask[self.index, value] = True

    def remove_candidates(self, values: Iterable[int]) -> bool:
        """
        Remove values from the candidate set.

        A cell left with a single candidate is promoted to solved.

        Returns:
            True if at least one candidate was removed.

        Raises:
            ImpossibleValueError: If no candidate would remain.
        """
        doomed = sorted({v for v in values if 1 <= v <= PUZZLE_WIDTH and self.grid.mask[self.index, v]})
        if not doomed:
            return False
        if len(doomed) >= self.candidate_count:
            raise ImpossibleValueError(
                f"No possible values left for ({self.row},{self.col}) "
                f"after removing {sorted(doomed)}"
            )
        self.grid.mask[self.index, doomed] = False
        self._promote()
        return True

    def set_candidates(self, values: Iterable[int]) -> None:
        """Replace the candidate set, resetting the value unless one candidate remains."""
        values = [v for v in values if 1 <= v <= PUZZLE_WIDTH]
        if not values:
            raise ImpossibleValueError(f"Empty candidate set for ({self.row},{self.col})")
        self.grid.mask[self.index] = False
        self.grid.mask[self.index, values] = True
        self.grid.values[self.index] = 0
        self._promote()

    def _promote(self) -> None:
        remaining = np.flatnonzero(self.grid.mask[self.index])
        if len(remaining) == 1:
            self.grid.values[self.index] = remaining[0]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return (
            self.value == other.value
            and self.row == other.row
            and self.col == other.col
            and self.candidates == other.candidates
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"Cell(row={self.row}, col={self.col}, value={self.value}, candidates={sorted(self.candidates)})"


class Grid:
    """
    A 9x9 Sudoku grid with candidate sets.

    All state lives in three arrays indexed by cell (row-major, 0..80):
    fixed values, initial values and a boolean candidate mask whose
    column ``d`` tells whether digit ``d`` is still possible (column 0 unused).
    """

    size = PUZZLE_WIDTH
    box_size = BOX_WIDTH

    def __init__(self, values: Optional[Sequence[int]] = None):
        """
        Initialize a grid.

        Args:
            values: Optional sequence of 81 digits (0 for unknown). If None,
                    creates an empty grid.
        """
        self.values = np.zeros(CELL_COUNT, dtype=np.int8)
        self.mask = np.ones((CELL_COUNT, PUZZLE_WIDTH + 1), dtype=bool)
        self.mask[:, 0] = False

        if values is not None:
            if len(values) != CELL_COUNT:
                raise InputDataError(f"Invalid input puzzle size: {len(values)}")
            for index, value in enumerate(values):
                if not 0 <= value <= PUZZLE_WIDTH:
                    raise InputDataError(f"Invalid digit {value} at position {index}")
                if value:
                    self.values[index] = value
                    self.mask[index] = False
                    self.mask[index, value] = True

        self.initial = self.values.copy()
        self.cells = [Cell(self, i) for i in range(CELL_COUNT)]

    @classmethod
    def from_string(cls, text: str) -> Grid:
        """
        Create a grid from an 81-character puzzle line.

        Args:
            text: Digits 1-9, with 0 or . for empty cells. Line terminators
                  are ignored.
        """
        data = text.replace("\r", "").replace("\n", "")
        if len(data) != CELL_COUNT:
            raise InputDataError(f"Invalid input puzzle size: {len(data)}")
        values = []
        for position, char in enumerate(data):
            if char == ".":
                values.append(0)
            elif char in "0123456789":
                values.append(int(char))
            else:
                raise InputDataError(f"Invalid character {char!r} at position {position}")
        return cls(values)

    @classmethod
    def from_candidate_snapshot(cls, text: str) -> Grid:
        """Create a grid from the output of ``serialize_with_candidates``."""
        records = text.strip().split(CELL_DELIMITER)
        if len(records) != CELL_COUNT:
            raise InputDataError(f"Invalid candidate snapshot size: {len(records)}")

        grid = cls()
        for index, record in enumerate(records):
            candidate_part, sep, value_part = record.partition(VALUE_DELIMITER)
            try:
                candidates = [int(c) for c in candidate_part.split(CANDIDATE_DELIMITER)]
                value = int(value_part) if sep else 0
            except ValueError:
                raise InputDataError(f"Malformed snapshot record {index}: {record!r}")

            if (not candidates or not 0 <= value <= PUZZLE_WIDTH
                    or any(not 1 <= c <= PUZZLE_WIDTH for c in candidates)):
                raise InputDataError(f"Malformed snapshot record {index}: {record!r}")
            if value and candidates != [value]:
                raise InputDataError(
                    f"Snapshot record {index} fixes {value} but lists {candidates}"
                )
            grid.mask[index] = False
            grid.mask[index, candidates] = True
            grid.values[index] = value
            grid.cells[index]._promote()

        grid.initial = grid.values.copy()
        return grid

    def copy(self) -> Grid:
        """Create an independent copy of the grid."""
        new_grid = Grid.__new__(Grid)
        new_grid.values = self.values.copy()
        new_grid.initial = self.initial.copy()
        new_grid.mask = self.mask.copy()
        new_grid.cells = [Cell(new_grid, i) for i in range(CELL_COUNT)]
        return new_grid

    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row * PUZZLE_WIDTH + col]

    def value_at(self, row: int, col: int) -> int:
        """Get the current value at (row, col). 0 means unset."""
        return int(self.values[row * PUZZLE_WIDTH + col])

    def initial_value_at(self, row: int, col: int) -> int:
        """Get the value (row, col) held when the grid was created."""
        return int(self.initial[row * PUZZLE_WIDTH + col])

    def row(self, num: int) -> List[Cell]:
        return [self.cells[i] for i in ROW_INDICES[num]]

    def column(self, num: int) -> List[Cell]:
        return [self.cells[i] for i in COLUMN_INDICES[num]]

    def box(self, num: int) -> List[Cell]:
        return [self.cells[i] for i in BOX_INDICES[num]]

    def groups(self, cell: Cell, include_self: bool = False) -> Tuple[List[Cell], List[Cell], List[Cell]]:
        """
        Get the row, column and box a cell belongs to.

        Args:
            cell: The cell whose groups are wanted.
            include_self: Keep the cell itself in each group.

        Returns:
            Tuple of (row cells, column cells, box cells).
        """
        row, col, box = self.row(cell.row), self.column(cell.col), self.box(cell.box)
        if include_self:
            return row, col, box
        return (
            [c for c in row if c.index != cell.index],
            [c for c in col if c.index != cell.index],
            [c for c in box if c.index != cell.index],
        )

    def peers(self, cell: Cell) -> List[Cell]:
        """Get the 20 cells sharing a row, column or box with the cell."""
        return [self.cells[i] for i in PEER_INDICES[cell.index]]

    def unsolved_cells(self) -> Iterator[Cell]:
        """Yield unsolved cells in grid order, re-checking each as it is reached."""
        for cell in self.cells:
            if not cell.is_solved():
                yield cell

    def count_solved(self) -> int:
        return sum(1 for cell in self.cells if cell.is_solved())

    def is_solved(self) -> bool:
        """Check every row, column and box is a permutation of 1-9."""
        rows = self.values.reshape(PUZZLE_WIDTH, PUZZLE_WIDTH)
        cols = rows.T
        boxes = (
            rows.reshape(BOX_WIDTH, BOX_WIDTH, BOX_WIDTH, BOX_WIDTH)
            .transpose(0, 2, 1, 3)
            .reshape(PUZZLE_WIDTH, PUZZLE_WIDTH)
        )
        expected = np.arange(1, PUZZLE_WIDTH + 1)
        return all(
            np.array_equal(np.sort(units, axis=1), np.tile(expected, (PUZZLE_WIDTH, 1)))
            for units in (rows, cols, boxes)
        )

    def remaining_digits(self) -> Set[int]:
        """Digits that are not yet placed in every box."""
        everywhere = set(DIGITS)
        for indices in BOX_INDICES:
            everywhere &= set(self.values[list(indices)].tolist())
        return set(DIGITS) - everywhere

    def serialize(self) -> str:
        """81-digit string of current values, 0 for unknown."""
        return "".join(str(v) for v in self.values.tolist())

    def state(self) -> Tuple[bytes, bytes]:
        """Raw value and candidate arrays; two grids serialize alike exactly when their states match."""
        return self.values.tobytes(), self.mask.tobytes()

    def serialize_with_candidates(self) -> str:
        """Per-cell ``candidates/value`` records joined by ``;``."""
        return CELL_DELIMITER.join(
            CANDIDATE_DELIMITER.join(str(d) for d in np.flatnonzero(self.mask[i]).tolist())
            + VALUE_DELIMITER + str(int(self.values[i]))
            for i in range(CELL_COUNT)
        )

    def __str__(self) -> str:
        return render_grid(self)

    def __repr__(self) -> str:
        return f"Grid(solved_cells={self.count_solved()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return np.array_equal(self.values, other.values) and np.array_equal(self.mask, other.mask)

    __hash__ = None
