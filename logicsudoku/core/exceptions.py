"""Exception hierarchy for puzzle parsing and solving."""


class SudokuError(Exception):
    """Base class for every error raised while reading or solving a puzzle."""


class InputDataError(SudokuError):
    """Puzzle text could not be parsed."""

    def __init__(self, msg: str = "Invalid input data"):
        super().__init__(msg)


class ImpossibleValueError(SudokuError):
    """A cell ran out of candidates, or was assigned a value it cannot hold."""

    def __init__(self, msg: str = "Impossible value"):
        super().__init__(msg)


class UnsolvableError(SudokuError):
    """The solver gave up on the puzzle."""

    def __init__(self, msg: str = "Unsolvable"):
        super().__init__(msg)


class StalledError(UnsolvableError):
    """No deduction rule made progress and guessing is disabled."""


class IterationLimitError(UnsolvableError):
    """Propagation kept changing the grid past the iteration ceiling."""


class GuessesExhaustedError(UnsolvableError):
    """Every guess at a search level led to a contradiction."""
