"""Reading puzzle files, one 81-character puzzle per line."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .exceptions import InputDataError
from .grid import Grid


@dataclass
class PuzzleEntry:
    """One line of a puzzle file, parsed or rejected."""
    index: int
    text: str
    grid: Optional[Grid] = None
    error: Optional[InputDataError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_puzzles(lines: Iterable[str]) -> List[PuzzleEntry]:
    """
    Parse puzzle lines, keeping per-line input errors instead of aborting.

    Blank lines are skipped and do not consume an index.
    """
    entries = []
    for line in lines:
        text = line.rstrip("\r\n")
        if not text.strip():
            continue
        entry = PuzzleEntry(index=len(entries), text=text)
        try:
            entry.grid = Grid.from_string(text)
        except InputDataError as e:
            entry.error = e
        entries.append(entry)
    return entries


def read_puzzles(path: str) -> List[PuzzleEntry]:
    """Read every puzzle in a text file."""
    with open(path, "r") as f:
        return parse_puzzles(f)
