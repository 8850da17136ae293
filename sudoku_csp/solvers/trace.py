"""Optional sinks for watching a search: a step trace and a value-change log."""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core.board import Coord


@dataclass
class TraceEvent:
    """One decision taken by the search."""
    step: int
    kind: str
    coord: Optional[Coord] = None
    value: Optional[int] = None
    message: str = ""

    def __str__(self) -> str:
        return f"[{self.step}] {self.message}"


class SearchTrace:
    """
    Collects every select / assign / reject / exhausted / unassign event of a
    solve, plus the terminal outcome.

    Event kinds:
        select     a variable is inspected (one node expansion)
        assign     a value is kept
        reject     a value was tried and undone because a peer ran dry
        exhausted  no candidate left, the search retreats
        unassign   a value is taken back while backtracking
        success    every variable holds a value
        failure    the first variable ran out of candidates
    """

    def __init__(self):
        self.events: List[TraceEvent] = []

    def record(self, step: int, kind: str, coord: Optional[Coord] = None,
               value: Optional[int] = None, message: str = "") -> None:
        self.events.append(TraceEvent(step, kind, coord, value, message))

    def counts(self) -> Counter:
        return Counter(event.kind for event in self.events)

    def lines(self) -> List[str]:
        return [str(event) for event in self.events]

    def write(self, path: str) -> None:
        with open(path, "w") as f:
            f.write("\n".join(self.lines()))
            f.write("\n")

    def clear(self) -> None:
        self.events.clear()

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self):
        return iter(self.events)


class ValueChangeRecorder:
    """Board observer that keeps every (coord, value) change in order."""

    def __init__(self):
        self.changes: List[Tuple[Coord, int]] = []

    def notify_assigned(self, coord: Coord, value: int) -> None:
        self.changes.append((coord, value))

    def replay(self, grid) -> None:
        """Apply the recorded changes to a grid (numpy array or nested lists)."""
        for (row, col), value in self.changes:
            grid[row][col] = value

    def __len__(self) -> int:
        return len(self.changes)
