"""Search state shared by the backtracking strategies."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..core.board import Board, Coord
from ..core.domain_index import DomainIndex
from .trace import SearchTrace


class SearchState(Enum):
    """States of the backtracking state machine."""
    SELECT_VARIABLE = "select_variable"
    TRY_VALUE = "try_value"
    BACKTRACK = "backtrack"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class Frame:
    """A variable on the assignment path and how many candidates it has used."""
    coord: Coord
    trials: int = 0


@dataclass
class SearchContext:
    """
    Everything one solve mutates, in one place.

    The context also hides the difference between the two bookkeeping modes:
    without an index, domains are recomputed from the board's used-value
    sets; with one, the live domains are read and kept up to date.
    """
    board: Board
    index: Optional[DomainIndex] = None
    trace: Optional[SearchTrace] = None

    state: SearchState = SearchState.SELECT_VARIABLE
    path: List[Frame] = field(default_factory=list)
    frame: Optional[Frame] = None
    resume: Optional[Frame] = None

    expanded: int = 0
    backtracks: int = 0
    steps: int = 0

    @property
    def incremental(self) -> bool:
        return self.index is not None

    @property
    def variables(self) -> List[Coord]:
        return self.board.variables

    @property
    def var_count(self) -> int:
        return self.board.var_count

    @property
    def depth(self) -> int:
        return len(self.path)

    @property
    def finished(self) -> bool:
        return self.state in (SearchState.SUCCESS, SearchState.FAILURE)

    def candidates(self, coord: Coord) -> List[int]:
        """Current domain of ``coord`` in ascending order."""
        if self.index is not None:
            return self.index.domain(coord).values()
        return self.board.domain_of(coord)

    def assign(self, coord: Coord, value: int) -> None:
        if self.index is not None:
            self.index.assign_and_propagate(coord, value)
        else:
            self.board.assign(coord, value)

    def unassign(self, coord: Coord) -> int:
        if self.index is not None:
            return self.index.unassign_and_propagate(coord)
        return self.board.unassign(coord)

    def dead_end(self, coord: Coord) -> bool:
        """
        Forward-checking check after ``coord`` was assigned: does some
        unassigned tile have no candidate left?
        """
        if self.index is not None:
            return self.index.empty_domain_exists()
        return self.board.has_empty_domain_in_peers(coord)

    def emit(self, kind: str, coord: Optional[Coord] = None,
             value: Optional[int] = None, message: str = "") -> None:
        if self.trace is not None:
            self.trace.record(self.steps, kind, coord, value, message)
