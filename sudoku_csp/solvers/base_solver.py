"""Base solver interface and common utilities."""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Any, Tuple
import time
import tracemalloc

from ..core.board import Board


@dataclass
class SolverStats:
    """Statistics from a solver run."""
    # Core metrics
    solved: bool = False
    time_seconds: float = 0.0
    memory_bytes: int = 0
    iterations: int = 0

    # Search metrics. nodes_explored is the node-expansion count.
    backtracks: int = 0
    nodes_explored: int = 0

    # Additional metadata
    algorithm: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            "solved": self.solved,
            "time_seconds": self.time_seconds,
            "memory_bytes": self.memory_bytes,
            "iterations": self.iterations,
            "backtracks": self.backtracks,
            "nodes_explored": self.nodes_explored,
            "algorithm": self.algorithm,
            **self.extra
        }


class BaseSolver(ABC):
    """Abstract base class for solvers."""

    name: str = "BaseSolver"

    def __init__(self, observer=None, track_memory: bool = True):
        """
        Args:
            observer: Optional value-change observer attached to the working
                      board of every solve.
            track_memory: Record peak memory with tracemalloc. tracemalloc is
                          process wide, so turn this off when solves run on
                          several threads at once.
        """
        self.observer = observer
        self.track_memory = track_memory
        self.stats = SolverStats(algorithm=self.name)

    def solve(self, puzzle: Board) -> Tuple[Board, SolverStats]:
        """
        Solve a puzzle with timing and memory tracking.

        The puzzle itself is left untouched; the search runs on a private
        copy which is returned whatever the outcome.

        Args:
            puzzle: The puzzle to solve.

        Returns:
            Tuple of (final board, stats). The final board is fully filled in
            when ``stats.solved`` is true.
        """
        self.stats = SolverStats(algorithm=self.name)
        board = puzzle.copy(observer=self.observer)

        if self.track_memory:
            tracemalloc.start()
        start_time = time.perf_counter()

        try:
            finished = self._solve(board)
        finally:
            self.stats.time_seconds = time.perf_counter() - start_time
            if self.track_memory:
                _, peak = tracemalloc.get_traced_memory()
                tracemalloc.stop()
                self.stats.memory_bytes = peak

        self.stats.solved = finished and board.is_solved()
        return board, self.stats

    @abstractmethod
    def _solve(self, board: Board) -> bool:
        """
        Internal solve method to be implemented by subclasses.

        Args:
            board: A private copy of the puzzle (can be modified).

        Returns:
            True if the search assigned every variable.
        """
        pass
