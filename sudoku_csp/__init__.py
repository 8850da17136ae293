"""Sudoku solving by backtracking with constraint propagation."""

from .core import Board, DomainIndex
from .solvers import ALGORITHMS, create_solver

__version__ = "1.0.0"

__all__ = ["Board", "DomainIndex", "ALGORITHMS", "create_solver"]
