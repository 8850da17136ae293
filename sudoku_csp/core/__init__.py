"""Core module: board representation, domain index and validation."""

from .board import Board, Tile, Coord
from .domain_index import DomainIndex, LiveDomain
from .errors import ConstraintViolationError, PuzzleFormatError
from .validator import is_valid_placement, is_valid_board, find_conflicts, validate_solution

__all__ = [
    "Board",
    "Tile",
    "Coord",
    "DomainIndex",
    "LiveDomain",
    "ConstraintViolationError",
    "PuzzleFormatError",
    "is_valid_placement",
    "is_valid_board",
    "find_conflicts",
    "validate_solution",
]
