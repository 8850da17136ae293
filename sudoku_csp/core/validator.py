"""Validation utilities for puzzles and solutions."""

from __future__ import annotations
from typing import TYPE_CHECKING, List

import numpy as np

if TYPE_CHECKING:
    from .board import Board


def is_valid_placement(board: Board, row: int, col: int, value: int) -> bool:
    """
    Check if placing a value at (row, col) is valid.

    Args:
        board: The board.
        row: Row index.
        col: Column index.
        value: Value to check (1 to board.size).

    Returns:
        True if the tile is empty and no peer holds the value.
    """
    if value < 1 or value > board.size:
        return False
    if not board.is_empty(row, col):
        return False
    return not board.is_used((row, col), value)


def is_valid_board(board: Board) -> bool:
    """True if no row, column or block holds a value twice."""
    return board.is_valid()


def find_conflicts(board: Board) -> List[str]:
    """
    Describe every group that holds a value more than once.

    Useful for explaining why an input puzzle can never be solved, since
    givens are not checked when a board is built.
    """
    conflicts = []
    for i in range(board.size):
        for name, group in (("row", board.get_row(i)), ("column", board.get_col(i))):
            values, counts = np.unique(group[group != 0], return_counts=True)
            for value in values[counts > 1]:
                conflicts.append(f"{name} {i} repeats {int(value)}")

    for b in range(board.size):
        box_row = (b // board.box_size) * board.box_size
        box_col = (b % board.box_size) * board.box_size
        box = board.get_box(box_row, box_col)
        values, counts = np.unique(box[box != 0], return_counts=True)
        for value in values[counts > 1]:
            conflicts.append(f"block {b} repeats {int(value)}")

    return conflicts


def validate_solution(puzzle: Board, solution: Board) -> bool:
    """
    Validate that a solution correctly solves the puzzle.

    Args:
        puzzle: The original puzzle.
        solution: The proposed solution.

    Returns:
        True if solution is complete, valid and keeps every given.
    """
    if puzzle.size != solution.size:
        return False

    givens = puzzle.givens_grid()
    mask = givens != 0
    if not np.array_equal(givens[mask], solution.grid[mask]):
        return False

    return solution.is_solved()
