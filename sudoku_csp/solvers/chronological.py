"""Chronological backtracking."""

from .backtracking import BacktrackingSolver


class ChronologicalBacktrackingSolver(BacktrackingSolver):
    """
    Plain backtracking over the variables in row-major order.

    Each variable takes the smallest untried value of its current domain;
    nothing beyond the direct row/column/block check is done before moving on.
    When a variable runs out of values the search undoes the previous one.
    """

    label = "CBT"
    forward_check = False
