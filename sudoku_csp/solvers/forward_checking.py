"""Forward checking."""

from .backtracking import BacktrackingSolver


class ForwardCheckingSolver(BacktrackingSolver):
    """
    Backtracking in row-major order with forward checking.

    After a tentative assignment the solver makes sure no unassigned tile
    was left without candidates. In naive mode only the row, column and
    block of the assigned tile are recomputed; in incremental mode the domain
    index answers for the whole board in O(1). A value that empties a domain
    is undone and the next one is tried before the search advances.
    """

    label = "FC"
    forward_check = True
