"""Forward checking with the minimum-remaining-values heuristic."""

from .context import SearchContext
from .forward_checking import ForwardCheckingSolver
from ..core.board import Coord


class ForwardCheckingMCVSolver(ForwardCheckingSolver):
    """
    Forward checking that always branches on the most constrained variable.

    The next variable is the unassigned one with the fewest candidates,
    ties going to the first one found. Since the order is dynamic, the
    assignment path records which tile sits at every depth.
    """

    label = "FC-MCV"

    def _select_variable(self, ctx: SearchContext) -> Coord:
        if ctx.index is None:
            return ctx.board.smallest_domain_variable()

        # An empty domain is the most constrained of all; branching on it
        # fails the node at once.
        coord = ctx.index.empty_domain_tile()
        if coord is None:
            coord = ctx.index.smallest_domain_tile()
        return coord
