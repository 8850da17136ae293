"""Iterative backtracking search shared by all strategies."""

from __future__ import annotations
from typing import Optional

from .base_solver import BaseSolver
from .context import Frame, SearchContext, SearchState
from .trace import SearchTrace
from ..core.board import Board, Coord
from ..core.domain_index import DomainIndex


class BacktrackingSolver(BaseSolver):
    """
    Explicit state machine over a ``SearchContext``.

    SELECT_VARIABLE picks the next variable (or resumes the one just
    backtracked into) and counts a node expansion. TRY_VALUE walks the
    variable's candidates in ascending order from its trial count, keeps the
    first one that survives ``forward_check`` and moves on, or gives up and
    hands over to BACKTRACK, which undoes the most recent assignment.

    Subclasses choose the variable ordering (``_select_variable``) and
    whether a tentative value has to leave every peer with a candidate
    (``forward_check``).
    """

    label = "Backtracking"
    forward_check = False

    def __init__(self, incremental: bool = False, trace: Optional[SearchTrace] = None,
                 observer=None, track_memory: bool = True):
        """
        Args:
            incremental: Keep domains in a DomainIndex instead of recomputing
                         them from the board.
            trace: Optional sink that records every search decision.
            observer: Optional board observer, see BaseSolver.
            track_memory: See BaseSolver.
        """
        self.incremental = incremental
        self.name = f"{self.label}-LL" if incremental else self.label
        super().__init__(observer=observer, track_memory=track_memory)
        self.trace = trace
        self.context: Optional[SearchContext] = None

    def _solve(self, board: Board) -> bool:
        index = DomainIndex(board) if self.incremental else None
        ctx = SearchContext(board=board, index=index, trace=self.trace)
        self.context = ctx

        try:
            self._run(ctx)
        finally:
            self.stats.nodes_explored = ctx.expanded
            self.stats.backtracks = ctx.backtracks
            self.stats.iterations = ctx.steps
            self.stats.extra["variables"] = ctx.var_count

        return ctx.state is SearchState.SUCCESS

    def _run(self, ctx: SearchContext) -> None:
        while not ctx.finished:
            ctx.steps += 1
            if ctx.state is SearchState.SELECT_VARIABLE:
                self._select(ctx)
            elif ctx.state is SearchState.TRY_VALUE:
                self._try_value(ctx)
            else:
                self._backtrack(ctx)

        if ctx.state is SearchState.SUCCESS:
            ctx.emit("success", message="Solution found!")
        else:
            ctx.emit("failure", message="No solution found.")

    def _select(self, ctx: SearchContext) -> None:
        if ctx.resume is not None:
            frame = ctx.resume
            ctx.resume = None
        else:
            if ctx.depth == ctx.var_count:
                ctx.state = SearchState.SUCCESS
                return
            frame = Frame(self._select_variable(ctx))

        ctx.frame = frame
        ctx.expanded += 1
        ctx.state = SearchState.TRY_VALUE
        ctx.emit("select", frame.coord, message=f"Checking tile {frame.coord} (depth {ctx.depth}).")

    def _try_value(self, ctx: SearchContext) -> None:
        frame = ctx.frame
        coord = frame.coord
        candidates = ctx.candidates(coord)

        while frame.trials < len(candidates):
            value = candidates[frame.trials]
            frame.trials += 1
            ctx.assign(coord, value)

            if self.forward_check and ctx.dead_end(coord):
                ctx.emit("reject", coord, value, f"Trying value {value} for tile {coord}: empty domain detected.")
                ctx.unassign(coord)
                continue

            ctx.emit("assign", coord, value, f"Setting value of tile {coord} to {value}.")
            ctx.path.append(frame)
            ctx.frame = None
            ctx.state = SearchState.SELECT_VARIABLE
            return

        ctx.emit("exhausted", coord, message=f"Resetting trials of tile {coord}, starting backtrack.")
        ctx.frame = None
        ctx.state = SearchState.BACKTRACK if ctx.path else SearchState.FAILURE

    def _backtrack(self, ctx: SearchContext) -> None:
        frame = ctx.path.pop()
        value = ctx.unassign(frame.coord)
        ctx.backtracks += 1
        ctx.resume = frame
        ctx.state = SearchState.SELECT_VARIABLE
        ctx.emit("unassign", frame.coord, value, f"Backtrack, resetting tile {frame.coord}.")

    def _select_variable(self, ctx: SearchContext) -> Coord:
        """Fixed order: the variable at the current depth."""
        return ctx.variables[ctx.depth]
