"""Solvers module: backtracking search strategies."""

from typing import Dict, Tuple, Type

from .base_solver import BaseSolver, SolverStats
from .backtracking import BacktrackingSolver
from .chronological import ChronologicalBacktrackingSolver
from .forward_checking import ForwardCheckingSolver
from .forward_checking_mcv import ForwardCheckingMCVSolver
from .context import SearchContext, SearchState, Frame
from .trace import SearchTrace, TraceEvent, ValueChangeRecorder


# Short names as used on the command line: the suffix "ll" selects the
# incremental (domain index) bookkeeping.
ALGORITHMS: Dict[str, Tuple[Type[BacktrackingSolver], bool]] = {
    "cbt": (ChronologicalBacktrackingSolver, False),
    "cbtll": (ChronologicalBacktrackingSolver, True),
    "fc": (ForwardCheckingSolver, False),
    "fcll": (ForwardCheckingSolver, True),
    "fcmcv": (ForwardCheckingMCVSolver, False),
    "fcmcvll": (ForwardCheckingMCVSolver, True),
}


def create_solver(name: str, **kwargs) -> BacktrackingSolver:
    """
    Build a solver from its short name.

    Args:
        name: One of the keys of ``ALGORITHMS``.
        **kwargs: Passed on to the solver (trace, observer, track_memory).
    """
    try:
        solver_class, incremental = ALGORITHMS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown algorithm {name!r}, expected one of {', '.join(ALGORITHMS)}") from None
    return solver_class(incremental=incremental, **kwargs)


__all__ = [
    "ALGORITHMS",
    "create_solver",
    "BaseSolver",
    "SolverStats",
    "BacktrackingSolver",
    "ChronologicalBacktrackingSolver",
    "ForwardCheckingSolver",
    "ForwardCheckingMCVSolver",
    "SearchContext",
    "SearchState",
    "Frame",
    "SearchTrace",
    "TraceEvent",
    "ValueChangeRecorder",
]
