"""Exception types shared by the board, the domain index and the solvers."""


class ConstraintViolationError(RuntimeError):
    """
    Raised when a mutation would break the board's bookkeeping.

    Examples are assigning a given tile, assigning a value that is already
    used in one of the tile's groups, or a domain index that no longer agrees
    with the board. These are programming errors and are never recovered.
    """


class PuzzleFormatError(ValueError):
    """Raised when a puzzle file cannot be parsed."""

    def __init__(self, message: str, line: int = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line
