"""
Reading and writing puzzle collections.

Two plain-text layouts are supported:

* 9 x 9 files hold blocks of 10 lines per puzzle: a header line (for
  example ``Grid 01``) followed by 9 lines of 9 digits, 0 for an empty tile.
* 16 x 16 files hold blocks of 17 lines per puzzle: 16 lines of 16
  whitespace-separated integers followed by one separator line.
"""

from __future__ import annotations
import os
from typing import List, Optional

import numpy as np

from ..core.board import Board
from ..core.errors import PuzzleFormatError


SUPPORTED_SIZES = (9, 16)


def _read_lines(path: str) -> List[str]:
    with open(path, "r") as f:
        return [line.rstrip("\r\n") for line in f]


def _available(lines: List[str], block: int, first_row: int, size: int) -> int:
    """How many complete puzzle blocks the lines hold."""
    count = 0
    while True:
        last = count * block + first_row + size - 1
        if last >= len(lines) or not lines[last].strip():
            return count
        count += 1


def parse_9(lines: List[str], count: Optional[int] = None) -> List[Board]:
    """
    Parse 9 x 9 puzzles.

    Args:
        lines: Lines of the file, without line terminators.
        count: Number of puzzles to read. Reads every complete block if None.
    """
    if count is None:
        count = _available(lines, 10, 1, 9)

    boards = []
    for i in range(count):
        start = i * 10
        grid = np.zeros((9, 9), dtype=np.int32)
        for r in range(9):
            line_no = start + r + 1
            if line_no >= len(lines):
                raise PuzzleFormatError(f"puzzle {i} is incomplete", line=line_no + 1)
            row = lines[line_no].strip()
            if len(row) < 9 or not row[:9].isdigit():
                raise PuzzleFormatError(f"expected 9 digits, got {row!r}", line=line_no + 1)
            grid[r] = [int(ch) for ch in row[:9]]
        boards.append(Board(grid))
    return boards


def parse_16(lines: List[str], count: Optional[int] = None) -> List[Board]:
    """
    Parse 16 x 16 puzzles.

    Args:
        lines: Lines of the file, without line terminators.
        count: Number of puzzles to read. Reads every complete block if None.
    """
    if count is None:
        count = _available(lines, 17, 0, 16)

    boards = []
    for i in range(count):
        start = i * 17
        grid = np.zeros((16, 16), dtype=np.int32)
        for r in range(16):
            line_no = start + r
            if line_no >= len(lines):
                raise PuzzleFormatError(f"puzzle {i} is incomplete", line=line_no + 1)
            fields = lines[line_no].split()
            if len(fields) < 16:
                raise PuzzleFormatError(f"expected 16 values, got {len(fields)}", line=line_no + 1)
            try:
                grid[r] = [int(v) for v in fields[:16]]
            except ValueError:
                raise PuzzleFormatError(f"non-numeric value in {lines[line_no]!r}", line=line_no + 1) from None
        try:
            boards.append(Board(grid))
        except ValueError as e:
            raise PuzzleFormatError(f"puzzle {i}: {e}", line=start + 1) from None
    return boards


def load_puzzles(path: str, size: int, count: Optional[int] = None) -> List[Board]:
    """
    Load puzzles from a file.

    Args:
        path: Path of the puzzle file.
        size: 9 or 16, selects the file layout.
        count: Number of puzzles to read (default: all).

    Raises:
        ValueError: For an unsupported size.
        PuzzleFormatError: If the file does not follow the layout.
    """
    if size not in SUPPORTED_SIZES:
        raise ValueError(f"Unsupported size {size}, expected one of {SUPPORTED_SIZES}")

    lines = _read_lines(path)
    if size == 9:
        return parse_9(lines, count)
    return parse_16(lines, count)


def format_puzzles(puzzles: List[Board]) -> str:
    """Render boards in the layout ``load_puzzles`` reads back."""
    out = []
    for i, board in enumerate(puzzles, 1):
        grid = board.givens_grid()
        if board.size == 9:
            out.append(f"Grid {i:02d}")
            out.extend("".join(str(v) for v in row) for row in grid.tolist())
        elif board.size == 16:
            out.extend(" ".join(str(v) for v in row) for row in grid.tolist())
            out.append("")
        else:
            raise ValueError(f"Unsupported size {board.size}, expected one of {SUPPORTED_SIZES}")
    return "\n".join(out) + "\n"


def save_puzzles(puzzles: List[Board], path: str) -> None:
    """Write boards to a single file, creating the parent folder if needed."""
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    with open(path, "w") as f:
        f.write(format_puzzles(puzzles))
