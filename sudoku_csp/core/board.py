"""Board model: tile values, given flags and per-group used-value sets."""

from __future__ import annotations
import math
from typing import List, NamedTuple, Optional, Set, Tuple

import numpy as np

from .errors import ConstraintViolationError


Coord = Tuple[int, int]


class Tile(NamedTuple):
    """Read-only view of a single tile."""
    coord: Coord
    block: Coord
    value: int
    given: bool


class Board:
    """
    An N x N puzzle with rows, columns and k x k blocks (N = k * k).

    The board keeps three families of "used value" sets, one per row, column
    and block. They always hold exactly the values of the tiles that are
    currently filled in, so checking whether a value is still available for a
    tile is three set lookups.

    Tiles that are non-zero at construction are *given*: they are never
    reassigned. All other tiles are *variables*, listed in row-major order in
    ``variables``.
    """

    def __init__(self, grid, observer=None):
        """
        Build a board from an N x N array of integers.

        Args:
            grid: 2-D array-like, 0 for an empty tile, 1..N for a given.
            observer: Optional object with ``notify_assigned(coord, value)``,
                      told about every value change.
        """
        data = np.array(grid, dtype=np.int32)
        if data.ndim != 2 or data.shape[0] != data.shape[1]:
            raise ValueError(f"Grid must be square, got shape {data.shape}")

        size = data.shape[0]
        box_size = math.isqrt(size)
        if size == 0 or box_size * box_size != size:
            raise ValueError(f"Size must be a perfect square, got {size}")
        if data.min() < 0 or data.max() > size:
            raise ValueError(f"Values must be in 0-{size}")

        self.size = size
        self.box_size = box_size
        self.observer = observer

        self.grid = data
        self.given = data != 0

        self.rows: List[Set[int]] = [set() for _ in range(size)]
        self.cols: List[Set[int]] = [set() for _ in range(size)]
        self.blocks: List[Set[int]] = [set() for _ in range(size)]

        self.variables: List[Coord] = []
        for r in range(size):
            for c in range(size):
                val = int(data[r, c])
                if val == 0:
                    self.variables.append((r, c))
                    continue
                # Duplicate givens collapse here; the search finds out later.
                self.rows[r].add(val)
                self.cols[c].add(val)
                self.blocks[self.block_index(r, c)].add(val)

    @property
    def var_count(self) -> int:
        return len(self.variables)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def block_index(self, row: int, col: int) -> int:
        """Get the block index (0 to size-1) for a cell."""
        return (row // self.box_size) * self.box_size + (col // self.box_size)

    def block_coord(self, row: int, col: int) -> Coord:
        return (row // self.box_size, col // self.box_size)

    def peers(self, coord: Coord) -> Set[Coord]:
        """All coordinates sharing a row, column or block with ``coord``."""
        row, col = coord
        peers = set()
        for i in range(self.size):
            peers.add((row, i))
            peers.add((i, col))

        box_row = (row // self.box_size) * self.box_size
        box_col = (col // self.box_size) * self.box_size
        for i in range(self.box_size):
            for j in range(self.box_size):
                peers.add((box_row + i, box_col + j))

        peers.remove(coord)
        return peers

    # ------------------------------------------------------------------
    # Tile access
    # ------------------------------------------------------------------

    def get(self, row: int, col: int) -> int:
        """Get value at position (row, col). 0 means empty."""
        return int(self.grid[row, col])

    def is_given(self, coord: Coord) -> bool:
        return bool(self.given[coord])

    def is_empty(self, row: int, col: int) -> bool:
        return self.grid[row, col] == 0

    def tile(self, coord: Coord) -> Tile:
        row, col = coord
        return Tile(coord, self.block_coord(row, col), self.get(row, col), self.is_given(coord))

    def is_used(self, coord: Coord, value: int) -> bool:
        """True if ``value`` already sits in the row, column or block of ``coord``."""
        row, col = coord
        return (
            value in self.rows[row]
            or value in self.cols[col]
            or value in self.blocks[self.block_index(row, col)]
        )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def assign(self, coord: Coord, value: int) -> None:
        """
        Put ``value`` on a variable tile and record it in its three groups.

        Raises:
            ConstraintViolationError: the tile is given or already filled,
                the value is out of range, or the value is already used in
                one of the tile's groups.
        """
        row, col = coord
        if self.given[row, col]:
            raise ConstraintViolationError(f"Tile {coord} is given and cannot be assigned")
        if self.grid[row, col] != 0:
            raise ConstraintViolationError(f"Tile {coord} already holds {self.get(row, col)}")
        if value < 1 or value > self.size:
            raise ConstraintViolationError(f"Value must be 1-{self.size}, got {value}")
        if self.is_used(coord, value):
            raise ConstraintViolationError(f"Value {value} is already used by a peer of {coord}")

        self.grid[row, col] = value
        self.rows[row].add(value)
        self.cols[col].add(value)
        self.blocks[self.block_index(row, col)].add(value)

        if self.observer is not None:
            self.observer.notify_assigned(coord, value)

    def unassign(self, coord: Coord) -> int:
        """
        Clear a variable tile. Exact inverse of ``assign``.

        Returns:
            The value that was removed.
        """
        row, col = coord
        if self.given[row, col]:
            raise ConstraintViolationError(f"Tile {coord} is given and cannot be cleared")
        value = int(self.grid[row, col])
        if value == 0:
            raise ConstraintViolationError(f"Tile {coord} is not assigned")

        self.grid[row, col] = 0
        self.rows[row].discard(value)
        self.cols[col].discard(value)
        self.blocks[self.block_index(row, col)].discard(value)

        if self.observer is not None:
            self.observer.notify_assigned(coord, 0)
        return value

    # ------------------------------------------------------------------
    # Naive domain computation
    # ------------------------------------------------------------------

    def domain_of(self, coord: Coord) -> List[int]:
        """
        Recompute the domain of ``coord`` from the used-value sets.

        Returns:
            Values 1..N not used in the tile's row, column or block, in
            ascending order. Given tiles have an empty domain.
        """
        row, col = coord
        if self.given[row, col]:
            return []
        used_row = self.rows[row]
        used_col = self.cols[col]
        used_block = self.blocks[self.block_index(row, col)]
        return [
            v for v in range(1, self.size + 1)
            if v not in used_row and v not in used_col and v not in used_block
        ]

    def has_empty_domain_in_peers(self, coord: Coord) -> bool:
        """
        Check whether any unassigned tile in the row, column or block of
        ``coord`` has run out of candidates.
        """
        row, col = coord
        box_row = (row // self.box_size) * self.box_size
        box_col = (col // self.box_size) * self.box_size
        for i in range(self.size):
            row_peer = (row, i)
            col_peer = (i, col)
            block_peer = (box_row + i // self.box_size, box_col + i % self.box_size)
            for peer in (row_peer, col_peer, block_peer):
                if self.grid[peer] == 0 and not self.domain_of(peer):
                    return True
        return False

    def smallest_domain_variable(self) -> Optional[Coord]:
        """
        Select the unassigned variable with the fewest candidates.

        Ties go to the variable found first in row-major order. A variable
        with an empty domain wins outright.
        """
        best = None
        best_size = self.size + 1
        for coord in self.variables:
            if self.grid[coord] != 0:
                continue
            domain_size = len(self.domain_of(coord))
            if domain_size < best_size:
                best = coord
                best_size = domain_size
                if domain_size == 0:
                    break
        return best

    # ------------------------------------------------------------------
    # Whole-board queries
    # ------------------------------------------------------------------

    def get_row(self, row: int) -> np.ndarray:
        return self.grid[row, :]

    def get_col(self, col: int) -> np.ndarray:
        return self.grid[:, col]

    def get_box(self, row: int, col: int) -> np.ndarray:
        """Get all values in the box containing (row, col)."""
        box_row = (row // self.box_size) * self.box_size
        box_col = (col // self.box_size) * self.box_size
        return self.grid[box_row:box_row + self.box_size,
                         box_col:box_col + self.box_size].flatten()

    def count_empty(self) -> int:
        return int(np.sum(self.grid == 0))

    def count_filled(self) -> int:
        return int(np.sum(self.grid != 0))

    def is_complete(self) -> bool:
        return self.count_empty() == 0

    def is_valid(self) -> bool:
        """
        Check that no row, column or block holds a value twice.
        Empty tiles are ignored, so a partial board can be valid.
        """
        for i in range(self.size):
            for group in (self.get_row(i), self.get_col(i)):
                non_zero = group[group != 0]
                if len(non_zero) != len(set(non_zero.tolist())):
                    return False

        for box_row in range(0, self.size, self.box_size):
            for box_col in range(0, self.size, self.box_size):
                box = self.get_box(box_row, box_col)
                non_zero = box[box != 0]
                if len(non_zero) != len(set(non_zero.tolist())):
                    return False

        return True

    def is_solved(self) -> bool:
        return self.is_complete() and self.is_valid()

    # ------------------------------------------------------------------
    # Copies and conversions
    # ------------------------------------------------------------------

    def givens_grid(self) -> np.ndarray:
        """The grid as it was handed in: givens only."""
        return np.where(self.given, self.grid, 0).astype(np.int32)

    def to_grid(self) -> np.ndarray:
        return self.grid.copy()

    def copy(self, observer=None) -> Board:
        """
        Copy givens and current assignments. The observer is not carried
        over; pass one to have the copy report to it instead.
        """
        new_board = Board(self.givens_grid())
        for coord in self.variables:
            value = self.get(*coord)
            if value:
                new_board.assign(coord, value)
        new_board.observer = observer
        return new_board

    def to_string(self) -> str:
        """
        Compact row-major string. 0 for empty, 1-9 as digits, A upwards
        for 10 and above.
        """
        chars = []
        for val in self.grid.flatten().tolist():
            if val <= 9:
                chars.append(str(val))
            else:
                chars.append(chr(ord('A') + val - 10))
        return ''.join(chars)

    @classmethod
    def from_string(cls, s: str, size: Optional[int] = None, observer=None) -> Board:
        """
        Create a board from a string.

        Args:
            s: String of length size*size. 0 or . for empty, 1-9 for values,
               A-Z for 10 upwards.
            size: Board size. Inferred from the length when omitted.
        """
        s = s.strip()
        if size is None:
            size = math.isqrt(len(s))
        if len(s) != size * size:
            raise ValueError(f"String length must be {size * size}, got {len(s)}")

        values = []
        for c in s:
            if c in '0.':
                values.append(0)
            elif c.isdigit():
                values.append(int(c))
            elif c.isalpha():
                values.append(ord(c.upper()) - ord('A') + 10)
            else:
                raise ValueError(f"Unexpected character {c!r} in puzzle string")

        grid = np.array(values, dtype=np.int32).reshape(size, size)
        return cls(grid, observer=observer)

    @classmethod
    def from_2d_list(cls, data: List[List[int]], observer=None) -> Board:
        return cls(np.array(data, dtype=np.int32), observer=observer)

    def __str__(self) -> str:
        """Pretty-print the board."""
        width = 1 if self.size <= 9 else 2
        lines = []
        horizontal_sep = '+' + ('-' * (self.box_size * (width + 1) + 1) + '+') * self.box_size

        for i in range(self.size):
            if i % self.box_size == 0:
                lines.append(horizontal_sep)

            row_str = '|'
            for j in range(self.size):
                val = self.get(i, j)
                cell = '.' if val == 0 else str(val)
                row_str += ' ' + cell.rjust(width)
                if (j + 1) % self.box_size == 0:
                    row_str += ' |'
            lines.append(row_str)

        lines.append(horizontal_sep)
        return '\n'.join(lines)

    def __repr__(self) -> str:
        return f"Board(size={self.size}, filled={self.count_filled()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return False
        return self.size == other.size and np.array_equal(self.grid, other.grid)

    def __hash__(self) -> int:
        return hash(self.to_string())
