"""
Incrementally maintained domains, bucketed by cardinality.

Every variable tile owns a ``LiveDomain`` and a node in an arena of doubly
linked chains. There is one chain per cardinality 0..N plus a "hidden" chain
for tiles that currently hold a value. Removing a value from a domain moves
its node one chain down, adding one moves it one chain up; both are O(1)
relinks, so the smallest non-empty domain and the presence of an empty domain
can be read off the chain heads.
"""

from __future__ import annotations
from typing import Dict, Iterator, List, Optional, Set

from .board import Board, Coord
from .errors import ConstraintViolationError


class LiveDomain:
    """
    The candidate set of one variable tile.

    Only effective changes are reported to the index: adding a value that is
    already present, or removing one that is absent, leaves the node where it
    is.
    """

    __slots__ = ['_values', '_index', '_node']

    def __init__(self, index: DomainIndex, node: int, values=()):
        self._values: Set[int] = set(values)
        self._index = index
        self._node = node

    def add(self, value: int) -> None:
        if value not in self._values:
            self._values.add(value)
            self._index._grow(self._node)

    def remove(self, value: int) -> None:
        if value in self._values:
            self._values.remove(value)
            self._index._shrink(self._node)

    def values(self) -> List[int]:
        """Candidates in ascending order."""
        return sorted(self._values)

    def __contains__(self, value: int) -> bool:
        return value in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._values))

    def __repr__(self) -> str:
        return f"LiveDomain({sorted(self._values)})"


class DomainIndex:
    """
    Live domains for every variable of a board, sorted by size online.

    Nodes are integer ids into parallel ``_prev``/``_next`` lists. Ids
    ``0..V-1`` belong to the variables (in ``board.variables`` order), then
    come a head and a tail sentinel for each bucket 0..N and finally the head
    and tail of the hidden chain. A node is a sentinel iff its id is >= V.
    """

    def __init__(self, board: Board):
        self.board = board
        self.size = board.size

        variables = board.variables
        num_nodes = len(variables)
        self._coords: List[Coord] = list(variables)
        self._node_of: Dict[Coord, int] = {coord: i for i, coord in enumerate(variables)}

        self._sentinel_base = num_nodes
        self._hidden_head = num_nodes + 2 * (self.size + 1)
        self._hidden_tail = self._hidden_head + 1
        total = self._hidden_tail + 1

        self._prev: List[int] = [-1] * total
        self._next: List[int] = [-1] * total
        self._count: List[int] = [0] * num_nodes
        self._hidden: List[bool] = [False] * num_nodes

        for b in range(self.size + 1):
            head, tail = self._head(b), self._tail(b)
            self._next[head] = tail
            self._prev[tail] = head
        self._next[self._hidden_head] = self._hidden_tail
        self._prev[self._hidden_tail] = self._hidden_head

        self._domains: List[LiveDomain] = []
        for node, coord in enumerate(variables):
            values = board.domain_of(coord)
            self._domains.append(LiveDomain(self, node, values))
            self._count[node] = len(values)
            if board.get(*coord) != 0:
                self._hidden[node] = True
                self._link_before(node, self._hidden_tail)
            else:
                self._link_before(node, self._tail(len(values)))

    # ------------------------------------------------------------------
    # Arena plumbing
    # ------------------------------------------------------------------

    def _head(self, bucket: int) -> int:
        return self._sentinel_base + 2 * bucket

    def _tail(self, bucket: int) -> int:
        return self._sentinel_base + 2 * bucket + 1

    def _is_sentinel(self, node: int) -> bool:
        return node >= self._sentinel_base

    def _unlink(self, node: int) -> None:
        prev, nxt = self._prev[node], self._next[node]
        self._next[prev] = nxt
        self._prev[nxt] = prev
        self._prev[node] = -1
        self._next[node] = -1

    def _link_before(self, node: int, anchor: int) -> None:
        prev = self._prev[anchor]
        self._prev[node] = prev
        self._next[node] = anchor
        self._next[prev] = node
        self._prev[anchor] = node

    def _link_after(self, node: int, anchor: int) -> None:
        nxt = self._next[anchor]
        self._prev[node] = anchor
        self._next[node] = nxt
        self._prev[nxt] = node
        self._next[anchor] = node

    def _shrink(self, node: int) -> None:
        self._count[node] -= 1
        if self._hidden[node]:
            return
        self._unlink(node)
        self._link_before(node, self._tail(self._count[node]))

    def _grow(self, node: int) -> None:
        self._count[node] += 1
        if self._hidden[node]:
            return
        self._unlink(node)
        self._link_before(node, self._tail(self._count[node]))

    def _hide(self, node: int) -> None:
        self._unlink(node)
        self._link_after(node, self._hidden_head)
        self._hidden[node] = True

    def _show(self, node: int) -> None:
        self._unlink(node)
        self._link_after(node, self._head(self._count[node]))
        self._hidden[node] = False

    def _node(self, coord: Coord) -> int:
        try:
            return self._node_of[coord]
        except KeyError:
            raise ConstraintViolationError(f"Tile {coord} is not a variable") from None

    # ------------------------------------------------------------------
    # Propagating mutations
    # ------------------------------------------------------------------

    def _group_peers(self, coord: Coord) -> Iterator[Coord]:
        """Row, column and block peers of ``coord`` in a single sweep."""
        row, col = coord
        k = self.board.box_size
        box_row = (row // k) * k
        box_col = (col // k) * k
        for i in range(self.size):
            yield (row, i)
            yield (i, col)
            yield (box_row + i // k, box_col + i % k)

    def assign_and_propagate(self, coord: Coord, value: int) -> None:
        """
        Assign ``value`` to ``coord`` on the board and strike it from the
        domains of every row, column and block peer.
        """
        node = self._node(coord)
        if value not in self._domains[node]:
            raise ConstraintViolationError(
                f"Value {value} is not in the live domain of {coord}: {self._domains[node]!r}"
            )

        self.board.assign(coord, value)
        self._hide(node)

        given = self.board.given
        for peer in self._group_peers(coord):
            if not given[peer]:
                self._domains[self._node_of[peer]].remove(value)

    def unassign_and_propagate(self, coord: Coord) -> int:
        """
        Clear ``coord`` on the board and hand its value back to every peer
        that no other group still forbids it for.

        Returns:
            The value that was removed.
        """
        node = self._node(coord)
        value = self.board.unassign(coord)

        board = self.board
        given = board.given
        for peer in self._group_peers(coord):
            if not given[peer] and not board.is_used(peer, value):
                self._domains[self._node_of[peer]].add(value)

        self._show(node)
        return value

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def smallest_domain_tile(self) -> Optional[Coord]:
        """
        First unassigned tile in the lowest non-empty bucket, starting at
        cardinality 1. ``None`` when no visible tile has a candidate left.
        """
        for b in range(1, self.size + 1):
            first = self._next[self._head(b)]
            if not self._is_sentinel(first):
                return self._coords[first]
        return None

    def empty_domain_exists(self) -> bool:
        return not self._is_sentinel(self._next[self._head(0)])

    def empty_domain_tile(self) -> Optional[Coord]:
        first = self._next[self._head(0)]
        if self._is_sentinel(first):
            return None
        return self._coords[first]

    def domain(self, coord: Coord) -> LiveDomain:
        return self._domains[self._node(coord)]

    def cardinality(self, coord: Coord) -> int:
        return self._count[self._node(coord)]

    def is_hidden(self, coord: Coord) -> bool:
        return self._hidden[self._node(coord)]

    def bucket_of(self, coord: Coord) -> Optional[int]:
        """Bucket the tile currently sits in, ``None`` while it is hidden."""
        node = self._node(coord)
        if self._hidden[node]:
            return None
        return self._count[node]

    def _chain(self, head: int) -> List[Coord]:
        coords = []
        node = self._next[head]
        while not self._is_sentinel(node):
            coords.append(self._coords[node])
            node = self._next[node]
        return coords

    def buckets(self) -> Dict[int, List[Coord]]:
        """Non-empty buckets mapped to their tiles in chain order."""
        result = {}
        for b in range(self.size + 1):
            chain = self._chain(self._head(b))
            if chain:
                result[b] = chain
        return result

    def hidden_tiles(self) -> List[Coord]:
        return self._chain(self._hidden_head)

    def verify(self) -> None:
        """
        Compare every live domain with a from-scratch recomputation and every
        node with the chain it is linked into.

        Raises:
            ConstraintViolationError: on the first disagreement.
        """
        for b, chain in self.buckets().items():
            for coord in chain:
                node = self._node_of[coord]
                if self._hidden[node] or self._count[node] != b:
                    raise ConstraintViolationError(f"{coord} is linked into bucket {b} "
                                                   f"but has cardinality {self._count[node]}")
        for coord in self.hidden_tiles():
            if not self._hidden[self._node_of[coord]]:
                raise ConstraintViolationError(f"{coord} is in the hidden chain but not hidden")

        for node, coord in enumerate(self._coords):
            expected = self.board.domain_of(coord)
            live = self._domains[node]
            if live.values() != expected:
                raise ConstraintViolationError(f"Live domain of {coord} is {live.values()}, expected {expected}")
            if self._count[node] != len(live):
                raise ConstraintViolationError(f"Node of {coord} counts {self._count[node]}, domain holds {len(live)}")
            if self._hidden[node] != (self.board.get(*coord) != 0):
                raise ConstraintViolationError(f"Hidden flag of {coord} disagrees with the board")

    def __str__(self) -> str:
        lines = []
        for b in range(self.size + 1):
            chain = self._chain(self._head(b))
            lines.append(f"\tBucket {b}: " + ", ".join(str(c) for c in chain))
        lines.append("\tHidden: " + ", ".join(str(c) for c in self.hidden_tiles()))
        return "\n".join(lines)
