from typing import Iterable, Iterator, List

import numpy as np

from tsp_heuristics.exceptions import InvalidTourError


class Tour:
    """
    A cyclic visiting order over distinct node ids.

    Positions are cyclic: ``get(size())`` is the first node. The only
    structural mutation is ``reverse``, which keeps the node set intact.
    """

    def __init__(self, nodes: Iterable[int]):
        """
        Args:
            nodes: Node ids in visiting order. Copied; duplicates are rejected.
        """
        array = np.array(list(nodes) if not isinstance(nodes, np.ndarray) else nodes, dtype=np.int64)
        if array.ndim != 1:
            raise InvalidTourError(f"tour must be one dimensional, got shape {array.shape}")
        if np.unique(array).size != array.size:
            values, counts = np.unique(array, return_counts=True)
            raise InvalidTourError(f"tour visits node {int(values[counts > 1][0])} more than once")
        self._nodes = array

    @classmethod
    def identity(cls, n: int, base: int = 0) -> "Tour":
        """The tour base, base + 1, ..., base + n - 1."""
        return cls(np.arange(base, base + n, dtype=np.int64))

    @classmethod
    def from_permutation(cls, permutation, base: int = 0) -> "Tour":
        """Build a tour from a 0-based permutation, shifting every entry by ``base``."""
        return cls(np.asarray(permutation, dtype=np.int64) + base)

    def to_permutation(self, base: int = 0) -> np.ndarray:
        """The 0-based permutation for node ids starting at ``base``."""
        return self._nodes - base

    @property
    def nodes(self) -> np.ndarray:
        """Read-only view of the visiting order."""
        view = self._nodes.view()
        view.flags.writeable = False
        return view

    def size(self) -> int:
        return self._nodes.size

    def __len__(self):
        return self._nodes.size

    def get(self, index: int) -> int:
        if self._nodes.size == 0:
            raise IndexError("get from an empty tour")
        return int(self._nodes[index % self._nodes.size])

    def __getitem__(self, index: int) -> int:
        return self.get(index)

    def __iter__(self) -> Iterator[int]:
        return (int(node) for node in self._nodes)

    def index_of(self, node: int) -> int:
        """Position of ``node`` in the tour."""
        hits = np.flatnonzero(self._nodes == node)
        if hits.size == 0:
            raise InvalidTourError(f"node {node} is not in the tour")
        return int(hits[0])

    def reverse(self, a: int, b: int):
        """
        Reverse the closed position range [a, b] in place.

        Positions wrap like ``get``. When ``a > b`` the segment runs from ``a``
        through the end of the tour and continues at position 0 up to ``b``.
        Applying the same reversal twice restores the tour.
        """
        n = self._nodes.size
        if n == 0:
            return
        if b < a:
            b += n
        if b - a + 1 > n:
            raise ValueError(f"segment [{a}, {b}] is longer than the tour ({n} nodes)")
        while a < b:
            i, j = a % n, b % n
            self._nodes[i], self._nodes[j] = self._nodes[j], self._nodes[i]
            a += 1
            b -= 1

    def distance(self, instance) -> float:
        """Total length including the edge closing the cycle."""
        return instance.tour_length(self)

    def _load(self, order: np.ndarray):
        # Kernels work on a scratch copy of the order and hand it back here.
        self._nodes[:] = order

    def copy(self) -> "Tour":
        return Tour(self._nodes)

    def to_list(self) -> List[int]:
        return self._nodes.tolist()

    def __eq__(self, other):
        if not isinstance(other, Tour):
            return NotImplemented
        return np.array_equal(self._nodes, other._nodes)

    def __repr__(self):
        return f"Tour({self._nodes.tolist()})"
