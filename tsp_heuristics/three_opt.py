import enum
from typing import Iterable

import numpy as np

from tsp_heuristics import _kernels
from tsp_heuristics.heuristic import Heuristic
from tsp_heuristics.tour import Tour


class Reconnection(enum.IntEnum):
    """
    Ways to reconnect a tour A B C D after removing the three edges
    A|B, B|C and C|D. A trailing ' marks a reversed segment.
    """

    SEGMENT_SWAP = _kernels.SEGMENT_SWAP                # A C B D
    SWAP_REVERSE_FIRST = _kernels.SWAP_REVERSE_FIRST    # A C B' D
    SWAP_REVERSE_SECOND = _kernels.SWAP_REVERSE_SECOND  # A C' B D
    REVERSE_BOTH = _kernels.REVERSE_BOTH                # A B' C' D
    REVERSE_FIRST = _kernels.REVERSE_FIRST              # A B' C D
    REVERSE_SECOND = _kernels.REVERSE_SECOND            # A B C' D
    REVERSE_SPAN = _kernels.REVERSE_SPAN                # A C' B' D

    @classmethod
    def all(cls):
        return tuple(cls)

    @classmethod
    def pure(cls):
        """Reconnections that replace all three edges."""
        return (cls.SEGMENT_SWAP, cls.SWAP_REVERSE_FIRST, cls.SWAP_REVERSE_SECOND, cls.REVERSE_BOTH)


class ThreeOptImprover(Heuristic):
    """
    3-opt local search over a configurable set of reconnections.

    For index triples i < j < k with j >= i + 2 and k >= j + 2 the edges
    (i, i+1), (j, j+1) and (k, k+1) are removed and each reconnection in
    ``reconnections`` is tried in order; the first one that is strictly
    shorter is applied through segment reversals. Passes repeat until none
    changes the tour.

    The default explores only the segment swap A C B D, which adds the
    edges (i, j+1), (i+1, k) and (j, k+1).
    """

    name = '3opt'
    # tours with 3 or fewer nodes are already optimal
    min_size = 4

    def __init__(self, instance, reconnections: Iterable[Reconnection] = (Reconnection.SEGMENT_SWAP,),
                 **kwargs):
        super().__init__(instance, **kwargs)
        self.reconnections = tuple(Reconnection(r) for r in reconnections)
        if not self.reconnections:
            raise ValueError("at least one reconnection is required")
        self._codes = np.array([int(r) for r in self.reconnections], dtype=np.int64)

    def apply(self, tour: Tour):
        order = self._prepare(tour)
        if order is None:
            return
        moves, passes, converged = _kernels.three_opt(order, self.instance.matrix, self._codes,
                                                      self.closed, self.pass_limit, self.tolerance)
        self._record(tour, order, moves, passes, converged)
