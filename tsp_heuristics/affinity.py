"""
Adaptive belonging-degree (AFD) 2-opt.

The belonging degree of node j to a reference node i is

    M[i, j] = 1 - d(i, j) / d(i, l)

where l is the node farthest from i, so the nearest nodes score close to 1
and the farthest scores 0. Two strategies use the table:

* ``AffinityVariant.CONSTRUCTIVE`` rebuilds the tour from a random start,
  taking the most affine remaining node while it clears a dynamic threshold
  and the last remaining node otherwise, then polishes the result with 2-opt.
* ``AffinityVariant.GATED`` runs 2-opt but only accepts a move whose new
  edges join affine nodes, relaxing the gate when nothing passes it.
"""
import enum
import logging

import numpy as np

from tsp_heuristics import _kernels
from tsp_heuristics.heuristic import Heuristic
from tsp_heuristics.tour import Tour

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.9
NORMALIZERS = ('max', 'total')


class AffinityVariant(enum.Enum):
    CONSTRUCTIVE = 'constructive'
    GATED = 'gated'


def affinity_table(dist: np.ndarray, normalizer: str = 'max') -> np.ndarray:
    """
    Belonging degree of every node (column) to every reference node (row).

    Args:
        dist: Square distance matrix.
        normalizer: 'max' divides by the distance to the farthest node,
            'total' by the summed distance to all nodes.

    Returns:
        Matrix of the same shape. Rows whose normalizer is 0 are all ones.
    """
    dist = np.asarray(dist, dtype=np.float64)
    if normalizer == 'max':
        scale = dist.max(axis=1)
    elif normalizer == 'total':
        scale = dist.sum(axis=1)
    else:
        raise ValueError(f"normalizer must be one of {NORMALIZERS}, got {normalizer!r}")
    table = np.ones_like(dist)
    nonzero = scale != 0
    table[nonzero] = 1.0 - dist[nonzero] / scale[nonzero, None]
    return table


def affinity_bounds(table: np.ndarray):
    """
    Per-node upper affinity and the common lower bound.

    The upper bound of node i is its affinity to its most affine other node.
    The common lower bound is the smallest of these, i.e. the weakest
    nearest-neighbour affinity in the instance.
    """
    others = table.copy()
    np.fill_diagonal(others, -np.inf)
    upper = others.max(axis=1)
    return upper, float(upper.min())


class AffinityTwoOptImprover(Heuristic):
    """
    AFD + 2-opt heuristic.

    Randomness only enters through the start node of the constructive
    variant; pass ``seed`` or ``rng`` for reproducible runs.
    """

    name = 'afd-2opt'
    # tours with 3 or fewer nodes are already optimal
    min_size = 4

    def __init__(self, instance, variant=AffinityVariant.CONSTRUCTIVE, threshold: float = DEFAULT_THRESHOLD,
                 normalizer: str = 'max', rng: np.random.Generator = None, seed: int = None, **kwargs):
        """
        Args:
            instance: Distance table of the problem instance.
            variant: AffinityVariant or its value.
            threshold: Starting affinity threshold.
            normalizer: Affinity normalizer, 'max' or 'total'.
            rng: Random generator for the start node.
            seed: Seed for a new generator when ``rng`` is not given.
            **kwargs: closed, max_passes and tolerance, as for TwoOptImprover.
        """
        super().__init__(instance, **kwargs)
        if normalizer not in NORMALIZERS:
            raise ValueError(f"normalizer must be one of {NORMALIZERS}, got {normalizer!r}")
        self.variant = AffinityVariant(variant)
        self.threshold = float(threshold)
        self.normalizer = normalizer
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.last_accepted = 0

    def apply(self, tour: Tour):
        order = self._prepare(tour)
        self.last_accepted = 0
        if order is None:
            return
        if self.variant is AffinityVariant.CONSTRUCTIVE:
            rebuilt = self._rebuild(order)
            moves, passes, converged = _kernels.two_opt(order, self.instance.matrix, self.closed,
                                                        self.pass_limit, self.tolerance)
            moves += rebuilt
        else:
            moves, passes, converged = _kernels.gated_two_opt(order, self.instance.matrix,
                                                              self._node_affinity(order), self.threshold,
                                                              self.closed, self.pass_limit, self.tolerance)
        self._record(tour, order, moves, passes, converged)

    def _node_affinity(self, order: np.ndarray) -> np.ndarray:
        """Affinity between the tour's nodes, indexed like the distance matrix."""
        cells = np.ix_(order, order)
        table = np.zeros_like(self.instance.matrix)
        table[cells] = affinity_table(self.instance.matrix[cells], self.normalizer)
        return table

    def _rebuild(self, order: np.ndarray) -> int:
        """
        Affinity-guided reconstruction of ``order`` in place.

        Returns:
            number of reversals performed
        """
        nodes = order.copy()
        n = nodes.size
        table = affinity_table(self.instance.matrix[np.ix_(nodes, nodes)], self.normalizer)
        upper, floor = affinity_bounds(table)
        placed = np.zeros(n, dtype=bool)

        current = int(self.rng.integers(n))
        reversals = self._place(order, 0, nodes[current])
        placed[current] = True

        for position in range(1, n):
            md = min(max(self.threshold, floor), upper[current])
            candidates = np.flatnonzero(~placed)
            best = candidates[np.argmax(table[current, candidates])]
            if table[current, best] >= md:
                chosen = best
                self.last_accepted += 1
            else:
                chosen = candidates[-1]
            reversals += self._place(order, position, nodes[chosen])
            placed[chosen] = True
            current = chosen

        logger.debug("affinity rebuild accepted %d of %d candidates (floor %.4f)",
                     self.last_accepted, n - 1, floor)
        return reversals

    @staticmethod
    def _place(order: np.ndarray, position: int, node: int) -> int:
        # every node before ``position`` is already placed, so node sits at or after it
        found = int(np.flatnonzero(order == node)[0])
        if found == position:
            return 0
        _kernels.reverse_segment(order, position, found)
        return 1
