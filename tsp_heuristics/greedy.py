from tsp_heuristics._kernels import adjacent_swap_pass, nearest_extension
from tsp_heuristics.heuristic import Heuristic
from tsp_heuristics.tour import Tour


class GreedyConstructor(Heuristic):
    """
    Nearest-extension construction over an existing tour.

    The first edge of the incoming tour (positions 0 and 1) is kept. Each
    following position receives the remaining node nearest to the node
    placed just before it, moved there by a segment reversal. One forward
    pass, O(n^2) distance lookups, no backtracking.

    Always a single pass: ``closed``, ``max_passes`` and ``tolerance`` are
    accepted for a uniform constructor and have no effect.
    """

    name = 'greedy'
    # tours with 2 or fewer nodes are already optimal
    min_size = 3

    def apply(self, tour: Tour):
        order = self._prepare(tour)
        if order is None:
            return
        moves = nearest_extension(order, self.instance.matrix)
        self._record(tour, order, moves, 1, True)


class GreedySwapPass(Heuristic):
    """
    Single pass that swaps a node with its successor when the successor's successor is closer.

    ``closed``, ``max_passes`` and ``tolerance`` have no effect.
    """

    name = 'greedy-swap'
    min_size = 3

    def apply(self, tour: Tour):
        order = self._prepare(tour)
        if order is None:
            return
        moves = adjacent_swap_pass(order, self.instance.matrix)
        self._record(tour, order, moves, 1, True)
