from tsp_heuristics import _kernels
from tsp_heuristics.heuristic import Heuristic
from tsp_heuristics.tour import Tour


class TwoOptImprover(Heuristic):
    """
    Exhaustive 2-opt local search.

    For every pair of non-adjacent edges (i, i+1) and (j, j+1), j >= i + 2,
    the tour is rewired to (i, j) and (i+1, j+1) by reversing positions
    i+1..j whenever that is strictly shorter. Improving moves are applied as
    soon as they are found and full passes repeat until one pass changes
    nothing, so the result is a 2-opt local optimum (unless ``max_passes``
    stops the search first).

    With ``closed=True`` (default) the edge from the last node back to the
    first is one of the candidate edges; ``closed=False`` leaves it alone.
    """

    name = '2opt'
    # tours with 3 or fewer nodes are already optimal
    min_size = 4

    def apply(self, tour: Tour):
        order = self._prepare(tour)
        if order is None:
            return
        moves, passes, converged = _kernels.two_opt(order, self.instance.matrix, self.closed,
                                                    self.pass_limit, self.tolerance)
        self._record(tour, order, moves, passes, converged)
