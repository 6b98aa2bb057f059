import logging
import sys

import numpy as np

from tsp_heuristics.distance_table import DistanceTable
from tsp_heuristics.tour import Tour

# Moves must shorten the tour by more than this to be accepted
DEFAULT_TOLERANCE = 1e-9


class Heuristic:
    """
    Base class of the tour heuristics.

    A heuristic is bound to one DistanceTable and mutates the tours passed to
    ``apply`` in place. Subclasses set ``min_size``: smaller tours are already
    optimal for their neighborhood and are returned untouched.
    """

    name = 'none'
    min_size = 0

    def __init__(self, instance: DistanceTable, closed: bool = True, max_passes: int = None,
                 tolerance: float = DEFAULT_TOLERANCE):
        """
        Args:
            instance: Distance table of the problem instance.
            closed: Let the edge from the last node back to the first take part in the search.
            max_passes: Upper bound on full improvement passes, None for no bound.
            tolerance: Minimum length decrease for a move to count as an improvement.
        """
        if max_passes is not None and max_passes < 1:
            raise ValueError(f"max_passes must be at least 1, got {max_passes}")
        if tolerance < 0:
            raise ValueError(f"tolerance must be nonnegative, got {tolerance}")
        self.instance = instance
        self.closed = closed
        self.max_passes = max_passes
        self.tolerance = tolerance

        # Counters of the most recent apply
        self.last_moves = 0
        self.last_passes = 0
        self.converged = True

    @property
    def pass_limit(self) -> int:
        return sys.maxsize if self.max_passes is None else int(self.max_passes)

    def _prepare(self, tour: Tour):
        """Validated matrix indices of the tour, or None when the tour is below ``min_size``."""
        order = self.instance.indices(tour)
        self.last_moves = 0
        self.last_passes = 0
        self.converged = True
        if tour.size() < self.min_size:
            return None
        return order

    def _record(self, tour: Tour, order: np.ndarray, moves: int, passes: int, converged: bool):
        tour._load(order + self.instance.base)
        self.last_moves = int(moves)
        self.last_passes = int(passes)
        self.converged = bool(converged)
        log = logging.getLogger(type(self).__module__)
        if not self.converged:
            log.warning("%s stopped after %d passes without reaching a fixed point",
                        self.name, self.last_passes)
        else:
            log.debug("%s converged after %d passes, %d moves", self.name, self.last_passes,
                      self.last_moves)

    def apply(self, tour: Tour):
        """Improve ``tour`` in place."""
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}({self.instance!r})"
