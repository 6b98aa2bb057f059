"""Errors raised by the tour and heuristic layer."""


class TSPError(ValueError):
    """Base class for all errors raised by tsp_heuristics."""


class InvalidTourError(TSPError):
    """The tour is not a one dimensional sequence of distinct nodes."""


class InvalidDistanceTableError(TSPError):
    """The distance matrix is not a square, finite, symmetric, zero-diagonal matrix."""


class UnknownNodeError(TSPError, KeyError):
    """A node id falls outside the id range of the distance table."""

    def __init__(self, node, base, dimension):
        self.node = node
        self.base = base
        self.dimension = dimension
        super().__init__(f"node {node} is not in the distance table "
                         f"(valid ids are {base}..{base + dimension - 1})")

    def __str__(self):
        return self.args[0]


class UnknownHeuristicError(TSPError, KeyError):
    """No heuristic is registered under the requested name."""

    def __str__(self):
        return self.args[0]
