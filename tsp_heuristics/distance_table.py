from typing import Callable

import numpy as np

from tsp_heuristics._kernels import tour_length
from tsp_heuristics.exceptions import InvalidDistanceTableError, UnknownNodeError


class DistanceTable:
    """
    Read-only pairwise distances over the dense node ids [base, base + dimension).

    Node id ``u`` maps to row/column ``u - base`` of the underlying matrix.
    """

    def __init__(self, distance_matrix: np.ndarray, base: int = 0, check: bool = True):
        """
        Args:
            distance_matrix: Numpy array of shape (n, n) containing pairwise distances between nodes.
            base: Id of the first node (0 for permutations, 1 for TSPLIB numbering).
            check: Validate that the matrix is finite, nonnegative, symmetric with a zero diagonal.
        """
        matrix = np.array(distance_matrix, dtype=np.float64, order='C')
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise InvalidDistanceTableError(f"distance matrix must be square, got shape {matrix.shape}")
        if check:
            self._validate(matrix)
        matrix.flags.writeable = False

        self._matrix = matrix
        self.base = int(base)
        self.dimension = matrix.shape[0]

    @staticmethod
    def _validate(matrix: np.ndarray):
        if not np.all(np.isfinite(matrix)):
            raise InvalidDistanceTableError("distance matrix contains non-finite values")
        if np.any(matrix < 0):
            raise InvalidDistanceTableError("distance matrix contains negative distances")
        if np.any(np.diag(matrix) != 0):
            raise InvalidDistanceTableError("distance from a node to itself must be 0")
        if not np.allclose(matrix, matrix.T):
            raise InvalidDistanceTableError("distance matrix is not symmetric")

    @classmethod
    def from_coordinates(cls, coordinates: np.ndarray, base: int = 0) -> "DistanceTable":
        """Euclidean distances between the rows of an (n, d) coordinate array."""
        coordinates = np.asarray(coordinates, dtype=np.float64)
        if coordinates.ndim != 2:
            raise InvalidDistanceTableError(f"coordinates must have shape (n, d), got {coordinates.shape}")
        diff = coordinates[:, None, :] - coordinates[None, :, :]
        return cls(np.linalg.norm(diff, axis=-1), base=base)

    @classmethod
    def from_function(cls, dimension: int, distance: Callable[[int, int], float],
                      base: int = 0) -> "DistanceTable":
        """Precompute a table by calling ``distance(u, v)`` once per unordered node pair."""
        matrix = np.zeros((dimension, dimension), dtype=np.float64)
        for i in range(dimension):
            for j in range(i + 1, dimension):
                matrix[i, j] = matrix[j, i] = distance(i + base, j + base)
        return cls(matrix, base=base)

    @property
    def matrix(self) -> np.ndarray:
        """Read-only view of the distance matrix, indexed by ``node - base``."""
        return self._matrix

    @property
    def nodes(self) -> range:
        return range(self.base, self.base + self.dimension)

    def __len__(self):
        return self.dimension

    def __contains__(self, node) -> bool:
        return self.base <= node < self.base + self.dimension

    def index_of(self, node: int) -> int:
        """Matrix index of a node id."""
        if node not in self:
            raise UnknownNodeError(node, self.base, self.dimension)
        return int(node) - self.base

    def distance(self, u: int, v: int) -> float:
        return float(self._matrix[self.index_of(u), self.index_of(v)])

    def indices(self, tour) -> np.ndarray:
        """Matrix indices of the tour's nodes, in tour order. Fails fast on unknown nodes."""
        nodes = np.asarray(tour.nodes if hasattr(tour, 'nodes') else tour, dtype=np.int64)
        outside = (nodes < self.base) | (nodes >= self.base + self.dimension)
        if np.any(outside):
            raise UnknownNodeError(int(nodes[outside][0]), self.base, self.dimension)
        return nodes - self.base

    def tour_length(self, tour) -> float:
        return float(tour_length(self.indices(tour), self._matrix))

    def __repr__(self):
        return f"DistanceTable(dimension={self.dimension}, base={self.base})"
