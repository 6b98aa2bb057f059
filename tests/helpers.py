"""Instance builders shared by the test modules."""
import numpy as np

from tsp_heuristics import DistanceTable, Tour


def regular_polygon(n, radius=1.0):
    """Vertices of a regular n-gon in counter-clockwise order."""
    angles = 2 * np.pi * np.arange(n) / n
    return np.column_stack((radius * np.cos(angles), radius * np.sin(angles)))


def random_case(n, seed, base=0):
    """A random Euclidean instance and a random start tour over it."""
    rng = np.random.default_rng(seed)
    table = DistanceTable.from_coordinates(rng.random((n, 2)), base=base)
    tour = Tour.from_permutation(rng.permutation(n), base=base)
    return table, tour
