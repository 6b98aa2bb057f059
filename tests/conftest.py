import numpy as np
import pytest

from tsp_heuristics import DistanceTable, Tour

from helpers import regular_polygon


@pytest.fixture
def crossed_square():
    """Unit square visited in the crossed order (0,0) (1,1) (1,0) (0,1)."""
    coordinates = np.array([[0.0, 0.0], [1.0, 1.0], [1.0, 0.0], [0.0, 1.0]])
    return DistanceTable.from_coordinates(coordinates), Tour.identity(4)


@pytest.fixture
def pentagon():
    return DistanceTable.from_coordinates(regular_polygon(5))


@pytest.fixture
def triangle():
    return DistanceTable.from_coordinates(np.array([[0.0, 0.0], [5.0, 1.0], [2.0, 2.0]]))
