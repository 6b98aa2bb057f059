"""
Test module for the distance table.
"""
import numpy as np
import pytest

from tsp_heuristics import DistanceTable, InvalidDistanceTableError, Tour, UnknownNodeError


def test_from_coordinates():
    table = DistanceTable.from_coordinates([[0, 0], [3, 4], [6, 8]])
    assert table.distance(0, 1) == pytest.approx(5.0)
    assert table.distance(2, 0) == pytest.approx(10.0)
    assert table.distance(1, 1) == 0.0
    assert np.array_equal(table.matrix, table.matrix.T)


def test_base_offsets_node_ids():
    table = DistanceTable.from_coordinates([[0, 0], [3, 4]], base=1)
    assert list(table.nodes) == [1, 2]
    assert table.distance(1, 2) == pytest.approx(5.0)
    assert 0 not in table
    with pytest.raises(UnknownNodeError):
        table.distance(0, 1)


def test_unknown_node_error_types():
    table = DistanceTable(np.zeros((2, 2)))
    with pytest.raises(KeyError):
        table.index_of(2)
    with pytest.raises(ValueError):
        table.index_of(-1)


def test_tour_length_rejects_unknown_nodes():
    table = DistanceTable(np.zeros((3, 3)))
    with pytest.raises(UnknownNodeError) as info:
        table.tour_length(Tour([0, 1, 5]))
    assert info.value.node == 5


@pytest.mark.parametrize("matrix", [
    np.zeros((2, 3)),
    np.array([[0.0, -1.0], [-1.0, 0.0]]),
    np.array([[0.0, 1.0], [2.0, 0.0]]),
    np.array([[1.0, 1.0], [1.0, 0.0]]),
    np.array([[0.0, np.nan], [np.nan, 0.0]]),
    np.array([[0.0, np.inf], [np.inf, 0.0]]),
])
def test_invalid_matrices_rejected(matrix):
    with pytest.raises(InvalidDistanceTableError):
        DistanceTable(matrix)


def test_matrix_is_read_only():
    table = DistanceTable(np.zeros((2, 2)))
    with pytest.raises(ValueError):
        table.matrix[0, 1] = 3.0


def test_input_matrix_is_copied():
    matrix = np.array([[0.0, 2.0], [2.0, 0.0]])
    table = DistanceTable(matrix)
    matrix[0, 1] = matrix[1, 0] = 7.0
    assert table.distance(0, 1) == 2.0


def test_from_function():
    table = DistanceTable.from_function(4, lambda u, v: abs(u - v), base=1)
    assert table.distance(1, 4) == 3.0
    assert table.distance(4, 1) == 3.0
    assert len(table) == 4
