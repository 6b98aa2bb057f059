"""
Test module for the tour representation.
"""
import numpy as np
import pytest

from tsp_heuristics import DistanceTable, InvalidTourError, Tour


def test_get_wraps_cyclically():
    tour = Tour([4, 2, 7])
    assert tour.get(0) == 4
    assert tour.get(3) == 4
    assert tour.get(-1) == 7
    assert tour[5] == 7


def test_get_from_empty_tour():
    with pytest.raises(IndexError):
        Tour([]).get(0)
    with pytest.raises(IndexError):
        Tour([])[3]


@pytest.mark.parametrize("a, b", [(0, 4), (1, 3), (2, 2), (3, 1), (4, 0), (6, 8)])
def test_reverse_is_self_inverse(a, b):
    tour = Tour([10, 11, 12, 13, 14])
    original = tour.copy()
    tour.reverse(a, b)
    tour.reverse(a, b)
    assert tour == original


def test_reverse_inner_segment():
    tour = Tour.identity(6)
    tour.reverse(1, 4)
    assert tour.to_list() == [0, 4, 3, 2, 1, 5]


def test_reverse_wrapping_segment():
    tour = Tour.identity(5)
    tour.reverse(3, 1)
    assert tour.to_list() == [4, 3, 2, 1, 0]


def test_reverse_longer_than_tour():
    with pytest.raises(ValueError):
        Tour.identity(4).reverse(0, 4)


def test_reverse_keeps_node_set():
    tour = Tour([5, 1, 3, 0, 2, 4])
    tour.reverse(2, 5)
    assert sorted(tour) == [0, 1, 2, 3, 4, 5]


def test_duplicate_nodes_rejected():
    with pytest.raises(InvalidTourError):
        Tour([0, 1, 1, 2])


def test_two_dimensional_input_rejected():
    with pytest.raises(InvalidTourError):
        Tour(np.zeros((2, 2), dtype=int))


def test_distance_includes_closing_edge():
    table = DistanceTable.from_coordinates([[0, 0], [1, 0], [1, 1], [0, 1]])
    assert Tour.identity(4).distance(table) == pytest.approx(4.0)
    assert Tour([0, 2, 1, 3]).distance(table) == pytest.approx(2 + 2 * np.sqrt(2))


def test_degenerate_tours():
    table = DistanceTable.from_coordinates([[0, 0], [3, 4]])
    assert Tour([]).distance(table) == 0.0
    assert Tour([1]).distance(table) == 0.0
    assert Tour([0, 1]).distance(table) == pytest.approx(10.0)
    empty = Tour([])
    empty.reverse(0, 0)
    assert len(empty) == 0


def test_permutation_round_trip_with_base():
    tour = Tour.from_permutation([2, 0, 1], base=1)
    assert tour.to_list() == [3, 1, 2]
    assert tour.to_permutation(base=1).tolist() == [2, 0, 1]


def test_index_of():
    tour = Tour([7, 3, 9])
    assert tour.index_of(9) == 2
    with pytest.raises(InvalidTourError):
        tour.index_of(4)


def test_nodes_view_is_read_only():
    tour = Tour.identity(3)
    with pytest.raises(ValueError):
        tour.nodes[0] = 2


def test_copy_is_independent():
    tour = Tour.identity(4)
    other = tour.copy()
    other.reverse(0, 3)
    assert tour.to_list() == [0, 1, 2, 3]
    assert other.to_list() == [3, 2, 1, 0]
