"""
Test module for the heuristic registry, exercised across every heuristic.
"""
import pytest

from tsp_heuristics import HEURISTICS, NoHeuristic, Tour, UnknownHeuristicError, make_heuristic

from helpers import random_case

NAMES = sorted(HEURISTICS)
LOCAL_SEARCH = ['2opt', '3opt']


def test_registered_names():
    assert set(NAMES) == {'none', 'greedy', 'greedy-swap', '2opt', '3opt', 'afd-2opt', 'afd-gated-2opt'}


@pytest.mark.parametrize("name", NAMES)
def test_make_heuristic_binds_table(name):
    table, _ = random_case(6, 0)
    heuristic = make_heuristic(name, table)
    assert heuristic.name == name
    assert heuristic.instance is table


def test_unknown_name():
    table, _ = random_case(6, 0)
    with pytest.raises(UnknownHeuristicError):
        make_heuristic('4opt', table)
    with pytest.raises(KeyError):
        make_heuristic('', table)


def test_gated_name_selects_gated_variant():
    table, _ = random_case(6, 0)
    assert make_heuristic('afd-gated-2opt', table).variant.value == 'gated'
    assert make_heuristic('afd-2opt', table).variant.value == 'constructive'


def test_options_are_forwarded():
    table, _ = random_case(6, 0)
    heuristic = make_heuristic('2opt', table, closed=False, max_passes=3)
    assert heuristic.closed is False
    assert heuristic.max_passes == 3


def test_no_heuristic_leaves_tour():
    table, tour = random_case(9, 1)
    original = tour.copy()
    NoHeuristic(table).apply(tour)
    assert tour == original


@pytest.mark.parametrize("name", NAMES)
@pytest.mark.parametrize("n", [0, 1, 2, 4, 9, 17])
@pytest.mark.parametrize("base", [0, 1])
def test_every_heuristic_keeps_node_set(name, n, base):
    table, tour = random_case(max(n, 1), n, base=base)
    tour = Tour(tour.to_list()[:n])
    make_heuristic(name, table, **({'seed': 0} if name.startswith('afd') else {})).apply(tour)
    assert sorted(tour) == list(range(base, base + n))


@pytest.mark.parametrize("name", LOCAL_SEARCH)
@pytest.mark.parametrize("seed", range(5))
def test_local_search_never_lengthens(name, seed):
    table, tour = random_case(14, seed)
    before = tour.distance(table)
    make_heuristic(name, table).apply(tour)
    assert tour.distance(table) <= before + 1e-9


@pytest.mark.parametrize("name", LOCAL_SEARCH)
def test_two_nodes_unchanged(name):
    table, tour = random_case(2, 0)
    original = tour.copy()
    before = tour.distance(table)
    make_heuristic(name, table).apply(tour)
    assert tour == original
    assert tour.distance(table) == before


def test_no_heuristic_ignores_search_options():
    table, tour = random_case(8, 1)
    original = tour.copy()
    NoHeuristic(table, closed=False, max_passes=1, tolerance=10.0).apply(tour)
    assert tour == original
