import logging

import numpy as np
from ortools.constraint_solver import pywrapcp, routing_enums_pb2

logger = logging.getLogger(__name__)

# OR-Tools works on integer arc costs
SCALING_FACTOR = 1000


def baseline_tour(distance_matrix: np.ndarray, time_limit: int = 1) -> np.ndarray:
    """
    Reference tour from OR-Tools guided local search.

    Args:
        distance_matrix: Numpy array of shape (n, n) containing pairwise distances between nodes.
        time_limit: Search time limit in seconds.

    Returns:
        A 0-based permutation of the n nodes starting at node 0.
    """
    n = len(distance_matrix)
    if n < 3:
        return np.arange(n)
    int_distance_matrix = np.rint(np.asarray(distance_matrix) * SCALING_FACTOR).astype(np.int64).tolist()

    # one vehicle starting and ending at node 0
    manager = pywrapcp.RoutingIndexManager(n, 1, 0)
    routing = pywrapcp.RoutingModel(manager)

    def distance_callback(from_index, to_index):
        return int_distance_matrix[manager.IndexToNode(from_index)][manager.IndexToNode(to_index)]

    transit_callback_index = routing.RegisterTransitCallback(distance_callback)
    routing.SetArcCostEvaluatorOfAllVehicles(transit_callback_index)

    search_parameters = pywrapcp.DefaultRoutingSearchParameters()
    search_parameters.first_solution_strategy = (
        routing_enums_pb2.FirstSolutionStrategy.PATH_CHEAPEST_ARC)
    search_parameters.local_search_metaheuristic = (
        routing_enums_pb2.LocalSearchMetaheuristic.GUIDED_LOCAL_SEARCH)
    search_parameters.time_limit.seconds = int(time_limit)
    search_parameters.log_search = False

    solution = routing.SolveWithParameters(search_parameters)
    if not solution:
        logger.warning("OR-Tools found no solution for %d nodes, using the identity tour", n)
        return np.arange(n)

    tour = []
    index = routing.Start(0)
    while not routing.IsEnd(index):
        tour.append(manager.IndexToNode(index))
        index = solution.Value(routing.NextVar(index))
    return np.array(tour)


def baseline_length(distance_matrix: np.ndarray, time_limit: int = 1) -> float:
    """Length of the OR-Tools reference tour."""
    distance_matrix = np.asarray(distance_matrix)
    tour = baseline_tour(distance_matrix, time_limit)
    if tour.size < 2:
        return 0.0
    return float(distance_matrix[tour, np.roll(tour, -1)].sum())
