"""Local-search heuristics that shorten travelling salesman tours in place."""
from tsp_heuristics.affinity import AffinityTwoOptImprover, AffinityVariant, affinity_table
from tsp_heuristics.distance_table import DistanceTable
from tsp_heuristics.exceptions import (InvalidDistanceTableError, InvalidTourError, TSPError,
                                       UnknownHeuristicError, UnknownNodeError)
from tsp_heuristics.greedy import GreedyConstructor, GreedySwapPass
from tsp_heuristics.heuristic import Heuristic
from tsp_heuristics.registry import HEURISTICS, GatedAffinityTwoOptImprover, NoHeuristic, make_heuristic
from tsp_heuristics.three_opt import Reconnection, ThreeOptImprover
from tsp_heuristics.tour import Tour
from tsp_heuristics.two_opt import TwoOptImprover

__version__ = "0.1.0"

__all__ = [
    'AffinityTwoOptImprover', 'AffinityVariant', 'DistanceTable', 'GatedAffinityTwoOptImprover',
    'GreedyConstructor', 'GreedySwapPass', 'HEURISTICS', 'Heuristic', 'InvalidDistanceTableError',
    'InvalidTourError', 'NoHeuristic', 'Reconnection', 'TSPError', 'ThreeOptImprover', 'Tour',
    'TwoOptImprover', 'UnknownHeuristicError', 'UnknownNodeError', 'affinity_table', 'make_heuristic',
]
