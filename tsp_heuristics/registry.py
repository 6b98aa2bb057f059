from tsp_heuristics.affinity import AffinityTwoOptImprover, AffinityVariant
from tsp_heuristics.exceptions import UnknownHeuristicError
from tsp_heuristics.greedy import GreedyConstructor, GreedySwapPass
from tsp_heuristics.heuristic import Heuristic
from tsp_heuristics.three_opt import ThreeOptImprover
from tsp_heuristics.two_opt import TwoOptImprover
from tsp_heuristics.tour import Tour


class NoHeuristic(Heuristic):
    """
    Leaves the tour as it is. Baseline for comparing the other heuristics.

    The tour is still validated. The base class options have no effect.
    """

    name = 'none'

    def apply(self, tour: Tour):
        self._prepare(tour)


class GatedAffinityTwoOptImprover(AffinityTwoOptImprover):
    """AffinityTwoOptImprover fixed to the gated 2-opt variant."""

    name = 'afd-gated-2opt'

    def __init__(self, instance, **kwargs):
        kwargs.setdefault('variant', AffinityVariant.GATED)
        super().__init__(instance, **kwargs)


HEURISTICS = {
    cls.name: cls
    for cls in (NoHeuristic, GreedyConstructor, GreedySwapPass, TwoOptImprover, ThreeOptImprover,
                AffinityTwoOptImprover, GatedAffinityTwoOptImprover)
}


def make_heuristic(name: str, instance, **options) -> Heuristic:
    """
    Build a registered heuristic bound to ``instance``.

    Args:
        name: One of the keys of HEURISTICS.
        instance: DistanceTable of the problem instance.
        **options: Constructor keyword arguments of the heuristic.
    """
    try:
        cls = HEURISTICS[name]
    except KeyError:
        raise UnknownHeuristicError(f"unknown heuristic {name!r}, "
                                    f"expected one of {sorted(HEURISTICS)}") from None
    return cls(instance, **options)
