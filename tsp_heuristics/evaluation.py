from __future__ import annotations
import concurrent.futures
import csv
import logging
import os
import pickle as pkl
import time
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from tsp_heuristics.affinity import AffinityTwoOptImprover
from tsp_heuristics.baseline import baseline_length
from tsp_heuristics.distance_table import DistanceTable
from tsp_heuristics.exceptions import UnknownHeuristicError
from tsp_heuristics.registry import HEURISTICS, make_heuristic
from tsp_heuristics.tour import Tour

__all__ = ['HeuristicEvaluation', 'random_instances']

logger = logging.getLogger(__name__)

START_STRATEGIES = ('random', 'identity')


def random_instances(count: int, size: int, seed: int = 2025) -> List[Tuple]:
    """
    Uniform random Euclidean instances in the unit square.

    Returns:
        (name, coordinates, distance_matrix, baseline) tuples with baseline None,
        the same layout as the pickled datasets.
    """
    rng = np.random.default_rng(seed)
    instances = []
    for k in range(count):
        coordinates = rng.random((size, 2))
        table = DistanceTable.from_coordinates(coordinates)
        instances.append((f"rand{size}_{k}", coordinates, np.array(table.matrix), None))
    return instances


class HeuristicEvaluation:
    """
    Applies tour heuristics to a batch of TSP instances in parallel and
    reports the gap of every improved tour to a reference length.
    """

    def __init__(self,
                 heuristics: List[str],
                 num_threads: int = 4,
                 output_csv_path: Optional[str] = 'tsp_heuristic_results.csv',
                 dataset_path: Optional[str] = None,
                 instances: Optional[List[Tuple]] = None,
                 baseline_time_limit: int = 1,
                 start: str = 'random',
                 seed: int = 2025,
                 options: Optional[Dict[str, Dict[str, Any]]] = None):
        """
        Args:
            heuristics (List[str]): Registered heuristic names to evaluate.
            num_threads (int): The number of threads to use for parallel evaluation.
            output_csv_path (str): Path to write the final results CSV file, None to skip writing.
            dataset_path (str): Pickle of (name, coordinates, distance_matrix, baseline) tuples.
            instances (List[Tuple]): Instances in the same layout, used instead of dataset_path.
            baseline_time_limit (int): OR-Tools time limit for instances without a baseline.
            start (str): Start tour of every run, 'random' or 'identity'.
            seed (int): Seed for the start tours and the heuristics' random choices.
            options (Dict): Constructor keyword arguments per heuristic name.
        """
        unknown = [name for name in heuristics if name not in HEURISTICS]
        if unknown:
            raise UnknownHeuristicError(f"unknown heuristics {unknown}, expected names from {sorted(HEURISTICS)}")
        if start not in START_STRATEGIES:
            raise ValueError(f"start must be one of {START_STRATEGIES}, got {start!r}")

        self.heuristics = list(heuristics)
        self.num_threads = num_threads
        self.output_csv_path = output_csv_path
        self.baseline_time_limit = baseline_time_limit
        self.start = start
        self.seed = seed
        self.options = options or {}

        if instances is None:
            if dataset_path is None:
                raise ValueError("either dataset_path or instances is required")
            if not os.path.exists(dataset_path):
                raise FileNotFoundError(f"Dataset file not found at: {dataset_path}")
            with open(dataset_path, 'rb') as f:
                instances = pkl.load(f)
        self._datasets = list(instances)

        logger.info("Loaded %d TSP instances.", len(self._datasets))
        logger.info("Heuristics to be evaluated: %s", self.heuristics)

    @staticmethod
    def check_feasibility(tour: Tour, problem_size: int) -> bool:
        """Checks that the tour visits every node of the instance exactly once."""
        if len(tour) != problem_size:
            logger.warning("tour has %d nodes, expected %d", len(tour), problem_size)
            return False
        if set(tour) != set(range(problem_size)):
            logger.warning("tour is not a permutation of 0..%d", problem_size - 1)
            return False
        return True

    def _start_tour(self, problem_size: int, instance_index: int) -> Tour:
        if self.start == 'identity':
            return Tour.identity(problem_size)
        # the same start tour for every heuristic on one instance
        rng = np.random.default_rng([self.seed, instance_index])
        return Tour.from_permutation(rng.permutation(problem_size))

    def _baselines(self) -> List[float]:
        baselines = []
        for name, coordinates, distance_matrix, baseline in self._datasets:
            if baseline is None:
                matrix = self._matrix(coordinates, distance_matrix)
                baseline = baseline_length(matrix, self.baseline_time_limit)
                logger.info("OR-Tools baseline for %s: %.4f", name, baseline)
            baselines.append(float(baseline))
        return baselines

    @staticmethod
    def _matrix(coordinates, distance_matrix) -> np.ndarray:
        if distance_matrix is None:
            return np.array(DistanceTable.from_coordinates(coordinates).matrix)
        return distance_matrix

    def _run_single_solve(self, task_args: Tuple) -> Tuple[str, str, Any, Any, float]:
        """
        Worker function to run one heuristic on one instance. This is executed by each thread.
        Returns a tuple: (instance_name, heuristic_name, gap, length, execution_time).
        """
        instance_index, heuristic_name, baseline = task_args
        instance_name, coordinates, distance_matrix, _ = self._datasets[instance_index]

        try:
            table = DistanceTable(self._matrix(coordinates, distance_matrix))
            options = dict(self.options.get(heuristic_name, {}))
            if issubclass(HEURISTICS[heuristic_name], AffinityTwoOptImprover):
                options.setdefault('rng', np.random.default_rng([self.seed, instance_index]))
            heuristic = make_heuristic(heuristic_name, table, **options)
            tour = self._start_tour(table.dimension, instance_index)

            solve_start_time = time.time()
            heuristic.apply(tour)
            solve_time = time.time() - solve_start_time

            if not self.check_feasibility(tour, table.dimension):
                return instance_name, heuristic_name, 'infeasible', 'infeasible', solve_time

            length = tour.distance(table)
            gap = (length - baseline) / baseline if baseline > 0 else float('inf')
            logger.debug("heuristic=%s, instance_name=%s, gap=%s, solve_time=%s",
                         heuristic_name, instance_name, gap, solve_time)
            return instance_name, heuristic_name, gap, length, solve_time

        except Exception:
            logger.exception("Runtime error in %s on %s", heuristic_name, instance_name)
            return instance_name, heuristic_name, 'error', 'error', 0.0

    def evaluate(self) -> List[Dict[str, Any]]:
        """
        Evaluates all heuristics against all instances in parallel.
        """
        start_time = time.time()
        baselines = self._baselines()

        tasks = []
        for index, baseline in enumerate(baselines):
            for heuristic_name in self.heuristics:
                tasks.append((index, heuristic_name, baseline))

        flat_results = []
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.num_threads) as executor:
            future_to_task = {executor.submit(self._run_single_solve, task): task for task in tasks}
            logger.info("Submitting %d tasks to the thread pool...", len(tasks))
            for future in tqdm(concurrent.futures.as_completed(future_to_task), total=len(tasks),
                               desc="Evaluating heuristics"):
                flat_results.append(future.result())

        results_by_instance = {}
        for instance_name, heuristic_name, gap, length, solve_time in flat_results:
            row = results_by_instance.setdefault(instance_name, {'instance_name': instance_name})
            row[f"{heuristic_name}_gap"] = gap
            row[f"{heuristic_name}_length"] = length
            row[f"{heuristic_name}_time"] = solve_time

        # preserve the dataset order
        ordered_results = [results_by_instance[d[0]] for d in self._datasets if d[0] in results_by_instance]

        if self.output_csv_path is not None:
            self.write_results_to_csv(ordered_results)

        logger.info("Evaluation finished in %.2f seconds.", time.time() - start_time)
        return ordered_results

    def write_results_to_csv(self, results_data: List[Dict[str, Any]]):
        """Writes the evaluation results to a CSV file."""
        if not results_data:
            logger.warning("No results to write.")
            return

        headers = ['instance_name']
        for heuristic_name in self.heuristics:
            headers.extend([f"{heuristic_name}_gap", f"{heuristic_name}_length", f"{heuristic_name}_time"])

        with open(self.output_csv_path, 'w', newline='') as csvfile:
            writer = csv.DictWriter(csvfile, fieldnames=headers, restval='N/A')
            writer.writeheader()
            writer.writerows(results_data)
        logger.info("Successfully wrote results to '%s'", self.output_csv_path)


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(levelname)s  %(name)s  %(message)s")

    heuristics_to_evaluate = [
        'none',
        'greedy',
        'greedy-swap',
        '2opt',
        '3opt',
        'afd-2opt',
        'afd-gated-2opt',
    ]

    evaluator = HeuristicEvaluation(
        heuristics=heuristics_to_evaluate,
        num_threads=8,
        instances=random_instances(count=5, size=100),
        output_csv_path='tsp_heuristic_results.csv',
    )

    results = evaluator.evaluate()
    for row in results[:5]:
        logger.info("%s", row)
