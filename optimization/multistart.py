# optimization/multistart.py
"""
Independent annealing runs, one seed each, evaluated in worker processes.

Filters, objectives and results are plain immutable values, so each run ships
to its worker without any shared state.
"""
from concurrent.futures import ProcessPoolExecutor
from typing import List, Optional, Sequence, Tuple

from core.exceptions import InvalidArgumentError
from core.topology.filter import Filter
from optimization.annealing import AnnealingResult, ObjectiveFunction, anneal
from utils.logging_config import get_logger

logger = get_logger(__name__)


def _run_seed(args: Tuple) -> Tuple[int, AnnealingResult]:
    seed, initial_filter, objective_function, initial_temperature, cooling_rate, iterations = args
    return seed, anneal(initial_filter, objective_function, initial_temperature,
                        cooling_rate, iterations, rng=seed)


def optimize_filter_multistart(initial_filter: Filter, objective_function: ObjectiveFunction,
                               initial_temperature: float, cooling_rate: float, iterations: int,
                               seeds: Sequence[int], max_workers: Optional[int] = None) -> List[AnnealingResult]:
    """
    Anneal `initial_filter` once per seed and return the results, lowest cost first.

    The objective function must be picklable (e.g. a MatchingNetworkObjective).
    A run that raises is logged and left out of the results.
    """
    seeds = list(seeds)
    if not seeds:
        raise InvalidArgumentError("At least one seed is required")

    jobs = [(seed, initial_filter, objective_function, initial_temperature, cooling_rate, iterations)
            for seed in seeds]
    results: List[AnnealingResult] = []
    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_run_seed, job) for job in jobs]
        for seed, future in zip(seeds, futures):
            try:
                _, result = future.result()
            except InvalidArgumentError:
                raise
            except Exception as e:
                logger.error("Annealing run with seed %s failed: %s", seed, e)
                continue
            logger.info("Seed %d finished with cost %g", seed, result.cost)
            results.append(result)

    results.sort(key=lambda r: r.cost)
    return results
