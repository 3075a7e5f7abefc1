# optimization/annealing.py
"""
Simulated annealing over ladder filters.

The walk keeps a single current filter. Each iteration perturbs every
component by one table step, accepts the candidate if it is no worse, and
otherwise accepts it with probability 2**(-(delta cost) / temperature). The
temperature decays geometrically every iteration. The final current filter is
returned; there is no memory of the best filter seen along the way.
"""
from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

import numpy as np

from components.component_value import as_generator
from core.exceptions import InvalidArgumentError
from core.network.two_port import TwoPortNetwork
from core.topology.filter import Filter
from utils.logging_config import get_logger

logger = get_logger(__name__)

ObjectiveFunction = Callable[[TwoPortNetwork], float]
RngLike = Union[None, int, np.random.Generator]

PROGRESS_EVERY = 1000


@dataclass
class AnnealingResult:
    """
    Outcome of one annealing run.

    Attributes:
        filter: The final current filter.
        cost: Objective value of `filter`.
        iterations: Number of iterations performed.
        accepted: Number of accepted candidates.
        final_temperature: Temperature after the last cooling step.
        cost_history: Current cost after each iteration (index 0 is the initial cost).
        stats: Timing information.
    """
    filter: Filter
    cost: float
    iterations: int
    accepted: int
    final_temperature: float
    cost_history: List[float] = field(default_factory=list)
    stats: dict = field(default_factory=dict)

    @property
    def acceptance_ratio(self) -> float:
        return self.accepted / self.iterations if self.iterations else 0.0


def acceptance_probability(delta: float, temperature: float) -> float:
    """
    Probability of moving to a candidate whose cost is `delta` higher.

    Non-positive deltas are always accepted; at zero temperature nothing
    worse is accepted.
    """
    if delta <= 0:
        return 1.0
    if temperature <= 0 or math.isnan(delta):
        return 0.0
    return 2.0 ** (-delta / temperature)


def _validate(initial_filter, objective_function, initial_temperature, cooling_rate, iterations) -> None:
    if not isinstance(initial_filter, Filter):
        raise InvalidArgumentError(f"Expected a Filter, got {type(initial_filter).__name__}")
    if not callable(objective_function):
        raise InvalidArgumentError("objective_function must be callable")
    if not initial_temperature > 0 or math.isinf(initial_temperature):
        raise InvalidArgumentError(f"initial_temperature must be > 0, got {initial_temperature!r}")
    if not 0 < cooling_rate < 1:
        raise InvalidArgumentError(f"cooling_rate must be in (0, 1), got {cooling_rate!r}")
    if (isinstance(iterations, bool) or not isinstance(iterations, (int, float, np.integer))
            or not math.isfinite(iterations) or int(iterations) != iterations or iterations < 0):
        raise InvalidArgumentError(f"iterations must be a non-negative integer, got {iterations!r}")


def anneal(initial_filter: Filter, objective_function: ObjectiveFunction,
           initial_temperature: float, cooling_rate: float, iterations: int,
           rng: RngLike = None) -> AnnealingResult:
    """
    Run simulated annealing and report the run.

    Args:
        initial_filter: Starting point of the walk.
        objective_function: Maps ``filter.network`` to a cost to minimize.
        initial_temperature: Starting temperature, > 0.
        cooling_rate: Fraction of the temperature removed each iteration, in (0, 1).
        iterations: Number of iterations, >= 0.
        rng: Generator or seed driving both perturbation and acceptance.

    Returns:
        AnnealingResult for the final current filter.
    """
    _validate(initial_filter, objective_function, initial_temperature, cooling_rate, iterations)
    rng = as_generator(rng)
    iterations = int(iterations)

    current = initial_filter
    current_cost = objective_function(current.network)
    temperature = float(initial_temperature)
    accepted = 0
    history = [current_cost]
    start_time = time.time()

    logger.info(
        "Annealing: T0=%g, cooling=%g, iterations=%d, initial cost=%g",
        initial_temperature, cooling_rate, iterations, current_cost,
    )

    for i in range(iterations):
        candidate = current.update(rng)
        candidate_cost = objective_function(candidate.network)

        if candidate_cost <= current_cost:
            accept = True
        else:
            accept = rng.random() < acceptance_probability(candidate_cost - current_cost, temperature)

        if accept:
            current = candidate
            current_cost = candidate_cost
            accepted += 1

        temperature = temperature * (1 - cooling_rate)
        history.append(current_cost)

        if (i + 1) % PROGRESS_EVERY == 0:
            logger.debug(
                "iteration %d: T=%.4g, cost=%g, accepted=%d", i + 1, temperature, current_cost, accepted
            )

    elapsed = time.time() - start_time
    result = AnnealingResult(
        filter=current,
        cost=current_cost,
        iterations=iterations,
        accepted=accepted,
        final_temperature=temperature,
        cost_history=history,
        stats={"elapsed": elapsed},
    )
    logger.info(
        "Annealing finished: cost=%g, accepted %d/%d (%.1f%%) in %.3f s",
        current_cost, accepted, iterations, 100 * result.acceptance_ratio, elapsed,
    )
    return result


def optimize_filter(initial_filter: Filter, objective_function: ObjectiveFunction,
                    initial_temperature: float, cooling_rate: float, iterations: int,
                    rng: RngLike = None) -> Filter:
    """Optimize a filter with simulated annealing and return the final filter."""
    return anneal(initial_filter, objective_function, initial_temperature,
                  cooling_rate, iterations, rng).filter
