#!/usr/bin/env python
import argparse
import logging

import numpy as np

from core.exceptions import LadderSynthError
from evaluation.sweep import frequency_grid, gain_sweep
from inout.design_file import load_design
from optimization.annealing import anneal
from optimization.multistart import optimize_filter_multistart
from utils.logging_config import setup_logging, get_logger

logger = get_logger(__name__)


def main(argv=None) -> int:
    """
    Optimize a ladder matching network described by a YAML design file.

    Command-line arguments:
      --design: Path to the YAML design file.
      --seed: Random seed (overrides the design file's annealing seed).
      --starts: Number of independent annealing runs (seed, seed+1, ...).
      --dump: Optional path to dump a gain sweep of the result (e.g., gain.npz).
      --points: Number of points in the dumped sweep.
      --log-file: Also write log records to this file.
      --verbose: Enable DEBUG logging.
    """
    parser = argparse.ArgumentParser(description="Optimize a ladder matching network by simulated annealing.")
    parser.add_argument("--design", required=True, help="Path to the YAML design file.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed.")
    parser.add_argument("--starts", type=int, default=1, help="Number of independent annealing runs.")
    parser.add_argument("--dump", default=None, help="Path to dump the optimized gain sweep (e.g., gain.npz).")
    parser.add_argument("--points", type=int, default=201, help="Points in the dumped sweep.")
    parser.add_argument("--log-file", default=None, help="Also log to this file.")
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging.")
    args = parser.parse_args(argv)

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    try:
        design = load_design(args.design, rng=args.seed)
    except LadderSynthError as e:
        logger.error("Design load failed: %s", e)
        return 1

    settings = design.annealing
    seed = args.seed if args.seed is not None else settings.seed
    try:
        if args.starts > 1:
            base = seed if seed is not None else 0
            results = optimize_filter_multistart(
                design.initial_filter, design.objective, settings.initial_temperature,
                settings.cooling_rate, settings.iterations, seeds=range(base, base + args.starts),
            )
            if not results:
                logger.error("All annealing runs failed.")
                return 1
            result = results[0]
        else:
            result = anneal(design.initial_filter, design.objective, settings.initial_temperature,
                            settings.cooling_rate, settings.iterations, rng=seed)
    except LadderSynthError as e:
        logger.error("Optimization failed: %s", e)
        return 1

    logger.info("Initial filter:\n%s", design.initial_filter)
    logger.info("Optimized filter (cost %g):\n%s", result.cost, result.filter)

    if args.dump:
        objective = design.objective
        freqs = frequency_grid(objective.min_frequency, objective.max_frequency, args.points)
        initial = gain_sweep(design.initial_filter.network, freqs)
        optimized = gain_sweep(result.filter.network, freqs)
        np.savez(args.dump, freqs=freqs, initial_gain=initial.gain, optimized_gain=optimized.gain,
                 cost_history=np.asarray(result.cost_history))
        logger.info("Gain sweep dumped to %s", args.dump)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
