# optimization/objective.py
"""
Cost functions mapping a terminated two-port network to a scalar to minimize.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from core.exceptions import InvalidArgumentError
from core.network.two_port import TwoPortNetwork
from utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GainStatistics:
    """Voltage-gain magnitude statistics over the sampled band."""
    min_gain: float
    max_gain: float
    mean_gain: float

    @property
    def deviation_db(self) -> float:
        """Peak-to-trough spread, 20*log10(max/min); infinite when min is zero."""
        if self.min_gain == 0:
            return math.inf if self.max_gain > 0 else 0.0
        return 20 * math.log10(self.max_gain / self.min_gain)

    @property
    def mean_gain_db(self) -> float:
        return 10 * math.log10(self.mean_gain) if self.mean_gain > 0 else -math.inf


@dataclass(frozen=True)
class MatchingNetworkObjective:
    """
    Maximize mean voltage gain over a band subject to a flatness limit.

    The band [min_frequency, max_frequency) in Hz is sampled at `n_samples`
    equally spaced points; the upper edge itself is never evaluated. A
    candidate whose peak-to-trough gain exceeds `max_gain_deviation_db`, or
    whose gain is not finite anywhere in the band, costs +inf. Otherwise the
    cost is -10*log10(mean gain).
    """
    min_frequency: float
    max_frequency: float
    max_gain_deviation_db: float
    n_samples: int = 20

    def __post_init__(self) -> None:
        if not 0 <= self.min_frequency < self.max_frequency or math.isinf(self.max_frequency):
            raise InvalidArgumentError(
                f"Require 0 <= min_frequency < max_frequency < inf, got "
                f"{self.min_frequency!r}, {self.max_frequency!r}"
            )
        if not self.max_gain_deviation_db >= 0:
            raise InvalidArgumentError(
                f"max_gain_deviation_db must be >= 0, got {self.max_gain_deviation_db!r}"
            )
        if (not isinstance(self.n_samples, (int, np.integer)) or isinstance(self.n_samples, bool)
                or self.n_samples < 1):
            raise InvalidArgumentError(f"n_samples must be a positive integer, got {self.n_samples!r}")

    @property
    def angular_frequencies(self) -> np.ndarray:
        return np.linspace(
            2 * np.pi * self.min_frequency,
            2 * np.pi * self.max_frequency,
            int(self.n_samples),
            endpoint=False,
        )

    def gain_statistics(self, network: TwoPortNetwork) -> GainStatistics:
        gains = np.abs(network.voltage_gain(self.angular_frequencies))
        return GainStatistics(
            min_gain=float(np.min(gains)),
            max_gain=float(np.max(gains)),
            mean_gain=float(np.sum(gains) / self.n_samples),
        )

    def __call__(self, network: TwoPortNetwork) -> float:
        if not isinstance(network, TwoPortNetwork):
            raise InvalidArgumentError(f"Expected a TwoPortNetwork, got {type(network).__name__}")
        stats = self.gain_statistics(network)
        if math.isnan(stats.mean_gain) or math.isinf(stats.max_gain):
            return math.inf
        deviation_db = stats.deviation_db
        logger.debug("mean gain %.4f dB, deviation %.4f dB", stats.mean_gain_db, deviation_db)
        if deviation_db > self.max_gain_deviation_db:
            return math.inf
        if stats.mean_gain == 0:
            return math.inf
        return -10 * math.log10(stats.mean_gain)


def make_matching_network_objective(min_frequency: float, max_frequency: float,
                                    max_gain_deviation_db: float,
                                    n_samples: int = 20) -> MatchingNetworkObjective:
    """
    Build the impedance-matching objective.

    Args:
        min_frequency: Lower band edge in Hz (sampled).
        max_frequency: Upper band edge in Hz (not sampled).
        max_gain_deviation_db: Largest allowed peak-to-trough gain spread in dB.
        n_samples: Number of frequency samples.

    Returns:
        A picklable callable ``network -> cost``.
    """
    return MatchingNetworkObjective(min_frequency, max_frequency, max_gain_deviation_db, n_samples)
