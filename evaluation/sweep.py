# evaluation/sweep.py
import logging
import time
from dataclasses import dataclass, field

import numpy as np

from core.exceptions import InvalidArgumentError
from core.network.two_port import TwoPortNetwork


def frequency_grid(start: float, stop: float, points: int, scale: str = "linear") -> np.ndarray:
    """
    Frequencies in Hz from start to stop inclusive, linearly or logarithmically spaced.
    """
    if points < 1:
        raise InvalidArgumentError(f"points must be >= 1, got {points}")
    if scale == "log":
        if start <= 0 or stop <= 0:
            raise InvalidArgumentError("Logarithmic sweeps need positive start and stop frequencies")
        return np.logspace(np.log10(start), np.log10(stop), points)
    if scale == "linear":
        return np.linspace(start, stop, points)
    raise InvalidArgumentError(f"Unknown sweep scale '{scale}'")


@dataclass
class GainSweepResult:
    frequencies: np.ndarray
    gain: np.ndarray
    stats: dict = field(default_factory=dict)

    @property
    def magnitude(self) -> np.ndarray:
        return np.abs(self.gain)

    @property
    def gain_db(self) -> np.ndarray:
        """20*log10|gain|; zero gain maps to -inf."""
        with np.errstate(divide="ignore"):
            return 20 * np.log10(self.magnitude)


def gain_sweep(network: TwoPortNetwork, frequencies) -> GainSweepResult:
    """
    Evaluate the voltage gain of a network at each frequency (Hz).
    """
    frequencies = np.asarray(frequencies, dtype=float)
    start_time = time.time()
    gain = np.asarray(network.voltage_gain(2 * np.pi * frequencies))
    elapsed = time.time() - start_time
    n_bad = int(np.count_nonzero(~np.isfinite(gain)))
    if n_bad:
        logging.warning(f"Gain sweep: {n_bad} of {frequencies.size} points are not finite.")
    return GainSweepResult(frequencies, gain, {"points": int(frequencies.size), "elapsed": elapsed})
