# core/network/two_port.py
"""
Two-port networks in ABCD (chain) form.

A network is an immutable tagged value (series element, shunt element, ideal
transformer, cascade) that yields a :class:`TwoPortMatrix` at any angular
frequency. Cascading multiplies chain matrices left to right, following the
signal path from the source towards the load.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from functools import singledispatch
from typing import Tuple

import numpy as np

from core.exceptions import InvalidArgumentError
from core.network.load import Load
from core.numeric.complex_math import ArrayLike, as_angular_frequency, multiply, reciprocal


def _is_entry_index(i) -> bool:
    return isinstance(i, (int, np.integer)) and not isinstance(i, bool) and 0 <= i <= 1


class TwoPortMatrix:
    """
    ABCD parameters of a linear two-port, [[A, B], [C, D]].

    Wraps an array of shape (..., 2, 2) so that a whole frequency sweep can be
    carried in one object; a single frequency has shape (2, 2).
    """

    def __init__(self, data: np.ndarray) -> None:
        data = np.asarray(data, dtype=complex)
        if data.shape[-2:] != (2, 2):
            raise InvalidArgumentError(f"ABCD data must end in a 2x2 block, got shape {data.shape}")
        self.data = data

    @classmethod
    def from_entries(cls, a, b, c, d) -> "TwoPortMatrix":
        """Build from four broadcast-compatible entries."""
        a, b, c, d = np.broadcast_arrays(*(np.asarray(x, dtype=complex) for x in (a, b, c, d)))
        return cls(np.stack([np.stack([a, b], axis=-1), np.stack([c, d], axis=-1)], axis=-2))

    def __getitem__(self, index: Tuple[int, int]) -> ArrayLike:
        if not isinstance(index, tuple) or len(index) != 2:
            raise InvalidArgumentError(f"ABCD index must be a (row, col) pair, got {index!r}")
        row, col = index
        if not all(_is_entry_index(i) for i in index):
            raise InvalidArgumentError(f"ABCD index out of range: ({row!r}, {col!r})")
        return self.data[..., row, col][()]

    def __matmul__(self, other: "TwoPortMatrix") -> "TwoPortMatrix":
        # Written out entry by entry so that 0 * inf stays 0 (see multiply).
        x, y = self.data, other.data

        def entry(row, col):
            with np.errstate(all="ignore"):
                return multiply(x[..., row, 0], y[..., 0, col]) + multiply(x[..., row, 1], y[..., 1, col])

        return TwoPortMatrix.from_entries(entry(0, 0), entry(0, 1), entry(1, 0), entry(1, 1))

    @property
    def a(self) -> ArrayLike:
        return self[0, 0]

    @property
    def b(self) -> ArrayLike:
        return self[0, 1]

    @property
    def c(self) -> ArrayLike:
        return self[1, 0]

    @property
    def d(self) -> ArrayLike:
        return self[1, 1]

    def __repr__(self) -> str:
        return f"<TwoPortMatrix shape={self.data.shape}>"


class TwoPortNetwork:
    """
    Base class of all two-port variants.

        >>> net = TwoPortNetwork.l_section(Load.resistor(1), Load.capacitor(1))
        >>> net.voltage_gain(1.0)
        (0.5-0.5j)
    """

    def abcd(self, angular_frequency: ArrayLike) -> TwoPortMatrix:
        """ABCD matrix at the given angular frequency (scalar or array, rad/s)."""
        w = as_angular_frequency(angular_frequency)
        with np.errstate(all="ignore"):
            return _abcd(self, w)

    def voltage_gain(self, angular_frequency: ArrayLike) -> ArrayLike:
        """
        Open-circuit voltage transfer ratio 1/A.

        A zero A-parameter (resonance) gives an infinite gain instead of an error.
        """
        return reciprocal(self.abcd(angular_frequency).a)

    @staticmethod
    def series(load: Load) -> "SeriesElement":
        """Load inserted in the signal path: [[1, Z], [0, 1]]."""
        return SeriesElement(_check_load(load))

    @staticmethod
    def shunt(load: Load) -> "ShuntElement":
        """Load from the signal path to ground: [[1, 0], [Y, 1]]."""
        return ShuntElement(_check_load(load))

    @staticmethod
    def l_section(series_load: Load, shunt_load: Load) -> "Cascade":
        return TwoPortNetwork.cascade(TwoPortNetwork.series(series_load), TwoPortNetwork.shunt(shunt_load))

    @staticmethod
    def cauer_l_section(series_inductance: float, series_capacitance: float,
                        shunt_inductance: float, shunt_capacitance: float) -> "Cascade":
        """L-section whose legs are each a parallel LC tank."""
        def tank(inductance, capacitance):
            return Load.parallel(Load.capacitor(capacitance), Load.inductor(inductance))

        return TwoPortNetwork.l_section(
            tank(series_inductance, series_capacitance),
            tank(shunt_inductance, shunt_capacitance),
        )

    @staticmethod
    def transformer(turns_ratio: float) -> "Transformer":
        """Ideal n:1 transformer, [[n, 0], [0, 1/n]]."""
        n = float(turns_ratio)
        if not n > 0 or math.isinf(n):
            raise InvalidArgumentError(f"Transformer turns ratio must be > 0 and finite, got {turns_ratio!r}")
        return Transformer(n)

    @staticmethod
    def identity() -> "Transformer":
        return TwoPortNetwork.transformer(1)

    @staticmethod
    def cascade(*networks: "TwoPortNetwork") -> "Cascade":
        """Chain networks in signal order; no networks is the identity."""
        for network in networks:
            if not isinstance(network, TwoPortNetwork):
                raise InvalidArgumentError(f"Expected a TwoPortNetwork, got {type(network).__name__}")
        return Cascade(tuple(networks))


def _check_load(load) -> Load:
    if not isinstance(load, Load):
        raise InvalidArgumentError(f"Expected a Load, got {type(load).__name__}")
    return load


@dataclass(frozen=True)
class SeriesElement(TwoPortNetwork):
    load: Load


@dataclass(frozen=True)
class ShuntElement(TwoPortNetwork):
    load: Load


@dataclass(frozen=True)
class Transformer(TwoPortNetwork):
    turns_ratio: float


@dataclass(frozen=True)
class Cascade(TwoPortNetwork):
    networks: Tuple[TwoPortNetwork, ...] = ()


# ----------------------------------------------------------------------
# ABCD dispatcher. `w` is an already validated float ndarray.
# ----------------------------------------------------------------------
@singledispatch
def _abcd(network: TwoPortNetwork, w: np.ndarray) -> TwoPortMatrix:
    raise InvalidArgumentError(f"Unsupported network type: {type(network).__name__}")


@_abcd.register
def _(network: SeriesElement, w: np.ndarray) -> TwoPortMatrix:
    return TwoPortMatrix.from_entries(1, network.load.impedance(w), 0, np.ones(w.shape))


@_abcd.register
def _(network: ShuntElement, w: np.ndarray) -> TwoPortMatrix:
    return TwoPortMatrix.from_entries(1, 0, network.load.admittance(w), np.ones(w.shape))


@_abcd.register
def _(network: Transformer, w: np.ndarray) -> TwoPortMatrix:
    n = network.turns_ratio
    ones = np.ones(w.shape)
    return TwoPortMatrix.from_entries(n * ones, 0, 0, ones / n)


@_abcd.register
def _(network: Cascade, w: np.ndarray) -> TwoPortMatrix:
    ones = np.ones(w.shape)
    combined = TwoPortMatrix.from_entries(ones, 0, 0, ones)
    for stage in network.networks:
        combined = combined @ _abcd(stage, w)
    return combined
