# core/network/load.py
"""
Passive one-port loads evaluated as a function of angular frequency.

A load is an immutable tagged value (resistor, capacitor, inductor, series or
parallel combination) evaluated by a single dispatcher, so loads can be
compared, hashed, pickled and printed.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from functools import singledispatch
from typing import Tuple

import numpy as np

from core.exceptions import InvalidArgumentError
from core.numeric.complex_math import ArrayLike, as_angular_frequency, imaginary, reciprocal


def _check_element_value(kind: str, value: float) -> float:
    value = float(value)
    if math.isnan(value) or value < 0:
        raise InvalidArgumentError(f"{kind} value must be >= 0, got {value!r}")
    return value


class Load:
    """
    Base class of all load variants.

    Use the factory methods rather than instantiating the variants directly:

        >>> z = Load.series(Load.resistor(50), Load.inductor(3e-9))
        >>> z.impedance(2 * np.pi * 1e9)
    """

    def impedance(self, angular_frequency: ArrayLike) -> ArrayLike:
        """Complex impedance at the given angular frequency (scalar or array, rad/s)."""
        w = as_angular_frequency(angular_frequency)
        with np.errstate(all="ignore"):
            return np.asarray(_impedance(self, w), dtype=complex)[()]

    def admittance(self, angular_frequency: ArrayLike) -> ArrayLike:
        """Complex admittance, the reciprocal of :meth:`impedance`."""
        return reciprocal(self.impedance(angular_frequency))

    @staticmethod
    def resistor(resistance: float) -> "Resistor":
        return Resistor(_check_element_value("Resistance", resistance))

    @staticmethod
    def capacitor(capacitance: float) -> "Capacitor":
        return Capacitor(_check_element_value("Capacitance", capacitance))

    @staticmethod
    def inductor(inductance: float) -> "Inductor":
        return Inductor(_check_element_value("Inductance", inductance))

    @staticmethod
    def series(*loads: "Load") -> "SeriesLoad":
        """Loads in series; impedances add. No loads is a short circuit."""
        return SeriesLoad(_check_loads(loads))

    @staticmethod
    def parallel(*loads: "Load") -> "ParallelLoad":
        """Loads in parallel; admittances add. No loads is an open circuit."""
        return ParallelLoad(_check_loads(loads))


def _check_loads(loads) -> Tuple[Load, ...]:
    for load in loads:
        if not isinstance(load, Load):
            raise InvalidArgumentError(f"Expected a Load, got {type(load).__name__}")
    return tuple(loads)


@dataclass(frozen=True)
class Resistor(Load):
    resistance: float


@dataclass(frozen=True)
class Capacitor(Load):
    capacitance: float


@dataclass(frozen=True)
class Inductor(Load):
    inductance: float


@dataclass(frozen=True)
class SeriesLoad(Load):
    loads: Tuple[Load, ...] = ()


@dataclass(frozen=True)
class ParallelLoad(Load):
    loads: Tuple[Load, ...] = ()


# ----------------------------------------------------------------------
# Impedance dispatcher. `w` is an already validated float ndarray.
# ----------------------------------------------------------------------
@singledispatch
def _impedance(load: Load, w: np.ndarray):
    raise InvalidArgumentError(f"Unsupported load type: {type(load).__name__}")


@_impedance.register
def _(load: Resistor, w: np.ndarray):
    return np.full(w.shape, load.resistance, dtype=complex)


@_impedance.register
def _(load: Capacitor, w: np.ndarray):
    # 1/(jwC); an empty capacitor or DC gives an open circuit.
    susceptance = np.where(w == 0, 0.0, w * load.capacitance)
    return reciprocal(imaginary(susceptance))


@_impedance.register
def _(load: Inductor, w: np.ndarray):
    reactance = np.where(w == 0, 0.0, w * load.inductance)
    return imaginary(reactance)


@_impedance.register
def _(load: SeriesLoad, w: np.ndarray):
    total = np.zeros(w.shape, dtype=complex)
    for child in load.loads:
        total = total + _impedance(child, w)
    return total


@_impedance.register
def _(load: ParallelLoad, w: np.ndarray):
    total = np.zeros(w.shape, dtype=complex)
    for child in load.loads:
        total = total + reciprocal(_impedance(child, w))
    return reciprocal(total)
