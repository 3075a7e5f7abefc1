# components/component_value.py
"""
Quantized component values drawn from the E24 preferred-number series.

A ComponentValue is an index into an ascending table of feasible values.
Perturbing it moves the index one step to a random neighbour and returns a
new value object that shares the same (read-only) table.
"""
from __future__ import annotations

import bisect
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from core.exceptions import InvalidArgumentError

E24_VALUES: Tuple[float, ...] = (
    1.0, 1.1, 1.2, 1.3, 1.5, 1.6, 1.8, 2.0, 2.2, 2.4, 2.7, 3.0,
    3.3, 3.6, 3.9, 4.3, 4.7, 5.1, 5.6, 6.2, 6.8, 7.5, 8.2, 9.1,
)


def _check_range(min_value: float, max_value: float) -> None:
    if not (min_value > 0 and max_value >= min_value) or math.isinf(max_value):
        raise InvalidArgumentError(
            f"Require 0 < min <= max < inf, got min={min_value!r}, max={max_value!r}"
        )


def feasible_preferred_values(min_value: float, max_value: float) -> Tuple[float, ...]:
    """
    Every E24 value times a power of ten that lies in [min_value, max_value], ascending.

    Raises:
        InvalidArgumentError: unless 0 < min_value <= max_value.
    """
    _check_range(min_value, max_value)
    first_decade = math.floor(math.log10(min_value))
    last_decade = math.ceil(math.log10(max_value))
    values = []
    for decade in range(first_decade, last_decade + 1):
        for mantissa in E24_VALUES:
            # Built from its decimal spelling so 2.7e-12 is exactly the float literal 2.7e-12.
            candidate = float(f"{mantissa}e{decade}")
            if min_value <= candidate <= max_value:
                values.append(candidate)
    return tuple(sorted(values))


def nearest_neighbor_index(value: float, sorted_values: Sequence[float]) -> int:
    """
    Index of the entry of `sorted_values` closest to `value`.

    Values below the table map to index 0 and values above it to the last
    index. Between two entries a tie goes to the upper one.
    """
    if len(sorted_values) == 0:
        raise InvalidArgumentError("Cannot pick a neighbour from an empty table")
    upper = bisect.bisect_left(sorted_values, value)
    if upper == 0:
        return 0
    if upper == len(sorted_values):
        return upper - 1
    if sorted_values[upper] == value:
        return upper
    lower = upper - 1
    if abs(value - sorted_values[upper]) <= abs(value - sorted_values[lower]):
        return upper
    return lower


def as_generator(rng=None) -> np.random.Generator:
    """Accept a Generator, a seed or None and return a Generator."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


@dataclass(frozen=True)
class ComponentValue:
    """
    A value quantized to `feasible_values[index]`.

    Attributes:
        feasible_values: Strictly ascending table of allowed values, shared between
            a value and all of its perturbed neighbours.
        index: Position of the current value in the table.
    """
    feasible_values: Tuple[float, ...]
    index: int

    def __post_init__(self) -> None:
        if len(self.feasible_values) == 0:
            raise InvalidArgumentError("A component value needs at least one feasible value")
        if not all(a < b for a, b in zip(self.feasible_values, self.feasible_values[1:])):
            raise InvalidArgumentError(
                f"Feasible values must be strictly ascending, got {self.feasible_values!r}"
            )
        if isinstance(self.index, bool) or not isinstance(self.index, (int, np.integer)):
            raise InvalidArgumentError(f"Index must be an integer, got {self.index!r}")
        if not 0 <= self.index < len(self.feasible_values):
            raise InvalidArgumentError(
                f"Index {self.index} outside table of {len(self.feasible_values)} values"
            )

    @property
    def value(self) -> float:
        return self.feasible_values[self.index]

    def update(self, rng: Optional[np.random.Generator] = None) -> "ComponentValue":
        """Return the value one table step away, in a random direction."""
        return ComponentValue(self.feasible_values, self._next_index(as_generator(rng)))

    def _next_index(self, rng: np.random.Generator) -> int:
        last = len(self.feasible_values) - 1
        if last == 0:
            return 0
        if self.index == 0:
            return 1
        if self.index == last:
            return last - 1
        return self.index + (1 if rng.random() < 0.5 else -1)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------
    @classmethod
    def fixed(cls, value: float) -> "ComponentValue":
        """A value that never moves under update()."""
        value = float(value)
        if math.isnan(value) or value < 0:
            raise InvalidArgumentError(f"Component value must be >= 0, got {value!r}")
        return cls((value,), 0)

    @classmethod
    def initialize_component(cls, initial_value: float, max_value: float, min_value: float,
                             allow_zero: bool = False, allow_infinite: bool = False) -> "ComponentValue":
        """
        Build the feasible table for [min_value, max_value] and snap `initial_value` onto it.

        Args:
            initial_value: Starting value, >= 0.
            max_value: Largest finite feasible value.
            min_value: Smallest nonzero feasible value, > 0.
            allow_zero: Prepend 0 (e.g. a shorted inductor or removed capacitor).
            allow_infinite: Append +inf (e.g. an open inductor).
        """
        if math.isnan(initial_value) or initial_value < 0:
            raise InvalidArgumentError(f"Initial value must be >= 0, got {initial_value!r}")
        values = feasible_preferred_values(min_value, max_value)
        if allow_zero:
            values = (0.0,) + values
        if allow_infinite:
            values = values + (math.inf,)
        if not values:
            raise InvalidArgumentError(
                f"No E24 value lies in [{min_value!r}, {max_value!r}]"
            )
        return cls(values, nearest_neighbor_index(initial_value, values))

    @classmethod
    def randomize_component(cls, max_value: float, min_value: float,
                            allow_zero: bool = False, allow_infinite: bool = False,
                            rng: Optional[np.random.Generator] = None) -> "ComponentValue":
        """Like initialize_component with an initial value drawn uniformly from [min_value, max_value)."""
        _check_range(min_value, max_value)
        initial_value = as_generator(rng).random() * (max_value - min_value) + min_value
        return cls.initialize_component(initial_value, max_value, min_value, allow_zero, allow_infinite)

    def __str__(self) -> str:
        return f"{self.value:g}"
