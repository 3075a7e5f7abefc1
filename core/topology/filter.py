# core/topology/filter.py
"""
Ladder filters built from series and shunt stages.

Stages and filters are immutable. update() perturbs every component by one
quantization step, independently, and returns a brand new object graph; the
feasible-value tables are shared, everything else is rebuilt.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

import numpy as np

from components.component import Component
from components.component_value import as_generator
from core.exceptions import InvalidArgumentError
from core.network.load import Load
from core.network.two_port import TwoPortNetwork


class StageRole(Enum):
    SERIES = "series"
    SHUNT = "shunt"

    @classmethod
    def from_name(cls, name: str) -> "StageRole":
        try:
            return cls(name.lower())
        except ValueError:
            raise InvalidArgumentError(f"Unknown stage role: '{name}'")


@dataclass(frozen=True)
class FilterStage:
    """
    Components combined in parallel and inserted into the ladder as one leg.

    Attributes:
        role: Whether the leg sits in the signal path (series) or to ground (shunt).
        components: Parts of the leg; they are wired in parallel with each other.
    """
    role: StageRole
    components: Tuple[Component, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.role, StageRole):
            raise InvalidArgumentError(f"Expected a StageRole, got {self.role!r}")
        object.__setattr__(self, "components", tuple(self.components))
        for component in self.components:
            if not isinstance(component, Component):
                raise InvalidArgumentError(f"Expected a Component, got {type(component).__name__}")

    @classmethod
    def series(cls, *components: Component) -> "FilterStage":
        return cls(StageRole.SERIES, components)

    @classmethod
    def shunt(cls, *components: Component) -> "FilterStage":
        return cls(StageRole.SHUNT, components)

    def load(self) -> Load:
        return Load.parallel(*(component.load() for component in self.components))

    @property
    def network(self) -> TwoPortNetwork:
        if self.role is StageRole.SERIES:
            return TwoPortNetwork.series(self.load())
        return TwoPortNetwork.shunt(self.load())

    def update(self, rng: Optional[np.random.Generator] = None) -> "FilterStage":
        rng = as_generator(rng)
        return FilterStage(self.role, tuple(component.update(rng) for component in self.components))

    def __str__(self) -> str:
        return f"{self.role.value}: " + ", ".join(str(component) for component in self.components)


@dataclass(frozen=True)
class Filter:
    """
    A ladder between a source and a load termination.

    The network is series(input_load), the stages in order, then
    shunt(output_load). Terminations never change under update().
    """
    input_load: Load
    output_load: Load
    stages: Tuple[FilterStage, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.input_load, Load) or not isinstance(self.output_load, Load):
            raise InvalidArgumentError("Filter terminations must be Load instances")
        object.__setattr__(self, "stages", tuple(self.stages))
        for stage in self.stages:
            if not isinstance(stage, FilterStage):
                raise InvalidArgumentError(f"Expected a FilterStage, got {type(stage).__name__}")

    @property
    def network(self) -> TwoPortNetwork:
        return TwoPortNetwork.cascade(
            TwoPortNetwork.series(self.input_load),
            *(stage.network for stage in self.stages),
            TwoPortNetwork.shunt(self.output_load),
        )

    def update(self, rng: Optional[np.random.Generator] = None) -> "Filter":
        rng = as_generator(rng)
        return Filter(self.input_load, self.output_load, tuple(stage.update(rng) for stage in self.stages))

    def components(self) -> Iterable[Component]:
        for stage in self.stages:
            yield from stage.components

    def __str__(self) -> str:
        return "\n".join(str(stage) for stage in self.stages)
