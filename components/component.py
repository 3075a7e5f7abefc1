# components/component.py
"""
Named passive parts: a quantized value plus the kind of load it realizes.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from components.component_value import ComponentValue
from core.exceptions import InvalidArgumentError
from core.network.load import Load
from utils.units import format_quantity


class ComponentKind(Enum):
    RESISTOR = "resistor"
    CAPACITOR = "capacitor"
    INDUCTOR = "inductor"

    @property
    def unit(self) -> str:
        return _UNITS[self]

    def make_load(self, value: float) -> Load:
        if self is ComponentKind.RESISTOR:
            return Load.resistor(value)
        if self is ComponentKind.CAPACITOR:
            return Load.capacitor(value)
        return Load.inductor(value)

    @classmethod
    def from_name(cls, name: str) -> "ComponentKind":
        try:
            return cls(name.lower())
        except ValueError:
            raise InvalidArgumentError(f"Unknown component kind: '{name}'")


_UNITS = {
    ComponentKind.RESISTOR: "ohm",
    ComponentKind.CAPACITOR: "farad",
    ComponentKind.INDUCTOR: "henry",
}


@dataclass(frozen=True)
class Component:
    kind: ComponentKind
    component_value: ComponentValue

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ComponentKind):
            raise InvalidArgumentError(f"Expected a ComponentKind, got {self.kind!r}")
        if not isinstance(self.component_value, ComponentValue):
            raise InvalidArgumentError(f"Expected a ComponentValue, got {self.component_value!r}")

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def value(self) -> float:
        return self.component_value.value

    def load(self) -> Load:
        return self.kind.make_load(self.value)

    def update(self, rng: Optional[np.random.Generator] = None) -> "Component":
        return Component(self.kind, self.component_value.update(rng))

    @classmethod
    def resistor(cls, value: ComponentValue) -> "Component":
        return cls(ComponentKind.RESISTOR, value)

    @classmethod
    def capacitor(cls, value: ComponentValue) -> "Component":
        return cls(ComponentKind.CAPACITOR, value)

    @classmethod
    def inductor(cls, value: ComponentValue) -> "Component":
        return cls(ComponentKind.INDUCTOR, value)

    def __str__(self) -> str:
        return f"{self.name}: {format_quantity(self.value, self.kind.unit)}"
