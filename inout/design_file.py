# inout/design_file.py
"""
Load and validate YAML design files describing a ladder optimization problem.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np
import yaml
from cerberus import Validator

from components.component import Component, ComponentKind
from components.component_value import ComponentValue
from core.exceptions import ConfigError, LadderSynthError
from core.network.load import Load
from core.topology.filter import Filter, FilterStage, StageRole
from optimization.objective import MatchingNetworkObjective, make_matching_network_objective
from utils.logging_config import get_logger
from utils.units import parse_quantity

logger = get_logger(__name__)

QUANTITY = {"type": ["string", "number"]}

TERMINATION_SCHEMA = {
    "type": "dict", "required": True,
    "schema": {
        "resistance":  {**QUANTITY, "required": False},
        "capacitance": {**QUANTITY, "required": False},
        "inductance":  {**QUANTITY, "required": False},
    },
}

DESIGN_SCHEMA: Dict[str, Any] = {
    "source": TERMINATION_SCHEMA,
    "load": TERMINATION_SCHEMA,

    "stages": {
        "type": "list", "required": True,
        "schema": {
            "type": "dict", "schema": {
                "role": {"type": "string", "required": True, "allowed": ["series", "shunt"]},
                "components": {
                    "type": "list", "required": True, "minlength": 1,
                    "schema": {
                        "type": "dict", "schema": {
                            "kind":    {"type": "string", "required": True,
                                        "allowed": ["resistor", "capacitor", "inductor"]},
                            "initial": {**QUANTITY, "required": False},
                            "value":   {**QUANTITY, "required": False},
                            "min":     {**QUANTITY, "required": False},
                            "max":     {**QUANTITY, "required": False},
                            "allow_zero":     {"type": "boolean", "required": False, "default": False},
                            "allow_infinite": {"type": "boolean", "required": False, "default": False},
                        },
                    },
                },
            },
        },
    },

    "objective": {
        "type": "dict", "required": True,
        "schema": {
            "min_frequency":         {**QUANTITY, "required": True},
            "max_frequency":         {**QUANTITY, "required": True},
            "max_gain_deviation_db": {"type": "number", "required": True, "min": 0},
            "samples":               {"type": "integer", "required": False, "min": 1, "default": 20},
        },
    },

    "annealing": {
        "type": "dict", "required": False,
        "default": {},
        "schema": {
            "initial_temperature": {"type": "number", "required": False, "default": 100},
            "cooling_rate":        {"type": "number", "required": False, "default": 0.001},
            "iterations":          {"type": "integer", "required": False, "min": 0, "default": 10000},
            "seed":                {"type": "integer", "required": False, "nullable": True, "default": None},
        },
    },
}

_TERMINATION_UNITS = {
    "resistance": (ComponentKind.RESISTOR, "ohm"),
    "capacitance": (ComponentKind.CAPACITOR, "farad"),
    "inductance": (ComponentKind.INDUCTOR, "henry"),
}


@dataclass
class AnnealingSettings:
    initial_temperature: float = 100.0
    cooling_rate: float = 0.001
    iterations: int = 10000
    seed: Optional[int] = None


@dataclass
class Design:
    initial_filter: Filter
    objective: MatchingNetworkObjective
    annealing: AnnealingSettings


def _termination(doc: Dict[str, Any], name: str) -> Load:
    parts: List[Load] = []
    for key, (kind, unit) in _TERMINATION_UNITS.items():
        if key in doc:
            parts.append(kind.make_load(parse_quantity(doc[key], unit)))
    if not parts:
        raise ConfigError(f"Termination '{name}' needs at least one of {', '.join(_TERMINATION_UNITS)}")
    return parts[0] if len(parts) == 1 else Load.parallel(*parts)


def _component(doc: Dict[str, Any], rng: np.random.Generator) -> Component:
    kind = ComponentKind.from_name(doc["kind"])
    unit = kind.unit
    if "value" in doc:
        return Component(kind, ComponentValue.fixed(parse_quantity(doc["value"], unit)))
    if "min" not in doc or "max" not in doc:
        raise ConfigError(f"{kind.value} needs either 'value' or both 'min' and 'max'")
    min_value = parse_quantity(doc["min"], unit)
    max_value = parse_quantity(doc["max"], unit)
    if "initial" in doc:
        value = ComponentValue.initialize_component(
            parse_quantity(doc["initial"], unit), max_value, min_value,
            doc.get("allow_zero", False), doc.get("allow_infinite", False),
        )
    else:
        value = ComponentValue.randomize_component(
            max_value, min_value, doc.get("allow_zero", False), doc.get("allow_infinite", False), rng=rng,
        )
    return Component(kind, value)


def parse_design(raw: Any, rng: Union[None, int, np.random.Generator] = None) -> Design:
    """
    Validate an already loaded design document and build the problem.

    `rng` seeds randomized initial values; when omitted the design's own
    annealing seed is used.
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"A design document must be a mapping, got {type(raw).__name__}")
    validator = Validator(DESIGN_SCHEMA, allow_unknown=False)
    if not validator.validate(raw):
        raise ConfigError(f"Design schema violations: {validator.errors}")
    doc = validator.document

    settings = AnnealingSettings(**doc.get("annealing") or {})
    if rng is None:
        rng = settings.seed
    rng = np.random.default_rng(rng) if not isinstance(rng, np.random.Generator) else rng

    try:
        stages = [
            FilterStage(StageRole.from_name(sdoc["role"]),
                        tuple(_component(cdoc, rng) for cdoc in sdoc["components"]))
            for sdoc in doc["stages"]
        ]
        initial_filter = Filter(_termination(doc["source"], "source"), _termination(doc["load"], "load"), stages)

        odoc = doc["objective"]
        objective = make_matching_network_objective(
            parse_quantity(odoc["min_frequency"], "hertz"),
            parse_quantity(odoc["max_frequency"], "hertz"),
            float(odoc["max_gain_deviation_db"]),
            odoc["samples"],
        )
    except ConfigError:
        raise
    except LadderSynthError as exc:
        raise ConfigError(f"Invalid design: {exc}")

    return Design(initial_filter, objective, settings)


def load_design(path: Union[str, Path], rng: Union[None, int, np.random.Generator] = None) -> Design:
    """
    Read a YAML design file, validate its schema and build the problem.

    Raises:
        ConfigError: If the file cannot be read or fails validation.
    """
    path = Path(path)
    try:
        raw = yaml.safe_load(path.read_text())
    except Exception as exc:
        raise ConfigError(f"Failed to read design YAML '{path}': {exc}")

    design = parse_design(raw, rng)
    logger.info("Loaded design '%s' with %d stage(s)", path, len(design.initial_filter.stages))
    return design
