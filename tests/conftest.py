import numpy as np
import pytest

from components.component import Component
from components.component_value import ComponentValue
from core.network.load import Load
from core.topology.filter import Filter, FilterStage


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def source_load():
    return Load.resistor(50)


@pytest.fixture
def capacitive_load():
    # High-impedance load: 2 pF in parallel with 660 kohm.
    return Load.parallel(Load.capacitor(2e-12), Load.resistor(660e3))


@pytest.fixture
def ladder_filter(source_load, capacitive_load):
    stages = [
        FilterStage.series(
            Component.inductor(ComponentValue.initialize_component(3e-9, 100e-9, 1e-9, True, True))),
        FilterStage.shunt(
            Component.capacitor(ComponentValue.initialize_component(1e-12, 1e-9, 1e-12, True, False))),
    ]
    return Filter(source_load, capacitive_load, stages)


@pytest.fixture
def dummy_logger(caplog):
    caplog.set_level("DEBUG")
    return caplog
