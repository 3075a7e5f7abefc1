import math

import numpy as np
import pytest

from components.component_value import (
    E24_VALUES,
    ComponentValue,
    feasible_preferred_values,
    nearest_neighbor_index,
)
from core.exceptions import InvalidArgumentError


def test_e24_table():
    assert len(E24_VALUES) == 24
    assert list(E24_VALUES) == sorted(E24_VALUES)


def test_feasible_preferred_values_one_decade():
    values = feasible_preferred_values(1.0, 10.0)
    assert len(values) > 0
    assert all(1.0 <= v <= 10.0 for v in values)
    assert all(a < b for a, b in zip(values, values[1:]))
    assert values[0] == 1.0
    assert values[-1] == 10.0
    assert len(values) == 25
    assert all(nearest_neighbor_index(v, values) == i for i, v in enumerate(values))


def test_feasible_preferred_values_span_decades():
    values = feasible_preferred_values(1e-12, 1e-9)
    assert values[0] == 1e-12
    assert values[-1] == 1e-9
    assert 2.7e-12 in values
    assert 4.7e-10 in values
    assert len(values) == 3 * 24 + 1
    assert all(a < b for a, b in zip(values, values[1:]))


def test_feasible_preferred_values_partial_decade():
    assert feasible_preferred_values(2.0, 3.0) == (2.0, 2.2, 2.4, 2.7, 3.0)


def test_feasible_preferred_values_may_be_empty():
    assert feasible_preferred_values(9.2, 9.9) == ()


@pytest.mark.parametrize("min_value, max_value", [(0, 1), (-1, 1), (2, 1), (1, float("inf"))])
def test_feasible_preferred_values_bad_range(min_value, max_value):
    with pytest.raises(InvalidArgumentError):
        feasible_preferred_values(min_value, max_value)


def test_nearest_neighbor_index():
    assert nearest_neighbor_index(2.5, [2.2, 2.7, 3.3]) == 1


@pytest.mark.parametrize("value, expected", [
    (0.0, 0),      # below the table
    (2.2, 0),
    (2.4, 0),      # closer to 2.2
    (2.9, 1),
    (3.01, 2),
    (3.3, 2),
    (100.0, 2),    # above the table
])
def test_nearest_neighbor_index_cases(value, expected):
    assert nearest_neighbor_index(value, [2.2, 2.7, 3.3]) == expected


def test_nearest_neighbor_index_with_infinity():
    table = (0.0, 1.0, 2.0, math.inf)
    assert nearest_neighbor_index(1e6, table) == 2
    assert nearest_neighbor_index(math.inf, table) == 3
    assert nearest_neighbor_index(0.0, table) == 0


def test_nearest_neighbor_index_empty():
    with pytest.raises(InvalidArgumentError):
        nearest_neighbor_index(1.0, [])


def test_initialize_component():
    component = ComponentValue.initialize_component(2.7, 10.0, 1.0)
    assert component.value == 2.7
    assert component.value in component.feasible_values


def test_initialize_component_snaps_to_nearest():
    assert ComponentValue.initialize_component(2.6, 10.0, 1.0).value == 2.7
    assert ComponentValue.initialize_component(2.5, 10.0, 1.0).value == 2.4
    assert ComponentValue.initialize_component(0.1, 10.0, 1.0).value == 1.0
    assert ComponentValue.initialize_component(50.0, 10.0, 1.0).value == 10.0


def test_initialize_component_zero_and_infinite():
    component = ComponentValue.initialize_component(0.0, 100e-9, 1e-9, allow_zero=True, allow_infinite=True)
    assert component.value == 0.0
    assert component.feasible_values[0] == 0.0
    assert component.feasible_values[-1] == math.inf
    assert component.feasible_values[1] == 1e-9
    assert ComponentValue.initialize_component(3e-9, 100e-9, 1e-9, True, True).value == 3e-9


@pytest.mark.parametrize("args", [
    (-1.0, 10.0, 1.0),
    (1.0, 10.0, 0.0),
    (1.0, 1.0, 10.0),
    (float("nan"), 10.0, 1.0),
])
def test_initialize_component_rejects_bad_arguments(args):
    with pytest.raises(InvalidArgumentError):
        ComponentValue.initialize_component(*args)


def test_constructor_validates_index():
    with pytest.raises(InvalidArgumentError):
        ComponentValue((1.0, 2.0), 2)
    with pytest.raises(InvalidArgumentError):
        ComponentValue((), 0)
    with pytest.raises(InvalidArgumentError):
        ComponentValue((3.0, 1.0, 2.0), 0)
    with pytest.raises(InvalidArgumentError):
        ComponentValue((1.0, 1.0, 2.0), 0)
    with pytest.raises(InvalidArgumentError):
        ComponentValue((1.0, 2.0), 0.5)
    with pytest.raises(InvalidArgumentError):
        ComponentValue((1.0, 2.0), True)
    assert ComponentValue((1.0, 2.0), np.int64(1)).value == 2.0


def test_update_returns_new_neighbor(rng):
    component = ComponentValue.initialize_component(2.7, 10.0, 1.0)
    updated = component.update(rng)
    assert updated is not component
    assert updated.value in updated.feasible_values
    assert updated.feasible_values is component.feasible_values
    assert abs(updated.index - component.index) == 1
    # the original is untouched
    assert component.value == 2.7


def test_update_interior_moves_one_step(rng):
    component = ComponentValue.initialize_component(4.7, 10.0, 1.0)
    seen = set()
    for _ in range(200):
        updated = component.update(rng)
        assert abs(updated.index - component.index) == 1
        seen.add(updated.index)
    assert seen == {component.index - 1, component.index + 1}


def test_update_at_boundaries(rng):
    table = feasible_preferred_values(1.0, 10.0)
    low = ComponentValue(table, 0)
    high = ComponentValue(table, len(table) - 1)
    for _ in range(20):
        assert low.update(rng).index == 1
        assert high.update(rng).index == len(table) - 2


def test_single_value_table_is_fixed_point(rng):
    component = ComponentValue.fixed(50.0)
    assert component.update(rng) == component
    assert component.update(rng).value == 50.0
    with pytest.raises(InvalidArgumentError):
        ComponentValue.fixed(-1.0)


def test_update_is_reproducible_with_seed():
    component = ComponentValue.initialize_component(4.7, 1000.0, 1.0)

    def walk(seed):
        rng = np.random.default_rng(seed)
        value = component
        path = []
        for _ in range(50):
            value = value.update(rng)
            path.append(value.index)
        return path

    assert walk(7) == walk(7)


def test_randomize_component(rng):
    for _ in range(50):
        component = ComponentValue.randomize_component(1e-9, 1e-12, rng=rng)
        assert 1e-12 <= component.value <= 1e-9
        assert component.value in component.feasible_values


def test_randomize_component_bad_range(rng):
    with pytest.raises(InvalidArgumentError):
        ComponentValue.randomize_component(1.0, 10.0, rng=rng)


def test_component_value_is_immutable():
    component = ComponentValue.initialize_component(2.7, 10.0, 1.0)
    with pytest.raises(AttributeError):
        component.index = 3


def test_nearest_neighbor_index_tie_goes_up():
    assert nearest_neighbor_index(1.5, [1.0, 2.0, 3.0]) == 1
    assert nearest_neighbor_index(2.5, [1.0, 2.0, 3.0]) == 2
