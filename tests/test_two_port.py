import numpy as np
import pytest

from core.exceptions import InvalidArgumentError
from core.network.load import Load
from core.network.two_port import TwoPortMatrix, TwoPortNetwork


def test_series_connection_gain():
    gain = TwoPortNetwork.series(Load.resistor(50)).voltage_gain(2)
    assert gain == complex(1, 0)


def test_shunt_connection_gain():
    gain = TwoPortNetwork.shunt(Load.capacitor(0.01)).voltage_gain(4)
    assert gain == complex(1, 0)


def test_series_and_shunt_matrices():
    Z = complex(3, 4)
    M = TwoPortNetwork.series(Load.series(Load.resistor(3), Load.inductor(2))).abcd(2)
    np.testing.assert_allclose(M.data, [[1, Z], [0, 1]])
    M = TwoPortNetwork.shunt(Load.resistor(4)).abcd(2)
    np.testing.assert_allclose(M.data, [[1, 0], [0.25, 1]])


def test_l_section():
    gain = TwoPortNetwork.l_section(Load.resistor(1), Load.capacitor(1)).voltage_gain(1)
    expected = 1 / (1 + 1j * 1)
    np.testing.assert_allclose(gain, expected)
    np.testing.assert_allclose(gain, complex(0.5, -0.5))


@pytest.mark.parametrize("w", [0.0, 1.0, 69.0, 1e9])
def test_identity(w):
    assert TwoPortNetwork.identity().voltage_gain(w) == complex(1, 0)
    assert TwoPortNetwork.cascade().voltage_gain(w) == complex(1, 0)


@pytest.mark.parametrize("n", [0.5, 2.0, 10.0])
def test_transformer(n):
    gain = TwoPortNetwork.transformer(n).voltage_gain(69)
    np.testing.assert_allclose(gain, complex(1 / n, 0))


def test_transformer_ratio_two():
    gain = TwoPortNetwork.transformer(2).voltage_gain(69)
    assert gain.real == 0.5
    assert gain.imag == 0


@pytest.mark.parametrize("ratio", [0, -1, float("nan"), float("inf")])
def test_transformer_rejects_bad_ratio(ratio):
    with pytest.raises(InvalidArgumentError):
        TwoPortNetwork.transformer(ratio)


def test_cascade_is_associative():
    a = TwoPortNetwork.series(Load.inductor(3e-9))
    b = TwoPortNetwork.shunt(Load.capacitor(2e-12))
    c = TwoPortNetwork.transformer(3)
    w = np.linspace(1e8, 1e10, 7)
    left = TwoPortNetwork.cascade(TwoPortNetwork.cascade(a, b), c).abcd(w).data
    right = TwoPortNetwork.cascade(a, TwoPortNetwork.cascade(b, c)).abcd(w).data
    flat = TwoPortNetwork.cascade(a, b, c).abcd(w).data
    np.testing.assert_allclose(left, right)
    np.testing.assert_allclose(left, flat)


def test_cascade_order_matters():
    series = TwoPortNetwork.series(Load.resistor(1))
    shunt = TwoPortNetwork.shunt(Load.resistor(1))
    assert TwoPortNetwork.cascade(series, shunt).voltage_gain(1) == 0.5
    assert TwoPortNetwork.cascade(shunt, series).voltage_gain(1) == 1


def test_cauer_l_section_matches_tank_l_section():
    Ls, Cs, Lp, Cp = 1e-6, 1e-9, 2e-6, 3e-9
    cauer = TwoPortNetwork.cauer_l_section(Ls, Cs, Lp, Cp)
    manual = TwoPortNetwork.l_section(
        Load.parallel(Load.capacitor(Cs), Load.inductor(Ls)),
        Load.parallel(Load.capacitor(Cp), Load.inductor(Lp)),
    )
    w = np.array([1e5, 1e6, 1e7])
    np.testing.assert_allclose(cauer.voltage_gain(w), manual.voltage_gain(w))


def test_resonance_gives_infinite_gain():
    # A = 1 + Z*Y = 1 + (j)(j) = 0 at w = 1
    network = TwoPortNetwork.l_section(Load.inductor(1), Load.capacitor(1))
    assert network.abcd(1).a == 0
    assert np.isinf(network.voltage_gain(1))


def test_shorted_shunt_element_blocks_signal():
    network = TwoPortNetwork.l_section(Load.resistor(50), Load.inductor(0))
    assert network.voltage_gain(1e9) == 0


def test_open_series_element_blocks_signal():
    network = TwoPortNetwork.l_section(Load.capacitor(0), Load.resistor(50))
    assert network.voltage_gain(1e9) == 0


def test_short_between_terminations_blocks_signal():
    network = TwoPortNetwork.cascade(
        TwoPortNetwork.series(Load.resistor(50)),
        TwoPortNetwork.shunt(Load.inductor(0)),
        TwoPortNetwork.shunt(Load.resistor(50)),
    )
    gain = network.voltage_gain(np.array([1e8, 1e9]))
    assert not np.any(np.isnan(gain))
    np.testing.assert_array_equal(gain, [0, 0])


def test_vectorized_abcd_shape():
    w = np.linspace(0, 10, 5)
    network = TwoPortNetwork.l_section(Load.resistor(1), Load.capacitor(1))
    M = network.abcd(w)
    assert M.data.shape == (5, 2, 2)
    np.testing.assert_allclose(network.voltage_gain(w), 1 / (1 + 1j * w))
    np.testing.assert_allclose(M.a, [network.abcd(x).a for x in w])


def test_matrix_indexing():
    M = TwoPortMatrix.from_entries(1, 2, 3, 4)
    assert (M.a, M.b, M.c, M.d) == (1, 2, 3, 4)
    assert M[1, 0] == 3
    with pytest.raises(InvalidArgumentError):
        M[2, 0]
    with pytest.raises(InvalidArgumentError):
        M[0, -1]
    with pytest.raises(InvalidArgumentError):
        M[True, 0]
    with pytest.raises(InvalidArgumentError):
        M[0]
    with pytest.raises(InvalidArgumentError):
        M[0, 0, 0]


def test_matrix_product():
    A = TwoPortMatrix.from_entries(1, 2, 3, 4)
    B = TwoPortMatrix.from_entries(0, 1, 1, 0)
    np.testing.assert_allclose((A @ B).data, [[2, 1], [4, 3]])


def test_negative_frequency_rejected():
    with pytest.raises(InvalidArgumentError):
        TwoPortNetwork.identity().voltage_gain(-1)


def test_constructors_reject_wrong_types():
    with pytest.raises(InvalidArgumentError):
        TwoPortNetwork.series(50)
    with pytest.raises(InvalidArgumentError):
        TwoPortNetwork.cascade(TwoPortNetwork.identity(), Load.resistor(1))
