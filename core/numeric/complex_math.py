# core/numeric/complex_math.py
"""
Infinity-safe complex helpers shared by the load and two-port algebra.

Open circuits (infinite impedance) and short circuits (zero impedance) are
legitimate points of the search space, so the helpers here never raise on
them: the reciprocal of zero is infinite and the reciprocal of an infinite
value is zero.
"""
from typing import Union

import numpy as np

from core.exceptions import InvalidArgumentError

ArrayLike = Union[float, complex, np.ndarray]

OPEN_CIRCUIT = complex(np.inf, 0.0)


def as_angular_frequency(angular_frequency: ArrayLike) -> np.ndarray:
    """
    Validate and convert an angular frequency (scalar or array) to a float array.

    Raises:
        InvalidArgumentError: if any entry is negative or NaN.
    """
    w = np.asarray(angular_frequency, dtype=float)
    if np.any(np.isnan(w)) or np.any(w < 0):
        raise InvalidArgumentError(f"Angular frequency must be >= 0, got {angular_frequency!r}")
    return w


def reciprocal(value: ArrayLike) -> ArrayLike:
    """
    Return 1/value element-wise, mapping 0 -> inf and inf -> 0.

    Scalars in give NumPy scalars out, arrays give arrays.
    """
    z = np.asarray(value, dtype=complex)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        out = 1.0 / z
    out = np.where(z == 0, OPEN_CIRCUIT, out)
    out = np.where(np.isinf(z), 0j, out)
    return out[()]


def scalar(value: ArrayLike) -> ArrayLike:
    """Unwrap 0-d arrays to NumPy scalars, leave n-d arrays alone."""
    return np.asarray(value)[()]


def imaginary(x: ArrayLike) -> ArrayLike:
    """
    Return j*x without the 0*inf = NaN artefact of complex multiplication.
    """
    x = np.asarray(x, dtype=float)
    out = np.zeros(x.shape, dtype=complex)
    out.imag = x
    return out[()]


def _real_product(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    return np.where((x == 0) | (y == 0), 0.0, x * y)


def multiply(x: ArrayLike, y: ArrayLike) -> ArrayLike:
    """
    Element-wise complex product in which 0 * inf counts as 0.

    A short (zero impedance) in front of an open (infinite impedance) then
    stays a short or an open instead of turning into NaN. The rule is
    applied to each of the four real products, so (50+0j) * (inf+0j) is
    inf+0j rather than inf+nanj.
    """
    x = np.asarray(x, dtype=complex)
    y = np.asarray(y, dtype=complex)
    with np.errstate(all="ignore"):
        real = _real_product(x.real, y.real) - _real_product(x.imag, y.imag)
        imag = _real_product(x.real, y.imag) + _real_product(x.imag, y.real)
    out = np.empty(np.broadcast(x, y).shape, dtype=complex)
    out.real = real
    out.imag = imag
    return out[()]
