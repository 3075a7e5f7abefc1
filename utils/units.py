# utils/units.py
import math

import pint

from core.exceptions import ConfigError

ureg = pint.UnitRegistry()


def parse_quantity(expr, unit: str) -> float:
    """
    Parse a number or a unit string and return its magnitude in `unit`.

    :param expr: A plain number (taken to be in `unit`) or a string such as "3 nH", "100 MHz", "50 ohm".
    :param unit: Target unit, e.g. "henry", "hertz", "ohm", "farad".
    :return: The magnitude as a float.
    :raises ConfigError: If the expression cannot be parsed or has the wrong dimension.
    """
    if isinstance(expr, (int, float)) and not isinstance(expr, bool):
        return float(expr)
    try:
        quantity = ureg.Quantity(str(expr))
        if quantity.unitless:
            return float(quantity.magnitude)
        return float(quantity.to(unit).magnitude)
    except Exception as e:
        raise ConfigError(f"Could not parse '{expr}' as a quantity in {unit}: {e}")


def format_quantity(value: float, unit: str) -> str:
    """
    Format a value with an SI prefix, e.g. 3e-09 henry -> "3 nH".
    """
    symbol = format(ureg.Unit(unit), "~")
    if value == 0 or math.isinf(value) or math.isnan(value):
        return f"{value:g} {symbol}"
    quantity = ureg.Quantity(value, unit).to_compact()
    return f"{quantity.magnitude:.3g} {format(quantity.units, '~')}"
