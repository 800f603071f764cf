"""
Integer helpers shared by the parameter formulas.
"""

from .Errors import InvalidParameterError


def ceil_div(num: int, den: int) -> int:
    """
    Ceiling of num / den for non-negative integers.

    Args:
        num: Dividend (>= 0)
        den: Divisor (> 0)

    Returns:
        Smallest integer q with q * den >= num
    """
    if den <= 0:
        raise ZeroDivisionError(f"Divisor must be positive, got {den}")
    return -(-num // den)


def check_width(value: int, bits: int, name: str) -> int:
    """
    Check that a value fits an unsigned field of the given width.

    Args:
        value: Value to check
        bits: Field width in bits
        name: Parameter name used in the error

    Returns:
        The value, unchanged

    Raises:
        InvalidParameterError: If value < 0 or value >= 2**bits
    """
    if not 0 <= value < (1 << bits):
        raise InvalidParameterError(
            f"{name}={value} does not fit in a {bits}-bit field", name)
    return value
