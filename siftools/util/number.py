"""
Parsing and formatting of numbers in point tables.

Values in IPF files are written by many different programs. Observed values
may use a comma as decimal separator; everything siftools writes uses a dot.
"""

import math

ACCEPTED_ERROR = 0.0001


def is_nodata(value: float, nodata: float) -> bool:
    """
    Whether value is missing: NaN, or equal to the NoData sentinel within
    ``ACCEPTED_ERROR``.
    """
    if math.isnan(value):
        return True
    if math.isnan(nodata):
        return False
    return abs(value - nodata) <= ACCEPTED_ERROR


def parse_float(s: str) -> float:
    """
    Parse a number written with either a dot or a comma as decimal separator.

    Raises
    ------
    ValueError
        If the string is not a number. Strings that contain both a dot and
        a comma are ambiguous and rejected as well.
    """
    stripped = s.strip().strip('"').strip("'")
    if "," in stripped:
        if "." in stripped or stripped.count(",") > 1:
            raise ValueError(f"Ambiguous decimal separators in number: {s}")
        stripped = stripped.replace(",", ".")
    return float(stripped)


def format_number(value: float, decimal_count: int) -> str:
    """Culture-invariant fixed-point formatting: dot as decimal separator."""
    if decimal_count < 0:
        raise ValueError(
            f"decimal_count must be non-negative, received {decimal_count}"
        )
    return f"{value:.{decimal_count}f}"


def format_sentinel(value: float) -> str:
    """
    Format a NoData sentinel compactly: ``-9999`` instead of ``-9999.0``,
    ``1e+20`` for large values.
    """
    if float(value).is_integer() and abs(value) < 1.0e15:
        return str(int(value))
    return repr(float(value))
