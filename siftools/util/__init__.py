"""
Miscellaneous utilities: number parsing and formatting, datetimes, and
all-or-nothing file output.
"""

from siftools.util.number import (
    ACCEPTED_ERROR,
    format_number,
    format_sentinel,
    is_nodata,
    parse_float,
)
from siftools.util.path import atomic_write, staged_directory
from siftools.util.time import to_datetime, to_datetime64
