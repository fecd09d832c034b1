import datetime

import dateutil.parser
import numpy as np

DATETIME_FORMATS = {
    14: "%Y%m%d%H%M%S",
    12: "%Y%m%d%H%M",
    10: "%Y%m%d%H",
    8: "%Y%m%d",
    4: "%Y",
}

NANOSECONDS_PER_DAY = 86_400 * 10**9


def to_datetime(s: str) -> datetime.datetime:
    """
    Convert string to datetime.

    The iMOD formats (``yyyymmdd``, ``yyyymmddhhmmss`` and the shorter
    variants) are tried first since they are by far the most common in
    associated files; anything else goes through the dateutil parser.
    """
    s = s.strip()
    try:
        time = datetime.datetime.strptime(s, DATETIME_FORMATS[len(s)])
    except (ValueError, KeyError):  # Try fullblown dateutil date parser
        time = dateutil.parser.parse(s)
    return time


def to_datetime64(time) -> np.datetime64:
    """Convert a string, datetime or datetime64 to np.datetime64[ns]."""
    if isinstance(time, str):
        time = to_datetime(time)
    return np.datetime64(time, "ns")


def compose_timestring(time: np.datetime64) -> str:
    """
    Compose the timestring of an associated file: ``yyyymmdd`` for dates at
    midnight, ``yyyymmddhhmmss`` otherwise.
    """
    # numpy.datetime64[ns] does not convert to datetime, but to an integer
    dt = np.datetime64(time, "us").item()
    if dt.hour == 0 and dt.minute == 0 and dt.second == 0:
        return dt.strftime("%Y%m%d")
    return dt.strftime("%Y%m%d%H%M%S")


def days_between(start: np.datetime64, end: np.datetime64) -> float:
    """Duration in decimal days, with nanosecond precision."""
    delta = np.datetime64(end, "ns") - np.datetime64(start, "ns")
    return delta.astype(np.int64) / NANOSECONDS_PER_DAY
