"""
Joining of two time series by date, with optional linear interpolation of
the second series in the dates of the first.
"""

import dataclasses
import enum
from typing import List, Optional

import numpy as np

from siftools.timeseries import TimeSeries, ValueColumn
from siftools.util.number import is_nodata
from siftools.util.time import days_between, to_datetime64


class JoinType(enum.Enum):
    """
    Which dates are kept. Dates present in both series are always kept.

    * INNER: only dates present in both series.
    * LEFT_OUTER: all dates of the first series.
    * RIGHT_OUTER: all dates of the second series.
    * FULL_OUTER: all dates of both series.
    * NATURAL: same as INNER for dates.
    """

    INNER = "inner"
    LEFT_OUTER = "left"
    RIGHT_OUTER = "right"
    FULL_OUTER = "full"
    NATURAL = "natural"

    @property
    def keeps_left(self) -> bool:
        return self in (JoinType.LEFT_OUTER, JoinType.FULL_OUTER)

    @property
    def keeps_right(self) -> bool:
        return self in (JoinType.RIGHT_OUTER, JoinType.FULL_OUTER)

    @classmethod
    def from_name(cls, name: str) -> "JoinType":
        lowered = name.lower().replace("_", "").replace("outer", "")
        for member in cls:
            if member.value == lowered:
                return member
        raise ValueError(f"Unknown join type: {name}")


@dataclasses.dataclass(frozen=True)
class JoinOptions:
    """
    Options of a time series join, see :func:`join_timeseries`.
    """

    join_type: JoinType = JoinType.FULL_OUTER
    period_start: Optional[np.datetime64] = None
    period_end: Optional[np.datetime64] = None
    max_interpolation_distance: Optional[float] = None
    interpolate: bool = False

    def __post_init__(self):
        if self.period_start is not None:
            object.__setattr__(self, "period_start", to_datetime64(self.period_start))
        if self.period_end is not None:
            object.__setattr__(self, "period_end", to_datetime64(self.period_end))
        if (
            self.period_start is not None
            and self.period_end is not None
            and self.period_start > self.period_end
        ):
            raise ValueError(
                f"Start of period {self.period_start} is after end of period "
                f"{self.period_end}"
            )
        if (
            self.max_interpolation_distance is not None
            and self.max_interpolation_distance < 0
        ):
            raise ValueError(
                "Maximum interpolation distance must be non-negative, "
                f"received {self.max_interpolation_distance}"
            )


def _result_names(ts1: TimeSeries, ts2: TimeSeries) -> List[str]:
    names = list(ts1.column_names)
    for name in ts2.column_names:
        while name in names:
            name += "2"
        names.append(name)
    return names


def _interpolate(
    ts2: TimeSeries,
    time: np.datetime64,
    prev_index: int,
    next_index: int,
    max_interpolation_distance: Optional[float],
) -> List[float]:
    """
    Values of ts2 at ``time``, interpolated linearly between the dates with
    indices prev_index and next_index.
    """
    t0 = ts2.times[prev_index]
    t1 = ts2.times[next_index]
    within_distance = (
        max_interpolation_distance is None
        or days_between(t0, t1) <= max_interpolation_distance
    )
    # Weights on nanosecond ticks
    ticks = (time - t0).astype(np.int64)
    total = (t1 - t0).astype(np.int64)

    values = []
    for column in ts2.columns:
        v0 = column.values[prev_index]
        v1 = column.values[next_index]
        if is_nodata(v0, column.nodata) or is_nodata(v1, column.nodata):
            values.append(column.nodata)
        elif not within_distance:
            values.append(column.nodata)
        else:
            with np.errstate(over="ignore", invalid="ignore"):
                value = v0 + (v1 - v0) * ticks / total if total != 0 else np.nan
            if not np.isfinite(value):
                # Copy the previous value
                value = v0
            values.append(float(value))
    return values


def join_timeseries(
    ts1: TimeSeries,
    ts2: TimeSeries,
    join_type: JoinType = JoinType.FULL_OUTER,
    period_start=None,
    period_end=None,
    max_interpolation_distance: Optional[float] = None,
    interpolate: bool = False,
) -> TimeSeries:
    """
    Join two time series by date.

    The result has the value columns of ``ts1`` followed by those of
    ``ts2``; a column name of ``ts2`` that is already in use gets the
    suffix "2". Missing values are filled with the NoData value of their
    column.

    Parameters
    ----------
    ts1 : TimeSeries
        Left series, with ascending dates.
    ts2 : TimeSeries
        Right series, with ascending dates.
    join_type : JoinType
    period_start, period_end : datetime-like, optional
        Only dates within this inclusive period are considered.
    max_interpolation_distance : float, optional
        Maximum distance in days between the two dates of ts2 around a date
        of ts1 to interpolate between. No limit if None.
    interpolate : bool, default False
        Interpolate ts2 linearly for dates of ts1 that fall between two dates
        of ts2. Only used with LEFT_OUTER and FULL_OUTER joins; dates before
        the first or after the last date of ts2 are never extrapolated.

    Returns
    -------
    TimeSeries

    Examples
    --------
    Fill in the values of a series of heads at the dates of a series of
    measurements:

    >>> joined = join_timeseries(measured, heads, JoinType.LEFT_OUTER, interpolate=True)
    """
    for name, ts in (("First", ts1), ("Second", ts2)):
        if not ts.is_sorted():
            raise ValueError(f"{name} time series is not sorted by date")

    ts1 = ts1.select(period_start, period_end)
    ts2 = ts2.select(period_start, period_end)
    n1 = len(ts1)
    n2 = len(ts2)
    nodata1 = list(ts1.nodata_values)
    nodata2 = list(ts2.nodata_values)

    times = []
    rows = []

    def emit(time, values1, values2):
        times.append(time)
        rows.append(values1 + values2)

    def left(i):
        return [float(column.values[i]) for column in ts1.columns]

    def right(i):
        return [float(column.values[i]) for column in ts2.columns]

    i2 = 0
    for i1 in range(n1):
        date1 = ts1.times[i1]
        # Dates of ts2 that are not in ts1
        while i2 < n2 and ts2.times[i2] < date1:
            if join_type.keeps_right:
                emit(ts2.times[i2], nodata1, right(i2))
            i2 += 1

        if i2 < n2 and ts2.times[i2] == date1:
            emit(date1, left(i1), right(i2))
            i2 += 1
        elif join_type.keeps_left:
            if interpolate and 0 < i2 < n2:
                values2 = _interpolate(
                    ts2, date1, i2 - 1, i2, max_interpolation_distance
                )
            else:
                values2 = nodata2
            emit(date1, left(i1), values2)

    if join_type.keeps_right:
        for i in range(i2, n2):
            emit(ts2.times[i], nodata1, right(i))

    names = _result_names(ts1, ts2)
    nodata = nodata1 + nodata2
    data = np.array(rows, dtype=np.float64).reshape((len(rows), len(names)))
    columns = tuple(
        ValueColumn(name, nodata_value, data[:, j])
        for j, (name, nodata_value) in enumerate(zip(names, nodata))
    )
    return TimeSeries(np.array(times, dtype="datetime64[ns]"), columns)
