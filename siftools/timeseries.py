"""
Time series as stored in IPF associated files.

Every value column carries its own NoData sentinel; sentinels are kept as
they are, not converted to NaN, so that they can be written back unchanged.
"""

import dataclasses
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from siftools.typing import DatetimeArray, FloatArray
from siftools.util.number import ACCEPTED_ERROR
from siftools.util.time import to_datetime64


def _readonly(a: np.ndarray) -> np.ndarray:
    view = a.view()
    view.flags.writeable = False
    return view


@dataclasses.dataclass(frozen=True, eq=False)
class ValueColumn:
    """One value column of a time series."""

    name: str
    nodata: float
    values: FloatArray

    def __post_init__(self):
        values = np.asarray(self.values, dtype=np.float64)
        if values.ndim != 1:
            raise ValueError(f"Values of column {self.name} must be one-dimensional")
        object.__setattr__(self, "values", _readonly(values))
        object.__setattr__(self, "nodata", float(self.nodata))


@dataclasses.dataclass(frozen=True, eq=False)
class TimeSeries:
    """
    Time series with ascending timestamps and one or more value columns.

    Parameters
    ----------
    times : array-like of datetimes
        Converted to ``np.datetime64[ns]``.
    columns : sequence of ValueColumn
        Every column must have as many values as there are timestamps.
    """

    times: DatetimeArray
    columns: Tuple[ValueColumn, ...]

    def __post_init__(self):
        times = np.asarray(self.times, dtype="datetime64[ns]")
        if times.ndim != 1:
            raise ValueError("Timestamps must be one-dimensional")
        columns = tuple(self.columns)
        for column in columns:
            if column.values.size != times.size:
                raise ValueError(
                    f"Column {column.name} has {column.values.size} values, "
                    f"but there are {times.size} timestamps"
                )
        object.__setattr__(self, "times", _readonly(times))
        object.__setattr__(self, "columns", columns)

    def __len__(self) -> int:
        return self.times.size

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    @property
    def nodata_values(self) -> Tuple[float, ...]:
        return tuple(column.nodata for column in self.columns)

    def is_sorted(self) -> bool:
        """Whether timestamps are (weakly) ascending."""
        return bool(np.all(self.times[1:] >= self.times[:-1]))

    def select(self, start=None, end=None) -> "TimeSeries":
        """
        Return the part of the series within the inclusive period
        [start, end]. Either bound may be None.
        """
        keep = np.full(self.times.size, True)
        if start is not None:
            keep &= self.times >= to_datetime64(start)
        if end is not None:
            keep &= self.times <= to_datetime64(end)
        columns = tuple(
            ValueColumn(column.name, column.nodata, column.values[keep])
            for column in self.columns
        )
        return TimeSeries(self.times[keep], columns)

    def to_dataframe(self, nodata_as_nan: bool = False) -> pd.DataFrame:
        """
        Convert to a DataFrame with a ``time`` column followed by the value
        columns.
        """
        data = {"time": pd.to_datetime(self.times)}
        for column in self.columns:
            values = np.array(column.values)
            if nodata_as_nan:
                values[np.abs(values - column.nodata) <= ACCEPTED_ERROR] = np.nan
            data[column.name] = values
        return pd.DataFrame(data)

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        time_column: str = "time",
        nodata: Optional[Sequence[float]] = None,
    ) -> "TimeSeries":
        """
        Create a TimeSeries from a DataFrame. NaN values are replaced by the
        column's NoData value, which defaults to -9999.0.
        """
        names = [name for name in df.columns if name != time_column]
        if nodata is None:
            nodata = [-9999.0] * len(names)
        columns = []
        for name, nodata_value in zip(names, nodata):
            values = pd.to_numeric(df[name], errors="coerce").to_numpy(dtype=np.float64)
            values = np.where(np.isnan(values), nodata_value, values)
            columns.append(ValueColumn(str(name), nodata_value, values))
        times = pd.to_datetime(df[time_column]).to_numpy(dtype="datetime64[ns]")
        return cls(times, tuple(columns))
