"""
Point datasets as stored in IPF files.

Column values are kept as the strings found in the file: IPF columns are
free text (identifiers, filenames, numbers in various notations) and are
only interpreted by the tool that needs a specific column.
"""

import dataclasses
from typing import Iterable, Optional, Sequence, Tuple, Union

import pandas as pd

from siftools.timeseries import TimeSeries
from siftools.util.number import parse_float


@dataclasses.dataclass(frozen=True)
class Point:
    x: float
    y: float
    values: Tuple[str, ...]
    timeseries: Optional[TimeSeries] = dataclasses.field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))
        object.__setattr__(self, "values", tuple(str(v) for v in self.values))

    def with_values(self, values: Iterable[str]) -> "Point":
        return dataclasses.replace(self, values=tuple(values))

    def with_timeseries(self, timeseries: Optional[TimeSeries]) -> "Point":
        return dataclasses.replace(self, timeseries=timeseries)


@dataclasses.dataclass(frozen=True)
class PointDataset:
    """
    Ordered collection of points with named columns.

    Parameters
    ----------
    columns : sequence of str
        Unique column names. The first two columns hold x and y.
    points : sequence of Point
        Every point has one value per column.
    index_column : int
        One-based number of the column holding the names of the associated
        files, 0 if there are none.
    assoc_ext : str
        Extension of the associated files.
    """

    columns: Tuple[str, ...]
    points: Tuple[Point, ...] = ()
    index_column: int = 0
    assoc_ext: str = "txt"

    def __post_init__(self):
        columns = tuple(self.columns)
        lowered = [name.lower() for name in columns]
        if len(set(lowered)) != len(lowered):
            seen = set()
            for name in lowered:
                if name in seen:
                    raise ValueError(f'Column name "{name}" is not unique.')
                seen.add(name)
        points = tuple(self.points)
        for i, point in enumerate(points):
            if len(point.values) != len(columns):
                raise ValueError(
                    f"Point {i + 1} has {len(point.values)} values, "
                    f"expected {len(columns)}"
                )
        if not 0 <= self.index_column <= len(columns):
            raise ValueError(f"Invalid index column: {self.index_column}")
        object.__setattr__(self, "columns", columns)
        object.__setattr__(self, "points", points)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def find_column(self, column: Union[int, str]) -> int:
        """
        Zero-based index of a column, given a one-based column number or a
        column name (case-insensitive).

        Raises
        ------
        KeyError
            If the column does not exist.
        """
        if isinstance(column, int) or (isinstance(column, str) and column.isdigit()):
            number = int(column)
            if not 1 <= number <= len(self.columns):
                raise KeyError(
                    f"Column number {number} is out of range, "
                    f"there are {len(self.columns)} columns"
                )
            return number - 1
        lowered = [name.lower() for name in self.columns]
        try:
            return lowered.index(column.lower())
        except ValueError:
            raise KeyError(f"Column not found: {column}")

    def with_points(
        self, points: Sequence[Point], columns: Optional[Sequence[str]] = None
    ) -> "PointDataset":
        """New dataset with other points, and optionally other columns."""
        if columns is None:
            columns = self.columns
        return dataclasses.replace(self, columns=tuple(columns), points=tuple(points))

    def has_timeseries(self) -> bool:
        return any(point.timeseries is not None for point in self.points)

    def to_dataframe(self) -> pd.DataFrame:
        """
        Table of the column values, as strings. Use ``pd.to_numeric`` on the
        columns that should be numeric.
        """
        return pd.DataFrame(
            [point.values for point in self.points],
            columns=list(self.columns),
            dtype=str,
        )

    @classmethod
    def from_dataframe(
        cls, df: pd.DataFrame, x: str = None, y: str = None
    ) -> "PointDataset":
        """
        Create a dataset from a DataFrame. The coordinates are taken from the
        columns ``x`` and ``y``, by default the first two columns.
        """
        columns = [str(name) for name in df.columns]
        xcol = columns.index(x) if x is not None else 0
        ycol = columns.index(y) if y is not None else 1
        points = []
        for row in df.astype(str).itertuples(index=False):
            values = tuple(row)
            x_value = parse_float(values[xcol])
            y_value = parse_float(values[ycol])
            points.append(Point(x_value, y_value, values))
        return cls(tuple(columns), tuple(points))
