"""
Functions for reading and writing iMOD Point Files (IPFs) to
:class:`siftools.points.PointDataset`.

An IPF consists of a header (number of records, number of columns, the
column names, and the number of the column holding the associated file
names with the extension of those files), followed by the records. Records
are separated by commas or whitespace. Associated files (TXT) hold a time
series per point; their paths are relative to the IPF.

Column values are kept as strings. NoData sentinels of the associated files
are kept as they are, rather than being converted to NaN.
"""

import csv
import io
import pathlib
import warnings
from typing import List, Tuple

import numpy as np
import pandas as pd

from siftools.points import Point, PointDataset
from siftools.timeseries import TimeSeries, ValueColumn
from siftools.typing import PathLike
from siftools.util.number import format_sentinel, parse_float
from siftools.util.path import atomic_write, staged_directory
from siftools.util.time import compose_timestring, to_datetime

DEFAULT_NODATA = -9999.0


def _infer_delimwhitespace(line, ncol):
    n_elem = len(next(csv.reader([line])))
    if n_elem == 1:
        return True
    elif n_elem == ncol:
        return False
    else:
        warnings.warn(
            f"Inconsistent IPF: header states {ncol} columns, "
            f"first line contains {n_elem}"
        )
        return False


def _split_header_line(line: str) -> List[str]:
    # csv.reader parse one line, this catches commas in quotes
    fields = [s.strip() for s in next(csv.reader([line]))]
    if len(fields) == 1:  # then try whitespace delimited
        fields = next(csv.reader([line.strip()], delimiter=" ", skipinitialspace=True))
    return [s.strip() for s in fields if s.strip() != ""]


def _read_table(f, names, nrow, delim_whitespace) -> pd.DataFrame:
    """Read the records block as strings."""
    if nrow == 0:
        return pd.DataFrame({name: pd.Series([], dtype=str) for name in names})
    table_kwargs = {
        "sep": r"\s+" if delim_whitespace else ",",
        "header": None,
        "names": names,
        "nrows": nrow,
        "dtype": str,
        "keep_default_na": False,
        "skipinitialspace": True,
    }
    df = pd.read_csv(f, **table_kwargs)
    if len(df) != nrow:
        raise ValueError(f"Header states {nrow} records, found {len(df)}")
    return df


def _read_ipf(path) -> Tuple[pd.DataFrame, int, str]:
    path = pathlib.Path(path)
    with open(path) as f:
        nrow = int(f.readline().strip())
        ncol = int(f.readline().strip())
        colnames = [f.readline().strip().strip("'").strip('"') for _ in range(ncol)]
        fields = _split_header_line(f.readline())
        if len(fields) != 2:
            raise ValueError(
                "Expected index column and extension after the column names"
            )
        indexcol, ext = fields

        position = f.tell()
        line = f.readline()
        delim_whitespace = _infer_delimwhitespace(line, ncol)
        f.seek(position)

        df = _read_table(f, colnames, nrow, delim_whitespace)

    return df, int(indexcol), ext


def read_associated(path: PathLike) -> TimeSeries:
    """
    Read an IPF associated file (TXT) with a time series.

    Parameters
    ----------
    path : pathlib.Path or str
        Path to associated file.

    Returns
    -------
    TimeSeries
        The first column holds the dates, in ``yyyymmdd`` or
        ``yyyymmddhhmmss`` format. Values that are not numeric are replaced by
        the NoData value of their column.
    """
    path = pathlib.Path(path)

    with open(path) as f:
        nrow = int(f.readline().strip())
        fields = _split_header_line(f.readline())
        # itype can be implicit, in which case it's a timeseries
        ncol = int(fields[0])
        itype = int(fields[1]) if len(fields) > 1 else 1
        if itype != 1:
            raise ValueError(
                f"{path.name}: only timeseries (itype 1) are supported, "
                f"received itype {itype}"
            )

        colnames = []
        nodata_values = []
        for _ in range(ncol):
            fields = _split_header_line(f.readline())
            if not fields:
                raise ValueError(f"{path.name}: missing column definition")
            colnames.append(fields[0].strip('"').strip("'"))
            nodata = parse_float(fields[1]) if len(fields) > 1 else DEFAULT_NODATA
            nodata_values.append(nodata)

        # Sniff the first line of the data block
        position = f.tell()
        line = f.readline()
        f.seek(position)
        delim_whitespace = _infer_delimwhitespace(line, ncol)
        df = _read_table(f, colnames, nrow, delim_whitespace)

    time_column = colnames[0]
    try:
        times = [to_datetime(s) for s in df[time_column]]
    except (ValueError, OverflowError) as e:
        raise ValueError(
            f"{path.name}: datetime format must be yyyymmddhhmmss or yyyymmdd"
        ) from e

    columns = []
    for name, nodata in zip(colnames[1:], nodata_values[1:]):
        values = pd.to_numeric(
            df[name].str.replace(",", ".", regex=False), errors="coerce"
        ).to_numpy(dtype=np.float64)
        values = np.where(np.isnan(values), nodata, values)
        columns.append(ValueColumn(name, nodata, values))
    return TimeSeries(np.array(times, dtype="datetime64[ns]"), tuple(columns))


def read(path: PathLike, read_timeseries: bool = True) -> PointDataset:
    """
    Read an IPF file, including its associated (TXT) files.

    Parameters
    ----------
    path : str or Path
    read_timeseries : bool, default True
        Whether to read the associated files. If False, only the records of
        the IPF itself are read.

    Returns
    -------
    PointDataset
        The x and y coordinates are taken from the first two columns.

    Examples
    --------
    >>> dataset = siftools.formats.ipf.read("heads.ipf")
    >>> df = dataset.to_dataframe()
    """
    path = pathlib.Path(path)
    try:
        df, indexcol, ext = _read_ipf(path)
    except Exception as e:
        raise type(e)(f'{e}\nWhile reading IPF file "{path}"') from e

    columns = tuple(df.columns)
    if len(columns) < 2:
        raise ValueError(
            f'IPF file "{path}" must have at least two columns for x and y'
        )

    points = []
    for i, values in enumerate(df.itertuples(index=False, name=None)):
        try:
            x = parse_float(values[0])
            y = parse_float(values[1])
        except ValueError as e:
            raise ValueError(
                f'Invalid coordinates in record {i + 1} of IPF file "{path}": {e}'
            ) from e

        timeseries = None
        if read_timeseries and indexcol > 0:
            # associated paths are relative to the ipf
            path_assoc = path.parent.joinpath(f"{values[indexcol - 1]}.{ext}")
            try:  # Capture the error and print the offending path
                timeseries = read_associated(path_assoc)
            except Exception as e:
                raise type(e)(
                    f'{e}\nWhile reading associated file "{path_assoc}" '
                    f'of IPF file "{path}"'
                ) from e
        points.append(Point(x, y, values, timeseries))

    return PointDataset(columns, tuple(points), index_column=indexcol, assoc_ext=ext)


def _quote(value: str) -> str:
    if value == "" or "," in value or " " in value:
        return '"' + value + '"'
    return value


def _format_value(value: float) -> str:
    if np.isnan(value):
        raise ValueError("NaN values should have been replaced by NoData")
    return format_sentinel(value)


def write_assoc(path: PathLike, timeseries: TimeSeries) -> None:
    """
    Writes a single IPF associated (TXT) file.

    Dates are written as ``yyyymmdd``, or ``yyyymmddhhmmss`` when they have a
    time component. NaN values are written as the NoData value of the column.
    """
    lines = [f"{len(timeseries)}", f"{len(timeseries.columns) + 1},1"]
    lines.append(f"time,{format_sentinel(DEFAULT_NODATA)}")
    for column in timeseries.columns:
        lines.append(f"{_quote(column.name)},{format_sentinel(column.nodata)}")

    values = [
        np.where(np.isnan(column.values), column.nodata, column.values)
        for column in timeseries.columns
    ]
    for i, time in enumerate(timeseries.times):
        fields = [compose_timestring(time)]
        fields.extend(_format_value(v[i]) for v in values)
        lines.append(",".join(fields))

    with atomic_write(path, "w") as f:
        f.write("\n".join(lines))
        f.write("\n")


def _write_ipf(path, dataset: PointDataset) -> None:
    lines = [f"{len(dataset)}", f"{len(dataset.columns)}"]
    lines.extend(_quote(name) for name in dataset.columns)
    lines.append(f"{dataset.index_column},{dataset.assoc_ext}")
    for point in dataset:
        lines.append(",".join(_quote(value) for value in point.values))
    with open(path, "w") as f:
        f.write("\n".join(lines))
        f.write("\n")


def write(path: PathLike, dataset: PointDataset) -> None:
    """
    Writes a single IPF file, and the associated (TXT) files of the points
    that have a time series.

    All files are written first to a temporary directory next to ``path``,
    and moved into place only when every file has been written.

    Parameters
    ----------
    path : pathlib.Path or str
        path of the written IPF file.
        Any associated files are written relative to this path, based on the
        index column.
    dataset : PointDataset
    """
    path = pathlib.Path(path)
    with staged_directory(path.parent) as staging:
        _write_ipf(staging / path.name, dataset)
        if dataset.index_column > 0:
            for point in dataset:
                if point.timeseries is None:
                    continue
                filename = point.values[dataset.index_column - 1]
                write_assoc(
                    staging / f"{filename}.{dataset.assoc_ext}", point.timeseries
                )


def write_csv(path: PathLike, dataset: PointDataset) -> None:
    """Writes the records of a dataset to a CSV file, with a header line."""
    df = dataset.to_dataframe()
    buffer = io.StringIO()
    df.to_csv(buffer, index=False, lineterminator="\n")
    with atomic_write(path, "w") as f:
        f.write(buffer.getvalue())
