"""
Sampling of grids at the points of an IPF file.

:func:`sample_points` works on in-memory datasets. :func:`run` and
:func:`run_batch` read the input files, sample and write the results and
the residual statistics report.
"""

import dataclasses
import pathlib
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from siftools.evaluate.statistics import (
    DEFAULT_PVALUES,
    ResidualStatistics,
    write_report,
)
from siftools.exceptions import ToolError
from siftools.formats import ipf, read_grid
from siftools.grid import Grid
from siftools.logging import logger, standard_log_decorator
from siftools.points import PointDataset
from siftools.sample.grid_sampler import sample
from siftools.typing import PathLike
from siftools.util.number import format_number, is_nodata, parse_float
from siftools.util.path import check_input_file, check_output_file

DEFAULT_VALUE_COLUMN = "value"


@dataclasses.dataclass(frozen=True)
class SampleOptions:
    """
    Options of a sampling run.

    Parameters
    ----------
    interpolate : bool, default False
        Interpolate bilinearly instead of taking the value of the containing
        cell.
    skip_outside_extent : bool, default False
        Leave out points outside the grid extent.
    skip_nodata : bool, default False
        Leave out points with a NoData value.
    decimal_count : int, default 2
        Number of decimals of the written values.
    nodata : float, default -9999.0
        Written for NoData values and for residuals that cannot be computed.
    value_column : str, optional
        Name of the column with the sampled values. :func:`run` uses the
        name of the grid file by default.
    prefix : str, default ""
        Prefix of the sampled value and residual column names.
    pvalues : tuple of floats, default (10, 50, 90)
        Percentiles of the statistics report.
    """

    interpolate: bool = False
    skip_outside_extent: bool = False
    skip_nodata: bool = False
    decimal_count: int = 2
    nodata: float = -9999.0
    value_column: Optional[str] = None
    prefix: str = ""
    pvalues: Tuple[float, ...] = DEFAULT_PVALUES

    def __post_init__(self):
        if self.decimal_count < 0:
            raise ToolError(
                "Number of decimals must be non-negative, "
                f"received {self.decimal_count}"
            )
        pvalues = tuple(float(p) for p in self.pvalues)
        for p in pvalues:
            if not 0.0 <= p <= 100.0:
                raise ToolError(f"Percentiles must be in [0, 100], received {p}")
        object.__setattr__(self, "pvalues", pvalues)
        object.__setattr__(self, "nodata", float(self.nodata))

    def column_names(self, with_residuals: bool) -> List[str]:
        value_column = self.value_column or DEFAULT_VALUE_COLUMN
        names = [self.prefix + value_column]
        if with_residuals:
            names += [self.prefix + "RES", self.prefix + "ABSRES"]
        return names


@dataclasses.dataclass(frozen=True)
class SampleResult:
    """
    Result of sampling one point dataset.

    Attributes
    ----------
    dataset : PointDataset
        The points that were not skipped, with the sampled value (and
        residual) columns added.
    pairs : tuple of (measured, modeled)
        Valid observation pairs, empty without observation column.
    skipped_count : int
        Points left out since they were outside the grid extent.
    nodata_count : int
        Points left out since their sampled value was NoData.
    invalid_count : int
        Points with an observed value that could not be parsed.
    warnings : tuple of str
    """

    dataset: PointDataset
    pairs: Tuple[Tuple[float, float], ...]
    skipped_count: int = 0
    nodata_count: int = 0
    invalid_count: int = 0
    warnings: Tuple[str, ...] = ()

    def statistics(
        self, pvalues: Sequence[float] = DEFAULT_PVALUES
    ) -> ResidualStatistics:
        measured = [pair[0] for pair in self.pairs]
        modeled = [pair[1] for pair in self.pairs]
        return ResidualStatistics.compute(measured, modeled, pvalues)


def _resolve_column(dataset: PointDataset, column: Union[int, str]) -> int:
    try:
        return dataset.find_column(column)
    except KeyError as e:
        raise ToolError(f"Observation column not found: {column}. {e.args[0]}") from e


def sample_points(
    dataset: PointDataset,
    grid: Grid,
    observation_column: Union[int, str, None] = None,
    options: SampleOptions = SampleOptions(),
) -> SampleResult:
    """
    Sample a grid at the points of a dataset.

    Parameters
    ----------
    dataset : PointDataset
    grid : Grid
    observation_column : int or str, optional
        One-based column number or column name of the observed values. If
        given, residuals (modeled - observed) and absolute residuals are
        added.
    options : SampleOptions

    Returns
    -------
    SampleResult
        The inputs are left unchanged.

    Examples
    --------
    >>> result = sample_points(dataset, grid, "head", SampleOptions(interpolate=True))
    >>> stats = result.statistics()
    """
    obs_index = None
    if observation_column is not None:
        obs_index = _resolve_column(dataset, observation_column)

    new_columns = options.column_names(with_residuals=obs_index is not None)
    existing = {name.lower() for name in dataset.columns}
    for name in new_columns:
        if name.lower() in existing:
            raise ToolError(
                f'Column "{name}" already exists, '
                "use another value column name or prefix"
            )

    def fmt(value):
        return format_number(value, options.decimal_count)

    x = np.array([point.x for point in dataset], dtype=np.float64)
    y = np.array([point.y for point in dataset], dtype=np.float64)
    values = sample(grid, x, y, options.interpolate)

    points = []
    pairs = []
    warnings = []
    skipped_count = 0
    nodata_count = 0
    invalid_count = 0
    for i, point in enumerate(dataset):
        if options.skip_outside_extent and not grid.contains(point.x, point.y):
            skipped_count += 1
            continue

        modeled = float(values[i])
        if is_nodata(modeled, grid.nodata):
            if options.skip_nodata:
                nodata_count += 1
                continue
            modeled = options.nodata

        new_values = [fmt(modeled)]
        if obs_index is not None:
            observed = point.values[obs_index]
            try:
                measured = parse_float(observed)
            except ValueError:
                message = (
                    f"Point {i + 1} ({point.x}, {point.y}): invalid observed value "
                    f'"{observed}", residuals are set to NoData'
                )
                logger.warning(message)
                warnings.append(message)
                invalid_count += 1
                measured = options.nodata

            nodata = options.nodata
            if is_nodata(measured, nodata) or is_nodata(modeled, nodata):
                new_values += [fmt(nodata), fmt(nodata)]
            else:
                residual = modeled - measured
                new_values += [fmt(residual), fmt(abs(residual))]
                pairs.append((measured, modeled))

        points.append(point.with_values(point.values + tuple(new_values)))

    if skipped_count > 0:
        message = f"{skipped_count} points were outside the grid extent and are skipped"
        logger.warning(message)
        warnings.append(message)
    if nodata_count > 0:
        message = f"{nodata_count} points had a NoData value and are skipped"
        logger.info(message)
    if invalid_count > 0:
        message = f"{invalid_count} points had invalid observed values"
        logger.warning(message)
        warnings.append(message)

    out = dataset.with_points(points, columns=dataset.columns + tuple(new_columns))
    return SampleResult(
        dataset=out,
        pairs=tuple(pairs),
        skipped_count=skipped_count,
        nodata_count=nodata_count,
        invalid_count=invalid_count,
        warnings=tuple(warnings),
    )


def default_report_path(output_path: PathLike) -> pathlib.Path:
    """``<output>_stats.csv``, next to the output file."""
    output_path = pathlib.Path(output_path)
    return output_path.with_name(f"{output_path.stem}_stats.csv")


def _sample_file(
    ipf_path: pathlib.Path,
    grid: Grid,
    output_path: pathlib.Path,
    observation_column,
    options: SampleOptions,
    stats_path: Optional[pathlib.Path],
    csv: bool,
    label: str,
) -> SampleResult:
    dataset = ipf.read(ipf_path, read_timeseries=not csv)
    logger.info(f"Sampling {len(dataset)} points of {ipf_path}")
    if observation_column is not None:
        # Raise before writing anything
        _resolve_column(dataset, observation_column)

    result = sample_points(dataset, grid, observation_column, options)
    if csv:
        ipf.write_csv(output_path, result.dataset)
    else:
        ipf.write(output_path, result.dataset)
    logger.info(f"Written {len(result.dataset)} points to {output_path}")

    if observation_column is not None:
        stats = result.statistics(options.pvalues)
        write_report(stats_path, label, stats, options.decimal_count)
        logger.info(
            f"Statistics of {stats.count} residuals appended to {stats_path}, "
            f"RMSE = {format_number(stats.rmse, options.decimal_count)}"
        )
    return result


def _with_value_column(
    options: SampleOptions, grid_path: pathlib.Path
) -> SampleOptions:
    if options.value_column is None:
        return dataclasses.replace(options, value_column=grid_path.stem)
    return options


@standard_log_decorator()
def run(
    ipf_path: PathLike,
    grid_path: PathLike,
    output_path: PathLike,
    observation_column: Union[int, str, None] = None,
    options: SampleOptions = SampleOptions(),
    stats_path: Optional[PathLike] = None,
    overwrite: bool = False,
    csv: bool = False,
) -> SampleResult:
    """
    Sample a grid at the points of an IPF file and write the result.

    Parameters
    ----------
    ipf_path : str or Path
        Input IPF file.
    grid_path : str or Path
        IDF or ASC file.
    output_path : str or Path
        Output IPF file, or CSV file if ``csv`` is True.
    observation_column : int or str, optional
        Column with observed values. If given, residuals are added and the
        residual statistics are appended to the report.
    options : SampleOptions
        If ``options.value_column`` is None, the name of the grid file is
        used.
    stats_path : str or Path, optional
        Statistics report, by default ``<output>_stats.csv``.
    overwrite : bool, default False
        Overwrite an existing output file.
    csv : bool, default False
        Write a CSV table instead of an IPF file.

    Returns
    -------
    SampleResult

    Raises
    ------
    ToolError
        When an input file is missing, the output exists and ``overwrite``
        is False, or the observation column does not exist. Nothing is
        written in that case.
    """
    ipf_path = check_input_file(ipf_path, "Input IPF file")
    grid_path = check_input_file(grid_path, "Grid file")
    output_path = check_output_file(output_path, overwrite)
    if stats_path is None:
        stats_path = default_report_path(output_path)

    options = _with_value_column(options, grid_path)
    grid = read_grid(grid_path)
    return _sample_file(
        ipf_path,
        grid,
        output_path,
        observation_column,
        options,
        pathlib.Path(stats_path),
        csv,
        ipf_path.name,
    )


@dataclasses.dataclass(frozen=True)
class BatchResult:
    """Results per input file, and the error message of failed files."""

    results: Dict[pathlib.Path, SampleResult]
    failures: Dict[pathlib.Path, str]

    @property
    def warnings(self) -> List[str]:
        return [
            f"{path}: {warning}"
            for path, result in self.results.items()
            for warning in result.warnings
        ]


@standard_log_decorator()
def run_batch(
    input_dir: PathLike,
    pattern: str,
    grid_path: PathLike,
    output_dir: PathLike,
    observation_column: Union[int, str, None] = None,
    options: SampleOptions = SampleOptions(),
    stats_path: Optional[PathLike] = None,
    overwrite: bool = False,
    csv: bool = False,
    recursive: bool = False,
) -> BatchResult:
    """
    Sample a grid at the points of all IPF files in a directory.

    The grid is read once. Files are processed one by one; relative
    subdirectories are kept in the output directory. When a file fails,
    the error is logged and processing continues with the next file.

    Parameters
    ----------
    input_dir : str or Path
    pattern : str
        Glob pattern of the input files, e.g. ``"*.ipf"``.
    grid_path : str or Path
    output_dir : str or Path
    observation_column : int or str, optional
    options : SampleOptions
    stats_path : str or Path, optional
        Statistics report with one row per file, by default
        ``<output_dir>/<grid name>_stats.csv``.
    overwrite : bool, default False
    csv : bool, default False
    recursive : bool, default False
        Also search subdirectories of ``input_dir``.

    Returns
    -------
    BatchResult
    """
    input_dir = pathlib.Path(input_dir)
    if not input_dir.is_dir():
        raise ToolError(f"Input directory doesn't exist: {input_dir}")
    grid_path = check_input_file(grid_path, "Grid file")
    output_dir = pathlib.Path(output_dir)
    if stats_path is None:
        stats_path = output_dir / f"{grid_path.stem}_stats.csv"
    stats_path = pathlib.Path(stats_path)

    paths = sorted(input_dir.rglob(pattern) if recursive else input_dir.glob(pattern))
    if len(paths) == 0:
        raise ToolError(f"No files found matching {pattern} in {input_dir}")

    options = _with_value_column(options, grid_path)
    grid = read_grid(grid_path)

    results = {}
    failures = {}
    for path in paths:
        relative = path.relative_to(input_dir)
        output_path = output_dir / relative
        if csv:
            output_path = output_path.with_suffix(".csv")
        try:
            check_output_file(output_path, overwrite)
            results[path] = _sample_file(
                path,
                grid,
                output_path,
                observation_column,
                options,
                stats_path,
                csv,
                str(relative),
            )
        except (ToolError, ValueError, OSError) as e:
            logger.error(f"Could not process {path}: {e}")
            failures[path] = str(e)

    if failures:
        logger.warning(f"{len(failures)} of {len(paths)} files failed")
    return BatchResult(results, failures)
