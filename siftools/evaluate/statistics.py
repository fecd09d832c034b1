"""
Statistics of sampled values: residual statistics of observed and modeled
pairs, and descriptive statistics with outlier ranges for a single series.

Percentiles are computed with NIST method 7, the method that spreadsheet
programs use for PERCENTILE: linear interpolation between the closest ranks.
"""

import dataclasses
import enum
import pathlib
from typing import Dict, Sequence, Tuple

import numpy as np
import pandas as pd

from siftools.typing import FloatArray, PathLike
from siftools.util.number import ACCEPTED_ERROR, format_number, format_sentinel

DEFAULT_PVALUES = (10.0, 50.0, 90.0)


def percentile(sorted_values: FloatArray, p: float) -> float:
    """
    Percentile ``p`` (0 to 100) of an ascending array, by NIST method 7.

    Returns NaN for an empty array.

    Examples
    --------
    >>> percentile(np.array([1.0, 2.0, 3.0, 4.0, 5.0]), 25)
    2.0
    """
    n = len(sorted_values)
    if n == 0:
        return np.nan
    if not 0.0 <= p <= 100.0:
        raise ValueError(f"Percentile must be in [0, 100], received {p}")
    rank = (p / 100.0) * (n - 1) + 1
    k = int(np.floor(rank))
    f = rank - k
    if k == 0:
        return float(sorted_values[0])
    if k >= n:
        return float(sorted_values[n - 1])
    return float(sorted_values[k - 1] + f * (sorted_values[k] - sorted_values[k - 1]))


@dataclasses.dataclass(frozen=True)
class SeriesSummary:
    """
    Summary of one series of a residual statistics computation.

    ``percentiles`` holds the requested percentiles; other percentiles are
    available from :meth:`percentile`, which uses the sorted values.
    """

    mean: float
    sd: float
    sample_sd: float
    min: float
    max: float
    percentiles: Dict[float, float]
    sorted_values: FloatArray = dataclasses.field(
        default_factory=lambda: np.empty(0), repr=False, compare=False
    )

    def percentile(self, p: float) -> float:
        """Percentile ``p`` (0 to 100) of the series, NaN if it is empty."""
        return percentile(self.sorted_values, p)


def _summarize(values: np.ndarray, pvalues: Sequence[float]) -> SeriesSummary:
    n = values.size
    if n == 0:
        return SeriesSummary(
            np.nan, np.nan, np.nan, np.nan, np.nan, {p: np.nan for p in pvalues}
        )
    mean = values.sum() / n
    diffsum = ((values - mean) ** 2).sum()
    sd = np.sqrt(diffsum / n)
    sample_sd = np.sqrt(diffsum / (n - 1)) if n > 1 else np.nan
    sorted_values = np.sort(values)
    sorted_values.flags.writeable = False
    return SeriesSummary(
        mean=float(mean),
        sd=float(sd),
        sample_sd=float(sample_sd),
        min=float(sorted_values[0]),
        max=float(sorted_values[-1]),
        percentiles={p: percentile(sorted_values, p) for p in pvalues},
        sorted_values=sorted_values,
    )


@dataclasses.dataclass(frozen=True)
class ResidualStatistics:
    """
    Statistics of observed (measured) and modeled values, with
    ``residual = modeled - measured``.

    Use :meth:`ResidualStatistics.compute` to create.
    """

    count: int
    pvalues: Tuple[float, ...]
    measured: SeriesSummary
    modeled: SeriesSummary
    residual: SeriesSummary
    absolute_residual: SeriesSummary
    rmse: float

    @classmethod
    def compute(
        cls, measured, modeled, pvalues: Sequence[float] = DEFAULT_PVALUES
    ) -> "ResidualStatistics":
        """
        Parameters
        ----------
        measured : array-like of floats
        modeled : array-like of floats
            Same length as ``measured``.
        pvalues : sequence of floats, default (10, 50, 90)
            Percentiles to compute for all four series.

        Returns
        -------
        ResidualStatistics
            Every derived statistic is NaN if there are no values.
        """
        measured = np.asarray(measured, dtype=np.float64)
        modeled = np.asarray(modeled, dtype=np.float64)
        if measured.shape != modeled.shape or measured.ndim != 1:
            raise ValueError(
                "measured and modeled must be one-dimensional and of equal length, "
                f"received shapes {measured.shape} and {modeled.shape}"
            )
        pvalues = tuple(float(p) for p in pvalues)
        for p in pvalues:
            if not 0.0 <= p <= 100.0:
                raise ValueError(f"Percentile must be in [0, 100], received {p}")

        residual = modeled - measured
        absolute_residual = np.abs(residual)
        count = residual.size
        rmse = float(np.sqrt((residual**2).sum() / count)) if count > 0 else np.nan
        return cls(
            count=count,
            pvalues=pvalues,
            measured=_summarize(measured, pvalues),
            modeled=_summarize(modeled, pvalues),
            residual=_summarize(residual, pvalues),
            absolute_residual=_summarize(absolute_residual, pvalues),
            rmse=rmse,
        )


def _pvalue_label(p: float) -> str:
    return format_sentinel(p)


def report_columns(pvalues: Sequence[float]) -> Tuple[str, ...]:
    """Column names of the statistics report."""
    columns = ["Filename", "AvgRes", "SdRes", "AvgAbsRes", "SdAbsRes", "RMSE"]
    for p in pvalues:
        label = _pvalue_label(p)
        columns.append(f"P{label}_Res")
        columns.append(f"P{label}_AbsRes")
    columns.append("N")
    return tuple(columns)


def write_report(
    path: PathLike, label: str, stats: ResidualStatistics, decimal_count: int = 2
) -> None:
    """
    Append one row with the residual statistics to a CSV report.

    The header is written only when the report does not exist yet.
    Standard deviations are sample standard deviations.

    Parameters
    ----------
    path : str or Path
        Path of the report.
    label : str
        Written in the Filename column, normally the name of the IPF file.
    stats : ResidualStatistics
    decimal_count : int, default 2
    """
    path = pathlib.Path(path)

    def fmt(value):
        return format_number(value, decimal_count)

    row = [
        label,
        fmt(stats.residual.mean),
        fmt(stats.residual.sample_sd),
        fmt(stats.absolute_residual.mean),
        fmt(stats.absolute_residual.sample_sd),
        fmt(stats.rmse),
    ]
    for p in stats.pvalues:
        row.append(fmt(stats.residual.percentiles[p]))
        row.append(fmt(stats.absolute_residual.percentiles[p]))
    row.append(str(stats.count))

    df = pd.DataFrame([row], columns=report_columns(stats.pvalues))
    path.parent.mkdir(parents=True, exist_ok=True)
    is_new = not path.exists()
    df.to_csv(path, mode="a", header=is_new, index=False, lineterminator="\n")


class OutlierMethod(enum.Enum):
    IQR = "iqr"
    HISTOGRAM_GAP = "histogram_gap"


class OutlierBaseRange(enum.Enum):
    """Percentiles that span the base range of the outlier methods."""

    PCT75_25 = (25, 75)
    PCT90_10 = (10, 90)
    PCT95_5 = (5, 95)


@dataclasses.dataclass(frozen=True)
class Statistics:
    """
    Descriptive statistics of a single series, including percentiles 0 to
    100 and an outlier range.

    Use :meth:`Statistics.compute` to create.
    """

    count: int
    min: float
    max: float
    sum: float
    mean: float
    sd: float
    sample_sd: float
    median: float
    q1: float
    q3: float
    iqr: float
    quartile_skew: float
    percentiles: FloatArray
    outlier_range: Tuple[float, float]

    @classmethod
    def compute(
        cls,
        values,
        skipped_values: Sequence[float] = (),
        outlier_method: OutlierMethod = OutlierMethod.IQR,
        outlier_base_range: OutlierBaseRange = OutlierBaseRange.PCT75_25,
        multiplier: float = 1.5,
    ) -> "Statistics":
        """
        Parameters
        ----------
        values : array-like of floats
        skipped_values : sequence of floats
            Values to leave out, e.g. NoData sentinels. NaN values are always
            left out.
        outlier_method : OutlierMethod
            IQR: the outlier range extends the base range by ``multiplier``
            times its width at both sides.
            HISTOGRAM_GAP: values below the lower or above the upper base
            percentile are outliers when they are separated from the rest by
            a gap larger than the histogram bin size,
            ``multiplier * width * n ** (-1/3)``.
        outlier_base_range : OutlierBaseRange
        multiplier : float, default 1.5

        Returns
        -------
        Statistics
            The outlier range is (NaN, NaN) for 3 values or less.
        """
        values = np.asarray(values, dtype=np.float64).ravel()
        keep = ~np.isnan(values)
        for skipped in skipped_values:
            keep &= ~(np.abs(values - skipped) <= ACCEPTED_ERROR)
        values = values[keep]

        n = values.size
        if n == 0:
            return cls(
                count=0,
                min=np.nan,
                max=np.nan,
                sum=0.0,
                mean=np.nan,
                sd=np.nan,
                sample_sd=np.nan,
                median=np.nan,
                q1=np.nan,
                q3=np.nan,
                iqr=np.nan,
                quartile_skew=np.nan,
                percentiles=np.full(101, np.nan),
                outlier_range=(np.nan, np.nan),
            )

        summary = _summarize(values, ())
        sorted_values = summary.sorted_values
        percentiles = np.array([summary.percentile(p) for p in range(101)])
        median = percentiles[50]
        q1 = percentiles[25]
        q3 = percentiles[75]
        iqr = q3 - q1
        quartile_skew = ((q3 - median) - (median - q1)) / iqr if iqr != 0.0 else np.nan

        if n > 3:
            outlier_range = _outlier_range(
                sorted_values,
                percentiles,
                outlier_method,
                outlier_base_range,
                multiplier,
            )
        else:
            outlier_range = (np.nan, np.nan)

        percentiles.flags.writeable = False
        return cls(
            count=n,
            min=summary.min,
            max=summary.max,
            sum=float(values.sum()),
            mean=summary.mean,
            sd=summary.sd,
            sample_sd=summary.sample_sd,
            median=float(median),
            q1=float(q1),
            q3=float(q3),
            iqr=float(iqr),
            quartile_skew=float(quartile_skew),
            percentiles=percentiles,
            outlier_range=outlier_range,
        )

    def outliers(self, values) -> np.ndarray:
        """Boolean array marking the values outside the outlier range."""
        values = np.asarray(values, dtype=np.float64)
        lower, upper = self.outlier_range
        return (values < lower) | (values > upper)


def _outlier_range(
    sorted_values: np.ndarray,
    percentiles: np.ndarray,
    method: OutlierMethod,
    base_range: OutlierBaseRange,
    multiplier: float,
) -> Tuple[float, float]:
    lower_pct, upper_pct = base_range.value
    lower_value = percentiles[lower_pct]
    upper_value = percentiles[upper_pct]
    width = upper_value - lower_value
    n = sorted_values.size

    match method:
        case OutlierMethod.IQR:
            return (
                float(lower_value - multiplier * width),
                float(upper_value + multiplier * width),
            )
        case OutlierMethod.HISTOGRAM_GAP:
            binsize = multiplier * width * n ** (-1.0 / 3.0)
            margin = binsize / 100.0
            lower = sorted_values[0]
            upper = sorted_values[-1]
            # Search the lower range value only below the lower base percentile
            for i in range(int(n * lower_pct / 100), -1, -1):
                if sorted_values[i + 1] - sorted_values[i] > binsize:
                    lower = sorted_values[i + 1] - margin
                    break
            for i in range(max(int(n * upper_pct / 100), 1), n):
                if sorted_values[i] - sorted_values[i - 1] > binsize:
                    upper = sorted_values[i - 1] + margin
                    break
            return float(lower), float(upper)
        case _:
            raise ValueError(f"Invalid outlier method: {method}")
