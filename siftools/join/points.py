"""
Matching of the points of two datasets on a key column, joining the time
series of every matched pair.
"""

from typing import Union

from siftools.exceptions import ToolError
from siftools.join.timeseries import JoinOptions, join_timeseries
from siftools.logging import logger
from siftools.points import PointDataset


def _key_index(dataset: PointDataset, column: Union[int, str], description: str) -> int:
    try:
        return dataset.find_column(column)
    except KeyError as e:
        raise ToolError(f"Key column of {description} not found: {column}") from e


def join_point_timeseries(
    dataset1: PointDataset,
    dataset2: PointDataset,
    key_column1: Union[int, str],
    key_column2: Union[int, str],
    options: JoinOptions = JoinOptions(),
) -> PointDataset:
    """
    Join the time series of the points of ``dataset2`` to those of
    ``dataset1``.

    Points are matched when their key values are equal; empty keys never
    match. When several points of ``dataset2`` share a key, the first one is
    used. Points without a match, or without a time series in either
    dataset, keep their own time series.

    Parameters
    ----------
    dataset1 : PointDataset
        Must refer to associated files.
    dataset2 : PointDataset
    key_column1, key_column2 : int or str
        One-based column number or name of the key columns.
    options : JoinOptions

    Returns
    -------
    PointDataset
        Points and columns of ``dataset1``, with the joined time series.
    """
    if dataset1.index_column == 0:
        raise ToolError("First IPF file has no associated files to join")
    index1 = _key_index(dataset1, key_column1, "first IPF file")
    index2 = _key_index(dataset2, key_column2, "second IPF file")

    lookup = {}
    for point in dataset2:
        key = point.values[index2].strip()
        if key != "" and key not in lookup:
            lookup[key] = point

    points = []
    matched = 0
    for point in dataset1:
        key = point.values[index1].strip()
        other = lookup.get(key) if key != "" else None
        if other is None:
            logger.debug(f'No matching point found for key "{key}"')
            points.append(point)
            continue
        if point.timeseries is None or other.timeseries is None:
            logger.debug(f'No time series to join for key "{key}"')
            points.append(point)
            continue

        logger.info(f'Joining time series for point "{key}"...')
        try:
            joined = join_timeseries(
                point.timeseries,
                other.timeseries,
                options.join_type,
                options.period_start,
                options.period_end,
                options.max_interpolation_distance,
                options.interpolate,
            )
        except ValueError as e:
            raise ValueError(f'{e}\nWhile joining time series of point "{key}"') from e
        points.append(point.with_timeseries(joined))
        matched += 1

    logger.info(f"Joined time series of {matched} of {len(dataset1)} points")
    return dataset1.with_points(points)
