import textwrap

import numpy as np
import pytest

from siftools.points import Point, PointDataset
from siftools.timeseries import TimeSeries, ValueColumn


def make_timeseries(dates, values, name="head", nodata=-9999.0):
    return TimeSeries(
        np.array(dates, dtype="datetime64[ns]"),
        (ValueColumn(name, nodata, np.array(values, dtype=np.float64)),),
    )


@pytest.fixture(scope="module")
def observations():
    """
    Points on simple_grid, with an observed head:

    * a: in the bottom-left cell (9), observed 8.5
    * b: in the top row (2), observed with a decimal comma
    * c: outside the grid
    * d: in the middle row (8), observed value is not a number
    """
    points = (
        Point(5.0, 5.0, ("5.0", "5.0", "a", "8.5")),
        Point(15.0, 25.0, ("15.0", "25.0", "b", "1,5")),
        Point(100.0, 100.0, ("100.0", "100.0", "c", "3.0")),
        Point(35.0, 15.0, ("35.0", "15.0", "d", "abc")),
    )
    return PointDataset(("x", "y", "id", "head"), points)


@pytest.fixture(scope="module")
def timeseries_dataset():
    points = (
        Point(
            1.0,
            2.0,
            ("1.0", "2.0", "well1"),
            make_timeseries(["2020-01-01", "2020-01-02"], [1.0, 2.0]),
        ),
        Point(
            3.0,
            4.0,
            ("3.0", "4.0", "well2"),
            make_timeseries(["2020-01-01T12:00:00"], [-9999.0]),
        ),
    )
    return PointDataset(("x", "y", "id"), points, index_column=3, assoc_ext="txt")


ipf_whitespace = textwrap.dedent(
    """\
    2
    4
    x
    y
    "well id"
    head
    0,txt
    100.0 200.0 "well 1" 1.5
    300.0 400.0 well2 -2.25
    """
)

ipf_associated = textwrap.dedent(
    """\
    1
    3
    x
    y
    id
    3,txt
    100.0,200.0,series/a
    """
)

txt_associated = textwrap.dedent(
    """\
    3
    3,1
    date,-999
    head,-999
    flux,1e20
    20200101,1.5,0.1
    20200102120000,-999,-
    20200105,2.5,0.3
    """
)
