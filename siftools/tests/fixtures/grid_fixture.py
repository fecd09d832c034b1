import numpy as np
import pytest

from siftools.grid import Grid


@pytest.fixture(scope="module")
def simple_grid():
    """
    3 rows, 4 columns of 10 x 10 m, lower-left corner at (0, 0).

    Row 0 is the northernmost row:

        1   2   3   4
        5   6   7   8
        9  10  11  12
    """
    values = np.arange(1.0, 13.0).reshape((3, 4))
    return Grid(values, xmin=0.0, ymin=0.0, dx=10.0, dy=10.0, nodata=-9999.0)


@pytest.fixture(scope="module")
def nodata_grid():
    """As simple_grid, with NoData in the centre cell of the middle row."""
    values = np.arange(1.0, 13.0).reshape((3, 4))
    values[1, 1] = -9999.0
    return Grid(values, xmin=0.0, ymin=0.0, dx=10.0, dy=10.0, nodata=-9999.0)
