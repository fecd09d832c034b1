"""
Lookup of grid values at point coordinates.

Both lookups return the NoData sentinel of the grid for coordinates outside
the extent, and never raise for a coordinate. Compare against
:meth:`siftools.grid.Grid.contains` to tell "outside" from "NoData cell"
apart.
"""

import numba
import numpy as np

from siftools.grid import Grid
from siftools.typing import FloatArray
from siftools.util.number import ACCEPTED_ERROR


@numba.njit
def _is_missing(value, nodata):
    if np.isnan(value):
        return True
    if np.isnan(nodata):
        return False
    return abs(value - nodata) <= ACCEPTED_ERROR


@numba.njit
def _nearest(values, xmin, ymin, dx, dy, nodata, x, y):
    nrow, ncol = values.shape
    if not (np.isfinite(x) and np.isfinite(y)):
        return nodata
    fcol = np.floor((x - xmin) / dx)
    finvrow = np.floor((y - ymin) / dy)
    # Checked as floats first: far away points would overflow the integers
    if fcol < 0 or fcol >= ncol or finvrow < 0 or finvrow >= nrow:
        return nodata
    col = int(fcol)
    row = (nrow - 1) - int(finvrow)
    return values[row, col]


@numba.njit
def _bilinear(values, xmin, ymin, dx, dy, nodata, x, y):
    """
    Bilinear interpolation between the centres of the four cells surrounding
    (x, y). Falls back to the nearest cell when any of the four lies outside
    the grid or is NoData.
    """
    nrow, ncol = values.shape
    if not (np.isfinite(x) and np.isfinite(y)):
        return nodata

    # Fractional positions relative to the cell centres; inverted rows count
    # from the south.
    fcol = (x - xmin) / dx - 0.5
    finvrow = (y - ymin) / dy - 0.5
    col0 = np.floor(fcol)
    invrow0 = np.floor(finvrow)
    if col0 < 0 or col0 + 1 >= ncol or invrow0 < 0 or invrow0 + 1 >= nrow:
        return _nearest(values, xmin, ymin, dx, dy, nodata, x, y)

    c0 = int(col0)
    r0 = (nrow - 1) - int(invrow0)  # southern row
    r1 = r0 - 1  # northern row
    v00 = values[r0, c0]
    v01 = values[r0, c0 + 1]
    v10 = values[r1, c0]
    v11 = values[r1, c0 + 1]
    if (
        _is_missing(v00, nodata)
        or _is_missing(v01, nodata)
        or _is_missing(v10, nodata)
        or _is_missing(v11, nodata)
    ):
        return _nearest(values, xmin, ymin, dx, dy, nodata, x, y)

    tx = fcol - col0
    ty = finvrow - invrow0
    south = (1.0 - tx) * v00 + tx * v01
    north = (1.0 - tx) * v10 + tx * v11
    return (1.0 - ty) * south + ty * north


@numba.njit
def _sample(values, xmin, ymin, dx, dy, nodata, x, y, interpolate):
    n = x.size
    out = np.empty(n, dtype=np.float64)
    for i in range(n):
        if interpolate:
            out[i] = _bilinear(values, xmin, ymin, dx, dy, nodata, x[i], y[i])
        else:
            out[i] = _nearest(values, xmin, ymin, dx, dy, nodata, x[i], y[i])
    return out


def _grid_args(grid: Grid):
    return grid.values, grid.xmin, grid.ymin, grid.dx, grid.dy, grid.nodata


def get_value(grid: Grid, x: float, y: float) -> float:
    """
    Value of the cell containing (x, y).

    The lower and left cell edges belong to the cell; a point on the exact
    lower-left corner of the grid gets the value of the bottom-left cell.
    """
    return float(_nearest(*_grid_args(grid), float(x), float(y)))


def get_interpolated_value(grid: Grid, x: float, y: float) -> float:
    """
    Bilinearly interpolated value at (x, y), see :func:`sample`.
    """
    return float(_bilinear(*_grid_args(grid), float(x), float(y)))


def sample(grid: Grid, x, y, interpolate: bool = False) -> FloatArray:
    """
    Sample a grid at many points.

    Parameters
    ----------
    grid : Grid
    x : array-like of floats
    y : array-like of floats
    interpolate : bool, default False
        If False, the value of the cell containing the point is returned.
        If True, values are interpolated bilinearly between the centres of
        the four surrounding cells. When one of these is missing (outside
        the grid, NoData or NaN) the value of the containing cell is used
        instead, so interpolation never introduces NaN.

    Returns
    -------
    np.ndarray of floats
        Sampled values, the NoData sentinel of the grid for points outside.
    """
    x = np.atleast_1d(np.asarray(x, dtype=np.float64))
    y = np.atleast_1d(np.asarray(y, dtype=np.float64))
    if x.shape != y.shape:
        raise ValueError(f"Shapes of x and y differ: {x.shape} and {y.shape}")
    values = _sample(*_grid_args(grid), x.ravel(), y.ravel(), interpolate)
    return values.reshape(x.shape)
