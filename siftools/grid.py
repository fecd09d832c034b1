"""
Regular, equidistant grids as read from IDF and ASC files.

A :class:`Grid` keeps the NoData sentinel of the file it was read from,
rather than converting NoData to NaN like ``xarray`` based code does. The
sampling tools compare values against the sentinel, and write the sentinel
back. Use :meth:`Grid.to_dataarray` and :meth:`Grid.from_dataarray` to move
between both representations.
"""

import dataclasses
from typing import Tuple

import numpy as np
import xarray as xr

from siftools.typing import FloatArray
from siftools.util.number import ACCEPTED_ERROR


@dataclasses.dataclass(frozen=True, eq=False)
class Grid:
    """
    Equidistant grid with lower-left origin.

    Row 0 of ``values`` is the northernmost row, as in the files.

    Parameters
    ----------
    values : np.ndarray of floats with shape (nrow, ncol)
    xmin : float
        x coordinate of the lower-left corner.
    ymin : float
        y coordinate of the lower-left corner.
    dx : float
        Cell width, positive.
    dy : float
        Cell height, positive.
    nodata : float
        NoData sentinel.
    """

    values: FloatArray
    xmin: float
    ymin: float
    dx: float
    dy: float
    nodata: float

    def __post_init__(self):
        values = np.asarray(self.values, dtype=np.float64).view()
        if values.ndim != 2:
            raise ValueError(
                f"Grid values must be two-dimensional, received shape {values.shape}"
            )
        if not (self.dx > 0.0 and self.dy > 0.0):
            raise ValueError(
                f"Cell sizes must be positive, received dx={self.dx}, dy={self.dy}"
            )
        # The core only reads the values
        values.flags.writeable = False
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "xmin", float(self.xmin))
        object.__setattr__(self, "ymin", float(self.ymin))
        object.__setattr__(self, "dx", float(self.dx))
        object.__setattr__(self, "dy", float(self.dy))
        object.__setattr__(self, "nodata", float(self.nodata))

    @property
    def nrow(self) -> int:
        return self.values.shape[0]

    @property
    def ncol(self) -> int:
        return self.values.shape[1]

    @property
    def xmax(self) -> float:
        return self.xmin + self.ncol * self.dx

    @property
    def ymax(self) -> float:
        return self.ymin + self.nrow * self.dy

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """(xmin, ymin, xmax, ymax)"""
        return self.xmin, self.ymin, self.xmax, self.ymax

    def contains(self, x: float, y: float) -> bool:
        """
        Whether (x, y) lies within the extent. Lower and left edges are
        inclusive, upper and right edges exclusive, matching the cell
        lookup.
        """
        return (self.xmin <= x < self.xmax) and (self.ymin <= y < self.ymax)

    def is_nodata(self) -> np.ndarray:
        """Boolean array marking NoData (or NaN) cells."""
        isnan = np.isnan(self.values)
        if np.isnan(self.nodata):
            return isnan
        return isnan | (np.abs(self.values - self.nodata) <= ACCEPTED_ERROR)

    def to_dataarray(self, name: str = None) -> xr.DataArray:
        """
        Convert to a DataArray with ``y`` and ``x`` cell centre coordinates.
        NoData cells become NaN; ``dx`` and ``dy`` are added as scalar
        coordinates, ``dy`` negative since y decreases with the rows.
        """
        coords = {
            "y": self.ymax - (np.arange(self.nrow) + 0.5) * self.dy,
            "x": self.xmin + (np.arange(self.ncol) + 0.5) * self.dx,
            "dx": self.dx,
            "dy": -self.dy,
        }
        data = np.where(self.is_nodata(), np.nan, self.values)
        return xr.DataArray(
            data,
            coords=coords,
            dims=("y", "x"),
            name=name,
            attrs={"nodata": self.nodata},
        )

    @classmethod
    def from_dataarray(cls, da: xr.DataArray, nodata: float = None) -> "Grid":
        """
        Create a Grid from an equidistant DataArray with dimensions ("y", "x").
        NaN values are replaced by ``nodata``; it defaults to the ``nodata``
        attribute, or -9999.0.
        """
        if da.dims != ("y", "x"):
            raise ValueError(
                f'Dimensions must be exactly ("y", "x"). Received {da.dims}'
            )
        if nodata is None:
            nodata = da.attrs.get("nodata", -9999.0)

        flip = slice(None, None, -1)
        if not da.indexes["x"].is_monotonic_increasing:
            da = da.isel(x=flip)
        if not da.indexes["y"].is_monotonic_decreasing:
            da = da.isel(y=flip)

        dx = _cellsize(da, "x")
        dy = _cellsize(da, "y")
        x = da["x"].values
        y = da["y"].values
        xmin = float(x[0]) - 0.5 * dx
        ymin = float(y[-1]) - 0.5 * dy
        values = np.where(np.isnan(da.values), nodata, da.values)
        return cls(values, xmin, ymin, dx, dy, nodata)


def _cellsize(da: xr.DataArray, dim: str) -> float:
    dname = f"d{dim}"
    if dname in da.coords:
        cellsize = da.coords[dname]
        if cellsize.size != 1:
            raise ValueError(f"Grid must be equidistant, {dname} is not a scalar")
        return abs(float(cellsize))
    coord = da[dim].values
    if coord.size < 2:
        raise ValueError(f'Cannot infer cell size of "{dim}" from a single value')
    diffs = np.abs(np.diff(coord))
    if not np.allclose(diffs, diffs[0]):
        raise ValueError(f"Grid must be equidistant along {dim}")
    return float(diffs[0])
