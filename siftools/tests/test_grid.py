import numpy as np
import pytest
import xarray as xr

from siftools.grid import Grid


def test_grid_properties(simple_grid):
    assert simple_grid.nrow == 3
    assert simple_grid.ncol == 4
    assert simple_grid.extent == (0.0, 0.0, 40.0, 30.0)


def test_contains(simple_grid):
    assert simple_grid.contains(0.0, 0.0)
    assert simple_grid.contains(39.9, 29.9)
    # Upper and right edges are exclusive
    assert not simple_grid.contains(40.0, 15.0)
    assert not simple_grid.contains(15.0, 30.0)
    assert not simple_grid.contains(-0.1, 15.0)


def test_values_read_only(simple_grid):
    with pytest.raises(ValueError):
        simple_grid.values[0, 0] = 0.0


def test_is_nodata(nodata_grid):
    expected = np.zeros((3, 4), dtype=bool)
    expected[1, 1] = True
    assert np.array_equal(nodata_grid.is_nodata(), expected)


def test_is_nodata_tolerance():
    values = np.array([[-9999.05, -9999.00005, -9999.0, 1.0]])
    grid = Grid(values, 0.0, 0.0, 1.0, 1.0, -9999.0)
    assert np.array_equal(grid.is_nodata(), [[False, True, True, False]])


@pytest.mark.parametrize(
    ("values", "dx", "dy"),
    [
        (np.ones(3), 1.0, 1.0),
        (np.ones((2, 2)), 0.0, 1.0),
        (np.ones((2, 2)), 1.0, -1.0),
    ],
)
def test_grid_invalid(values, dx, dy):
    with pytest.raises(ValueError):
        Grid(values, 0.0, 0.0, dx, dy, -9999.0)


def test_to_dataarray(nodata_grid):
    da = nodata_grid.to_dataarray("head")
    assert da.dims == ("y", "x")
    assert np.allclose(da["x"].values, [5.0, 15.0, 25.0, 35.0])
    assert np.allclose(da["y"].values, [25.0, 15.0, 5.0])
    assert float(da["dy"]) == -10.0
    assert np.isnan(da.values[1, 1])
    assert da.values[0, 0] == 1.0


def test_dataarray_roundtrip(nodata_grid):
    back = Grid.from_dataarray(nodata_grid.to_dataarray())
    assert back.extent == nodata_grid.extent
    assert back.nodata == nodata_grid.nodata
    assert np.array_equal(back.values, nodata_grid.values)


def test_from_dataarray_ascending_y():
    da = xr.DataArray(
        [[1.0, 2.0], [3.0, np.nan]],
        coords={"y": [0.5, 1.5], "x": [0.5, 1.5]},
        dims=("y", "x"),
    )
    grid = Grid.from_dataarray(da, nodata=-1.0)
    assert grid.extent == (0.0, 0.0, 2.0, 2.0)
    # Row 0 is the northernmost row
    assert np.array_equal(grid.values, [[3.0, -1.0], [1.0, 2.0]])


def test_from_dataarray_invalid():
    da = xr.DataArray(
        [[1.0], [2.0]], coords={"x": [0.5, 1.5], "y": [0.5]}, dims=("x", "y")
    )
    with pytest.raises(ValueError, match="Dimensions"):
        Grid.from_dataarray(da)

    da = xr.DataArray(
        [[1.0, 2.0, 3.0]],
        coords={"y": [0.5], "x": [0.5, 1.5, 3.5]},
        dims=("y", "x"),
    )
    with pytest.raises(ValueError, match="equidistant"):
        Grid.from_dataarray(da)
