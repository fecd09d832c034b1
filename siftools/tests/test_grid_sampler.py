import numpy as np
import pytest
from pytest import approx

from siftools.grid import Grid
from siftools.sample import grid_sampler


def test_get_value_lower_left_corner(simple_grid):
    assert grid_sampler.get_value(simple_grid, 0.0, 0.0) == 9.0


def test_get_value_rows_inverted(simple_grid):
    assert grid_sampler.get_value(simple_grid, 15.0, 25.0) == 2.0
    assert grid_sampler.get_value(simple_grid, 39.9, 29.9) == 4.0
    assert grid_sampler.get_value(simple_grid, 35.0, 15.0) == 8.0


def test_get_value_outside(simple_grid):
    nodata = simple_grid.nodata
    # One cellsize beyond xmax
    assert grid_sampler.get_value(simple_grid, simple_grid.xmax + 10.0, 5.0) == nodata
    # Upper and right edges are outside
    assert grid_sampler.get_value(simple_grid, 40.0, 5.0) == nodata
    assert grid_sampler.get_value(simple_grid, 5.0, 30.0) == nodata
    assert grid_sampler.get_value(simple_grid, -0.001, 5.0) == nodata
    assert grid_sampler.get_value(simple_grid, 1.0e300, 5.0) == nodata
    assert grid_sampler.get_value(simple_grid, np.nan, 5.0) == nodata


def test_get_interpolated_value(simple_grid):
    # Cell corner: mean of the four surrounding cell centres 9, 10, 5, 6
    assert grid_sampler.get_interpolated_value(simple_grid, 10.0, 10.0) == approx(7.5)
    # Cell centre
    assert grid_sampler.get_interpolated_value(simple_grid, 15.0, 15.0) == approx(6.0)
    # Halfway between two centres in x
    assert grid_sampler.get_interpolated_value(simple_grid, 10.0, 15.0) == approx(5.5)


def test_get_interpolated_value_edge_falls_back(simple_grid):
    # Within half a cell of the edge, not all four neighbours exist
    assert grid_sampler.get_interpolated_value(simple_grid, 2.0, 2.0) == 9.0
    assert grid_sampler.get_interpolated_value(simple_grid, 38.0, 28.0) == 4.0
    value = grid_sampler.get_interpolated_value(simple_grid, 50.0, 5.0)
    assert value == simple_grid.nodata


def test_get_interpolated_value_nodata_neighbour(nodata_grid):
    # The north-east neighbour is NoData: value of the containing cell
    assert grid_sampler.get_interpolated_value(nodata_grid, 12.0, 8.0) == 10.0
    # The containing cell is NoData itself
    assert grid_sampler.get_interpolated_value(nodata_grid, 12.0, 12.0) == -9999.0


def test_get_interpolated_value_nan_neighbour():
    values = np.array([[1.0, np.nan], [3.0, 4.0]])
    grid = Grid(values, 0.0, 0.0, 1.0, 1.0, -9999.0)
    value = grid_sampler.get_interpolated_value(grid, 0.9, 0.9)
    assert not np.isnan(value)
    assert value == 3.0


def test_sample_vectorized(simple_grid):
    x = np.array([0.0, 15.0, 100.0])
    y = np.array([0.0, 25.0, 100.0])
    actual = grid_sampler.sample(simple_grid, x, y)
    assert np.array_equal(actual, [9.0, 2.0, -9999.0])

    actual = grid_sampler.sample(simple_grid, [10.0], [10.0], interpolate=True)
    assert actual == approx([7.5])


def test_sample_shape_mismatch(simple_grid):
    with pytest.raises(ValueError, match="Shapes"):
        grid_sampler.sample(simple_grid, [1.0, 2.0], [1.0])


def test_sample_leaves_grid_unchanged(simple_grid):
    before = simple_grid.values.copy()
    grid_sampler.sample(simple_grid, [5.0, 15.0], [5.0, 15.0], interpolate=True)
    assert np.array_equal(simple_grid.values, before)
