import textwrap

import numpy as np
import pytest

from siftools.formats import asc, read_grid
from siftools.grid import Grid


def test_read(tmp_path):
    path = tmp_path / "test.asc"
    path.write_text(
        textwrap.dedent(
            """\
            NCOLS 3
            NROWS 2
            XLLCORNER 10.0
            YLLCORNER 20.0
            CELLSIZE 5.0
            NODATA_VALUE -9999
            1.0 2.0 3.0
            4.0 -9999 6.5
            """
        )
    )
    grid = asc.read(path)
    assert grid.values.shape == (2, 3)
    assert np.array_equal(grid.values, [[1.0, 2.0, 3.0], [4.0, -9999.0, 6.5]])
    assert grid.extent == (10.0, 20.0, 25.0, 30.0)
    assert grid.nodata == -9999.0


def test_read_header_order_and_center(tmp_path):
    path = tmp_path / "test.asc"
    path.write_text(
        textwrap.dedent(
            """\
            ncols 2
            nrows 1
            cellsize 10
            xllcenter 5
            yllcenter 15
            nodata_value -1
            1 2
            """
        )
    )
    grid = asc.read(path)
    assert grid.xmin == 0.0
    assert grid.ymin == 10.0
    assert grid.nodata == -1.0


def test_read_decimal_comma(tmp_path):
    path = tmp_path / "comma.asc"
    path.write_text(
        textwrap.dedent(
            """\
            NCOLS 2
            NROWS 2
            XLLCORNER 0,5
            YLLCORNER 0
            CELLSIZE 1
            NODATA_VALUE -9999
            1,5 2,25
            3 -4,75
            """
        )
    )
    grid = asc.read(path)
    assert grid.xmin == 0.5
    assert np.array_equal(grid.values, [[1.5, 2.25], [3.0, -4.75]])


def test_read_comma_separated(tmp_path):
    path = tmp_path / "csv.asc"
    path.write_text(
        textwrap.dedent(
            """\
            NCOLS 3
            NROWS 1
            XLLCORNER 0
            YLLCORNER 0
            CELLSIZE 1
            NODATA_VALUE -9999
            1.5,2.5,3.5
            """
        )
    )
    grid = asc.read(path)
    assert np.array_equal(grid.values, [[1.5, 2.5, 3.5]])


def test_read_comma_separated_integers(tmp_path):
    path = tmp_path / "ints.asc"
    path.write_text(
        textwrap.dedent(
            """\
            NCOLS 2
            NROWS 2
            XLLCORNER 0
            YLLCORNER 0
            CELLSIZE 1
            NODATA_VALUE -9999
            1,2
            3,4
            """
        )
    )
    grid = asc.read(path)
    assert np.array_equal(grid.values, [[1.0, 2.0], [3.0, 4.0]])


def test_read_decimal_comma_values_only(tmp_path):
    path = tmp_path / "comma_values.asc"
    path.write_text(
        textwrap.dedent(
            """\
            NCOLS 2
            NROWS 2
            XLLCORNER 0
            YLLCORNER 0
            CELLSIZE 1
            NODATA_VALUE -9999
            1,5 2,5
            3,5 4,5
            """
        )
    )
    grid = asc.read(path)
    assert np.array_equal(grid.values, [[1.5, 2.5], [3.5, 4.5]])


def test_read_value_count_mismatch(tmp_path):
    path = tmp_path / "short.asc"
    path.write_text(
        "NCOLS 2\nNROWS 2\nXLLCORNER 0\nYLLCORNER 0\nCELLSIZE 1\nNODATA_VALUE -1\n"
        "1 2 3\n"
    )
    with pytest.raises(ValueError, match="Too few values"):
        asc.read(path)


def test_read_unknown_keyword(tmp_path):
    path = tmp_path / "bad.asc"
    path.write_text(
        "NCOLS 2\nNROWS 2\nXLL 0\nYLLCORNER 0\nCELLSIZE 1\nNODATA_VALUE -1\n"
        "1 2 3 4\n"
    )
    with pytest.raises(ValueError, match="Unknown ASC header keyword"):
        asc.read(path)


def test_write_read(tmp_path):
    values = np.array([[0.1, 2.0], [-9999.0, 1.0e-3]])
    grid = Grid(values, xmin=155000.0, ymin=463000.0, dx=25.0, dy=25.0, nodata=-9999.0)
    path = tmp_path / "test.asc"
    asc.write(path, grid)
    back = read_grid(path)
    assert np.array_equal(back.values, values)
    assert back.extent == grid.extent
    assert path.read_text().splitlines()[5] == "NODATA_VALUE -9999"


def test_write_decimal_count(tmp_path):
    grid = Grid(np.array([[1.234, 5.0]]), 0.0, 0.0, 1.0, 1.0, -9999.0)
    path = tmp_path / "test.asc"
    asc.write(path, grid, decimal_count=1)
    assert path.read_text().splitlines()[-1] == "1.2 5.0"


def test_write_non_square(tmp_path):
    grid = Grid(np.ones((2, 2)), 0.0, 0.0, 1.0, 2.0, -9999.0)
    with pytest.raises(ValueError, match="square cells"):
        asc.write(tmp_path / "test.asc", grid)
