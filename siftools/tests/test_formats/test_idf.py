import numpy as np
import pytest
from pytest import approx

from siftools.formats import idf, read_grid
from siftools.grid import Grid


@pytest.fixture(scope="module", params=[np.float32, np.float64])
def dtype(request):
    return request.param


@pytest.fixture(scope="module")
def test_grid():
    values = np.array(
        [
            [1.0, 2.0, 3.0, 4.0],
            [5.0, -9999.0, 7.0, 8.0],
            [9.0, 10.0, 11.0, 12.5],
        ]
    )
    return Grid(values, xmin=100.0, ymin=200.0, dx=25.0, dy=50.0, nodata=-9999.0)


def test_header(tmp_path, test_grid, dtype):
    path = tmp_path / "test.idf"
    idf.write(path, test_grid, dtype=dtype)
    attrs = idf.header(path)
    assert attrs["ncol"] == 4
    assert attrs["nrow"] == 3
    assert attrs["xmin"] == 100.0
    assert attrs["xmax"] == 200.0
    assert attrs["ymin"] == 200.0
    assert attrs["ymax"] == 350.0
    assert attrs["dx"] == 25.0
    assert attrs["dy"] == 50.0
    assert attrs["dmin"] == 1.0
    assert attrs["dmax"] == 12.5
    assert attrs["nodata"] == -9999.0
    assert attrs["dtype"] == np.dtype(dtype).name
    assert attrs["headersize"] == (52 if dtype == np.float32 else 104)


def test_write_read(tmp_path, test_grid, dtype):
    path = tmp_path / "test.idf"
    idf.write(path, test_grid, dtype=dtype)
    grid = idf.read(path)
    assert grid.values.dtype == np.float64
    assert np.array_equal(grid.values, test_grid.values)
    assert grid.extent == test_grid.extent
    assert grid.dx == 25.0
    assert grid.dy == 50.0
    assert grid.nodata == -9999.0


def test_write_adds_extension(tmp_path, test_grid):
    idf.write(tmp_path / "noext", test_grid)
    assert (tmp_path / "noext.idf").exists()


def test_write_invalid_dtype(tmp_path, test_grid):
    with pytest.raises(ValueError, match="Invalid dtype"):
        idf.write(tmp_path / "test.idf", test_grid, dtype=np.int32)
    assert not (tmp_path / "test.idf").exists()


def test_write_all_nodata(tmp_path):
    grid = Grid(np.full((2, 2), -1.0), 0.0, 0.0, 1.0, 1.0, nodata=-1.0)
    path = tmp_path / "nodata.idf"
    idf.write(path, grid)
    attrs = idf.header(path)
    assert attrs["dmin"] == -1.0
    assert attrs["dmax"] == -1.0


def test_write_nodata_tolerance(tmp_path):
    values = np.array([[-9999.05, -9999.0], [3.0, 4.0]])
    grid = Grid(values, 0.0, 0.0, 1.0, 1.0, -9999.0)
    path = tmp_path / "tolerance.idf"
    idf.write(path, grid, dtype=np.float64)
    attrs = idf.header(path)
    assert attrs["dmin"] == approx(-9999.05)
    assert attrs["dmax"] == 4.0


def test_read_invalid(tmp_path):
    path = tmp_path / "invalid.idf"
    path.write_bytes(np.array([1234, 0, 0], dtype=np.int32).tobytes())
    with pytest.raises(ValueError, match="Not a supported IDF file"):
        idf.read(path)


def test_read_truncated(tmp_path, test_grid):
    path = tmp_path / "test.idf"
    idf.write(path, test_grid)
    content = path.read_bytes()
    path.write_bytes(content[:-8])
    with pytest.raises(ValueError, match="truncated"):
        idf.read(path)


def test_read_grid(tmp_path, test_grid):
    path = tmp_path / "test.IDF"
    idf.write(path, test_grid)
    grid = read_grid(path)
    assert grid.values[2, 3] == approx(12.5)

    with pytest.raises(ValueError, match="Unsupported grid format"):
        read_grid(tmp_path / "test.tif")
