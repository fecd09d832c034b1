import pytest

import siftools.logging
from siftools.logging.nulllogger import NullLogger

from .fixtures.grid_fixture import nodata_grid, simple_grid
from .fixtures.points_fixture import observations, timeseries_dataset


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    siftools.logging.logger.instance = NullLogger()
