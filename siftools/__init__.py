# exports
from siftools import evaluate, join, logging, sample, util
from siftools.formats import asc, idf, ipf, read_grid
from siftools.grid import Grid
from siftools.points import Point, PointDataset
from siftools.timeseries import TimeSeries, ValueColumn

__version__ = "0.1.0"
