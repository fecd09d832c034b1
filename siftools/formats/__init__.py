"""
Readers and writers of the iMOD file formats: IDF and ASC grids, IPF point
files with associated TXT time series.
"""

import pathlib

from siftools.formats import asc, idf, ipf
from siftools.grid import Grid
from siftools.typing import PathLike


def read_grid(path: PathLike) -> Grid:
    """
    Read a grid, choosing the reader by file extension: ".idf" or ".asc".
    """
    path = pathlib.Path(path)
    match path.suffix.lower():
        case ".idf":
            reader = idf.read
        case ".asc":
            reader = asc.read
        case _:
            raise ValueError(
                f'Unsupported grid format "{path.suffix}", '
                f"expected .idf or .asc: {path}"
            )
    try:
        return reader(path)
    except ValueError as e:
        raise ValueError(f'{e}\nWhile reading grid file "{path}"') from e
