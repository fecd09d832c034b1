"""
Functions for reading and writing iMOD Data Files (IDFs) to :class:`siftools.grid.Grid`.

Only equidistant IDFs are supported, in single and double precision.
"""

import pathlib
import struct

import numpy as np

from siftools.grid import Grid
from siftools.typing import PathLike
from siftools.util.path import atomic_write

# Make sure we can still use the built-in function...
f_open = open


def header(path: PathLike) -> dict:
    """Read the IDF header information into a dictionary"""
    attrs = {}
    with f_open(path, "rb") as f:
        reclen_id = struct.unpack("i", f.read(4))[0]  # Lahey RecordLength Ident.
        if reclen_id == 1271:
            floatsize = intsize = 4
            floatformat = "f"
            intformat = "i"
            dtype = "float32"
            doubleprecision = False
        # 2296 was a typo in the iMOD manual. Keep 2296 around in case some IDFs
        # were written with this identifier.
        elif reclen_id == 2295 or reclen_id == 2296:
            floatsize = intsize = 8
            floatformat = "d"
            intformat = "q"
            dtype = "float64"
            doubleprecision = True
        else:
            raise ValueError(
                f"Not a supported IDF file: {path}\n"
                "Record length identifier should be 1271 or 2295, "
                f"received {reclen_id} instead."
            )

        # Header is fully doubled in size in case of double precision ...
        # This means integers are also turned into 8 bytes
        # and requires padding with some additional bytes
        if doubleprecision:
            f.read(4)  # not used

        ncol = struct.unpack(intformat, f.read(intsize))[0]
        nrow = struct.unpack(intformat, f.read(intsize))[0]
        attrs["xmin"] = struct.unpack(floatformat, f.read(floatsize))[0]
        attrs["xmax"] = struct.unpack(floatformat, f.read(floatsize))[0]
        attrs["ymin"] = struct.unpack(floatformat, f.read(floatsize))[0]
        attrs["ymax"] = struct.unpack(floatformat, f.read(floatsize))[0]
        attrs["dmin"] = struct.unpack(floatformat, f.read(floatsize))[0]
        attrs["dmax"] = struct.unpack(floatformat, f.read(floatsize))[0]
        attrs["nodata"] = struct.unpack(floatformat, f.read(floatsize))[0]
        # flip definition here such that True means equidistant
        ieq = not struct.unpack("?", f.read(1))[0]
        itb = struct.unpack("?", f.read(1))[0]

        f.read(2)  # not used
        if doubleprecision:
            f.read(4)  # not used

        if not ieq:
            raise ValueError(f"Non-equidistant IDF files are not supported: {path}")

        attrs["dx"] = struct.unpack(floatformat, f.read(floatsize))[0]
        attrs["dy"] = struct.unpack(floatformat, f.read(floatsize))[0]

        if itb:
            attrs["top"] = struct.unpack(floatformat, f.read(floatsize))[0]
            attrs["bot"] = struct.unpack(floatformat, f.read(floatsize))[0]

        attrs["headersize"] = f.tell()
        attrs["ncol"] = ncol
        attrs["nrow"] = nrow
        attrs["dtype"] = dtype

    return attrs


def read(path: PathLike) -> Grid:
    """
    Read a single IDF file.

    Parameters
    ----------
    path : str or Path

    Returns
    -------
    Grid
        Values are returned as read, NoData values keep the sentinel of the
        file.
    """
    attrs = header(path)
    nrow = attrs["nrow"]
    ncol = attrs["ncol"]
    with f_open(path, "rb") as f:
        f.seek(attrs["headersize"])
        a = np.fromfile(f, attrs["dtype"], nrow * ncol)
    if a.size != nrow * ncol:
        raise ValueError(
            f"IDF file {path} is truncated: expected {nrow * ncol} values, "
            f"found {a.size}"
        )
    values = a.reshape((nrow, ncol)).astype(np.float64)
    return Grid(
        values,
        xmin=attrs["xmin"],
        ymin=attrs["ymin"],
        dx=attrs["dx"],
        dy=attrs["dy"],
        nodata=attrs["nodata"],
    )


def write(path: PathLike, grid: Grid, dtype=np.float32) -> None:
    """
    Write a Grid to an IDF file.

    Parameters
    ----------
    path : str or Path
        Path to the IDF file to be written. The ".idf" extension is added if
        there is none.
    grid : Grid
    dtype : type, ``{np.float32, np.float64}``, default is ``np.float32``.
        Whether to write single precision or double precision IDF files.
    """
    if dtype == np.float64:
        reclenid = 2295
        floatformat = "d"
        intformat = "q"
        doubleprecision = True
    elif dtype == np.float32:
        reclenid = 1271
        floatformat = "f"
        intformat = "i"
        doubleprecision = False
    else:
        raise ValueError("Invalid dtype, IDF allows only np.float32 and np.float64")

    path = pathlib.Path(path)
    if path.suffix == "":
        path = path.with_suffix(".idf")

    values = grid.values.astype(dtype)
    data = values[~grid.is_nodata()]
    if data.size > 0:
        dmin = float(data.min())
        dmax = float(data.max())
    else:
        dmin = dmax = grid.nodata

    with atomic_write(path, "wb") as f:
        f.write(struct.pack("i", reclenid))  # Lahey RecordLength Ident.
        if doubleprecision:
            f.write(struct.pack("i", reclenid))
        f.write(struct.pack(intformat, grid.ncol))
        f.write(struct.pack(intformat, grid.nrow))
        f.write(struct.pack(floatformat, grid.xmin))
        f.write(struct.pack(floatformat, grid.xmax))
        f.write(struct.pack(floatformat, grid.ymin))
        f.write(struct.pack(floatformat, grid.ymax))
        f.write(struct.pack(floatformat, dmin))
        f.write(struct.pack(floatformat, dmax))
        f.write(struct.pack(floatformat, grid.nodata))
        f.write(struct.pack("?", False))  # ieq: equidistant
        f.write(struct.pack("?", False))  # itb: no top and bottom
        f.write(struct.pack("xx"))  # not used
        if doubleprecision:
            f.write(struct.pack("xxxx"))  # not used
        f.write(struct.pack(floatformat, grid.dx))
        f.write(struct.pack(floatformat, grid.dy))
        values.tofile(f)
