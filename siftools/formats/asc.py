"""
Functions for reading and writing ESRI ASCII grids (ASC).

The header consists of six ``KEYWORD value`` lines: NCOLS, NROWS,
XLLCORNER (or XLLCENTER), YLLCORNER (or YLLCENTER), CELLSIZE and
NODATA_VALUE. Values follow row by row, starting at the northernmost row,
separated by whitespace or commas. Commas are read as decimal separators
when the header uses them, or when only that reading gives NCOLS x NROWS
values.
"""

import re

import numpy as np

from siftools.grid import Grid
from siftools.typing import PathLike
from siftools.util.number import format_number, format_sentinel
from siftools.util.path import atomic_write

HEADER_KEYS = ("ncols", "nrows", "xll", "yll", "cellsize", "nodata_value")
DECIMAL_COMMA = re.compile(r"^[+-]?\d*,\d+([eE][+-]?\d+)?$")


def _has_decimal_comma(tokens) -> bool:
    """
    Header values are single numbers: a comma between digits is a decimal
    separator.
    """
    return any(DECIMAL_COMMA.match(token) for token in tokens)


def _split(line: str, decimal_comma: bool):
    if decimal_comma:
        return line.replace(",", ".").split()
    return line.replace(",", " ").split()


def _tokens(lines, decimal_comma: bool):
    tokens = []
    for line in lines:
        tokens.extend(_split(line, decimal_comma))
    return tokens


def _value_tokens(lines, expected: int, decimal_comma_header: bool):
    """
    Split the values, reading commas as delimiters or as decimal separators.

    The reading that gives the expected number of values wins. Commas are
    delimiters first, unless the header itself uses decimal commas. If
    neither reading fits, the preferred one is returned.
    """
    preferred = [True, False] if decimal_comma_header else [False, True]
    for decimal_comma in preferred:
        tokens = _tokens(lines, decimal_comma)
        if len(tokens) == expected:
            return tokens
    return _tokens(lines, preferred[0])


def _read_header(f, path):
    attrs = {}
    tokens_seen = []
    for _ in range(len(HEADER_KEYS)):
        line = f.readline()
        parts = line.split(None, 1)
        if len(parts) != 2:
            raise ValueError(f"Invalid ASC header line in {path}: {line!r}")
        key = parts[0].lower().rstrip(",")
        value = parts[1].strip()
        tokens_seen.append(value)
        if key in ("xllcorner", "xllcenter"):
            attrs["xll"] = value
            attrs["x_is_center"] = key == "xllcenter"
        elif key in ("yllcorner", "yllcenter"):
            attrs["yll"] = value
            attrs["y_is_center"] = key == "yllcenter"
        elif key in ("ncols", "nrows", "cellsize", "nodata_value"):
            attrs[key] = value
        else:
            raise ValueError(f"Unknown ASC header keyword in {path}: {parts[0]}")
    missing = [key for key in HEADER_KEYS if key not in attrs]
    if missing:
        raise ValueError(
            f"Missing ASC header keyword(s) in {path}: {', '.join(missing)}"
        )
    return attrs, tokens_seen


def read(path: PathLike) -> Grid:
    """
    Read an ASC file.

    Parameters
    ----------
    path : str or Path

    Returns
    -------
    Grid
    """
    with open(path) as f:
        attrs, header_tokens = _read_header(f, path)
        body = f.read()

    lines = [line for line in body.splitlines() if line.strip()]

    def number(s):
        return float(s.replace(",", "."))

    ncol = int(attrs["ncols"])
    nrow = int(attrs["nrows"])
    cellsize = number(attrs["cellsize"])
    nodata = number(attrs["nodata_value"])
    xll = number(attrs["xll"])
    yll = number(attrs["yll"])
    if attrs["x_is_center"]:
        xll -= 0.5 * cellsize
    if attrs["y_is_center"]:
        yll -= 0.5 * cellsize

    expected = nrow * ncol
    tokens = _value_tokens(lines, expected, _has_decimal_comma(header_tokens))
    if len(tokens) > expected:
        raise ValueError(
            f"Too many values found in ASC file {path}: expected {expected}, "
            f"found {len(tokens)}. Check the decimal separator."
        )
    if len(tokens) < expected:
        raise ValueError(
            f"Too few values found in ASC file {path}: expected {expected}, "
            f"found {len(tokens)}."
        )
    try:
        values = np.array(tokens, dtype=np.float64).reshape((nrow, ncol))
    except ValueError as e:
        raise ValueError(f"{e}\nWhile reading values of ASC file {path}") from e
    return Grid(values, xll, yll, cellsize, cellsize, nodata)


def write(path: PathLike, grid: Grid, decimal_count: int = None) -> None:
    """
    Write a Grid to an ASC file, with a dot as decimal separator.

    Parameters
    ----------
    path : str or Path
    grid : Grid
        Must have square cells.
    decimal_count : int, optional
        Number of decimals. By default the shortest representation of every
        value is written.
    """
    if not np.isclose(grid.dx, grid.dy):
        raise ValueError(
            f"ASC files require square cells, received dx={grid.dx}, dy={grid.dy}"
        )

    if decimal_count is None:
        def fmt(v):
            return format_sentinel(v) if float(v).is_integer() else repr(float(v))
    else:
        def fmt(v):
            return format_number(v, decimal_count)

    with atomic_write(path, "w") as f:
        f.write(f"NCOLS {grid.ncol}\n")
        f.write(f"NROWS {grid.nrow}\n")
        f.write(f"XLLCORNER {grid.xmin!r}\n")
        f.write(f"YLLCORNER {grid.ymin!r}\n")
        f.write(f"CELLSIZE {grid.dx!r}\n")
        f.write(f"NODATA_VALUE {format_sentinel(grid.nodata)}\n")
        for row in grid.values:
            f.write(" ".join(fmt(v) for v in row))
            f.write("\n")
