"""
Module to define type aliases.
"""

import pathlib
from typing import TypeAlias, Union

import numpy as np
from numpy.typing import NDArray

FloatArray: TypeAlias = NDArray[np.floating]
IntArray: TypeAlias = NDArray[np.int_]
DatetimeArray: TypeAlias = NDArray[np.datetime64]
PathLike: TypeAlias = Union[str, pathlib.Path]
