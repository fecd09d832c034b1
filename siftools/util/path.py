import contextlib
import os
import pathlib
import tempfile
from typing import Union

from siftools.exceptions import ToolError


@contextlib.contextmanager
def atomic_write(path: Union[str, pathlib.Path], mode: str = "w", **kwargs):
    """
    Write a file all-or-nothing.

    The content is written to a temporary file in the same directory, which
    replaces ``path`` only when the with block finishes without an error.

    Examples
    --------
    >>> with atomic_write("result.ipf") as f:
            f.write(content)

    """
    path = pathlib.Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmpname = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    try:
        with os.fdopen(fd, mode, **kwargs) as f:
            yield f
        os.replace(tmpname, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.remove(tmpname)
        raise


@contextlib.contextmanager
def staged_directory(directory: Union[str, pathlib.Path]):
    """
    Collect several output files in a temporary directory and move them into
    ``directory`` when the with block finishes without an error.

    Files are moved one by one with ``os.replace``; relative subdirectories
    are preserved. On error, the temporary directory is removed and
    ``directory`` is left untouched.
    """
    directory = pathlib.Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    with tempfile.TemporaryDirectory(prefix=".siftools.", dir=directory) as tmpdir:
        staging = pathlib.Path(tmpdir)
        yield staging
        for source in sorted(p for p in staging.rglob("*") if p.is_file()):
            target = directory / source.relative_to(staging)
            target.parent.mkdir(parents=True, exist_ok=True)
            os.replace(source, target)


def check_input_file(path: Union[str, pathlib.Path], description: str) -> pathlib.Path:
    path = pathlib.Path(path)
    if not path.is_file():
        raise ToolError(f"{description} doesn't exist: {path}")
    return path


def check_output_file(path: Union[str, pathlib.Path], overwrite: bool) -> pathlib.Path:
    path = pathlib.Path(path)
    if path.exists() and not overwrite:
        raise ToolError(
            f"Output file exists, use overwrite option: {path}. Processing is aborted."
        )
    return path
