from enum import Enum

import siftools
from siftools.typing import PathLike

from .loglevel import LogLevel
from .logurulogger import LoguruLogger
from .nulllogger import NullLogger
from .pythonlogger import LOGFILE, PythonLogger


class LoggerType(Enum):
    """
    The logging frameworks siftools can forward its messages to.
    """

    PYTHON = "python"
    """
    The standard library logging framework, logger name ``siftools``.
    """
    LOGURU = "loguru"
    """
    The loguru logging framework.
    """
    NULL = "null"
    """
    Discards all messages. This is the default until :func:`configure` is
    called.
    """

    @classmethod
    def from_name(cls, name: str) -> "LoggerType":
        try:
            return cls(name.lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown logger {name}, should be one of: {valid}")


def configure(
    logger_type: LoggerType,
    log_level: LogLevel = LogLevel.WARNING,
    add_default_stream_handler: bool = True,
    add_default_file_handler: bool = False,
    log_file: PathLike = LOGFILE,
) -> None:
    """
    Select the logging framework for all siftools messages and set the log
    level.

    Parameters
    ----------
    logger_type : LoggerType
        The logging framework to be used.
    log_level : LogLevel
        Messages below this level are dropped.
    add_default_stream_handler : bool
        Print the messages to stdout. True by default.
    add_default_file_handler : bool
        Also write the messages to ``log_file``. False by default.
    log_file : str or Path
        Log file of the default file handler, ``siftools.log`` by default.
    """
    match logger_type:
        case LoggerType.PYTHON:
            siftools.logging.logger.instance = PythonLogger(
                log_level,
                add_default_stream_handler,
                add_default_file_handler,
                log_file,
            )
        case LoggerType.LOGURU:
            siftools.logging.logger.instance = LoguruLogger(
                log_level,
                add_default_stream_handler,
                add_default_file_handler,
                log_file,
            )
        case _:
            siftools.logging.logger.instance = NullLogger()
