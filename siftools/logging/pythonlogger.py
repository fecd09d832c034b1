import logging
import sys

from siftools.logging.ilogger import ILogger
from siftools.logging.loglevel import LogLevel
from siftools.typing import PathLike

LOGFILE = "siftools.log"


def _formatter():
    return logging.Formatter(
        "%(name)s: %(asctime)s | %(levelname)s | "
        "%(filename)s:%(lineno)s >>> %(message)s"
    )


def _stack_level(additional_depth: int) -> int:
    """
    The stack level is used to print the file and line number of the line
    being logged. There are a few layers between the place where the siftools
    logger is called and the python logger: the holder and this wrapper.

    An additional_depth can be provided for decorators, which introduce
    another level.
    """

    default_stack_level = 3
    return default_stack_level + additional_depth


class PythonLogger(ILogger):
    """
    The :class:`PythonLogger` forwards siftools messages to the "siftools"
    logger of the standard library. Default handlers of an earlier
    configuration are replaced; handlers added by the application are kept.
    """

    def __init__(
        self,
        log_level: LogLevel,
        add_default_stream_handler: bool,
        add_default_file_handler: bool,
        log_file: PathLike = LOGFILE,
    ) -> None:
        self.logger = logging.getLogger("siftools")
        self._set_level(log_level)
        self._remove_default_handlers()

        if add_default_stream_handler:
            self._add_stream_handler()
        if add_default_file_handler:
            self._add_file_handler(log_file)

    def debug(self, message: str, additional_depth: int = 0) -> None:
        self.logger.debug(message, stacklevel=_stack_level(additional_depth))

    def info(self, message: str, additional_depth: int = 0) -> None:
        self.logger.info(message, stacklevel=_stack_level(additional_depth))

    def warning(self, message: str, additional_depth: int = 0) -> None:
        self.logger.warning(message, stacklevel=_stack_level(additional_depth))

    def error(self, message: str, additional_depth: int = 0) -> None:
        self.logger.error(message, stacklevel=_stack_level(additional_depth))

    def critical(self, message: str, additional_depth: int = 0) -> None:
        self.logger.critical(message, stacklevel=_stack_level(additional_depth))

    def _set_level(self, log_level: LogLevel) -> None:
        self.logger.setLevel(log_level.value)

    def _remove_default_handlers(self) -> None:
        # Handlers added by an earlier configure call
        for handler in list(self.logger.handlers):
            if getattr(handler, "_siftools_default", False):
                self.logger.removeHandler(handler)
                handler.close()

    def _add_handler(self, handler: logging.Handler) -> None:
        handler.setFormatter(_formatter())
        handler._siftools_default = True
        self.logger.addHandler(handler)

    def _add_stream_handler(self) -> None:
        self._add_handler(logging.StreamHandler(stream=sys.stdout))

    def _add_file_handler(self, log_file: PathLike) -> None:
        self._add_handler(logging.FileHandler(log_file))
