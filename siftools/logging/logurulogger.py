import sys
from typing import Optional

from loguru import logger

from siftools.logging.ilogger import ILogger
from siftools.logging.loglevel import LogLevel
from siftools.typing import PathLike

FORMAT = (
    "siftools: {time:YYYY-MM-DD HH:mm:ss} | {level} | {file}:{line} >>> {message}"
)


def _depth_level(additional_depth: Optional[int]) -> int:
    """
    The depth level is used to print the file and line number of the line
    being logged, skipping the holder and this wrapper.
    """

    default_stack_level = 2
    if additional_depth is not None:
        return default_stack_level + additional_depth
    else:
        return default_stack_level


class LoguruLogger(ILogger):
    """
    The :class:`LoguruLogger` forwards siftools messages to loguru.

    Loguru has a single global logger. Its handlers are replaced by the ones
    requested here, so configuring siftools twice does not duplicate output.
    """

    def __init__(
        self,
        log_level: LogLevel,
        add_default_stream_handler: bool,
        add_default_file_handler: bool,
        log_file: PathLike = "siftools.log",
    ) -> None:
        # Remove default handler set by loguru
        logger.remove()

        if add_default_stream_handler:
            logger.add(sys.stdout, level=log_level.value, format=FORMAT)
        if add_default_file_handler:
            logger.add(log_file, level=log_level.value, format=FORMAT)

    def debug(self, message: str, additional_depth: Optional[int] = None) -> None:
        logger.opt(depth=_depth_level(additional_depth)).debug(message)

    def info(self, message: str, additional_depth: Optional[int] = None) -> None:
        logger.opt(depth=_depth_level(additional_depth)).info(message)

    def warning(self, message: str, additional_depth: Optional[int] = None) -> None:
        logger.opt(depth=_depth_level(additional_depth)).warning(message)

    def error(self, message: str, additional_depth: Optional[int] = None) -> None:
        logger.opt(depth=_depth_level(additional_depth)).error(message)

    def critical(self, message: str, additional_depth: Optional[int] = None) -> None:
        logger.opt(depth=_depth_level(additional_depth)).critical(message)
