from typing import Optional

from siftools.logging.ilogger import ILogger


class NullLogger(ILogger):
    """
    The :class:`NullLogger` is the default logger: it doesn't log anything.
    """

    def debug(self, message: str, additional_depth: Optional[int] = None) -> None:
        pass

    def info(self, message: str, additional_depth: Optional[int] = None) -> None:
        pass

    def warning(self, message: str, additional_depth: Optional[int] = None) -> None:
        pass

    def error(self, message: str, additional_depth: Optional[int] = None) -> None:
        pass

    def critical(self, message: str, additional_depth: Optional[int] = None) -> None:
        pass
