from siftools.logging.ilogger import ILogger
from siftools.logging.nulllogger import NullLogger


class _LoggerHolder(ILogger):
    """
    The :class:`_LoggerHolder` is a wrapper that allows us to change the
    logger during runtime.

    Modules import ``siftools.logging.logger`` once, at import time. At that
    moment no logger has been configured yet. The holder is what they get;
    :func:`siftools.logging.configure` replaces the instance inside the
    holder, and all calls are forwarded to it.

    >>> from siftools.logging import logger
    >>>
    >>> def sample(logger: ILogger = logger):
    >>>    logger.info("sampling")
    >>>
    >>> siftools.logging.configure(LoggerType.LOGURU)
    >>> sample()  # logs with loguru
    """

    def __init__(self) -> None:
        self._instance = NullLogger()

    @property
    def instance(self) -> ILogger:
        """
        Contains the actual ILogger object
        """
        return self._instance

    @instance.setter
    def instance(self, value: ILogger) -> None:
        self._instance = value

    def debug(self, message: str, additional_depth: int = 0) -> None:
        self.instance.debug(message, additional_depth)

    def info(self, message: str, additional_depth: int = 0) -> None:
        self.instance.info(message, additional_depth)

    def warning(self, message: str, additional_depth: int = 0) -> None:
        self.instance.warning(message, additional_depth)

    def error(self, message: str, additional_depth: int = 0) -> None:
        self.instance.error(message, additional_depth)

    def critical(self, message: str, additional_depth: int = 0) -> None:
        self.instance.critical(message, additional_depth)
