from abc import abstractmethod

from siftools.logging.loglevel import LogLevel


class ILogger:
    """
    Interface to be implemented by all logger wrappers.

    Every method takes the message and an ``additional_depth``. The depth is
    used to correct the reported filename and line number when the call is
    made from a decorator or another helper.
    """

    @abstractmethod
    def debug(self, message: str, additional_depth: int = 0) -> None:
        """Log message with severity DEBUG."""
        raise NotImplementedError

    @abstractmethod
    def info(self, message: str, additional_depth: int = 0) -> None:
        """Log message with severity INFO."""
        raise NotImplementedError

    @abstractmethod
    def warning(self, message: str, additional_depth: int = 0) -> None:
        """
        Log message with severity WARNING.

        Used for per-record problems: the record is skipped, the tool
        continues.
        """
        raise NotImplementedError

    @abstractmethod
    def error(self, message: str, additional_depth: int = 0) -> None:
        """
        Log message with severity ERROR.

        Used when processing of a complete input file failed.
        """
        raise NotImplementedError

    @abstractmethod
    def critical(self, message: str, additional_depth: int = 0) -> None:
        """Log message with severity CRITICAL."""
        raise NotImplementedError

    def log(self, loglevel: LogLevel, message: str, additional_depth: int = 0) -> None:
        """
        logs a message with the specified urgency level.
        """
        match loglevel:
            case LogLevel.DEBUG:
                self.debug(message, additional_depth)
            case LogLevel.INFO:
                self.info(message, additional_depth)
            case LogLevel.WARNING:
                self.warning(message, additional_depth)
            case LogLevel.ERROR:
                self.error(message, additional_depth)
            case LogLevel.CRITICAL:
                self.critical(message, additional_depth)
            case _:
                raise ValueError(f"Unknown logging urgency at level {loglevel}")
