from enum import Enum


class LogLevel(Enum):
    """
    The available log levels for the logger.
    """

    DEBUG = 10
    """
    Detailed information, such as every skipped point.
    """
    INFO = 20
    """
    Progress of the tools: files read, files written, summary statistics.
    """
    WARNING = 30
    """
    A record could not be processed and is excluded, the tool continues.
    """
    ERROR = 40
    """
    Processing of an input file failed, no output was written for it.
    """
    CRITICAL = 50
    """
    The tool cannot continue.
    """

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        try:
            return cls[name.upper()]
        except KeyError:
            valid = ", ".join(level.name for level in cls)
            raise ValueError(f"Unknown log level {name}, should be one of: {valid}")
