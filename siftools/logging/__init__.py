"""
Package used for providing logging support to siftools.

By default nothing is logged. The command line tools configure a logger
before processing; library users can do the same.

Examples
--------

Log to stdout with the python logging framework:

>>> import siftools
>>> from siftools.logging import LoggerType
>>>
>>> siftools.logging.configure(LoggerType.PYTHON)

Log with loguru, and also write the log output to ``siftools.log``:

>>> siftools.logging.configure(LoggerType.LOGURU, add_default_file_handler=True)

Integrate the messages into an existing python logging setup, without the
default handlers:

>>> import logging
>>> from siftools.logging import LoggerType, LogLevel
>>>
>>> siftools.logging.configure(
>>>     LoggerType.PYTHON,
>>>     LogLevel.INFO,
>>>     add_default_stream_handler=False,
>>>     add_default_file_handler=False,
>>> )
>>> logging.basicConfig(level=logging.INFO, handlers=[logging.StreamHandler()])
"""

from siftools.logging._loggerholder import _LoggerHolder
from siftools.logging.config import LoggerType, configure
from siftools.logging.ilogger import ILogger  # noqa: I001
from siftools.logging.loglevel import LogLevel
from siftools.logging.logging_decorators import standard_log_decorator

logger = _LoggerHolder()
