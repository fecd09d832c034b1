from functools import wraps
from time import time
from typing import Callable, ParamSpec, TypeVar

from siftools.logging.loglevel import LogLevel

T = TypeVar("T")
P = ParamSpec("P")


def standard_log_decorator(
    start_level: LogLevel = LogLevel.INFO, end_level: LogLevel = LogLevel.DEBUG
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator to print log messages announcing the beginning and end of the
    decorated tool function. The first positional argument, normally the
    input path, is included in the messages.
    """

    def decorator(fun: Callable[P, T]) -> Callable[P, T]:
        @wraps(fun)
        def wrapper(*args: P.args, **kwargs: P.kwargs):
            from siftools.logging import logger

            subject = f" for {args[0]}" if args else ""
            start_message = (
                f"Beginning execution of {fun.__module__}.{fun.__name__}{subject}..."
            )

            start_time = time()
            logger.log(loglevel=start_level, message=start_message, additional_depth=2)

            return_value = fun(*args, **kwargs)
            end_time = time()

            end_message = (
                f"Finished execution of {fun.__module__}.{fun.__name__}{subject} "
                f"in {end_time - start_time:.3f} seconds..."
            )
            logger.log(loglevel=end_level, message=end_message, additional_depth=2)
            return return_value

        return wrapper

    return decorator
