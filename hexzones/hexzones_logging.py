"""Logging support for hexzones.

It is modeled on the default `logging approach that comes with Python
<https://docs.python.org/library/logging.html>`_. All loggers live under a
single ``HEXZONES`` root logger, so an application can turn the whole library
on or off in one place::

    from hexzones.hexzones_logging import log_to_stderr, DEBUG

    log_to_stderr(DEBUG)

Modules create their own logger with :func:`create_module_logger`, and
methods whose calls are worth tracing are wrapped with :func:`method_logger`.
"""

from __future__ import annotations

import inspect
import logging
from functools import wraps
from logging import DEBUG, INFO, WARNING

__all__ = [
    "DEBUG",
    "DEFAULT_LEVEL",
    "INFO",
    "LOGGER_NAME",
    "WARNING",
    "create_module_logger",
    "function_logger",
    "get_module_logger",
    "get_rootlogger",
    "log_to_stderr",
    "method_logger",
]

LOGGER_NAME = "HEXZONES"
DEFAULT_LEVEL = DEBUG
LOG_FORMAT = "[%(name)s %(levelname)s] %(message)s"


def create_module_logger(name: str | None = None) -> logging.Logger:
    """Helper function for creating a module logger.

    Args:
        name: The name to be given to the logger. If the name is None, the name
            defaults to the name of the calling module.

    """
    if name is None:
        frm = inspect.stack()[1]
        mod = inspect.getmodule(frm[0])
        name = mod.__name__
    logger = logging.getLogger(f"{LOGGER_NAME}.{name}")
    logger.addHandler(logging.NullHandler())
    return logger


def get_module_logger(name: str) -> logging.Logger:
    """Return the logger for the module with the given name."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def get_rootlogger() -> logging.Logger:
    """Return the root logger of hexzones."""
    return logging.getLogger(LOGGER_NAME)


def method_logger(name: str):
    """Decorator for adding debug logging to a method.

    Args:
        name: The name of the module in which the method is defined.

    """
    logger = get_module_logger(name)
    classname = inspect.getouterframes(inspect.currentframe())[1][3]

    def real_decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            # the instance is the first positional argument, leave it out
            logger.debug(
                f"calling {classname}.{func.__name__} with {args[1:]} and {kwargs}"
            )
            return func(*args, **kwargs)

        return wrapper

    return real_decorator


def function_logger(name: str):
    """Decorator for adding debug logging to a module level function.

    Args:
        name: The name of the module in which the function is defined.

    """
    logger = get_module_logger(name)

    def real_decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger.debug(f"calling {func.__name__} with {args} and {kwargs}")
            return func(*args, **kwargs)

        return wrapper

    return real_decorator


def log_to_stderr(
    level: int | None = None, pass_root_logger_level: bool = False
) -> logging.Logger:
    """Turn on logging and add a handler which prints to stderr.

    Args:
        level: minimum level of the messages that will be logged
        pass_root_logger_level: also set the level of the hexzones root logger

    """
    if not level:
        level = DEFAULT_LEVEL

    logger = get_rootlogger()

    # avoid stacking a second console handler on repeated calls
    for entry in logger.handlers:
        if (
            isinstance(entry, logging.StreamHandler)
            and entry.formatter is not None
            and entry.formatter._fmt == LOG_FORMAT
        ):
            return logger

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    if pass_root_logger_level:
        logger.setLevel(level)

    return logger
