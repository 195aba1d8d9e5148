from functools import wraps
from datetime import datetime
import logging
from pathlib import Path
from typing import Callable, Optional, Union

from coloredlogs import ColoredFormatter

from coalescer import validation
from coalescer.py import ErrorEncoder

LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def get_formatter_class(colored):
    parents = [logging.Formatter]
    if colored:
        parents.insert(0, ColoredFormatter)

    class Formatter(*parents):
        pass

    return Formatter


@validation.choices("level", LEVELS, doc=False)
def configure_logging_handler(
    level: str = "ERROR",
    filename: Optional[Union[str, Path]] = None,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    name: Optional[str] = "coalescer",
):
    """
    Appends a handler to the specified logger (the ``coalescer`` package logger by default). If a filename is specified, this handler will write to that file. Otherwise, it will write colored output to the console.

    .. note::

      Records below the logger's own level never reach the handler. To see the debug messages emitted by coalescers, also lower the logger level, e.g., by setting environment variable ``COALESCER_LOG_LEVEL=DEBUG``.

    :param level: Minimum level logged by the created handler.
    :param filename: If specified, a file handler is created instead of a console handler. If a directory, a file named after the current time is created within that directory.
    :param fmt: :class:`logging.Formatter` ``fmt`` parameter.
    :param datefmt: :class:`logging.Formatter` ``datefmt`` parameter.
    :param name: The name of the logger to configure.

    :return: The created handler.
    """

    fmt = fmt or "%(levelname)-8s %(asctime)s %(name)s:%(lineno)d %(message)s"
    datefmt = datefmt or "%Y-%m-%d %H:%M:%S"

    formatter = get_formatter_class(colored=filename is None)(fmt=fmt, datefmt=datefmt)

    if filename and (filename := Path(filename)).is_dir():
        filename = filename / (datetime.now().strftime("%Y-%m-%d_%H-%M-%S") + ".log")

    if filename is not None:
        handler = logging.FileHandler(filename)
    else:
        handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)

    logging.getLogger(name).addHandler(handler)

    return handler


def log_exception(logger, error: BaseException, level="error"):
    """
    Logs the full traceback of ``error`` as a single line. Use :meth:`ErrorEncoder.decode` to recover it.
    """
    getattr(logger, level)(ErrorEncoder.encode(error))


def logged_exception(
    logger: logging.Logger,
    fxn: Callable[..., None],
    level: str = "error",
    do_raise=False,
):
    """
    Wraps ``fxn`` so that any exception it raises is logged and, if ``do_raise`` is ``True``, re-raised.
    """

    @wraps(fxn)
    def wrapper(*args, **kwargs):
        try:
            fxn(*args, **kwargs)
        except Exception as err:
            log_exception(logger, err, level)
            if do_raise:
                raise

    return wrapper
