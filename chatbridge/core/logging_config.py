"""
Logging setup shared by the API, services and the OpenWebUI client.

Modules log through ``get_logger(__name__)``; ``setup_logging`` is called
once by the API entry point. Console output is always on, a dated log
file is written only when a log directory is configured (LOG_DIR).
"""
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# requests logs every pooled connection through urllib3
QUIET_LOGGERS = ("urllib3", "requests")

# Marks handlers installed here so repeated setup calls don't stack them
_HANDLER_TAG = "_chatbridge_handler"


def _tagged(handler: logging.Handler, formatter: logging.Formatter, level: int) -> logging.Handler:
    handler.setFormatter(formatter)
    handler.setLevel(level)
    setattr(handler, _HANDLER_TAG, True)
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the root logger for the application.

    Calling it again replaces the handlers it installed earlier, so the
    level can be changed without duplicating output.

    Args:
        log_level: Console level name; unknown names fall back to INFO
        log_dir: If given, also write everything (DEBUG and up) to
                 ``<log_dir>/chatbridge_<YYYYMMDD>.log``

    Returns:
        The root logger
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    for handler in [h for h in root_logger.handlers if getattr(h, _HANDLER_TAG, False)]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.addHandler(_tagged(logging.StreamHandler(sys.stdout), formatter, level))

    log_file = None
    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        log_file = directory / f"chatbridge_{date.today():%Y%m%d}.log"
        root_logger.addHandler(
            _tagged(logging.FileHandler(log_file, encoding="utf-8"), formatter, logging.DEBUG)
        )

    root_logger.setLevel(logging.DEBUG if log_file else level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.debug(f"Logging configured: level={log_level}, file={log_file or 'none'}")
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; pass ``__name__``."""
    return logging.getLogger(name)


class LoggerMixin:
    """Gives a class ``self.logger``, named after its module and class."""

    @property
    def logger(self) -> logging.Logger:
        cls = type(self)
        return get_logger(f"{cls.__module__}.{cls.__name__}")
