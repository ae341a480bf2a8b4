import logging
import sys
from pathlib import Path
from typing import Optional, Union

PACKAGE_LOGGER = "quantcal"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: Union[str, int] = logging.INFO,
    format_string: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    logger_name: str = PACKAGE_LOGGER
) -> logging.Logger:
    """
    Attach handlers to the ``quantcal`` logger.

    Root finders, optimizers and calibrations all log below this logger,
    so the root logger is left alone. Calling it again replaces the
    handlers installed by the previous call.

    Args:
        level: Level name such as ``"DEBUG"`` or a ``logging`` constant
        format_string: Record format, ``DEFAULT_FORMAT`` if omitted
        log_file: Also write records to this file, creating its directory
        console: Write records to stdout
        logger_name: Logger to configure

    Returns:
        The configured logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = []
    if console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        logger.addHandler(handler)

    return logger


class LoggerMixin:
    """Per-class logger for solvers and optimization methods."""

    @property
    def logger(self) -> logging.Logger:
        return logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")
