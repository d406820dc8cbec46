"""Package logger for ballistic_solver.

Console output at INFO by default. File logging at DEBUG can be switched
on for a session:

    from ballistic_solver.logger import enable_file_logging, disable_file_logging

    enable_file_logging("solver_debug.log")
    ...
    disable_file_logging()
"""
import logging
from typing import Optional

__all__ = ('logger',
           'enable_file_logging',
           'disable_file_logging',
)

formatter = logging.Formatter("%(levelname)s:%(name)s:%(message)s")
console_handler = logging.StreamHandler()
console_handler.setFormatter(formatter)
console_handler.setLevel(logging.DEBUG)

logger: logging.Logger = logging.getLogger('ballistic_solver')
logger.addHandler(console_handler)
logger.setLevel(logging.INFO)

file_handler: Optional[logging.FileHandler] = None
_level_before_file: int = logging.INFO


def enable_file_logging(filename: str = "debug.log") -> None:
    """Log everything from DEBUG up to `filename`, replacing any previous file handler."""
    global file_handler, _level_before_file
    if file_handler is not None:
        disable_file_logging()

    file_handler = logging.FileHandler(filename)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter("%(asctime)s:%(levelname)s:%(message)s"))
    logger.addHandler(file_handler)
    _level_before_file = logger.level
    logger.setLevel(logging.DEBUG)


def disable_file_logging() -> None:
    """Remove and close the file handler. Safe to call when none is active."""
    global file_handler
    if file_handler is not None:
        logger.removeHandler(file_handler)
        file_handler.close()
        file_handler = None
        logger.setLevel(_level_before_file)
