"""
Logging for TrifocalEstimation.

Every module logs under the package logger through get_logger:

    TrifocalEstimation.trifocal.solver     retry warnings, solve failures
    TrifocalEstimation.trifocal.error      per-correspondence reprojections (DEBUG)
    TrifocalEstimation.trifocal.probing    ground-truth search results
    TrifocalEstimation.providers.folder    feature loading
    TrifocalEstimation.config              configuration files

Nothing is configured on import; call setup_logger once from the caller.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union


ROOT_LOGGER_NAME = "TrifocalEstimation"

# [2025-10-31 10:15:30] [WARNING] [TrifocalEstimation.trifocal.solver] Minimal solver failed ...
LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _to_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper())


def setup_logger(level: Union[str, int] = "INFO",
                 log_file: Optional[str] = None,
                 console: bool = True,
                 force: bool = False,
                 name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Attach handlers to the package logger (or to one of its children).

    Args:
        level: Logging level name or number
        log_file: Optional log file, appended to
        console: Log to stdout
        force: Replace the handlers of an already configured logger
        name: Logger to configure

    Returns:
        Configured logger

    Example:
        >>> setup_logger(level='DEBUG', log_file='runs/trifocal.log')
        >>> solutions = TrifocalSolver(minimal_solver).solve(*datum)
    """
    logger = logging.getLogger(name)

    if logger.handlers and not force:
        return logger

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(_to_level(level))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode='a')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger of one component, e.g. get_logger('trifocal.solver')"""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def set_level(level: Union[str, int], name: Optional[str] = None):
    """
    Change the level of the package logger, or of one component.

    Example:
        >>> set_level('DEBUG', 'trifocal.error')   # log every reprojection
    """
    logger = get_logger(name) if name else logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(_to_level(level))
