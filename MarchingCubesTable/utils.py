"""
Utility Functions
=================

This module provides general utility functions used throughout
MarchingCubesTable: logging configuration and validation of the integer ids
(corners, edges, rotations, cube ids) the public functions accept.

Functions
---------
configure_logging
    Attach console and optional file handlers to the package logger.
check_id
    Reject ids outside their valid range.
"""

import logging
import numbers

import MarchingCubesTable

# marks handlers owned by configure_logging
_HANDLER_TAG = "_marching_cubes_table_handler"


def configure_logging(level=logging.INFO, logfile=None):
    """Attach the package's console (and optional file) handler.

    Runs on import with the defaults. Calling it again replaces the handlers
    set up by an earlier call instead of adding more, so table construction
    is not logged twice after e.g. switching to ``logging.DEBUG``.

    Parameters
    ----------
    level : int, default logging.INFO
        Level of the ``MarchingCubesTable`` logger.
    logfile : str, optional
        Additionally write the log to this file.
    """
    logger = logging.getLogger(MarchingCubesTable.__name__)
    logger.setLevel(level)
    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_TAG, False)]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter("%(asctime)s %(message)s", datefmt="%H:%M:%S")
    handlers = [logging.StreamHandler()]
    if logfile is not None:
        handlers.append(logging.FileHandler(logfile))
    for handler in handlers:
        setattr(handler, _HANDLER_TAG, True)
        handler.setFormatter(formatter)
        logger.addHandler(handler)


def check_id(value, upper: int, name: str) -> int:
    """Return ``value`` as int if it is an integer in ``[0, upper)``.

    Raises:
        ValueError: for non-integers (bools included) and out of range values.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{name} must be an integer, not {type(value).__name__}")
    if not 0 <= value < upper:
        raise ValueError(f"{name} must be in [0, {upper}), got {value}")
    return int(value)
