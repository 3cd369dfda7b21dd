"""Minimal logging utilities for markline.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from markline.log import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Flushing list block")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "markline." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> get_logger("cli").name
        'markline.cli'
    """
    if not (name == "markline" or name.startswith("markline.")):
        name = f"markline.{name}"
    return logging.getLogger(name)
