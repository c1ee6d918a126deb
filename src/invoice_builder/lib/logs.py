"""
Logging utilities for the invoice builder.

Provides a logger factory so every module logs with the same format and
the level configured through the LOG_LEVEL environment variable.
"""

import logging
import os
from pathlib import Path

# Default log level from environment or INFO
_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def logger(name: str) -> logging.Logger:
    """
    Create and configure a logger for the given name.

    Accepts either a dotted logger name or a module path (``__file__``).
    Paths inside the package are turned into ``invoice_builder.<module>``
    names so they share the package logger hierarchy.

    Args:
        name: Logger name or __file__ path.

    Returns:
        Configured logging.Logger instance.
    """
    if "/" in name or "\\" in name:
        name = _module_name(Path(name))

    log = logging.getLogger(name)

    # Only configure if not already configured
    if not log.handlers:
        log.setLevel(getattr(logging, _LOG_LEVEL, logging.INFO))
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
        log.addHandler(handler)

    return log


def _module_name(path: Path) -> str:
    parts = list(path.with_suffix("").parts)
    if "invoice_builder" in parts:
        parts = parts[parts.index("invoice_builder") :]
        if parts[-1] == "__init__":
            parts = parts[:-1]
        return ".".join(parts)
    return path.stem
