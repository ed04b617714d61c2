"""
Logger factory for the order_ui package.

Modules call ``logs.logger(__file__)``. The file path is turned into the
dotted module name under ``order_ui`` (``order_ui.sync.list_sync``), so log
lines name the module that wrote them. LOG_LEVEL sets the level of newly
configured loggers.
"""

import logging
import os
from pathlib import Path

_PACKAGE = "order_ui"
_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def module_name(path: str) -> str:
    """
    Map a source file path onto its dotted module name.

    ``.../order_ui/sync/list_sync.py`` becomes ``order_ui.sync.list_sync``
    and a package's ``__init__.py`` maps onto the package itself. Files
    outside the package are namespaced as ``order_ui.<stem>``.
    """
    parts = Path(path).with_suffix("").parts
    if _PACKAGE not in parts:
        return f"{_PACKAGE}.{Path(path).stem}"
    start = len(parts) - 1 - parts[::-1].index(_PACKAGE)
    return ".".join(part for part in parts[start:] if part != "__init__")


def logger(name: str) -> logging.Logger:
    """
    Return a configured logger.

    Args:
        name: Logger name, or a ``__file__`` path.
    """
    if "/" in name or "\\" in name:
        name = module_name(name)

    log = logging.getLogger(name)
    if not log.handlers:
        log.setLevel(getattr(logging, _LOG_LEVEL, logging.INFO))
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        log.addHandler(handler)
        # package loggers also carry a handler; propagating would print twice
        log.propagate = False
    return log
