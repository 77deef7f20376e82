"""Logging utilities.

All package loggers live below the ``aarbuilder`` namespace.  The package
logger carries a :class:`logging.NullHandler` so library use stays silent until
an application configures logging; :func:`configure_logging` is the hook used
by the CLI.  Both helpers are idempotent.
"""

from __future__ import annotations

import logging
import sys

__all__ = ["get_logger", "configure_logging"]

_ROOT = "aarbuilder"
_FORMAT = "%(levelname)s %(name)s: %(message)s"

logging.getLogger(_ROOT).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the package namespace for ``name``."""

    if name == _ROOT or name.startswith(_ROOT + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT}.{name}")


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the package logger."""

    root = logging.getLogger(_ROOT)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    for h in list(root.handlers):
        if getattr(h, "_aarbuilder", False):
            # The stream it holds may belong to a replaced, already closed sys.stderr.
            root.removeHandler(h)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._aarbuilder = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    return root
