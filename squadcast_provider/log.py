"""Logging setup.

Modules log through ``logging.getLogger(__name__)``; this module only wires a
rich handler onto the package logger.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOG_ENV_VAR = "SQUADCAST_LOG"
DEFAULT_LEVEL = "WARNING"


def resolve_level(level: str | None = None) -> int:
    """Resolve a level name: explicit value, then SQUADCAST_LOG, then WARNING."""
    name = (level or os.environ.get(LOG_ENV_VAR) or DEFAULT_LEVEL).upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {name}")
    return resolved


def configure_logging(level: str | None = None) -> logging.Logger:
    """Install a single RichHandler on the ``squadcast_provider`` logger."""
    root = logging.getLogger("squadcast_provider")
    root.setLevel(resolve_level(level))

    # Remove handlers from earlier calls
    root.handlers.clear()

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    root.propagate = False
    return root
