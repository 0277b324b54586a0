"""Root logger configuration for the CLI."""

import logging


def setup_logging(level: int = logging.WARNING) -> None:
    """
    Set up the root logger with a stderr stream handler.

    Planner diagnostics (unsatisfiable selections, dropped volume) are
    logged at WARNING, allocator steps at INFO/DEBUG.  Calling again only
    changes the level; the handler is installed once.
    """
    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        return
    fmt = logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    root.addHandler(ch)
