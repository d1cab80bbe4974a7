"""Logging setup for sqlift.

Modules obtain loggers through :func:`get_logger`; the command line calls
:func:`configure_logging` once to install a rich console handler.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "sqlift"

_LEVELS = {
    0: logging.INFO,
    1: logging.DEBUG,
}


def get_logger(name: str) -> logging.Logger:
    """Return a logger living under the ``sqlift`` namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Configured ``logging.Logger`` instance.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(verbosity: int = 0, console: Console | None = None) -> None:
    """Install a rich handler on the sqlift root logger.

    Args:
        verbosity: 0 for INFO, 1 for DEBUG, 2 or more for DEBUG plus the SQL
            statements issued by SQLAlchemy.
        console: Console to log to (stderr console if omitted).
    """
    level = _LEVELS.get(verbosity, logging.DEBUG)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False

    sql_logger = logging.getLogger("sqlalchemy.engine")
    for existing in [h for h in sql_logger.handlers if isinstance(h, RichHandler)]:
        sql_logger.removeHandler(existing)
    if verbosity >= 2:
        sql_logger.addHandler(handler)
        sql_logger.setLevel(logging.INFO)
    else:
        sql_logger.setLevel(logging.WARNING)

    root.debug("Logging configured (verbosity=%d)", verbosity)
