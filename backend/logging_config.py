"""Centralized logging configuration."""

import logging

from config import settings

# Third-party loggers that are only useful at WARNING and above
QUIET_LOGGERS: tuple[str, ...] = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "httpx",
    "httpcore",
    "urllib3",
)


def setup_logging(level: str | None = None) -> None:
    """Configure root logging from settings.LOG_LEVEL (or ``level``).

    The upstream quote client logs each request through httpx, which at
    INFO would print the API key carried in the query string, so httpx
    and the other QUIET_LOGGERS are held at WARNING regardless of level.
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)-8s %(name)s  %(message)s",
        datefmt="%H:%M:%S",
        level=getattr(logging, (level or settings.LOG_LEVEL).upper()),
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
