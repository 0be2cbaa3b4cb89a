"""Logging setup for the console and HTTP entry points."""

import logging

from config import LoggingConfig


def configure_logging(settings: LoggingConfig | None = None, level: str | None = None) -> None:
    """
    Configure root logging once per process.

    Library modules only create module loggers; entry points call this.

    Args:
        settings: Logging configuration (read from the environment if omitted)
        level: Overrides ``settings.level``
    """
    settings = settings or LoggingConfig()
    resolved = (level or settings.level).upper()
    numeric = logging.getLevelName(resolved)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {resolved}")

    logging.basicConfig(level=numeric, format=settings.format)
    logging.getLogger().setLevel(numeric)
    # transitions logs every trigger at INFO
    logging.getLogger("transitions").setLevel(max(numeric, logging.WARNING))
