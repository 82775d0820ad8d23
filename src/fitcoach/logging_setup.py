"""Logging setup shared by the CLI and the web app."""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """
    Configure root logging once.

    Level defaults to settings.log_level (LOG_LEVEL env var).
    """
    if level is None:
        from fitcoach.config import get_settings
        level = get_settings().log_level

    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    logging.getLogger(__name__).debug(f"Logging configured at {level}")
