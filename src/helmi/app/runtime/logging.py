"""Loguru sink setup for the broker process."""

from __future__ import annotations

import sys

from loguru import logger

from helmi.app.runtime.config.config_data import LoggingConfig

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | "
    "{message} <dim>{extra}</dim>"
)


def configure_logging(config: LoggingConfig) -> None:
    """Replace loguru's default sink with one honoring the configuration.

    With ``serialize`` every record is written as one JSON object, bound
    context included.
    """
    logger.remove()
    logger.configure(extra={"component": "broker"})
    if config.serialize:
        logger.add(sys.stderr, level=config.level, serialize=True)
    else:
        logger.add(sys.stderr, level=config.level, format=LOG_FORMAT)
