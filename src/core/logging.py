"""Logging setup for the API process."""

import logging

from src.core.config import Settings

# SDK loggers that log every request at INFO/DEBUG
NOISY_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3", "httpx", "httpcore", "pymongo")


def configure_logging(settings: Settings, *, force: bool = False) -> None:
    """
    Initialises the root logger from ``LOG_LEVEL`` / ``LOG_FORMAT``.

    AWS, HTTP and Mongo client loggers are held at WARNING unless the
    service itself runs at DEBUG.
    """
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format=settings.LOG_FORMAT,
        datefmt="%H:%M:%S",
        force=force,
    )

    sdk_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(sdk_level)
