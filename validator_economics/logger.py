"""Log configuration shared by every module of the package"""

import logging.config
import os
from functools import cache
from logging import Logger

from validator_economics.config import IOConfig

PACKAGE_LOGGER = "validator_economics"


@cache
def configure_logging() -> None:
    """
    Applies logging.conf once per process. `LOG_LEVEL` (e.g. DEBUG to see
    every provider request) overrides the package logger's level.
    """
    io_config = IOConfig.from_env()
    logging.config.fileConfig(
        fname=io_config.log_config_file.absolute(),
        disable_existing_loggers=False,
    )
    level = os.environ.get("LOG_LEVEL")
    if level:
        logging.getLogger(PACKAGE_LOGGER).setLevel(level.upper())


def set_log(name: str) -> Logger:
    """Logger for `name`, with logging configured on first use"""
    configure_logging()
    return logging.getLogger(name)
