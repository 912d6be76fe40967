"""Logging setup for the web application."""

import logging
from pythonjsonlogger import jsonlogger

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s %(funcName)s %(message)s'


def setup_logger(level: str = 'INFO') -> None:
    """Send JSON log records from the root logger to stderr."""
    logger = logging.getLogger()
    logger.setLevel(level)
    if any(isinstance(handler.formatter, jsonlogger.JsonFormatter)
           for handler in logger.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter(
        LOG_FORMAT,
        rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
    ))
    logger.addHandler(handler)
