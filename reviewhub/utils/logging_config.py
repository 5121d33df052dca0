"""Logging configuration shared by the web app and the cron scripts."""

import logging
import sys


def configure_logging(level='INFO', logger_name='reviewhub'):
    """Attach one timestamped stream handler to the package logger (idempotent)."""
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    ))
    logger.addHandler(handler)
    return logger
