"""Logging helpers for the inventory catalog."""
import logging

LOGGER_NAME = "inventory_catalog"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stream handler to the package logger and set its level."""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger
