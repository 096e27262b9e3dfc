"""Logging setup shared by the proxy modules."""
import logging

LOGGER_NAME = "rerank_proxy"
LOG_FORMAT = "[RerankProxy] %(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "info") -> logging.Logger:
    """Attach a stream handler to the package logger once and set its level."""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger
