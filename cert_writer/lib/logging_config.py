"""JSON logging configuration for cert_writer scripts and library modules."""

import logging
import os

from pythonjsonlogger import jsonlogger

LOGGER_NAME = "cert_writer"
LOG_LEVEL_ENV = "CERT_WRITER_LOG_LEVEL"

ALLOWED_FIELDS = frozenset({"timestamp", "level", "message", "exc_info", "funcName", "lineno"})


class CertWriterJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter emitting timestamp, level, message, exc_info, funcName, lineno."""

    def add_fields(self, log_record, record, message_dict):
        """Populate the record, rename levelname to level, drop everything else.

        Args:
            log_record: Dict to be logged as JSON
            record: LogRecord object from logging framework
            message_dict: Dict containing message and args
        """
        super().add_fields(log_record, record, message_dict)

        if "levelname" in log_record:
            log_record["level"] = log_record.pop("levelname")

        for key in [key for key in log_record if key not in ALLOWED_FIELDS]:
            log_record.pop(key)


def setup_logger(name: str = LOGGER_NAME, level: str | None = None) -> logging.Logger:
    """Configure the package logger once and return it.

    Library modules use ``logging.getLogger(__name__)`` and inherit this
    logger's handler because their names sit under ``cert_writer``.

    Args:
        name: Logger name
        level: Level name; defaults to $CERT_WRITER_LOG_LEVEL or INFO

    Returns:
        Logger with a JSON stream handler
    """
    logger = logging.getLogger(name)
    logger.setLevel(level or os.environ.get(LOG_LEVEL_ENV, "INFO").upper())

    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        CertWriterJsonFormatter(
            fmt="%(timestamp)s %(levelname)s %(funcName)s %(lineno)d %(message)s",
            timestamp=True,
        )
    )
    logger.addHandler(handler)
    logger.propagate = False

    return logger


# Singleton logger instance - import this in scripts
LOGGER = setup_logger()
