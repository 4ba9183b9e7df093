"""Logging setup shared by the services.

Log records are rendered as JSON lines. ``RequestIdFilter`` attaches the
current request id (see ``gateway.middleware``) so every record emitted
while handling a request can be correlated.
"""

import logging
from logging import Filter, LogRecord
from logging.handlers import TimedRotatingFileHandler

from pythonjsonlogger import jsonlogger

from .middleware import REQUEST_ID_CTX

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s"


class RequestIdFilter(Filter):
    """Populate ``record.request_id`` from the request context.

    Outside a request the value is a hyphen so formatters can always
    reference ``%(request_id)s``.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = REQUEST_ID_CTX.get()
        return True


def configure_logging(name: str, level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """Return the service logger ``name`` with JSON handlers attached.

    Calling it twice for the same name does not stack handlers. When
    ``log_file`` is given, records also go to a file rotated at midnight.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())
    if not logger.handlers:
        formatter = jsonlogger.JsonFormatter(LOG_FORMAT)
        h = logging.StreamHandler()
        h.setFormatter(formatter)
        h.addFilter(RequestIdFilter())
        logger.addHandler(h)
        if log_file:
            fh = TimedRotatingFileHandler(log_file, when="midnight", encoding="utf-8")
            fh.setFormatter(formatter)
            fh.addFilter(RequestIdFilter())
            logger.addHandler(fh)
    return logger
