"""Configure application logging using the Python standard library.

Sets up the root logger with a console handler and a rotating file
handler.  Every record is written as one JSON object per line with the
timestamp, level, module and message, plus the shop context fields
(``customer``, ``transaction_kind``) when a caller passes them through
``extra``.  A dict passed as ``extra={"extra": {...}}`` is merged into
the top level of the JSON object.
"""

import json
import logging
import logging.handlers
import os
from datetime import datetime, UTC

LOG_FILE_NAME = "farm_shop.log"

_CONTEXT_FIELDS = ("customer", "transaction_kind")


class JsonFormatter(logging.Formatter):
    """Format log records as JSON strings."""

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "module": record.module,
            "message": record.getMessage(),
        }
        for field in _CONTEXT_FIELDS:
            if hasattr(record, field):
                log_record[field] = getattr(record, field)
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            log_record.update(extra)
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record, default=str)


def configure_logging(log_dir: str = "logs", level: int = logging.INFO, console: bool = True) -> None:
    """Configure the root logger with JSON formatting.

    Args:
        log_dir: Directory for ``farm_shop.log``.  Created if missing.
        level: Logging level for the root logger and its handlers.
        console: Also log to stderr.  The interactive shell turns this off
            so log lines do not interleave with the menu.
    """
    os.makedirs(log_dir, exist_ok=True)
    logger = logging.getLogger()
    logger.setLevel(level)
    # Remove any default handlers (e.g. from basicConfig)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    formatter = JsonFormatter()
    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.setLevel(level)
        logger.addHandler(console_handler)
    file_handler = logging.handlers.RotatingFileHandler(
        filename=os.path.join(log_dir, LOG_FILE_NAME),
        maxBytes=1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)
    logger.addHandler(file_handler)
