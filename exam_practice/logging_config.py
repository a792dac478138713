"""Logging setup: single-line JSON records on stdout."""

import json
import logging
import sys
import time


class JSONFormatter(logging.Formatter):
    """Render a log record as one compact JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "ts": round(time.time(), 3),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: int | str = "INFO") -> logging.Logger:
    """Install the JSON formatter on the root logger and return the app logger."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    logging.basicConfig(level=level, handlers=[handler], force=True)
    return logging.getLogger("exam_practice")
