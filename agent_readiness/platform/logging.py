import json
import logging
import sys
from datetime import datetime, timezone

from ..platform.config import settings
from ..platform.request_context import get_assessment_id

PLAIN_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
PLAIN_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("anthropic", "httpx", "httpcore")


class JsonFormatter(logging.Formatter):
    """One JSON object per record, tagged with the active assessment id."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload = {
            "timestamp": created.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        assessment_id = getattr(record, "assessment_id", None) or get_assessment_id()
        if assessment_id:
            payload["assessment_id"] = assessment_id
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def _resolve_level(name: str | None) -> int:
    level = getattr(logging, (name or settings.LOG_LEVEL or "INFO").upper(), None)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: str | None = None, json_output: bool | None = None):
    """Configure root logging from settings; arguments override LOG_LEVEL / LOG_JSON."""
    log_level = _resolve_level(level)
    use_json = settings.LOG_JSON if json_output is None else json_output

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if use_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(fmt=PLAIN_FORMAT, datefmt=PLAIN_DATE_FORMAT))
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
