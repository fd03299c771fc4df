import json
import logging
import logging.config
from datetime import datetime, timezone

from ..settings import settings

_CONFIGURED = False

_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line; attributes passed through `extra=` are nested under "extra"."""

    def format(self, record: logging.LogRecord) -> str:
        try:
            message = record.getMessage()
        except TypeError:
            message = str(record.msg)
        line = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
        }
        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            line["extra"] = extra
        if record.exc_info:
            line["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


def configure_logging() -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return

    level = logging.getLevelName(str(settings.LOG_LEVEL or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO
    if settings.ENV.lower() == "prod":
        level = max(level, logging.INFO)
    # httpx logs every request at INFO
    transport_level = logging.DEBUG if level <= logging.DEBUG else max(level, logging.WARNING)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": JsonFormatter},
                "plain": {"format": "%(levelname)s %(name)s %(message)s"},
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "json" if settings.LOG_JSON else "plain",
                },
            },
            "root": {"level": level, "handlers": ["default"]},
            "loggers": {name: {"level": transport_level} for name in ("httpx", "httpcore")},
        }
    )
    _CONFIGURED = True
