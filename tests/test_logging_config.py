import json
import logging

from polybets.core import logging_config
from polybets.core.logging_config import JsonFormatter
from polybets.settings import settings


def _record(msg, args=(), **extra) -> logging.LogRecord:
    record = logging.LogRecord("polybets.core.pipeline", logging.INFO, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_renders_message_and_extra():
    record = _record("polymarket_bets_search_summary terms=%s", ("bitcoin",), markets_kept=3)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "polybets.core.pipeline"
    assert payload["message"] == "polymarket_bets_search_summary terms=bitcoin"
    assert payload["extra"] == {"markets_kept": 3}


def test_json_formatter_survives_mismatched_args():
    record = _record("events=%s markets=%s", ("only-one",))

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "events=%s markets=%s"


def test_configure_logging_quiets_httpx_and_floors_prod_level(monkeypatch):
    monkeypatch.setattr(logging_config, "_CONFIGURED", False)
    monkeypatch.setattr(settings, "ENV", "prod")
    monkeypatch.setattr(settings, "LOG_LEVEL", "debug")
    root = logging.getLogger()
    saved_level, saved_handlers = root.level, root.handlers[:]
    try:
        logging_config.configure_logging()

        assert root.level == logging.INFO
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING
        assert isinstance(root.handlers[-1].formatter, JsonFormatter)
    finally:
        root.setLevel(saved_level)
        root.handlers[:] = saved_handlers


def test_unknown_log_level_falls_back_to_info(monkeypatch):
    monkeypatch.setattr(logging_config, "_CONFIGURED", False)
    monkeypatch.setattr(settings, "ENV", "dev")
    monkeypatch.setattr(settings, "LOG_LEVEL", "chatty")
    root = logging.getLogger()
    saved_level, saved_handlers = root.level, root.handlers[:]
    try:
        logging_config.configure_logging()

        assert root.level == logging.INFO
    finally:
        root.setLevel(saved_level)
        root.handlers[:] = saved_handlers
