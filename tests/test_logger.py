import json
import logging

from logger import JsonFormatter, LoggerConfig, get_logger


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("snapshot", logging.WARNING, __file__, 10, "Reflow test failed for %s", ("x",), None)
    record.extra_fields = {"url": "https://example.com"}

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "snapshot"
    assert payload["message"] == "Reflow test failed for x"
    assert payload["url"] == "https://example.com"


def test_setup_is_idempotent():
    get_logger("a")
    handlers = len(logging.getLogger().handlers)

    get_logger("b")
    LoggerConfig.setup_logging()

    assert len(logging.getLogger().handlers) == handlers
