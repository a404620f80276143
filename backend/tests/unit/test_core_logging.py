import json
import logging

from handlog.core.config import Settings
from handlog.core.logging import JSONFormatter, setup_logging


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("handlog.test", logging.INFO, __file__, 10, "saved %s", ("meal",), None)
    record.extra_fields = {"path": "/api/meals"}
    payload = json.loads(JSONFormatter().format(record))
    assert payload["message"] == "saved meal"
    assert payload["level"] == "INFO"
    assert payload["path"] == "/api/meals"


def test_setup_logging_picks_formatter_from_settings():
    root = setup_logging(Settings(log_level="debug", log_format="json"))
    assert root.level == logging.DEBUG
    assert isinstance(root.handlers[0].formatter, JSONFormatter)

    root = setup_logging(Settings(log_format="text"))
    assert not isinstance(root.handlers[0].formatter, JSONFormatter)
