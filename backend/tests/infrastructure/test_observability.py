"""Structured logging — JSON formatter fields and idempotent setup."""

import json
import logging

from assetquery.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord(
        "assetquery.core.where_clause", logging.WARNING, __file__, 1,
        "Ignoring filter %s", ("kit",), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_core_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "WARNING"
    assert log["logger"] == "assetquery.core.where_clause"
    assert log["message"] == "Ignoring filter kit"
    assert "timestamp" in log


def test_json_formatter_surfaces_known_extras_only():
    log = json.loads(JSONFormatter().format(
        _record(filter_name="kit", organization_id="org-1", secret="x"),
    ))
    assert log["filter_name"] == "kit"
    assert log["organization_id"] == "org-1"
    assert "secret" not in log


def test_setup_logging_is_idempotent():
    setup_logging("DEBUG", "json")
    setup_logging("INFO", "text")
    handlers = [h for h in logging.root.handlers if h.get_name() == "assetquery"]
    assert len(handlers) == 1
    assert not isinstance(handlers[0].formatter, JSONFormatter)
    assert logging.root.level == logging.INFO
    logging.root.removeHandler(handlers[0])
