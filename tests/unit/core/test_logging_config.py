from __future__ import annotations

import json
import logging

from realty_crm.core.logging_config import JsonFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("realty_crm.test", logging.INFO, __file__, 1, "funnel.sync.completed", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_keeps_funnel_extras():
    line = JsonFormatter().format(
        _record(event="funnel.sync.completed", stage_id="s-new", synced=3)
    )
    payload = json.loads(line)

    assert payload["event"] == "funnel.sync.completed"
    assert payload["stage_id"] == "s-new"
    assert payload["synced"] == 3


def test_formatter_omits_absent_extras():
    payload = json.loads(JsonFormatter().format(_record()))
    assert "synced" not in payload
    assert payload["message"] == "funnel.sync.completed"
