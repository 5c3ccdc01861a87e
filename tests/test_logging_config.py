"""
Tests for log formatting and context ids.
"""

import json
import logging

import pytest

from jobmanager.core.logging_config import ContextFormatter, CustomJsonFormatter, log_context


def make_record(level=logging.INFO, **extra):
    record = logging.LogRecord("jobmanager.test", level, __file__, 42, "Stored résumé", None, None)
    record.__dict__.update(extra)
    return record


def test_log_context_skips_missing_ids():
    assert log_context(job_id=None, application_id=7) == {"application_id": "7"}


def test_log_context_rejects_unknown_fields():
    with pytest.raises(ValueError):
        log_context(candidate_email="ana@x.com")


def test_json_formatter_emits_context_ids():
    formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(logger)s %(message)s')

    line = json.loads(formatter.format(make_record(**log_context(message_id="m-1", event_id="e-1"))))

    assert line["message"] == "Stored résumé"
    assert line["level"] == "INFO"
    assert line["logger"] == "jobmanager.test"
    assert line["message_id"] == "m-1"
    assert line["event_id"] == "e-1"
    assert line["timestamp"]
    assert "location" not in line
    assert "module" not in line


def test_json_formatter_adds_location_for_warnings():
    formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(logger)s %(message)s')

    line = json.loads(formatter.format(make_record(level=logging.WARNING)))

    assert line["location"] == "test_logging_config:42"


def test_plain_formatter_appends_context_ids():
    formatter = ContextFormatter('%(levelname)s - %(message)s')

    assert formatter.format(make_record(**log_context(application_id=7))) == "INFO - Stored résumé [application_id=7]"
    assert formatter.format(make_record()) == "INFO - Stored résumé"
