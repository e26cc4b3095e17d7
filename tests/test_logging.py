"""Tests for core.logging."""

import logging

from core.logging import ContextFormatter


def _record():
    return logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)


def test_context_formatter_defaults_missing_fields():
    formatter = ContextFormatter("%(session_id)s %(stage)s %(message)s")
    assert formatter.format(_record()) == "- - hello"


def test_context_formatter_keeps_extra():
    formatter = ContextFormatter("%(session_id)s %(stage)s %(message)s")
    record = _record()
    record.session_id = "s1"
    record.stage = "plan"
    assert formatter.format(record) == "s1 plan hello"
