"""
test_logging_config.py — structured log output.
"""

import json
import logging
import sys

from tablayeso.services.logging_config import (
    JSONFormatter,
    RequestContextFilter,
    TextFormatter,
    bind_request_id,
    current_request_id,
    reset_request_id,
)


def _record(**extra):
    record = logging.LogRecord(
        name="tablayeso-engine", level=logging.WARNING, pathname=__file__, lineno=10,
        msg="Item %s excluded", args=("Muro #2",), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_base_fields(self):
        entry = json.loads(JSONFormatter().format(_record()))
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "tablayeso-engine"
        assert entry["message"] == "Item Muro #2 excluded"
        assert "item_number" not in entry

    def test_item_number_and_duration(self):
        entry = json.loads(JSONFormatter().format(_record(item_number=2, duration_ms=1.5)))
        assert entry["item_number"] == 2
        assert entry["duration_ms"] == 1.5

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()
        entry = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in entry["exception"]

    def test_calculation_context_fields(self):
        record = _record(work_area="Oficina", item_count=3, error_count=1, material_count=12)
        entry = json.loads(JSONFormatter().format(record))
        assert entry["work_area"] == "Oficina"
        assert entry["item_count"] == 3
        assert entry["error_count"] == 1
        assert entry["material_count"] == 12

    def test_spanish_text_kept_readable(self):
        entry = JSONFormatter().format(_record(work_area="Baño"))
        assert "Baño" in entry


class TestRequestContext:

    def test_bound_request_id_stamped(self):
        record = _record()
        token = bind_request_id("req-42")
        try:
            assert RequestContextFilter().filter(record) is True
        finally:
            reset_request_id(token)
        assert record.request_id == "req-42"
        assert current_request_id() is None

    def test_explicit_request_id_wins(self):
        record = _record(request_id="own")
        token = bind_request_id("req-42")
        try:
            RequestContextFilter().filter(record)
        finally:
            reset_request_id(token)
        assert record.request_id == "own"

    def test_unbound_context_leaves_record_alone(self):
        record = _record()
        RequestContextFilter().filter(record)
        assert not hasattr(record, "request_id")


class TestTextFormatter:

    def test_context_suffix(self):
        line = TextFormatter().format(_record(request_id="abc", item_number=2))
        assert line.endswith("Item Muro #2 excluded (req=abc item=#2)")

    def test_no_context(self):
        line = TextFormatter().format(_record())
        assert line.endswith("WARNING: Item Muro #2 excluded")
