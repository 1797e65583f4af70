"""Tests for observability/logger.py and observability/metrics.py"""
import io
import json
import logging
import sys


class TestStructuredFormatter:
    def _get_record(self, msg, level=logging.INFO, exc_info=None, extra_fields=None):
        record = logging.LogRecord(
            name="test",
            level=level,
            pathname="",
            lineno=0,
            msg=msg,
            args=(),
            exc_info=exc_info,
        )
        if extra_fields is not None:
            record.extra_fields = extra_fields
        return record

    def test_basic_format(self):
        from richmark.observability.logger import StructuredFormatter

        result = json.loads(StructuredFormatter().format(self._get_record("hello")))
        assert result["message"] == "hello"
        assert result["level"] == "INFO"
        assert result["logger"] == "test"
        assert "ts" in result

    def test_extra_fields_merged(self):
        from richmark.observability.logger import StructuredFormatter

        record = self._get_record("msg", extra_fields={"op": "push", "chars": 5})
        result = json.loads(StructuredFormatter().format(record))
        assert result["op"] == "push"
        assert result["chars"] == 5

    def test_exception_info_included(self):
        from richmark.observability.logger import StructuredFormatter

        try:
            raise ValueError("bad")
        except ValueError:
            exc_info = sys.exc_info()
        result = json.loads(StructuredFormatter().format(self._get_record("e", exc_info=exc_info)))
        assert "ValueError" in result["exception"]

    def test_non_json_values_stringified(self):
        from richmark.observability.logger import StructuredFormatter

        record = self._get_record("m", extra_fields={"obj": object()})
        assert "object" in json.loads(StructuredFormatter().format(record))["obj"]


class TestGetLogger:
    def test_root_defaults_to_warning_and_owns_the_handler(self):
        from richmark.observability.logger import get_logger

        root = get_logger()
        assert root.name == "richmark"
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert root.propagate is False

    def test_component_logger_propagates_to_root(self):
        from richmark.observability.logger import get_logger

        logger = get_logger("richmark.test.child")
        assert logger.handlers == []
        assert logger.propagate is True
        assert logger.parent is get_logger()
        assert logger.getEffectiveLevel() == logging.WARNING

    def test_foreign_name_nested_under_root(self):
        from richmark.observability.logger import get_logger

        assert get_logger("host.page").name == "richmark.host.page"

    def test_string_level(self):
        from richmark.observability.logger import get_logger

        assert get_logger("richmark.test.level", level="debug").level == logging.DEBUG

    def test_idempotent_no_duplicate_handlers(self):
        from richmark.observability.logger import get_logger

        get_logger("richmark.test.dupes")
        get_logger("richmark.test.dupes")
        assert len(get_logger().handlers) == 1

    def test_child_records_written_as_json_lines(self):
        from richmark.observability.logger import get_logger

        stream = io.StringIO()
        logger = get_logger("richmark.test.stream", level="INFO", stream=stream)
        try:
            logger.info("pushed", extra={"extra_fields": {"chars": 3}})
        finally:
            get_logger(stream=sys.stderr)
        line = json.loads(stream.getvalue().strip())
        assert line["logger"] == "richmark.test.stream"
        assert line["message"] == "pushed"
        assert line["chars"] == 3


class TestMetricsHook:
    def test_noop_satisfies_protocol(self):
        from richmark.observability.metrics import MetricsHook, NoopMetricsHook

        assert isinstance(NoopMetricsHook(), MetricsHook)

    def test_noop_discards(self):
        from richmark.observability.metrics import NoopMetricsHook

        hook = NoopMetricsHook()
        assert hook.increment("a") is None
        assert hook.timing("b", 1.5) is None
        assert hook.gauge("c", 2, tags={"k": "v"}) is None

    def test_resolve_metrics(self, metrics):
        from richmark.observability.metrics import NoopMetricsHook, resolve_metrics

        assert isinstance(resolve_metrics(None), NoopMetricsHook)
        assert resolve_metrics(None) is resolve_metrics(None)
        assert resolve_metrics(metrics) is metrics

    def test_recording_hook_satisfies_protocol(self, metrics):
        from richmark.observability.metrics import MetricsHook

        assert isinstance(metrics, MetricsHook)
