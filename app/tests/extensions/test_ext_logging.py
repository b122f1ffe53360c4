import logging

from extensions.ext_logging import TraceIdFilter, TraceIdFormatter, trace_id_generator, trace_id_var


def make_record() -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)


class TestTraceId:
    def test_generator_is_unique_hex(self):
        first, second = trace_id_generator(), trace_id_generator()
        assert first != second
        assert len(first) == 32
        int(first, 16)

    def test_filter_adds_current_trace_id(self):
        record = make_record()
        token = trace_id_var.set("abc123")
        try:
            assert TraceIdFilter().filter(record) is True
        finally:
            trace_id_var.reset(token)
        assert record.trace_id == "abc123"

    def test_filter_outside_chain(self):
        record = make_record()
        TraceIdFilter().filter(record)
        assert record.trace_id == ""

    def test_formatter_without_filter(self):
        formatter = TraceIdFormatter("%(trace_id)s|%(message)s")
        assert formatter.format(make_record()) == "|hello"
