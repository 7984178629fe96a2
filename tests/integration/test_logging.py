# tests/integration/test_logging.py
"""
Logging integration tests - structured errors attached to stdlib logging
lines through JSONFormatter and StructuredLogger.
"""

from __future__ import annotations

import inspect
import io
import json
import logging

from erreur import (
    JSONFormatter,
    StructuredLogger,
    StringError,
    example_encoder_config,
    json_handler,
    log_field,
    production_encoder_config,
    string,
    wrap,
)


def _lines(stream: io.StringIO) -> list[str]:
    return stream.getvalue().splitlines()


def test_log_structured_error(log_capture, conn_err):
    logger, stream = log_capture
    StructuredLogger(logger).error("failed to load data", log_field(conn_err))

    assert _lines(stream) == [
        '{"level":"error","msg":"failed to load data","error":{"msg":"connection error","code":1234,"addr":"example.com"}}'
    ]


def test_log_wrapped_plain_cause(log_capture):
    logger, stream = log_capture
    err = wrap(StringError("insufficient permissions"), "writing to file failed", string("fileName", "someFile"))
    StructuredLogger(logger).error("failed to flush db", log_field(err))

    assert _lines(stream) == [
        '{"level":"error","msg":"failed to flush db","error":{"msg":"writing to file failed","fileName":"someFile"}}'
    ]


def test_log_nested_cause(log_capture, file_err):
    logger, stream = log_capture
    StructuredLogger(logger).error("failed to flush db", log_field(file_err))

    assert _lines(stream) == [
        '{"level":"error","msg":"failed to flush db","error":{"msg":"failed to flush db",'
        '"fieldThatGoes":"ping","cause":{"msg":"writing to file failed","fileName":"someFile"}}}'
    ]


def test_log_none_error_adds_nothing(log_capture):
    logger, stream = log_capture
    StructuredLogger(logger).info("all good", log_field(None))

    assert _lines(stream) == ['{"level":"info","msg":"all good"}']


def test_log_foreign_error_as_text(log_capture):
    logger, stream = log_capture
    StructuredLogger(logger).warning("retrying", log_field(TimeoutError("read timed out")))

    assert _lines(stream) == ['{"level":"warn","msg":"retrying","error":"read timed out"}']


def test_with_fields_prepends_context(log_capture):
    logger, stream = log_capture
    log = StructuredLogger(logger).with_fields(string("request_id", "r-1"))
    log.info("handled", string("route", "/users"))

    assert _lines(stream) == ['{"level":"info","msg":"handled","request_id":"r-1","route":"/users"}']


def test_disabled_level_emits_nothing(log_capture):
    logger, stream = log_capture
    logger.setLevel(logging.INFO)
    StructuredLogger(logger).debug("noisy", string("k", "v"))

    assert stream.getvalue() == ""


def test_plain_logger_call_without_fields(log_capture):
    logger, stream = log_capture
    logger.info("user %s logged in", "alice")

    assert _lines(stream) == ['{"level":"info","msg":"user alice logged in"}']


def test_production_config_keys():
    stream = io.StringIO()
    logger = logging.getLogger("erreur.tests.production")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = json_handler(stream, production_encoder_config())
    logger.addHandler(handler)
    try:
        try:
            raise ValueError("bad input")
        except ValueError as e:
            StructuredLogger(logger).exception("request failed", log_field(wrap(e, "parse failed")))
    finally:
        logger.removeHandler(handler)

    line = stream.getvalue()
    assert line.count("\n") == 1
    record = json.loads(line)
    assert list(record) == ["level", "ts", "logger", "caller", "msg", "error", "stacktrace"]
    assert record["level"] == "error"
    assert record["logger"] == "erreur.tests.production"
    assert record["error"] == {"msg": "parse failed"}
    assert "ValueError: bad input" in record["stacktrace"]


def test_formatter_default_config_is_production_without_line_ending():
    formatter = JSONFormatter()
    assert formatter.config.line_ending == ""
    assert formatter.config.time_key == production_encoder_config().time_key

    record = logging.LogRecord("app", logging.INFO, __file__, 10, "hello", None, None)
    out = formatter.format(record)
    assert json.loads(out)["caller"] == "test_logging.py:10"
    assert not out.endswith("\n")


def test_example_config_formatter_via_fields_extra():
    formatter = JSONFormatter(example_encoder_config())
    record = logging.LogRecord("app", logging.CRITICAL, __file__, 1, "down", None, None)
    record.fields = (string("svc", "api"),)

    assert formatter.format(record) == '{"level":"fatal","msg":"down","svc":"api"}'


def test_caller_points_at_logging_call_site():
    stream = io.StringIO()
    logger = logging.getLogger("erreur.tests.caller")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = json_handler(stream, production_encoder_config())
    logger.addHandler(handler)
    log = StructuredLogger(logger)
    try:
        line = inspect.currentframe().f_lineno + 1
        log.error("direct", string("k", "v"))
        child_line = inspect.currentframe().f_lineno + 1
        log.with_fields(string("req", "r-1")).info("child")
        log_line = inspect.currentframe().f_lineno + 1
        log.log(logging.WARNING, "explicit level")
    finally:
        logger.removeHandler(handler)

    callers = [json.loads(raw)["caller"] for raw in _lines(stream)]
    assert callers == [
        f"test_logging.py:{line}",
        f"test_logging.py:{child_line}",
        f"test_logging.py:{log_line}",
    ]
