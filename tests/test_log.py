import json
import logging
import sys

import pytest

from sitegen.exceptions import NoCredentialsConfigured, ProviderExhausted
from sitegen.log import JSONFormatter, ProviderCallLogger, log_step, setup_logging


def test_json_formatter_includes_structured_data():
    record = logging.LogRecord("sitegen.llm", logging.INFO, __file__, 1, "provider_call", None, None)
    record.data = {"credential": 2, "attempt": 1}

    entry = json.loads(JSONFormatter().format(record))

    assert entry["level"] == "INFO"
    assert entry["logger"] == "sitegen.llm"
    assert entry["msg"] == "provider_call"
    assert entry["data"] == {"credential": 2, "attempt": 1}


def test_provider_call_logger_records_success_and_error(caplog):
    caplog.set_level(logging.INFO, logger="sitegen.llm")

    with ProviderCallLogger("test-model", credential=1, attempt=2) as call_log:
        call_log.success(512)
    with ProviderCallLogger("test-model", credential=2, attempt=3) as call_log:
        call_log.error("rate_limited", "quota")

    success, failure = [record for record in caplog.records if record.name == "sitegen.llm"]
    assert success.data["text_len"] == 512
    assert success.data["attempt"] == 2
    assert failure.levelno == logging.WARNING
    assert failure.data["status"] == "rate_limited"
    assert "secret" not in json.dumps(failure.data)


def test_json_formatter_tags_tracked_errors():
    error = ProviderExhausted("gave up", attempts=2)
    try:
        raise error
    except ProviderExhausted:
        record = logging.LogRecord("sitegen", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())

    entry = json.loads(JSONFormatter().format(record))

    assert entry["error_type"] == "provider_exhausted"
    assert entry["trace_id"] == error.trace_id


def test_provider_call_logger_reports_escaping_exception(caplog):
    caplog.set_level(logging.INFO, logger="sitegen.llm")

    with pytest.raises(OSError):
        with ProviderCallLogger("test-model", credential=1, attempt=1):
            raise OSError("connection reset")

    (record,) = [record for record in caplog.records if record.name == "sitegen.llm"]
    assert record.data["status"] == "exception"
    assert record.data["error"] == "connection reset"


def test_log_step_records_fallback_flag(caplog):
    caplog.set_level(logging.INFO, logger="sitegen.generation")
    log_step("stylesheet", fallback=True, size=120)
    record = caplog.records[-1]
    assert record.data == {"step": "stylesheet", "fallback": True, "size": 120, "corrective": False}


def test_setup_logging_writes_json_lines(tmp_path):
    logger = logging.getLogger("sitegen")
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    logger.handlers = []
    try:
        setup_logging(tmp_path, "debug")
        logging.getLogger("sitegen.test").info("hello", extra={"data": {"k": "v"}})
        for handler in logger.handlers:
            handler.flush()
        lines = (tmp_path / "sitegen.jsonl").read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["data"] == {"k": "v"}
        assert logger.level == logging.DEBUG
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers = saved_handlers
        logger.setLevel(saved_level)


def test_tracked_errors_carry_type_and_trace():
    error = NoCredentialsConfigured()
    assert error.error_type == "no_credentials"
    assert error.trace_id in error.with_trace()

    exhausted = ProviderExhausted("gave up", attempts=3)
    assert exhausted.error_type == "provider_exhausted"
    assert exhausted.attempts == 3
    assert exhausted.last_error is None
