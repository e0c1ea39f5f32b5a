"""
Tests for structured logging.
"""

import io
import json
import logging
import os
import sys
import threading

import pytest

from docseal.logging import LogContext, StructuredFormatter, configure_logging, get_logger
from docseal.utils.config import get_settings


@pytest.fixture
def restore_logger():
    root = logging.getLogger("docseal")
    handlers, level, propagate = list(root.handlers), root.level, root.propagate
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate


@pytest.fixture
def fresh_settings(monkeypatch):
    monkeypatch.chdir(os.path.dirname(__file__))
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


class TestLogging:
    def test_logger_namespace(self):
        assert get_logger("codec").name == "docseal.codec"
        assert get_logger("docseal.documents").name == "docseal.documents"

    def test_json_output_redacts_sensitive_fields(self, restore_logger):
        stream = io.StringIO()
        configure_logging(level="DEBUG", json_format=True, stream=stream)
        get_logger("test").info("hello", extra={"leaf_count": 3, "primary_key": "abc"})

        record = json.loads(stream.getvalue().strip())
        assert record["message"] == "hello"
        assert record["extra"]["leaf_count"] == 3
        assert record["extra"]["primary_key"] == "[REDACTED]"

    def test_log_context_included(self, restore_logger):
        stream = io.StringIO()
        configure_logging(level="INFO", json_format=True, stream=stream)
        with LogContext(request_id="req-42"):
            get_logger("test").info("inside")
        assert json.loads(stream.getvalue().strip())["extra"]["request_id"] == "req-42"

    def test_development_format(self, restore_logger):
        stream = io.StringIO()
        configure_logging(level="INFO", json_format=False, stream=stream)
        get_logger("test").warning("careful")
        assert "WARNING" in stream.getvalue()
        assert "careful" in stream.getvalue()

    def test_signature_failure_is_logged(self, encryptor, caplog):
        data = encryptor.encrypt({"a": "1"}).to_dict()
        data["signature"] = "garbage"
        with caplog.at_level(logging.WARNING, logger="docseal"):
            assert encryptor.verify(data) is False
        assert any("signature" in r.getMessage() for r in caplog.records)

    def test_formatter_handles_exceptions(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.getLogger("docseal.x").makeRecord(
                "docseal.x", logging.ERROR, __file__, 1, "failed", (), exc_info=sys.exc_info()
            )
        output = json.loads(StructuredFormatter().format(record))
        assert "ValueError" in output["exception"]

    def test_level_defaults_to_environment_setting(self, restore_logger, fresh_settings):
        fresh_settings.setenv("DS_LOG_LEVEL", "WARNING")
        configure_logging(json_format=True, stream=io.StringIO())
        assert logging.getLogger("docseal").level == logging.WARNING

    def test_explicit_level_wins_over_environment(self, restore_logger, fresh_settings):
        fresh_settings.setenv("DS_LOG_LEVEL", "WARNING")
        configure_logging(level="DEBUG", json_format=True, stream=io.StringIO())
        assert logging.getLogger("docseal").level == logging.DEBUG

    def test_production_environment_selects_json(self, restore_logger, fresh_settings):
        fresh_settings.setenv("DS_ENVIRONMENT", "production")
        fresh_settings.setenv("DS_LOG_LEVEL", "INFO")
        stream = io.StringIO()
        configure_logging(stream=stream)
        get_logger("test").info("structured")
        assert json.loads(stream.getvalue().strip())["message"] == "structured"


class TestLogContext:
    def test_nested_contexts_restore(self):
        with LogContext(request_id="outer"):
            with LogContext(request_id="inner"):
                assert LogContext.get_current() == {"request_id": "inner"}
            assert LogContext.get_current() == {"request_id": "outer"}
        assert LogContext.get_current() == {}

    def test_threads_do_not_share_context(self):
        entered = threading.Barrier(2)
        seen = {}

        def worker(request_id):
            with LogContext(request_id=request_id):
                entered.wait(timeout=5)
                seen[request_id] = LogContext.get_current()["request_id"]
                entered.wait(timeout=5)

        threads = [threading.Thread(target=worker, args=(rid,)) for rid in ("req-a", "req-b")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert seen == {"req-a": "req-a", "req-b": "req-b"}
