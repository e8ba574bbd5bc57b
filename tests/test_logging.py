"""
Tests for logging utilities.
"""

import json
import logging

import pytest

from ng_i18n_extract.utils.logging import (
    LogContext,
    StructuredFormatter,
    context_filter,
    log_performance,
    setup_logging,
)


def make_record(message="Extracted 3 texts", **extra):
    record = logging.LogRecord("ng_i18n_extract.test", logging.INFO, __file__, 10, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Test JSON log formatting."""

    def test_fields(self):
        data = json.loads(StructuredFormatter().format(make_record(source_file="a.html")))

        assert data["level"] == "INFO"
        assert data["message"] == "Extracted 3 texts"
        assert data["logger"] == "ng_i18n_extract.test"
        assert data["source_file"] == "a.html"


class TestLogContext:
    """Test temporary logging context."""

    def test_context_is_applied_and_restored(self):
        with LogContext(source_file="outer.ts"):
            with LogContext(source_file="inner.ts"):
                record = make_record()
                context_filter.filter(record)
                assert record.source_file == "inner.ts"
            assert context_filter.context["source_file"] == "outer.ts"

        assert "source_file" not in context_filter.context


class TestLogPerformance:
    """Test the performance decorator."""

    @pytest.mark.asyncio
    async def test_completion_is_logged(self, caplog):
        @log_performance
        async def double(x):
            return x * 2

        with caplog.at_level(logging.DEBUG):
            assert await double(4) == 8

        assert double.__name__ == "double"
        assert "Completed double in" in caplog.text

    @pytest.mark.asyncio
    async def test_async_failure_is_reraised(self, caplog):
        @log_performance
        async def explode():
            raise ValueError("boom")

        with pytest.raises(ValueError):
            await explode()
        assert "Failed explode" in caplog.text


class TestSetupLogging:
    """Test logging configuration."""

    def test_file_handler(self, tmp_path):
        log_path = tmp_path / "extract.log"
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging(log_level="info", log_file_path=log_path)
            logging.getLogger("ng_i18n_extract.test").info("Saved 2 translations")
            for handler in root.handlers:
                handler.flush()

            line = log_path.read_text(encoding="utf-8").strip().splitlines()[-1]
            assert json.loads(line)["message"] == "Saved 2 translations"
            assert root.level == logging.INFO
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
