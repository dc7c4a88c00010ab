"""Tests for contentstore.core.logging — processors and scoped context."""

from __future__ import annotations

import pytest
import structlog
from structlog.testing import capture_logs

from contentstore.core import logging as cs_logging
from contentstore.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


@pytest.fixture(autouse=True)
def _reset():
    clear_context()
    yield
    clear_context()
    structlog.reset_defaults()


class TestProcessors:
    def test_service_metadata(self):
        event = cs_logging._add_service_metadata(None, "info", {"event": "x"})
        assert event["service.name"] == "content-store"

    def test_service_metadata_not_overwritten(self):
        event = cs_logging._add_service_metadata(None, "info", {"service.name": "cms"})
        assert event["service.name"] == "cms"

    def test_elasticsearch_fields(self):
        event = cs_logging._elasticsearch_compatible(
            None, "info", {"timestamp": "t", "level": "info", "event": "x"}
        )
        assert event == {"@timestamp": "t", "log.level": "info", "event": "x"}


class TestContext:
    def test_bind_and_unbind(self):
        bind_context(entity="block", entity_id=3)
        assert structlog.contextvars.get_contextvars() == {"entity": "block", "entity_id": 3}
        unbind_context("entity_id")
        assert structlog.contextvars.get_contextvars() == {"entity": "block"}

    def test_log_context_scoped(self):
        bind_context(request_id="r-1")
        with LogContext(entity="content", operation="create"):
            assert structlog.contextvars.get_contextvars() == {
                "request_id": "r-1",
                "entity": "content",
                "operation": "create",
            }
        assert structlog.contextvars.get_contextvars() == {"request_id": "r-1"}

    def test_log_context_unbinds_on_error(self):
        with pytest.raises(RuntimeError):
            with LogContext(entity="block"):
                raise RuntimeError("boom")
        assert structlog.contextvars.get_contextvars() == {}


class TestConfigure:
    def test_service_name(self, monkeypatch):
        monkeypatch.setattr(cs_logging, "_SERVICE_NAME", "content-store")
        configure_logging(level="debug", json_format=True, service="cms-test")
        assert cs_logging._SERVICE_NAME == "cms-test"

    def test_captured_events(self):
        with capture_logs() as logs:
            get_logger(__name__).info("translation_swapped", superseded=1)
        assert logs == [{"event": "translation_swapped", "superseded": 1, "log_level": "info"}]
