"""Unit tests for infrastructure.logging.context module.

Tests cover:
- bind_request_context() context manager
- get_correlation_id()
- clear_request_context()
- Context cleanup
"""

import uuid

import pytest
import structlog

from infrastructure.logging.context import (
    bind_request_context,
    clear_request_context,
    get_correlation_id,
)


@pytest.mark.unit
class TestBindRequestContext:
    """Test suite for bind_request_context context manager."""

    def test_auto_generates_correlation_id(self):
        """Correlation ID is auto-generated if not provided."""
        with bind_request_context():
            uuid.UUID(get_correlation_id())

    def test_uses_provided_correlation_id(self):
        """Provided correlation ID is used instead of generating one."""
        with bind_request_context(correlation_id="req-123"):
            assert get_correlation_id() == "req-123"

    def test_binds_request_and_localization(self):
        """Request path, method and localization are bound."""
        with bind_request_context(
            request_path="/de-DE/produkt-liste",
            request_method="GET",
            localization="de-DE",
        ):
            ctx = structlog.contextvars.get_contextvars()
            assert ctx["request_path"] == "/de-DE/produkt-liste"
            assert ctx["request_method"] == "GET"
            assert ctx["localization"] == "de-DE"

    def test_unset_values_are_not_bound(self):
        """None values are left out of the context."""
        with bind_request_context(correlation_id="req-1"):
            ctx = structlog.contextvars.get_contextvars()
            assert "localization" not in ctx
            assert "request_path" not in ctx

    def test_binds_extra_context(self):
        """Extra keyword arguments are bound to context."""
        with bind_request_context(route="products"):
            assert structlog.contextvars.get_contextvars()["route"] == "products"

    def test_context_is_unbound_on_exit(self):
        """Bound values are removed after the block."""
        with bind_request_context(correlation_id="req-1", localization="en"):
            pass
        assert get_correlation_id() is None
        assert "localization" not in structlog.contextvars.get_contextvars()

    def test_context_is_unbound_on_error(self):
        """Bound values are removed when the block raises."""
        with pytest.raises(RuntimeError):
            with bind_request_context(correlation_id="req-1"):
                raise RuntimeError("boom")
        assert get_correlation_id() is None


@pytest.mark.unit
class TestClearRequestContext:
    """Test suite for clear_request_context."""

    def test_clears_all_context(self):
        """All bound values are dropped."""
        structlog.contextvars.bind_contextvars(correlation_id="x", other="y")
        clear_request_context()
        assert structlog.contextvars.get_contextvars() == {}
