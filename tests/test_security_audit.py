"""Tests for notelink.security.audit — security event emission."""

import logging

import pytest

from notelink.security.audit import SecurityEvent, emit_security_event, set_security_event_sink


class _FakeRequest:
    method = "GET"
    path = "/me"
    client = ("10.0.0.1", 5555)


class TestEmitSecurityEvent:
    def test_logs_on_auth_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="notelink.auth"):
            emit_security_event("auth.token.missing", request=_FakeRequest())
        assert "auth.token.missing GET /me client=10.0.0.1:5555" in caplog.text

    def test_returns_event(self) -> None:
        event = emit_security_event("auth.token.invalid", request=_FakeRequest())
        assert event.name == "auth.token.invalid"
        assert event.client == "10.0.0.1:5555"

    def test_without_request(self) -> None:
        event = emit_security_event("custom.event", details={"k": "v"})
        assert (event.method, event.path, event.client) == (None, None, None)
        assert event.details == {"k": "v"}

    def test_sink_receives_event(self) -> None:
        received: list[SecurityEvent] = []
        set_security_event_sink(received.append)
        try:
            emit_security_event("auth.token.missing")
        finally:
            set_security_event_sink(None)
        assert [e.name for e in received] == ["auth.token.missing"]

    def test_cleared_sink_is_not_called(self) -> None:
        received: list[SecurityEvent] = []
        set_security_event_sink(received.append)
        set_security_event_sink(None)
        emit_security_event("auth.token.missing")
        assert received == []
