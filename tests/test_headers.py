"""Tests for notelink.http.headers — immutable, case-insensitive Headers."""

import pytest

from notelink.http.headers import Headers


def _h(*pairs: tuple[str, str]) -> Headers:
    """Shorthand: build Headers from string pairs."""
    raw = tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in pairs)
    return Headers(raw)


class TestHeaders:
    def test_case_insensitive(self) -> None:
        h = _h(("Content-Type", "text/html"))
        assert h["content-type"] == "text/html"
        assert h["CONTENT-TYPE"] == "text/html"

    def test_missing_key_raises(self) -> None:
        with pytest.raises(KeyError):
            _h(("Accept", "*/*"))["X-Missing"]

    def test_contains(self) -> None:
        h = _h(("Accept", "*/*"))
        assert "ACCEPT" in h
        assert "x-missing" not in h
        assert 42 not in h  # type: ignore[operator]

    def test_first_value_wins(self) -> None:
        h = _h(("X-Tag", "a"), ("x-tag", "b"))
        assert h["x-tag"] == "a"
        assert len(h) == 1

    def test_get_default(self) -> None:
        assert _h().get("x", "fallback") == "fallback"

    def test_to_dict_lowercases(self) -> None:
        h = _h(("X-Api-Key", "k"), ("Accept", "*/*"))
        assert h.to_dict() == {"x-api-key": "k", "accept": "*/*"}

    def test_from_dict(self) -> None:
        h = Headers.from_dict({"Authorization": "Bearer t"})
        assert h["authorization"] == "Bearer t"
        assert h.raw == ((b"authorization", b"Bearer t"),)
