"""Request headers and the ``Cookie`` header."""

from __future__ import annotations

from collections.abc import Mapping

from notelink.http.multidict import MultiDict

type RawHeaders = tuple[tuple[bytes, bytes], ...]


class Headers(MultiDict):
    """Case-insensitive request headers decoded from ASGI byte pairs.

    Names are folded to lower case, so ``headers["Authorization"]`` and
    ``headers["authorization"]`` are the same lookup, and iteration
    yields lower-case names.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: RawHeaders = ()) -> None:
        super().__init__((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)
        self._raw = raw

    @staticmethod
    def normalize(key: str) -> str:
        return key.lower()

    @classmethod
    def from_dict(cls, headers: Mapping[str, str]) -> Headers:
        """Build headers from a plain ``name -> value`` mapping."""
        return cls(
            tuple(
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in headers.items()
            )
        )

    def to_dict(self) -> dict[str, str]:
        """``name -> first value``, the shape header validation sees."""
        return {name: self[name] for name in self}

    @property
    def raw(self) -> RawHeaders:
        """The byte pairs exactly as the server delivered them."""
        return self._raw


def parse_cookies(header: str) -> dict[str, str]:
    """``Cookie`` header value to a dict. Pieces without ``=`` are skipped."""
    pieces = (piece.partition("=") for piece in header.split(";"))
    return {name.strip(): value.strip() for name, sep, value in pieces if sep}
