"""Query string parameters."""

from urllib.parse import parse_qsl

from notelink.http.multidict import MultiDict


class QueryParams(MultiDict):
    """Parsed query string (or URL-encoded form body).

    Blank values are kept, so ``?flag=`` gives ``{"flag": ""}``.
    """

    __slots__ = ("_raw",)

    def __init__(self, query_string: bytes = b"") -> None:
        super().__init__(
            parse_qsl(query_string.decode("utf-8", "replace"), keep_blank_values=True)
        )
        self._raw = query_string

    @property
    def raw(self) -> bytes:
        """The undecoded query string."""
        return self._raw
