"""Read-only multi-valued string mappings.

Headers, query strings and URL-encoded forms share one shape: a key may
repeat, plain lookup answers with its first value, and validation wants
an ordinary dict.
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import Any


class MultiDict(Mapping[str, str]):
    """Immutable ``str -> str`` mapping whose keys may carry several values.

    ``m[key]`` and ``m.get(key)`` give the first value; ``get_list``
    gives all of them in arrival order. Subclasses normalize keys by
    overriding ``normalize``.
    """

    __slots__ = ("_values",)

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        grouped: dict[str, list[str]] = {}
        for key, value in pairs:
            grouped.setdefault(self.normalize(key), []).append(value)
        self._values: dict[str, tuple[str, ...]] = {
            key: tuple(values) for key, values in grouped.items()
        }

    @staticmethod
    def normalize(key: str) -> str:
        return key

    def __getitem__(self, key: str) -> str:
        return self._values[self.normalize(key)][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.normalize(key) in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_dict()!r})"

    def get_list(self, key: str) -> list[str]:
        """Every value sent for *key*; empty when absent."""
        return list(self._values.get(self.normalize(key), ()))

    def to_dict(self) -> dict[str, Any]:
        """Plain dict for validation.

        Single values stay strings; repeated keys (``?tag=a&tag=b``)
        become lists so ``array`` parameters validate.
        """
        return {
            key: values[0] if len(values) == 1 else list(values)
            for key, values in self._values.items()
        }
