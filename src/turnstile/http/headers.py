"""Request headers as an immutable, case-insensitive mapping.

Names are folded to lower case once, when the headers are built from
the ASGI scope. Only the first occurrence of a repeated header is kept;
routing and authorization never need more than one value.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Read-only ``Mapping[str, str]`` keyed by lower-cased header name."""

    __slots__ = ("_values",)

    def __init__(self, raw: Iterable[tuple[bytes, bytes]] = ()) -> None:
        values: dict[str, str] = {}
        for name, value in raw:
            values.setdefault(name.decode("latin-1").lower(), value.decode("latin-1"))
        self._values = values

    @classmethod
    def from_dict(cls, headers: Mapping[str, str]) -> Headers:
        """Build headers from a plain ``str -> str`` mapping."""
        return cls(
            (name.encode("latin-1"), value.encode("latin-1")) for name, value in headers.items()
        )

    def __getitem__(self, key: str) -> str:
        return self._values[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Headers({self._values!r})"
