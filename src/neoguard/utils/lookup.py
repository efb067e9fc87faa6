"""Read-only reference tables keyed by name."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, TypeVar

T = TypeVar("T")


class UnknownKeyError(KeyError):
    """Lookup of a name that is not in a reference table.

    Attributes:
        kind: What the table holds (e.g. ``"target material"``).
        key: The requested name.
    """

    def __init__(self, kind: str, key: str) -> None:
        super().__init__(kind, key)
        self.kind = kind
        self.key = key

    def __str__(self) -> str:
        return f"Unknown {self.kind}: {self.key}"


def frozen(table: dict[str, T]) -> Mapping[str, T]:
    """Wrap a dict so callers cannot mutate it."""
    return MappingProxyType(table)


def lookup(table: Mapping[str, T], key: str, kind: str) -> T:
    """Fetch ``table[key]`` or raise :class:`UnknownKeyError`."""
    try:
        return table[key]
    except KeyError:
        raise UnknownKeyError(kind, key) from None
