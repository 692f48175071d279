"""Store protocol: the contract the router and the client backup/restore rely on."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class IConfigStore(Protocol):
    """Protocol for string key/value configuration stores (local file, remote host, fakes)."""

    def contains(self, key: str) -> bool:
        """Check whether *key* has a value."""
        ...

    def get(self, key: str) -> str | None:
        """Return the value of *key*, or ``None`` if absent."""
        ...

    def put(self, key: str, value: str) -> None:
        """Set *key* to *value*."""
        ...

    def put_all(self, mapping: Mapping[str, str]) -> int:
        """Set every pair of *mapping* independently. Returns ``len(mapping)``."""
        ...

    def remove(self, key: str) -> bool:
        """Remove *key*. Returns whether a value was removed."""
        ...

    def clear(self) -> int:
        """Remove everything. Returns the number of entries removed."""
        ...

    def size(self) -> int:
        """Number of keys with a value."""
        ...

    def snapshot(self) -> dict[str, str]:
        """A copy of the current content."""
        ...


@runtime_checkable
class IPersistentConfigStore(IConfigStore, Protocol):
    """A store that can persist its snapshot; what the host router serves."""

    def store(self, comments: str | None = None) -> None:
        """Persist the current snapshot. Raises ``PersistenceError`` on I/O failure."""
        ...
