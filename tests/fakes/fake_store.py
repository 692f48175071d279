"""In-memory configuration store for router tests."""

from __future__ import annotations

from collections.abc import Mapping

from confshare.exceptions import PersistenceError


class FakeConfigStore:
    """Dict-backed store with no filesystem.

    Args:
        fail_store: Make :meth:`store` raise ``PersistenceError``.
        fail_on_key: Make :meth:`put` raise ``RuntimeError`` for this key.
    """

    def __init__(
        self,
        entries: Mapping[str, str] | None = None,
        *,
        fail_store: bool = False,
        fail_on_key: str | None = None,
    ) -> None:
        self._data: dict[str, str] = dict(entries or {})
        self._fail_store = fail_store
        self._fail_on_key = fail_on_key
        self.stored: list[tuple[dict[str, str], str | None]] = []

    def contains(self, key: str) -> bool:
        return key in self._data

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        if key == self._fail_on_key:
            raise RuntimeError(f"put failed for {key}")
        self._data[key] = value

    def put_all(self, mapping: Mapping[str, str]) -> int:
        for key, value in mapping.items():
            self.put(key, value)
        return len(mapping)

    def remove(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def clear(self) -> int:
        removed = len(self._data)
        self._data.clear()
        return removed

    def size(self) -> int:
        return len(self._data)

    def snapshot(self) -> dict[str, str]:
        return dict(self._data)

    def store(self, comments: str | None = None) -> None:
        if self._fail_store:
            raise PersistenceError("disk full")
        self.stored.append((dict(self._data), comments))
