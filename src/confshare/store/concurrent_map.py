"""Lock-striped string map safe for concurrent single-key access."""

from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping


class StripedMap:
    """A ``str -> str`` map split into independently locked stripes.

    Each key hashes to one stripe, so operations on different keys rarely
    contend and every single-key operation is atomic. Whole-map operations
    (``size``, ``clear``, ``snapshot``, ``replace``) visit the stripes one at a
    time and are therefore weakly consistent: writers touching a stripe that
    has already been visited are not reflected.
    """

    def __init__(self, stripes: int = 16) -> None:
        if stripes < 1:
            raise ValueError(f"stripes must be >= 1, got {stripes}")
        self._locks = [threading.Lock() for _ in range(stripes)]
        self._tables: list[dict[str, str]] = [{} for _ in range(stripes)]

    def _slot(self, key: str) -> int:
        return hash(key) % len(self._tables)

    def get(self, key: str) -> str | None:
        slot = self._slot(key)
        with self._locks[slot]:
            return self._tables[slot].get(key)

    def contains(self, key: str) -> bool:
        slot = self._slot(key)
        with self._locks[slot]:
            return key in self._tables[slot]

    def put(self, key: str, value: str) -> str | None:
        """Store *value* under *key*, returning the previous value if any."""
        slot = self._slot(key)
        with self._locks[slot]:
            previous = self._tables[slot].get(key)
            self._tables[slot][key] = value
            return previous

    def remove(self, key: str) -> str | None:
        """Remove *key*, returning the removed value or ``None``."""
        slot = self._slot(key)
        with self._locks[slot]:
            return self._tables[slot].pop(key, None)

    def size(self) -> int:
        total = 0
        for slot, lock in enumerate(self._locks):
            with lock:
                total += len(self._tables[slot])
        return total

    def clear(self) -> int:
        """Empty every stripe and return how many entries were removed."""
        removed = 0
        for slot, lock in enumerate(self._locks):
            with lock:
                table = self._tables[slot]
                removed += len(table)
                table.clear()
        return removed

    def snapshot(self) -> dict[str, str]:
        result: dict[str, str] = {}
        for slot, lock in enumerate(self._locks):
            with lock:
                result.update(self._tables[slot])
        return result

    def replace(self, entries: Mapping[str, str]) -> None:
        """Swap the content of every stripe for the matching part of *entries*."""
        fresh: list[dict[str, str]] = [{} for _ in self._tables]
        for key, value in entries.items():
            fresh[self._slot(key)][key] = value
        for slot, lock in enumerate(self._locks):
            with lock:
                self._tables[slot] = fresh[slot]

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())
