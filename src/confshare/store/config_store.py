"""The host's canonical configuration store backed by a properties file."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from pathlib import Path

from confshare.codec.properties import PropertiesCodec
from confshare.exceptions import CodecError, PersistenceError
from confshare.store.concurrent_map import StripedMap

log = logging.getLogger(__name__)


class ConfigStore:
    """String key/value store with explicit load/store against one file.

    Single-key operations go straight to a :class:`StripedMap` and are atomic
    per key. ``load`` and ``store`` serialise on a dedicated I/O lock but do not
    block concurrent single-key operations, so a persisted snapshot may mix
    values written before and during the walk.

    Mutations are not persisted until :meth:`store` is called.
    """

    FILE_NAME = "config.properties"

    def __init__(
        self,
        path: Path,
        encoding: str = "utf-8",
        *,
        escape_unicode: bool = False,
        atomic_writes: bool = False,
        stripes: int = 16,
    ) -> None:
        self._path = Path(path)
        self._codec = PropertiesCodec(encoding, escape_unicode=escape_unicode)
        self._atomic_writes = atomic_writes
        self._map = StripedMap(stripes)
        self._io_lock = threading.Lock()

    @classmethod
    def open(
        cls,
        data_dir: Path,
        file_name: str = FILE_NAME,
        encoding: str = "utf-8",
        *,
        escape_unicode: bool = False,
        atomic_writes: bool = False,
        stripes: int = 16,
    ) -> ConfigStore:
        """Open the store kept in *data_dir*, creating an empty file on first use.

        Raises:
            PersistenceError: If the file exists but cannot be read, or the
                empty snapshot cannot be written.
        """
        data_dir = Path(data_dir)
        path = data_dir / file_name
        store = cls(
            path,
            encoding,
            escape_unicode=escape_unicode,
            atomic_writes=atomic_writes,
            stripes=stripes,
        )
        if path.exists():
            log.info("Loading configuration from %s", path)
            store.load()
        else:
            log.info("Creating configuration at %s", path)
            try:
                data_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise PersistenceError(f"Cannot create data directory {data_dir}: {e}") from e
            store.store()
        return store

    @property
    def path(self) -> Path:
        return self._path

    @property
    def encoding(self) -> str:
        return self._codec.encoding

    # ── Single-key operations ────────────────────────────────────────

    def contains(self, key: str) -> bool:
        return self._map.contains(key)

    def get(self, key: str) -> str | None:
        return self._map.get(key)

    def put(self, key: str, value: str) -> None:
        if value is None:
            raise ValueError(f"Value for key {key!r} must not be None")
        self._map.put(key, value)

    def put_all(self, mapping: Mapping[str, str]) -> int:
        """Put each pair in turn; earlier pairs stay applied if a later one fails."""
        for key, value in mapping.items():
            self.put(key, value)
        return len(mapping)

    def remove(self, key: str) -> bool:
        return self._map.remove(key) is not None

    def clear(self) -> int:
        return self._map.clear()

    def size(self) -> int:
        return self._map.size()

    def snapshot(self) -> dict[str, str]:
        return self._map.snapshot()

    def __len__(self) -> int:
        return self._map.size()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._map.contains(key)

    # ── Persistence ──────────────────────────────────────────────────

    def load(self) -> None:
        """Replace the whole content with what the backing file holds."""
        with self._io_lock:
            try:
                entries = self._codec.read(self._path)
            except (OSError, UnicodeError, CodecError) as e:
                raise PersistenceError(f"Cannot read configuration from {self._path}: {e}") from e
            self._map.replace(entries)
        log.info("Loaded %d configuration items from %s", len(entries), self._path)

    def store(self, comments: str | None = None) -> None:
        """Overwrite the backing file with the current snapshot."""
        with self._io_lock:
            entries = self._map.snapshot()
            try:
                self._codec.write(self._path, entries, comments, atomic=self._atomic_writes)
            except (OSError, UnicodeError) as e:
                raise PersistenceError(f"Cannot write configuration to {self._path}: {e}") from e
        log.info("Stored %d configuration items to %s", len(entries), self._path)
