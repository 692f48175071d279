"""In-memory configuration store with file-backed snapshots."""

from __future__ import annotations

from confshare.store.concurrent_map import StripedMap
from confshare.store.config_store import ConfigStore
from confshare.store.protocols import IConfigStore, IPersistentConfigStore

__all__ = ["ConfigStore", "IConfigStore", "IPersistentConfigStore", "StripedMap"]
