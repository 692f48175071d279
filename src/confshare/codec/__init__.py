"""Text codecs for the persisted configuration snapshot."""

from __future__ import annotations

from confshare.codec.properties import PropertiesCodec, dumps, loads

__all__ = ["PropertiesCodec", "dumps", "loads"]
