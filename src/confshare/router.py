"""Request router: resolves a request path to a store operation and shapes the response.

The router never raises for expected failures. Missing arguments, unknown
paths, an unavailable store and persistence errors are all encoded in the
response (``None``, a zero count, ``contains=0``).
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from confshare.exceptions import PersistenceError
from confshare.models import (
    Action,
    ConfigRequest,
    ConfigResponse,
    ContainsResult,
    CountResult,
    EntriesResult,
    Entry,
    InsertResult,
    RequestPath,
    ValueResult,
    build_type,
    build_uri,
)
from confshare.store.protocols import IPersistentConfigStore

log = logging.getLogger(__name__)

Handler = Callable[[ConfigRequest], Optional[ConfigResponse]]


class ConfigRouter:
    """Dispatches requests for one authority against one store.

    Args:
        authority: Logical name of the host; requests for any other
            authority match nothing.
        store: The host's store, or ``None`` when it failed to initialise.
            Without a store every operation answers its empty result.
    """

    def __init__(self, authority: str, store: IPersistentConfigStore | None) -> None:
        self._authority = authority
        self._store = store
        self._paths: dict[str, RequestPath] = {p.value: p for p in RequestPath}
        self._handlers: dict[RequestPath, Handler] = {
            RequestPath.CONTAINS: self._contains,
            RequestPath.GET: self._get,
            RequestPath.GET_ALL: self._get_all,
            RequestPath.PUT: self._put,
            RequestPath.PUT_ALL: self._put_all,
            RequestPath.REMOVE: self._remove,
            RequestPath.CLEAR: self._clear,
            RequestPath.SAVE: self._save,
        }
        self._types: dict[RequestPath, str] = {p: build_type(authority, p.value) for p in RequestPath}
        if store is None:
            log.warning("Configuration store unavailable; serving empty results for %s", authority)

    @property
    def authority(self) -> str:
        return self._authority

    @property
    def available(self) -> bool:
        return self._store is not None

    def resolve(self, authority: str, path: str) -> RequestPath | None:
        """Match a request target to an operation, or ``None``."""
        if authority != self._authority:
            return None
        return self._paths.get(path)

    def get_type(self, authority: str, path: str) -> str | None:
        kind = self.resolve(authority, path)
        return None if kind is None else self._types[kind]

    def dispatch(self, request: ConfigRequest) -> ConfigResponse | None:
        """Run *request* and return its response; ``None`` when nothing matched."""
        kind = self.resolve(request.authority, request.path)
        if kind is None or kind.action is not request.action:
            log.debug("No operation for %s %s/%s", request.action.value, request.authority, request.path)
            return None
        if self._store is None:
            return _unavailable(kind)
        return self._handlers[kind](request)

    # ── Queries ──────────────────────────────────────────────────────

    def _contains(self, request: ConfigRequest) -> ContainsResult | None:
        if request.key is None:
            return None
        contains = self._store.contains(request.key)
        log.debug("Checking the configuration item: contains(%r) = %s", request.key, contains)
        return ContainsResult(key=request.key, contains=1 if contains else 0)

    def _get(self, request: ConfigRequest) -> ValueResult | None:
        if request.key is None:
            return None
        value = self._store.get(request.key)
        log.debug("Getting the configuration item: %s = %s", request.key, value)
        return ValueResult(value=value)

    def _get_all(self, request: ConfigRequest) -> EntriesResult:
        rows = [Entry(key=k, value=v) for k, v in self._store.snapshot().items()]
        return EntriesResult(rows=rows)

    # ── Inserts ──────────────────────────────────────────────────────

    def _put(self, request: ConfigRequest) -> InsertResult | None:
        if request.key is None or request.value is None:
            return None
        log.debug("Setting the configuration item: %s = %s", request.key, request.value)
        self._store.put(request.key, request.value)
        return InsertResult(uri=build_uri(self._authority, RequestPath.PUT.value, request.key))

    def _put_all(self, request: ConfigRequest) -> InsertResult | None:
        if request.values is None:
            return None
        log.debug("Setting %d configuration items", len(request.values))
        # One put per pair: a failure part-way leaves the earlier pairs applied.
        for key, value in request.values.items():
            log.debug("Setting the configuration item: %s = %s", key, value)
            self._store.put(key, value)
        return InsertResult(
            uri=build_uri(self._authority, RequestPath.PUT_ALL.value),
            count=len(request.values),
        )

    # ── Deletes ──────────────────────────────────────────────────────

    def _remove(self, request: ConfigRequest) -> CountResult:
        if request.key is None:
            return CountResult(count=0)
        log.debug("Removing the configuration item: %s", request.key)
        return CountResult(count=1 if self._store.remove(request.key) else 0)

    def _clear(self, request: ConfigRequest) -> CountResult:
        removed = self._store.clear()
        log.debug("Cleared %d configuration items", removed)
        return CountResult(count=removed)

    # ── Updates ──────────────────────────────────────────────────────

    def _save(self, request: ConfigRequest) -> CountResult:
        log.info("Storing the configuration")
        size = self._store.size()
        try:
            self._store.store(request.comments)
        except PersistenceError:
            log.error("Failed to store the configuration", exc_info=True)
            return CountResult(count=0)
        return CountResult(count=size)


def _unavailable(kind: RequestPath) -> ConfigResponse | None:
    """Empty result of *kind* while the store is unavailable."""
    if kind.action in (Action.DELETE, Action.UPDATE):
        return CountResult(count=0)
    return None
