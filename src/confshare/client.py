"""Client for a configuration host.

Every primitive call is one blocking HTTP round trip to the host serving
``authority``. Host-side failures never arrive as exceptions: a degraded or
empty host both answer ``False`` / ``None`` / ``0`` / ``{}``. Only transport
problems raise, as :class:`HostUnavailableError`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from confshare.core.config import AppSettings
from confshare.exceptions import HostUnavailableError
from confshare.models import RequestPath
from confshare.store.protocols import IConfigStore

log = logging.getLogger(__name__)


class ConfigClient:
    """Typed access to the shared configuration of one host.

    Args:
        authority: Logical name of the target host.
        http: Client used for the round trips. When omitted one is created
            from *base_url* and *timeout* and closed by :meth:`close`.
        base_url: Host address, used only when *http* is omitted.
        timeout: Per-request timeout in seconds, used only when *http* is omitted.
    """

    def __init__(
        self,
        authority: str,
        http: httpx.Client | None = None,
        *,
        base_url: str = "http://127.0.0.1:8080",
        timeout: float = 10.0,
    ) -> None:
        self._authority = authority
        self._owns_http = http is None
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)

    @classmethod
    def from_settings(cls, settings: AppSettings) -> ConfigClient:
        return cls(
            settings.host.authority,
            base_url=settings.client.base_url,
            timeout=settings.client.timeout,
        )

    @property
    def authority(self) -> str:
        return self._authority

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> ConfigClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        url = f"/{self._authority}/{path}"
        try:
            response = self._http.request(method, url, params=params, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise HostUnavailableError(
                f"{method} {url} failed with status {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise HostUnavailableError(f"{method} {url} failed: {e}") from e
        return response.json()

    @staticmethod
    def _count(data: Any) -> int:
        return int(data.get("count", 0)) if data else 0

    # ── Primitive operations ─────────────────────────────────────────

    def contains(self, key: str) -> bool:
        data = self._send("GET", RequestPath.CONTAINS.value, params={"key": key})
        return bool(data) and data.get("contains") == 1

    def get(self, key: str) -> str | None:
        data = self._send("GET", RequestPath.GET.value, params={"key": key})
        return data.get("value") if data else None

    def get_all(self) -> dict[str, str]:
        data = self._send("GET", RequestPath.GET_ALL.value)
        if not data:
            return {}
        return {row["key"]: row["value"] for row in data.get("rows", [])}

    def put(self, key: str, value: str) -> None:
        self._send("POST", RequestPath.PUT.value, json={"key": key, "value": value})

    def put_all(self, mapping: Mapping[str, str]) -> int:
        """Submit every pair in one request; returns ``len(mapping)``, not a per-key confirmation."""
        self._send("POST", RequestPath.PUT_ALL.value, json={"values": dict(mapping)})
        return len(mapping)

    def remove(self, key: str) -> bool:
        data = self._send("DELETE", RequestPath.REMOVE.value, params={"key": key})
        return self._count(data) > 0

    def clear(self) -> int:
        return self._count(self._send("DELETE", RequestPath.CLEAR.value))

    def save(self, comments: str | None = None) -> int:
        """Ask the host to persist its store.

        Returns the number of items saved; ``0`` also means the save failed.
        """
        params = {"comments": comments} if comments is not None else None
        return self._count(self._send("PUT", RequestPath.SAVE.value, params=params))

    def get_type(self, path: str) -> str | None:
        data = self._send("GET", f"{path}/type")
        return data.get("type") if data else None

    def size(self) -> int:
        return len(self.get_all())

    def snapshot(self) -> dict[str, str]:
        return self.get_all()

    # ── Compound operations ──────────────────────────────────────────

    def backup_to(self, target: IConfigStore) -> int:
        """Replace the content of *target* with this host's content.

        Entries only present in *target* are lost. Not atomic: a failure after
        the clear leaves *target* empty.

        Returns:
            The size of *target* afterwards.
        """
        data = self.get_all()
        target.clear()
        target.put_all(data)
        log.info("Backed up %d configuration items from %s", len(data), self._authority)
        return target.size()

    def restore_from(self, source: IConfigStore) -> int:
        """Replace this host's content with the content of *source*.

        Not atomic: a failure after the clear leaves the host empty.

        Returns:
            The size of *source*.
        """
        self.clear()
        self.put_all(source.snapshot())
        log.info("Restored configuration of %s", self._authority)
        return source.size()
