"""confshare: share string key/value settings between processes through one host.

Host side::

    from confshare import ConfigStore, ConfigRouter

    store = ConfigStore.open(Path("./data"))
    router = ConfigRouter("com.example.settings", store)

Client side::

    from confshare import ConfigClient

    with ConfigClient("com.example.settings", base_url="http://127.0.0.1:8080") as client:
        client.put("theme", "dark")
        client.save()
"""

from __future__ import annotations

from confshare.client import ConfigClient
from confshare.core.config import AppSettings
from confshare.exceptions import (
    CodecError,
    ConfShareError,
    HostUnavailableError,
    PersistenceError,
)
from confshare.models import Action, ConfigRequest, RequestPath
from confshare.router import ConfigRouter
from confshare.store import ConfigStore, IConfigStore

__all__ = [
    "Action",
    "AppSettings",
    "CodecError",
    "ConfShareError",
    "ConfigClient",
    "ConfigRequest",
    "ConfigRouter",
    "ConfigStore",
    "HostUnavailableError",
    "IConfigStore",
    "PersistenceError",
    "RequestPath",
]
