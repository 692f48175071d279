"""Nested pydantic-settings configuration for host, client and CLI.

Each group reads its own ``CONFSHARE_<GROUP>_*`` env vars::

    export CONFSHARE_STORE_DATA_DIR=/var/lib/confshare
    export CONFSHARE_HOST_AUTHORITY=com.example.settings
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class StoreConfig(BaseSettings):
    """Backing file of the host's store.

    Env vars use ``CONFSHARE_STORE_`` prefix.
    """

    model_config = {"env_prefix": "CONFSHARE_STORE_"}

    data_dir: Path = Path("./data")
    file_name: str = "config.properties"
    encoding: str = "utf-8"
    escape_unicode: bool = False
    atomic_writes: bool = False
    stripes: int = Field(default=16, ge=1, le=1024)


class HostConfig(BaseSettings):
    """Identity and bind address of the host process.

    Env vars use ``CONFSHARE_HOST_`` prefix.
    """

    model_config = {"env_prefix": "CONFSHARE_HOST_"}

    authority: str = "confshare.default"
    bind: str = "127.0.0.1"
    port: int = Field(default=8080, ge=1, le=65535)


class ClientConfig(BaseSettings):
    """How clients reach a host.

    Env vars use ``CONFSHARE_CLIENT_`` prefix.
    """

    model_config = {"env_prefix": "CONFSHARE_CLIENT_"}

    base_url: str = "http://127.0.0.1:8080"
    timeout: float = Field(default=10.0, gt=0.0)


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Env vars use ``CONFSHARE_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "CONFSHARE_OBSERVABILITY_"}

    log_level: str = "INFO"


class APIConfig(BaseSettings):
    """FastAPI metadata.

    Env vars use ``CONFSHARE_API_`` prefix.
    """

    model_config = {"env_prefix": "CONFSHARE_API_"}

    title: str = "confshare"
    description: str = "Shared string key/value configuration host"


class AppSettings(BaseSettings):
    """Top-level settings aggregating all sub-configs."""

    store: StoreConfig = StoreConfig()
    host: HostConfig = HostConfig()
    client: ClientConfig = ClientConfig()
    observability: ObservabilityConfig = ObservabilityConfig()
    api: APIConfig = APIConfig()
