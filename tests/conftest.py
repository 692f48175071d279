"""Shared fixtures for confshare tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from confshare.api.app import create_app
from confshare.client import ConfigClient
from confshare.core.config import AppSettings, HostConfig, StoreConfig

AUTHORITY = "com.example.settings"


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def settings(data_dir: Path) -> AppSettings:
    """Settings pointing the host store at a temporary directory."""
    return AppSettings(
        store=StoreConfig(data_dir=data_dir),
        host=HostConfig(authority=AUTHORITY),
    )


@pytest.fixture
def app(settings: AppSettings) -> FastAPI:
    return create_app(settings, configure_logging=False)


@pytest.fixture
def http(app: FastAPI) -> Iterator[TestClient]:
    """Test client with the host lifespan (store activation) running."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def client(http: TestClient) -> ConfigClient:
    return ConfigClient(AUTHORITY, http=http)
