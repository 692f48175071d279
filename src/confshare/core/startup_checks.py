"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import codecs
import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from confshare.core.config import AppSettings

log = logging.getLogger(__name__)


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings at startup. Raises ValueError on fatal misconfig."""
    _check_encoding(settings)
    _check_authority(settings)
    _check_file_name(settings)
    _check_data_dir(settings)


def _check_encoding(settings: AppSettings) -> None:
    """Reject encodings Python does not know."""
    try:
        codecs.lookup(settings.store.encoding)
    except LookupError:
        raise ValueError(
            f"CONFSHARE_STORE_ENCODING={settings.store.encoding!r} is not a known text encoding."
        ) from None


def _check_authority(settings: AppSettings) -> None:
    """The authority is a single URL path segment."""
    authority = settings.host.authority
    if not authority or "/" in authority or authority.strip() != authority:
        raise ValueError(
            f"CONFSHARE_HOST_AUTHORITY={authority!r} must be a non-empty name "
            "without slashes or surrounding whitespace."
        )


def _check_file_name(settings: AppSettings) -> None:
    name = settings.store.file_name
    if not name or os.sep in name or (os.altsep and os.altsep in name):
        raise ValueError(f"CONFSHARE_STORE_FILE_NAME={name!r} must be a bare file name.")


def _check_data_dir(settings: AppSettings) -> None:
    """Warn about a relative data directory in containerized environments."""
    is_container = bool(
        os.environ.get("ECS_CONTAINER_METADATA_URI")
        or os.environ.get("KUBERNETES_SERVICE_HOST")
    )
    if is_container and not settings.store.data_dir.is_absolute():
        log.warning(
            "CONFSHARE_STORE_DATA_DIR=%s is relative in a container environment. "
            "Saved configuration is lost on restart unless it lives on a mounted volume.",
            settings.store.data_dir,
        )
