"""Storage backend abstractions for session preferences and code.

A session persists its language, theme, font size and the last source text
typed for each language.  To keep the session testable without a real
storage medium, persistence goes through a small key/value interface with
three concrete backends:

* ``MemoryStorageBackend`` – keeps values in a dict.  Used when no durable
  storage is configured and as the fake in tests.

* ``LocalStorageBackend`` – stores one file per key under a configurable
  base directory.  Suitable for a single user on one machine.

* ``GCSStorageBackend`` – stores one blob per key in Google Cloud Storage.
  Suitable when preferences should follow the user across machines.

All values are strings.  A missing key is a valid state and reads as
``None``.  Backends are not thread‑safe and should be instantiated once per
session.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import quote

try:
    from google.cloud import storage  # type: ignore
except ImportError:
    storage = None  # type: ignore

from .config import Config

logger = logging.getLogger("codesession.storage")

LANGUAGE_KEY = "editor-language"
THEME_KEY = "editor-theme"
FONT_SIZE_KEY = "editor-font-size"
CODE_KEY_PREFIX = "editor-code-"


def code_key(language: str) -> str:
    """Storage key holding the saved source text for ``language``."""
    return f"{CODE_KEY_PREFIX}{language}"


class StorageBackend:
    """Protocol for storage backends."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryStorageBackend(StorageBackend):
    """Keep values in process memory."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class LocalStorageBackend(StorageBackend):
    """Store each key as a UTF‑8 text file on the local filesystem."""

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        # Percent-encoding keeps every key inside base_dir as a single file name
        name = quote(key, safe="")
        if name in ("", ".", ".."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.base_dir / name

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        path.write_text(value, encoding="utf-8")


class GCSStorageBackend(StorageBackend):
    """Store keys as blobs in Google Cloud Storage.

    Keys are stored under ``prefix/``.  This backend requires
    ``google-cloud-storage`` to be installed and application default
    credentials to be available.
    """

    def __init__(self, bucket_name: str, prefix: str = "codesession", bucket=None) -> None:
        if bucket is None:
            if storage is None:
                raise RuntimeError(
                    "google-cloud-storage is not installed; cannot use GCSStorageBackend"
                )
            client = storage.Client()
            bucket = client.bucket(bucket_name)
        self.bucket = bucket
        self.prefix = prefix.strip("/")

    def _blob_name(self, key: str) -> str:
        return f"{self.prefix}/{key}" if self.prefix else key

    def get(self, key: str) -> Optional[str]:
        blob = self.bucket.blob(self._blob_name(key))
        if not blob.exists():
            return None
        return blob.download_as_bytes().decode("utf-8")

    def set(self, key: str, value: str) -> None:
        blob = self.bucket.blob(self._blob_name(key))
        blob.upload_from_string(value.encode("utf-8"), content_type="text/plain; charset=utf-8")


def create_storage(config: Config) -> StorageBackend:
    """Build the backend selected by ``config.storage_backend``."""
    if config.storage_backend == "gcs":
        if config.gcs_bucket is None:
            raise RuntimeError("CODESESSION_GCS_BUCKET must be set when using GCS storage backend")
        logger.info("Using GCS storage: bucket=%s prefix=%s", config.gcs_bucket, config.gcs_prefix)
        return GCSStorageBackend(config.gcs_bucket, prefix=config.gcs_prefix)
    if config.storage_backend == "local":
        logger.info("Using local storage under %s", config.storage_path)
        return LocalStorageBackend(config.storage_path)
    return MemoryStorageBackend()
