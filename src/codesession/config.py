"""Configuration loader.

The session manager reads its configuration from environment variables so
the same code can back a desktop shell, a test run or the HTTP facade
without code changes.  Reasonable defaults are provided so that local
development works out of the box.

Environment variables:

``CODESESSION_EXECUTE_URL``
    Endpoint of the remote execution service.  Defaults to the public
    Piston instance at ``https://emkc.org/api/v2/piston/execute``.

``CODESESSION_REQUEST_TIMEOUT``
    Transport timeout (in seconds) for a single execution request.  Default
    is 30.  The session itself never times a run out.

``CODESESSION_STORAGE_BACKEND``
    Selects where preferences and per‑language code are persisted.
    Supported values are ``memory``, ``local`` and ``gcs``.  Defaults to
    ``local``.

``CODESESSION_STORAGE_PATH``
    Base directory used by the ``local`` backend.  Defaults to
    ``~/.codesession``.

``CODESESSION_GCS_BUCKET``
    Name of the Google Cloud Storage bucket to use when
    ``CODESESSION_STORAGE_BACKEND`` is ``gcs``.  Required for that backend.

``CODESESSION_GCS_PREFIX``
    Blob prefix under which keys are stored in the bucket.  Defaults to
    ``codesession``.

``CODESESSION_LOG_LEVEL``
    Level for the ``codesession`` logger.  Defaults to ``INFO``.

``PORT``
    The port on which the HTTP facade listens.  Defaults to 8080.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

DEFAULT_EXECUTE_URL = "https://emkc.org/api/v2/piston/execute"


@dataclass
class Config:
    """Centralised configuration object."""

    execute_url: str
    request_timeout: float
    storage_backend: str
    storage_path: str
    gcs_bucket: str | None
    gcs_prefix: str
    log_level: str
    port: int

    @classmethod
    def load(cls) -> "Config":
        execute_url = os.getenv("CODESESSION_EXECUTE_URL", DEFAULT_EXECUTE_URL).strip()
        if not execute_url.startswith(("http://", "https://")):
            raise ValueError(f"Invalid CODESESSION_EXECUTE_URL: {execute_url}")

        storage_backend = os.getenv("CODESESSION_STORAGE_BACKEND", "local").lower()
        if storage_backend not in {"memory", "local", "gcs"}:
            raise ValueError(
                f"Invalid CODESESSION_STORAGE_BACKEND: {storage_backend}. "
                "Use 'memory', 'local' or 'gcs'."
            )
        storage_path = os.path.expanduser(
            os.getenv("CODESESSION_STORAGE_PATH", "~/.codesession")
        )
        gcs_bucket = os.getenv("CODESESSION_GCS_BUCKET")
        if storage_backend == "gcs" and not gcs_bucket:
            raise RuntimeError(
                "CODESESSION_GCS_BUCKET must be set when using the GCS storage backend"
            )
        gcs_prefix = os.getenv("CODESESSION_GCS_PREFIX", "codesession").strip("/")

        log_level = os.getenv("CODESESSION_LOG_LEVEL", "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"Invalid CODESESSION_LOG_LEVEL: {log_level}")

        def _int_var(name: str, default: int) -> int:
            val = os.getenv(name)
            if val is None:
                return default
            try:
                parsed = int(val)
            except ValueError:
                raise ValueError(f"Invalid integer for {name}: {val}")
            if parsed <= 0:
                raise ValueError(f"{name} must be positive, got {val}")
            return parsed

        def _float_var(name: str, default: float) -> float:
            val = os.getenv(name)
            if val is None:
                return default
            try:
                parsed = float(val)
            except ValueError:
                raise ValueError(f"Invalid number for {name}: {val}")
            if parsed <= 0:
                raise ValueError(f"{name} must be positive, got {val}")
            return parsed

        request_timeout = _float_var("CODESESSION_REQUEST_TIMEOUT", 30.0)
        port = _int_var("PORT", 8080)

        return cls(
            execute_url=execute_url,
            request_timeout=request_timeout,
            storage_backend=storage_backend,
            storage_path=storage_path,
            gcs_bucket=gcs_bucket,
            gcs_prefix=gcs_prefix,
            log_level=log_level,
            port=port,
        )

    @classmethod
    def from_env(cls) -> "Config":
        """
        Alternate constructor used by the HTTP facade.

        This wrapper calls :meth:`load`; it exists to give application code
        a more intuitive name.
        """
        return cls.load()
