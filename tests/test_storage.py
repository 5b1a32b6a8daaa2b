"""Tests for the storage backends."""

from __future__ import annotations

import pytest

from codesession import storage as storage_module
from codesession.config import Config
from codesession.storage import (
    GCSStorageBackend,
    LocalStorageBackend,
    MemoryStorageBackend,
    code_key,
    create_storage,
)


def test_code_key():
    assert code_key("python") == "editor-code-python"


def test_memory_backend_roundtrip():
    backend = MemoryStorageBackend({"editor-theme": "monokai"})
    assert backend.get("editor-theme") == "monokai"
    assert backend.get("editor-language") is None
    backend.set("editor-language", "go")
    assert backend.get("editor-language") == "go"


def test_local_backend_persists_across_instances(tmp_path):
    LocalStorageBackend(tmp_path).set("editor-code-python", "print('héllo')\n")
    reopened = LocalStorageBackend(tmp_path)
    assert reopened.get("editor-code-python") == "print('héllo')\n"
    assert (tmp_path / "editor-code-python").is_file()


def test_local_backend_missing_key(tmp_path):
    assert LocalStorageBackend(tmp_path / "nested").get("editor-theme") is None


@pytest.mark.parametrize("key", ["editor-code-../escape", "editor-code-a/b", "editor-code-objective c", ".hidden"])
def test_local_backend_keeps_any_key_inside_base_dir(tmp_path, key):
    backend = LocalStorageBackend(tmp_path)
    backend.set(key, "x")
    assert backend.get(key) == "x"
    entries = list(tmp_path.iterdir())
    assert len(entries) == 1
    assert entries[0].is_file()
    assert not (tmp_path.parent / "escape").exists()


@pytest.mark.parametrize("key", ["", ".", ".."])
def test_local_backend_rejects_directory_names(tmp_path, key):
    backend = LocalStorageBackend(tmp_path)
    with pytest.raises(ValueError):
        backend.set(key, "x")


class FakeBlob:
    def __init__(self, bucket, name):
        self.bucket = bucket
        self.name = name

    def exists(self):
        return self.name in self.bucket.blobs

    def download_as_bytes(self):
        return self.bucket.blobs[self.name]

    def upload_from_string(self, data, content_type=None):
        self.bucket.blobs[self.name] = data


class FakeBucket:
    def __init__(self):
        self.blobs = {}

    def blob(self, name):
        return FakeBlob(self, name)


def test_gcs_backend_uses_prefixed_blobs():
    bucket = FakeBucket()
    backend = GCSStorageBackend("prefs", prefix="users/alice/", bucket=bucket)
    assert backend.get("editor-theme") is None
    backend.set("editor-theme", "monokai")
    assert bucket.blobs == {"users/alice/editor-theme": b"monokai"}
    assert backend.get("editor-theme") == "monokai"


def test_gcs_backend_requires_library(monkeypatch):
    monkeypatch.setattr(storage_module, "storage", None)
    with pytest.raises(RuntimeError):
        GCSStorageBackend("prefs")


def _config(**overrides) -> Config:
    values = dict(
        execute_url="https://piston.test/execute",
        request_timeout=30.0,
        storage_backend="memory",
        storage_path="/unused",
        gcs_bucket=None,
        gcs_prefix="codesession",
        log_level="INFO",
        port=8080,
    )
    values.update(overrides)
    return Config(**values)


def test_create_storage_memory():
    assert isinstance(create_storage(_config()), MemoryStorageBackend)


def test_create_storage_local(tmp_path):
    backend = create_storage(_config(storage_backend="local", storage_path=str(tmp_path)))
    assert isinstance(backend, LocalStorageBackend)
    assert backend.base_dir == tmp_path


def test_create_storage_gcs_without_bucket():
    with pytest.raises(RuntimeError):
        create_storage(_config(storage_backend="gcs"))
