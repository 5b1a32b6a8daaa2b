"""
API tests for the HTTP facade.

These tests drive a session through FastAPI's TestClient with in-memory
storage and a fake executor, so no network access is needed.
"""

from __future__ import annotations

import asyncio
import logging

import httpx
import pytest
from fastapi.testclient import TestClient

from codesession.api import create_app
from codesession.config import Config
from codesession.executor import CompileFailure, Success
from codesession.session import TextBuffer


@pytest.fixture
def client(session) -> TestClient:
    return TestClient(create_app(session))


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_languages(client):
    response = client.get("/languages")
    assert response.status_code == 200
    python = next(item for item in response.json() if item["id"] == "python")
    assert python["runtime"] == "python"
    assert python["version"] == "3.10.0"
    assert python["default_code"] == 'print("Hello, World!")\n'


def test_session_state(client):
    data = client.get("/session").json()
    assert data["language"] == "javascript"
    assert data["theme"] == "vs-dark"
    assert data["font_size"] == 16
    assert data["status"] == "idle"
    assert data["execution_result"] is None


def test_update_preferences(client, storage):
    assert client.put("/session/theme", json={"theme": "monokai"}).json()["theme"] == "monokai"
    assert client.put("/session/font-size", json={"font_size": 100}).json()["font_size"] == 36
    assert storage.get("editor-theme") == "monokai"
    assert storage.get("editor-font-size") == "36"


def test_switch_language_saves_code(client, storage):
    client.put("/session/code", json={"code": "console.log(1)"})
    response = client.put("/session/language", json={"language": "python"})
    assert response.status_code == 200
    assert response.json()["language"] == "python"
    assert storage.get("editor-code-javascript") == "console.log(1)"


def test_unsupported_language_is_rejected(client):
    response = client.put("/session/language", json={"language": "cobol"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Unsupported language: cobol"


def test_run_success(client, executor):
    executor.result = Success("42\n")
    client.put("/session/code", json={"code": "console.log(42)"})
    data = client.post("/session/run").json()
    assert data["output"] == "42"
    assert data["error"] is None
    assert data["status"] == "idle"
    assert data["execution_result"]["kind"] == "success"


def test_run_compile_failure(client, executor):
    executor.result = CompileFailure("syntax error")
    client.put("/session/code", json={"code": "int main( {"})
    data = client.post("/session/run").json()
    assert data["error"] == "syntax error"
    assert data["output"] == ""
    assert data["execution_result"]["kind"] == "compile_failure"


def test_run_without_code(client, executor):
    data = client.post("/session/run").json()
    assert data["error"] == "Please enter some code"
    assert executor.requests == []


@pytest.mark.asyncio
async def test_run_while_running_conflicts(session):
    started = asyncio.Event()
    release = asyncio.Event()
    calls = []

    async def slow(request):
        calls.append(request)
        started.set()
        await release.wait()
        return Success("done")

    session.executor = slow
    session.attach_editor(TextBuffer("x"))
    transport = httpx.ASGITransport(app=create_app(session))
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        first = asyncio.create_task(client.post("/session/run"))
        await started.wait()
        second = await client.post("/session/run")
        release.set()
        first_response = await first

    assert second.status_code == 409
    assert first_response.status_code == 200
    assert first_response.json()["output"] == "done"
    assert first_response.json()["status"] == "idle"
    assert len(calls) == 1


def test_config_log_level_applies_to_given_session(session):
    logger = logging.getLogger("codesession")
    previous = logger.level
    config = Config(
        execute_url="https://piston.test/execute",
        request_timeout=30.0,
        storage_backend="memory",
        storage_path="/unused",
        gcs_bucket=None,
        gcs_prefix="codesession",
        log_level="DEBUG",
        port=8080,
    )
    try:
        app = create_app(session, config=config)
        assert logger.level == logging.DEBUG
        assert app.state.session is session
    finally:
        logger.setLevel(previous)
