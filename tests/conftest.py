"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from codesession.executor import ExecutionRequest, ExecutionResult, Success
from codesession.session import Session, TextBuffer
from codesession.storage import MemoryStorageBackend


class FakeExecutor:
    """Async executor that records requests and answers with a preset result."""

    def __init__(self, result: ExecutionResult | None = None):
        self.result = result or Success("")
        self.requests: list[ExecutionRequest] = []

    async def __call__(self, request: ExecutionRequest) -> ExecutionResult:
        self.requests.append(request)
        return self.result


@pytest.fixture
def storage() -> MemoryStorageBackend:
    return MemoryStorageBackend()


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def session(storage, executor) -> Session:
    """Create a fresh session backed by in-memory storage."""
    return Session(storage, executor=executor)


@pytest.fixture
def editor(session) -> TextBuffer:
    """Attach an empty editor to the session."""
    buffer = TextBuffer()
    session.attach_editor(buffer)
    return buffer
