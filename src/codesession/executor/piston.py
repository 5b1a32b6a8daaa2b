"""
Client for the Piston multi‑language execution API.

:func:`execute` submits an :class:`~codesession.executor.base.ExecutionRequest`
as a single‑file program and maps the answer onto an
:class:`~codesession.executor.base.ExecutionResult`.  The mapping itself is
:func:`classify_response`, a pure function over the decoded JSON body, so
the precedence rules can be exercised without any network traffic.

Only one attempt is made per call; callers retry by calling again.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from ..config import DEFAULT_EXECUTE_URL
from ..models import PistonRequest, PistonResponse, SourceFile, StageResult
from .base import (
    BackendError,
    CompileFailure,
    ExecutionRequest,
    ExecutionResult,
    RuntimeFailure,
    Success,
)

logger = logging.getLogger("codesession.executor")

DEFAULT_TIMEOUT = 30.0


def build_payload(request: ExecutionRequest) -> dict:
    """Serialise ``request`` into the Piston request body."""
    body = PistonRequest(
        language=request.language,
        version=request.version,
        files=[SourceFile(content=request.source)],
    )
    return body.model_dump()


def _stage_message(stage: StageResult) -> str:
    return stage.stderr or stage.stdout or stage.output or ""


def classify_response(payload: Any) -> ExecutionResult:
    """Map a decoded Piston response body to a result variant.

    Rules are evaluated in order and the first match wins:

    1. a top‑level ``message`` means the backend rejected the submission;
    2. a ``compile`` stage with a non‑zero code is a compile failure;
    3. a ``run`` stage with a non‑zero code is a runtime failure;
    4. anything else is a success carrying the run output.

    A stage killed by a signal reports ``code: null``, which counts as
    non‑zero.
    """
    if not isinstance(payload, dict):
        return BackendError("Unexpected response from execution service")
    # message wins even when the stages are malformed
    message = payload.get("message")
    if isinstance(message, str) and message:
        return BackendError(message)

    try:
        response = PistonResponse.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Malformed execution response: %s", exc)
        return BackendError("Malformed response from execution service")

    if response.compile is not None and response.compile.code != 0:
        return CompileFailure(_stage_message(response.compile))

    if response.run is not None and response.run.code != 0:
        return RuntimeFailure(_stage_message(response.run))

    stdout = (response.run.output or "") if response.run is not None else ""
    return Success(stdout)


async def execute(
    request: ExecutionRequest,
    *,
    endpoint: str = DEFAULT_EXECUTE_URL,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> ExecutionResult:
    """Submit ``request`` to the execution service and classify the answer.

    Parameters
    ----------
    request: ExecutionRequest
        Runtime descriptor plus program text.
    endpoint: str, optional
        URL of the ``/execute`` endpoint.
    client: httpx.AsyncClient, optional
        Client to send the request with.  When omitted a short‑lived client
        is created for this call and closed afterwards.
    timeout: float, optional
        Transport timeout in seconds, applied only to a client created here.

    Returns
    -------
    ExecutionResult
        Never raises for transport or protocol problems; those come back as
        :class:`BackendError`.
    """
    payload = build_payload(request)
    logger.debug("Submitting %s %s program to %s", request.language, request.version, endpoint)

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as own_client:
                response = await own_client.post(endpoint, json=payload)
        else:
            response = await client.post(endpoint, json=payload)
    except httpx.HTTPError as exc:
        logger.warning("Execution request to %s failed: %s", endpoint, exc)
        return BackendError(f"Execution request failed: {exc}")

    if not response.is_success:
        logger.warning("Execution service answered %s", response.status_code)
        return BackendError(f"API request failed with status {response.status_code}")

    try:
        data = response.json()
    except ValueError:
        logger.warning("Execution service returned invalid JSON")
        return BackendError("Execution service returned invalid JSON")

    logger.debug("Response from execution service: %s", data)
    return classify_response(data)
