"""
Execution clients for the session manager.

The session never runs code itself.  It builds an ``ExecutionRequest`` and
hands it to an executor: an async callable returning one of the
``ExecutionResult`` variants from ``base.py``.  The default executor is
the Piston client in ``piston.py``; tests substitute their own callables.
"""

from .base import (
    BackendError,
    CompileFailure,
    ExecutionRequest,
    ExecutionResult,
    Executor,
    RuntimeFailure,
    Success,
)
from .piston import build_payload, classify_response, execute

__all__ = [
    "BackendError",
    "CompileFailure",
    "ExecutionRequest",
    "ExecutionResult",
    "Executor",
    "RuntimeFailure",
    "Success",
    "build_payload",
    "classify_response",
    "execute",
]
