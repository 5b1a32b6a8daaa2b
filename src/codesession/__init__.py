"""Client-side session manager for a remote code execution service.

A session keeps the editor configuration (language, theme, font size),
remembers the code typed for each language, and submits the active code to
a multi‑language execution backend (Piston), recording the outcome as one
of a small set of result variants.

The top‑level modules include:

* ``config`` – configuration handling for environment variables.
* ``errors`` – exceptions raised on misuse of a session.
* ``languages`` – registry of runnable languages and their runtimes.
* ``models`` – Pydantic models for wire bodies.
* ``storage`` – pluggable key/value backends for preferences and code.
* ``executor`` – result variants and the Piston execution client.
* ``session`` – the session store and its execution state machine.
* ``api`` – optional FastAPI facade over a single session.
"""

from .config import Config
from .errors import RunInProgressError, SessionError, UnsupportedLanguageError
from .executor import (
    BackendError,
    CompileFailure,
    ExecutionRequest,
    ExecutionResult,
    RuntimeFailure,
    Success,
)
from .session import RunRecord, RunStatus, Session, SessionConfig, TextBuffer

__all__ = [
    "BackendError",
    "CompileFailure",
    "Config",
    "ExecutionRequest",
    "ExecutionResult",
    "RunInProgressError",
    "RunRecord",
    "RunStatus",
    "RuntimeFailure",
    "Session",
    "SessionConfig",
    "SessionError",
    "Success",
    "TextBuffer",
    "UnsupportedLanguageError",
]
