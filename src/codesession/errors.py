"""Exceptions raised by the session layer.

Backend, compile and runtime failures of a submitted program are not
exceptions: they come back from the executor as
:class:`~codesession.executor.base.ExecutionResult` values and are stored on
the session.  The classes below cover misuse of the session itself.
"""

from __future__ import annotations


class SessionError(Exception):
    """Base class for session errors."""


class UnsupportedLanguageError(SessionError):
    """The language has no entry in the registry."""

    def __init__(self, language: str) -> None:
        super().__init__(f"Unsupported language: {language}")
        self.language = language


class RunInProgressError(SessionError):
    """A run was requested while another one is still in flight."""
