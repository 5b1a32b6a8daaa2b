"""
Request and result types shared by execution clients.

An :class:`ExecutionRequest` names the runtime to use and carries the
source text of a single‑file program.  Whatever the remote backend answers
is folded into exactly one of four result variants:

* :class:`Success` – the program ran and exited with status zero.
* :class:`CompileFailure` – the compile stage reported a non‑zero status.
* :class:`RuntimeFailure` – the run stage reported a non‑zero status.
* :class:`BackendError` – the submission never produced a program result
  (rejected request, transport failure, non‑2xx response, garbled body).

Failure variants always carry a non‑empty, human readable message.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, ClassVar, Optional, Union


@dataclass(frozen=True)
class ExecutionRequest:
    """A single program submission.

    Attributes
    ----------
    language: str
        Runtime name understood by the backend.
    version: str
        Runtime version understood by the backend.
    source: str
        Program text, submitted as one file.
    """

    language: str
    version: str
    source: str


@dataclass(frozen=True)
class Success:
    stdout: str

    kind: ClassVar[str] = "success"
    ok: ClassVar[bool] = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "stdout", self.stdout.rstrip())

    @property
    def error(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class _Failure:
    message: str

    kind: ClassVar[str] = "failure"
    ok: ClassVar[bool] = False
    fallback: ClassVar[str] = "Execution failed"

    def __post_init__(self) -> None:
        if not self.message or not self.message.strip():
            object.__setattr__(self, "message", self.fallback)

    @property
    def error(self) -> Optional[str]:
        return self.message


@dataclass(frozen=True)
class CompileFailure(_Failure):
    kind: ClassVar[str] = "compile_failure"
    fallback: ClassVar[str] = "Compilation error"


@dataclass(frozen=True)
class RuntimeFailure(_Failure):
    kind: ClassVar[str] = "runtime_failure"
    fallback: ClassVar[str] = "Runtime error"


@dataclass(frozen=True)
class BackendError(_Failure):
    kind: ClassVar[str] = "backend_error"
    fallback: ClassVar[str] = "Error running code"


ExecutionResult = Union[Success, CompileFailure, RuntimeFailure, BackendError]

Executor = Callable[[ExecutionRequest], Awaitable[ExecutionResult]]
