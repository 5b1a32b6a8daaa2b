"""Pydantic models for wire bodies.

Two groups live here: the request and response shapes of the Piston
``/execute`` endpoint, and the bodies exchanged by the HTTP facade in
:mod:`codesession.api`.  Piston omits fields freely, so every response
field is optional and unknown keys are ignored.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SourceFile(BaseModel):
    """A single file of a program submission."""

    content: str


class PistonRequest(BaseModel):
    """Request body for the Piston ``/execute`` endpoint."""

    language: str
    version: str
    files: List[SourceFile]


class StageResult(BaseModel):
    """Outcome of the ``compile`` or ``run`` stage."""

    model_config = ConfigDict(extra="ignore")

    code: Optional[int] = None
    signal: Optional[str] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    output: Optional[str] = None


class PistonResponse(BaseModel):
    """Response body from the Piston ``/execute`` endpoint."""

    model_config = ConfigDict(extra="ignore")

    message: Optional[str] = None
    language: Optional[str] = None
    version: Optional[str] = None
    compile: Optional[StageResult] = None
    run: Optional[StageResult] = None


class RunRecordModel(BaseModel):
    kind: str = Field(..., description="success, compile_failure, runtime_failure or backend_error")
    source: str
    output: str
    error: Optional[str] = None


class SessionState(BaseModel):
    """Serialisable view of a session."""

    language: str
    theme: str
    font_size: int
    output: str
    error: Optional[str] = None
    status: str
    execution_result: Optional[RunRecordModel] = None


class ThemeUpdate(BaseModel):
    theme: str


class FontSizeUpdate(BaseModel):
    font_size: int


class LanguageUpdate(BaseModel):
    language: str


class CodeUpdate(BaseModel):
    code: str


class LanguageInfo(BaseModel):
    id: str
    label: str
    runtime: str
    version: str
    editor_language: str
    default_code: str = ""
