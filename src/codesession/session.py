"""Session: editor configuration plus the execution state machine.

One :class:`Session` is built when the application starts and handed to
whatever UI layer drives it.  It holds the current language, theme and font
size, the output and error of the last run, and whether a run is in flight.
Preferences and per‑language code go through a
:class:`~codesession.storage.StorageBackend`, so the session itself never
touches a storage medium directly.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Mapping, Optional, Protocol

from .config import Config
from .errors import RunInProgressError, UnsupportedLanguageError
from .executor import BackendError, ExecutionRequest, ExecutionResult, Executor, Success
from .executor import execute as piston_execute
from .languages import LANGUAGES, LanguageSpec, get_runtime
from .models import RunRecordModel, SessionState
from .storage import (
    FONT_SIZE_KEY,
    LANGUAGE_KEY,
    THEME_KEY,
    MemoryStorageBackend,
    StorageBackend,
    code_key,
    create_storage,
)

logger = logging.getLogger("codesession.session")

DEFAULT_LANGUAGE = "javascript"
DEFAULT_THEME = "vs-dark"
DEFAULT_FONT_SIZE = 16
MIN_FONT_SIZE = 8
MAX_FONT_SIZE = 36

EMPTY_CODE_MESSAGE = "Please enter some code"


class RunStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class EditorSurface(Protocol):
    """The text buffer of an editor widget."""

    def get_value(self) -> str: ...

    def set_value(self, value: str) -> None: ...


class TextBuffer:
    """Plain in‑memory editor surface."""

    def __init__(self, value: str = "") -> None:
        self.value = value

    def get_value(self) -> str:
        return self.value

    def set_value(self, value: str) -> None:
        self.value = value


@dataclass(frozen=True)
class SessionConfig:
    language: str
    theme: str
    font_size: int


@dataclass(frozen=True)
class RunRecord:
    """Outcome of the last settled run."""

    source: str
    result: ExecutionResult
    output: str
    error: Optional[str]


Listener = Callable[["Session"], None]


def clamp_font_size(px: int) -> int:
    return max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, int(px)))


def _load_config(storage: StorageBackend) -> SessionConfig:
    language = storage.get(LANGUAGE_KEY) or DEFAULT_LANGUAGE
    theme = storage.get(THEME_KEY) or DEFAULT_THEME
    raw_size = storage.get(FONT_SIZE_KEY)
    try:
        font_size = clamp_font_size(int(raw_size)) if raw_size else DEFAULT_FONT_SIZE
    except ValueError:
        logger.warning("Ignoring stored font size %r", raw_size)
        font_size = DEFAULT_FONT_SIZE
    return SessionConfig(language=language, theme=theme, font_size=font_size)


class Session:
    """Editor configuration and a single‑run‑at‑a‑time execution state machine."""

    def __init__(
        self,
        storage: Optional[StorageBackend] = None,
        *,
        registry: Mapping[str, LanguageSpec] = LANGUAGES,
        executor: Optional[Executor] = None,
    ):
        self.storage = storage if storage is not None else MemoryStorageBackend()
        self.registry = registry
        self.executor: Executor = executor or piston_execute

        self._config = _load_config(self.storage)
        self._editor: Optional[EditorSurface] = None
        self._output = ""
        self._error: Optional[str] = None
        self._status = RunStatus.IDLE
        self._execution_result: Optional[RunRecord] = None
        self._listeners: List[Listener] = []

        logger.debug(
            "Session started: language=%s theme=%s font_size=%s",
            self._config.language,
            self._config.theme,
            self._config.font_size,
        )

    @classmethod
    def from_config(cls, config: Config, storage: Optional[StorageBackend] = None) -> "Session":
        """Build a session wired to the endpoint and storage named by ``config``."""
        executor = functools.partial(
            piston_execute,
            endpoint=config.execute_url,
            timeout=config.request_timeout,
        )
        if storage is None:
            storage = create_storage(config)
        return cls(storage, executor=executor)

    # -- read-only state ---------------------------------------------------

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def language(self) -> str:
        return self._config.language

    @property
    def theme(self) -> str:
        return self._config.theme

    @property
    def font_size(self) -> int:
        return self._config.font_size

    @property
    def output(self) -> str:
        return self._output

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def status(self) -> RunStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status is RunStatus.RUNNING

    @property
    def editor(self) -> Optional[EditorSurface]:
        return self._editor

    @property
    def execution_result(self) -> Optional[RunRecord]:
        return self._execution_result

    # -- observers ---------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(session)`` after every state change.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, **changes) -> None:
        for name, value in changes.items():
            setattr(self, f"_{name}", value)
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Session listener %r failed", listener)

    # -- editor ------------------------------------------------------------

    def get_active_code(self) -> str:
        if self._editor is None:
            return ""
        return self._editor.get_value() or ""

    def attach_editor(self, editor: EditorSurface) -> None:
        """Register ``editor`` and load the saved code for the current language."""
        saved = self.storage.get(code_key(self.language))
        if saved:
            editor.set_value(saved)
        self._set(editor=editor)

    def detach_editor(self) -> None:
        self._set(editor=None)

    # -- configuration -----------------------------------------------------

    def set_theme(self, theme: str) -> None:
        if not theme or not theme.strip():
            logger.warning("Ignoring blank theme")
            return
        self.storage.set(THEME_KEY, theme)
        if theme != self.theme:
            self._set(config=SessionConfig(self.language, theme, self.font_size))

    def set_font_size(self, px: int) -> None:
        size = clamp_font_size(px)
        if size != px:
            logger.info("Clamped font size %s to %s", px, size)
        self.storage.set(FONT_SIZE_KEY, str(size))
        if size != self.font_size:
            self._set(config=SessionConfig(self.language, self.theme, size))

    def set_language(self, language: str) -> None:
        """Switch to ``language``.

        The code typed under the previous language is saved first.  The
        saved code of the new language is not loaded here; that only happens
        in :meth:`attach_editor`.
        """
        if language not in self.registry:
            raise UnsupportedLanguageError(language)

        current_code = self.get_active_code()
        if current_code:
            self.storage.set(code_key(self.language), current_code)

        self.storage.set(LANGUAGE_KEY, language)
        self._set(
            config=SessionConfig(language, self.theme, self.font_size),
            output="",
            error=None,
        )

    # -- execution ---------------------------------------------------------

    async def run(self) -> None:
        """Run the active code and record the outcome on the session.

        Raises :class:`RunInProgressError` if a run is already in flight.
        Every other failure ends up in :attr:`error`.
        """
        if self.is_running:
            raise RunInProgressError("A run is already in progress")

        language = self.language
        code = self.get_active_code()
        if not code.strip():
            self._set(error=EMPTY_CODE_MESSAGE)
            return

        self._set(status=RunStatus.RUNNING, error=None, output="")
        try:
            runtime = get_runtime(language, self.registry)
            if runtime is None:
                self._fail(code, BackendError(f"Unsupported language: {language}"))
                return

            request = ExecutionRequest(runtime.language, runtime.version, code)
            logger.info("Running %s code (%s %s)", language, runtime.language, runtime.version)
            result = await self.executor(request)

            if isinstance(result, Success):
                self._set(
                    output=result.stdout,
                    error=None,
                    execution_result=RunRecord(code, result, result.stdout, None),
                )
            else:
                self._fail(code, result)
        except Exception as exc:
            message = str(exc) or "Error running code"
            logger.exception("Error running code: %s", message)
            self._fail(code, BackendError(message))
        finally:
            self._set(status=RunStatus.IDLE)

    def _fail(self, code: str, result: ExecutionResult) -> None:
        logger.info("Run failed (%s): %s", result.kind, result.error)
        self._set(
            error=result.error,
            execution_result=RunRecord(code, result, "", result.error),
        )

    # -- views -------------------------------------------------------------

    def snapshot(self) -> SessionState:
        record = self._execution_result
        return SessionState(
            language=self.language,
            theme=self.theme,
            font_size=self.font_size,
            output=self._output,
            error=self._error,
            status=self._status.value,
            execution_result=(
                RunRecordModel(
                    kind=record.result.kind,
                    source=record.source,
                    output=record.output,
                    error=record.error,
                )
                if record is not None
                else None
            ),
        )
