"""
FastAPI facade for a code session.

This module exposes one :class:`~codesession.session.Session` over HTTP so
that a browser or desktop UI can drive it: read the session state, change
language, theme and font size, replace the editor text and trigger a run.
It adds no behaviour of its own; every route delegates to the session.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request

from ..config import Config
from ..errors import RunInProgressError, UnsupportedLanguageError
from ..models import (
    CodeUpdate,
    FontSizeUpdate,
    LanguageInfo,
    LanguageUpdate,
    SessionState,
    ThemeUpdate,
)
from ..session import Session, TextBuffer


logger = logging.getLogger("codesession")

if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("[codesession] %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

logger.setLevel(logging.INFO)


def create_app(session: Optional[Session] = None, config: Optional[Config] = None) -> FastAPI:
    """Build the application around ``session``.

    When no session is given one is built from ``config`` (or from the
    environment when that is omitted too).  A given ``config`` always sets
    the log level, even alongside a ready-made session.
    """
    if session is None and config is None:
        config = Config.from_env()
    if config is not None:
        logger.setLevel(config.log_level)
    if session is None:
        logger.info(
            "Loaded config: execute_url=%s, storage_backend=%s, storage_path=%s, timeout=%s",
            config.execute_url,
            config.storage_backend,
            config.storage_path,
            config.request_timeout,
        )
        session = Session.from_config(config)

    app = FastAPI(title="Code Session", version="0.1.0")
    app.state.session = session

    @app.middleware("http")
    async def log_requests(request, call_next):
        """Log every request and the status it was answered with."""
        method = request.method
        path = request.url.path
        client = getattr(request.client, "host", "unknown")
        logger.info("Incoming request: %s %s from %s", method, path, client)
        response = await call_next(request)
        logger.info("Response: %s %s -> %s", method, path, response.status_code)
        return response

    @app.get("/health")
    async def health() -> Dict[str, str]:
        """Return a simple health check response."""
        return {"status": "ok"}

    @app.get("/languages", response_model=List[LanguageInfo])
    async def list_languages(session: Session = Depends(get_session)) -> List[LanguageInfo]:
        """List the languages the session can run, with their runtimes."""
        return [
            LanguageInfo(
                id=spec.id,
                label=spec.label,
                runtime=spec.runtime.language,
                version=spec.runtime.version,
                editor_language=spec.editor_language,
                default_code=spec.default_code,
            )
            for spec in session.registry.values()
        ]

    @app.get("/session", response_model=SessionState)
    async def get_state(session: Session = Depends(get_session)) -> SessionState:
        """Return the current session state."""
        return session.snapshot()

    @app.put("/session/theme", response_model=SessionState)
    async def put_theme(req: ThemeUpdate, session: Session = Depends(get_session)) -> SessionState:
        """Switch the editor theme; blank themes are ignored."""
        session.set_theme(req.theme)
        return session.snapshot()

    @app.put("/session/font-size", response_model=SessionState)
    async def put_font_size(req: FontSizeUpdate, session: Session = Depends(get_session)) -> SessionState:
        """Set the font size, clamped to the supported range."""
        session.set_font_size(req.font_size)
        return session.snapshot()

    @app.put("/session/language", response_model=SessionState)
    async def put_language(req: LanguageUpdate, session: Session = Depends(get_session)) -> SessionState:
        """Switch language, saving the editor text under the previous one."""
        try:
            session.set_language(req.language)
        except UnsupportedLanguageError as exc:
            logger.warning("[/session/language] %s", exc)
            raise HTTPException(status_code=400, detail=str(exc))
        return session.snapshot()

    @app.put("/session/code", response_model=SessionState)
    async def put_code(req: CodeUpdate, session: Session = Depends(get_session)) -> SessionState:
        """Replace the editor text, attaching a buffer if none is attached."""
        if session.editor is None:
            session.attach_editor(TextBuffer())
        session.editor.set_value(req.code)
        return session.snapshot()

    @app.post("/session/run", response_model=SessionState)
    async def run(session: Session = Depends(get_session)) -> SessionState:
        """Run the active code and return the settled session state."""
        try:
            await session.run()
        except RunInProgressError as exc:
            raise HTTPException(status_code=409, detail=str(exc))
        return session.snapshot()

    return app


def get_session(request: Request) -> Session:
    return request.app.state.session
