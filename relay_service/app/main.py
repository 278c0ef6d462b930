from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .chat_service import ChatService, Completer
from .completion_client import CompletionClient
from .config import Settings, get_settings
from .errors import RelayError
from .identifiers import IdentifierGenerator
from .reaper import ExpiryReaper
from .routers import chat, health
from .session_store import SessionStore

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    completion_client: Optional[Completer] = None,
    clock: Optional[Callable[[], int]] = None,
) -> FastAPI:
    """Build the relay app with its own store, service and reaper."""

    settings = settings or get_settings()
    store = SessionStore(max_turns=settings.max_turns)
    reaper = ExpiryReaper(
        store,
        ttl_seconds=settings.session_ttl_seconds,
        interval_seconds=settings.reap_interval_seconds,
        clock=clock,
    )
    service = ChatService(
        store,
        completion_client or CompletionClient(settings),
        settings,
        id_generator=IdentifierGenerator(clock),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if not settings.upstream_api_key:
            logger.warning("GITHUB_TOKEN is not set! Set it in the environment or a .env file.")
            logger.warning("Get a token at https://github.com/settings/tokens (enable the Models scope)")
        logger.info(
            "Chat relay ready; GITHUB_TOKEN is %s",
            "SET" if settings.upstream_api_key else "NOT SET",
        )
        reaper.start()
        try:
            yield
        finally:
            await reaper.stop()

    app = FastAPI(title="Chat Relay", lifespan=lifespan)
    app.state.settings = settings
    app.state.session_store = store
    app.state.chat_service = service
    app.state.reaper = reaper

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        )
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "details": details},
        )

    app.include_router(chat.router)
    app.include_router(health.router)

    if settings.frontend_dir:
        frontend = Path(settings.frontend_dir)
        if frontend.is_dir():
            app.mount("/", StaticFiles(directory=frontend, html=True), name="frontend")
        else:
            logger.warning("FRONTEND_DIR %s is not a directory; static files disabled", frontend)

    return app


app = create_app()
