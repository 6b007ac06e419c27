from __future__ import annotations

import contextlib
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from dotenv import load_dotenv

from commands import CommandError, StateCommands
from log_config import configure_logging
from persistence.handles import open_persistent_state
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    load_dotenv("local.env")
    if settings is None:
        settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)

    from endpoints.mcp_endpoints import build_mcp
    from endpoints.state_endpoints import command_error_handler, router as state_router

    state = open_persistent_state(settings)
    commands = StateCommands(state, log_requests=settings.debug_log_requests)
    logger.info("APP: state store open (persist_to_disk=%s)", settings.persist_to_disk)
    mcp = build_mcp(commands)
    mcp.settings.streamable_http_path = "/"
    mcp_app = mcp.streamable_http_app()

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            async with mcp.session_manager.run():
                yield
        finally:
            state.close()

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.commands = commands

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(CommandError, command_error_handler)  # type: ignore[arg-type]

    @app.post("/mcp")
    async def mcp_redirect_post():
        return RedirectResponse(url="/mcp/", status_code=307)

    @app.get("/mcp")
    async def mcp_redirect_get():
        return RedirectResponse(url="/mcp/", status_code=307)

    @app.get("/healthz")
    async def healthz():
        return {"ok": True, "persist_to_disk": settings.persist_to_disk}

    app.include_router(state_router)

    app.mount("/mcp", mcp_app)

    return app
