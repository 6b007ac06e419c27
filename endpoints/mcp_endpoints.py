from __future__ import annotations

import contextlib
import logging
from typing import Any, AsyncIterator, Literal

from typing_extensions import TypedDict

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.server import Context
from mcp.server.transport_security import TransportSecuritySettings

from commands import CommandError, StateCommands

logger = logging.getLogger(__name__)


class ToolTextContent(TypedDict):
    type: Literal["text"]
    text: str


class StateToolResponse(TypedDict, total=False):
    content: list[ToolTextContent]
    structuredContent: dict[str, Any]


def _get_commands(ctx: Context | None) -> StateCommands:
    if ctx is None:
        raise ValueError("Context is required")
    lifespan_context = ctx.request_context.lifespan_context
    commands = lifespan_context.get("commands") if isinstance(lifespan_context, dict) else None
    if not isinstance(commands, StateCommands):
        raise ValueError("State commands are not available on MCP context")
    return commands


def _reply(message: str | None = None, **structured: Any) -> StateToolResponse:
    return {
        "content": ([{"type": "text", "text": message}] if message else []),
        "structuredContent": structured,
    }


def _failure(e: CommandError) -> StateToolResponse:
    return _reply(e.message, error=e.kind)


async def get_settings(ctx: Context | None = None) -> StateToolResponse:
    """
    Returns the saved accessibility settings, or null if none were saved yet.
    """
    try:
        settings = await _get_commands(ctx).get_settings()
    except CommandError as e:
        return _failure(e)
    if settings is None:
        return _reply("No accessibility settings saved yet.", settings=None)
    return _reply("Accessibility settings:", settings=settings.model_dump(mode="json"))


async def save_settings(settings: dict[str, Any], ctx: Context | None = None) -> StateToolResponse:
    """
    Replaces the saved accessibility settings in full.
    """
    try:
        await _get_commands(ctx).save_settings(settings)
    except CommandError as e:
        return _failure(e)
    return _reply("Saved accessibility settings.", ok=True)


async def get_history(limit: int | None = None, ctx: Context | None = None) -> StateToolResponse:
    """
    Lists recent voice commands, newest first (default 100).
    """
    try:
        entries = await _get_commands(ctx).get_history(limit)
    except CommandError as e:
        return _failure(e)
    return _reply(
        f"{len(entries)} recent voice commands:",
        commands=[e.model_dump(mode="json") for e in entries],
    )


async def save_command(
    id: str,
    transcript: str,
    matched_command: str,
    confidence: float,
    timestamp: str,
    ctx: Context | None = None,
) -> StateToolResponse:
    """
    Appends a recognized voice command to the history (the oldest beyond 1000 are dropped).
    """
    entry = {
        "id": id,
        "transcript": transcript,
        "matched_command": matched_command,
        "confidence": confidence,
        "timestamp": timestamp,
    }
    try:
        await _get_commands(ctx).save_command(entry)
    except CommandError as e:
        return _failure(e)
    return _reply(f'Saved voice command "{matched_command}" ({id}).', ok=True)


async def clear_history(ctx: Context | None = None) -> StateToolResponse:
    """
    Deletes all saved voice commands.
    """
    try:
        await _get_commands(ctx).clear_history()
    except CommandError as e:
        return _failure(e)
    return _reply("Cleared voice command history.", ok=True)


async def get_scan(scan_id: str, ctx: Context | None = None) -> StateToolResponse:
    """
    Looks up a cached document scan by id.
    """
    try:
        scan = await _get_commands(ctx).get_scan(scan_id)
    except CommandError as e:
        return _failure(e)
    if scan is None:
        return _reply(f"Scan {scan_id} is not cached.", scan=None)
    return _reply(f"Cached scan {scan_id}:", scan=scan.model_dump(mode="json"))


async def save_scan(
    id: str,
    file_path: str,
    result: str,
    cached_at: str,
    ctx: Context | None = None,
) -> StateToolResponse:
    """
    Caches a document scan result, replacing any earlier result with the same id.
    """
    entry = {"id": id, "file_path": file_path, "result": result, "cached_at": cached_at}
    try:
        await _get_commands(ctx).save_scan(entry)
    except CommandError as e:
        return _failure(e)
    return _reply(f"Cached scan {id}.", ok=True)


async def clear_scans(ctx: Context | None = None) -> StateToolResponse:
    """
    Deletes all cached document scans.
    """
    try:
        await _get_commands(ctx).clear_scans()
    except CommandError as e:
        return _failure(e)
    return _reply("Cleared document scan cache.", ok=True)


TOOLS = (
    get_settings,
    save_settings,
    get_history,
    save_command,
    clear_history,
    get_scan,
    save_scan,
    clear_scans,
)


def build_mcp(commands: StateCommands) -> FastMCP:
    """
    One FastMCP server per application; tools reach the commands through the lifespan context.
    """

    @contextlib.asynccontextmanager
    async def lifespan(_server: FastMCP) -> AsyncIterator[dict[str, Any]]:
        yield {"commands": commands}

    server = FastMCP(
        "Assistive State",
        stateless_http=True,
        json_response=True,
        lifespan=lifespan,
        # Local desktop shell talks to us over loopback with its own Host header.
        transport_security=TransportSecuritySettings(enable_dns_rebinding_protection=False),
    )
    for tool in TOOLS:
        server.tool()(tool)
    logger.debug("MCP: registered %d state tools", len(TOOLS))
    return server
