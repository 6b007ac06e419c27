from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from commands import CommandError, StateCommands

router = APIRouter(prefix="/state", tags=["state"])
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    "invalid_input": 400,
    "store_access": 503,
    "persistence": 500,
}

ACK = {"ok": True}


def get_commands(request: Request) -> StateCommands:
    commands = getattr(request.app.state, "commands", None)
    if commands is None:
        raise HTTPException(status_code=503, detail="state store is not open")
    return commands


async def command_error_handler(request: Request, exc: CommandError) -> JSONResponse:
    status = ERROR_STATUS.get(exc.kind, 500)
    logger.info("STATE HTTP: %s %s -> %d %s", request.method, request.url.path, status, exc.kind)
    return JSONResponse({"detail": exc.message, "kind": exc.kind}, status_code=status)


@router.get("/settings")
async def read_settings(commands: StateCommands = Depends(get_commands)) -> dict[str, Any]:
    settings = await commands.get_settings()
    return {"settings": settings.model_dump(mode="json") if settings is not None else None}


@router.put("/settings")
async def write_settings(
    payload: dict[str, Any] = Body(...),
    commands: StateCommands = Depends(get_commands),
) -> dict[str, Any]:
    await commands.save_settings(payload)
    return ACK


@router.get("/voice-commands")
async def read_voice_commands(
    limit: int | None = Query(default=None),
    commands: StateCommands = Depends(get_commands),
) -> dict[str, Any]:
    entries = await commands.get_history(limit)
    return {"commands": [e.model_dump(mode="json") for e in entries]}


@router.post("/voice-commands")
async def append_voice_command(
    payload: dict[str, Any] = Body(...),
    commands: StateCommands = Depends(get_commands),
) -> dict[str, Any]:
    await commands.save_command(payload)
    return ACK


@router.delete("/voice-commands")
async def delete_voice_commands(commands: StateCommands = Depends(get_commands)) -> dict[str, Any]:
    await commands.clear_history()
    return ACK


@router.get("/scans/{scan_id}")
async def read_scan(scan_id: str, commands: StateCommands = Depends(get_commands)) -> dict[str, Any]:
    scan = await commands.get_scan(scan_id)
    return {"scan": scan.model_dump(mode="json") if scan is not None else None}


@router.put("/scans")
async def write_scan(
    payload: dict[str, Any] = Body(...),
    commands: StateCommands = Depends(get_commands),
) -> dict[str, Any]:
    await commands.save_scan(payload)
    return ACK


@router.delete("/scans")
async def delete_scans(commands: StateCommands = Depends(get_commands)) -> dict[str, Any]:
    await commands.clear_scans()
    return ACK
