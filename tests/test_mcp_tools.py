from __future__ import annotations

import asyncio
from types import SimpleNamespace

from commands import StateCommands
from helpers import FlakyDocumentStore
from persistence.disk_store import InMemoryDocumentStore
from persistence.handles import NAMESPACES, PersistentState


def _fake_ctx(commands: StateCommands):
    # minimal shape for _get_commands: ctx.request_context.lifespan_context["commands"]
    request_context = SimpleNamespace(lifespan_context={"commands": commands})
    return SimpleNamespace(request_context=request_context)


def _commands(**overrides) -> StateCommands:
    stores = {ns: InMemoryDocumentStore(ns) for ns in NAMESPACES}
    stores.update(overrides)
    return StateCommands(PersistentState.from_stores(stores))


def test_mcp_tools_basic_flow():
    async def _run():
        import endpoints.mcp_endpoints as mcp

        ctx = _fake_ctx(_commands())

        r = await mcp.get_settings(ctx=ctx)
        assert r["structuredContent"] == {"settings": None}

        r = await mcp.save_settings({"sticky_keys": True}, ctx=ctx)
        assert r["structuredContent"] == {"ok": True}
        r = await mcp.get_settings(ctx=ctx)
        assert r["structuredContent"]["settings"]["sticky_keys"] is True

        for i in ("a", "b"):
            r = await mcp.save_command(
                id=i,
                transcript="go home",
                matched_command="navigate.home",
                confidence=0.5,
                timestamp="2025-01-01T00:00:00Z",
                ctx=ctx,
            )
            assert "Saved voice command" in r["content"][0]["text"]
        r = await mcp.get_history(ctx=ctx)
        assert [c["id"] for c in r["structuredContent"]["commands"]] == ["b", "a"]
        await mcp.clear_history(ctx=ctx)
        r = await mcp.get_history(limit=5, ctx=ctx)
        assert r["structuredContent"]["commands"] == []

        r = await mcp.save_scan(id="s", file_path="/f", result="done", cached_at="2025-01-01T00:00:00", ctx=ctx)
        assert r["structuredContent"] == {"ok": True}
        r = await mcp.get_scan("s", ctx=ctx)
        assert r["structuredContent"]["scan"]["result"] == "done"
        await mcp.clear_scans(ctx=ctx)
        r = await mcp.get_scan("s", ctx=ctx)
        assert r["structuredContent"] == {"scan": None}

    asyncio.run(_run())


def test_mcp_tools_report_failures_as_text():
    async def _run():
        import endpoints.mcp_endpoints as mcp

        ctx = _fake_ctx(_commands(document_cache=FlakyDocumentStore("document_cache", fail_saves=1)))

        r = await mcp.save_command(
            id="x", transcript="t", matched_command="m", confidence=2.0, timestamp="now", ctx=ctx
        )
        assert r["structuredContent"] == {"error": "invalid_input"}
        assert r["content"][0]["text"].startswith("Invalid input:")

        r = await mcp.save_scan(id="s", file_path="/f", result="r", cached_at="2025-01-01T00:00:00", ctx=ctx)
        assert r["structuredContent"] == {"error": "persistence"}
        assert r["content"][0]["text"] == "Failed to save scan: disk full"

    asyncio.run(_run())


def test_build_mcp_registers_every_command():
    async def _run():
        import endpoints.mcp_endpoints as mcp

        server = mcp.build_mcp(_commands())
        tools = await server.list_tools()
        assert {t.name for t in tools} == {
            "get_settings",
            "save_settings",
            "get_history",
            "save_command",
            "clear_history",
            "get_scan",
            "save_scan",
            "clear_scans",
        }

    asyncio.run(_run())


def test_tool_response_type_builds_a_pydantic_schema():
    from pydantic import TypeAdapter

    import endpoints.mcp_endpoints as mcp

    adapter = TypeAdapter(mcp.StateToolResponse)
    reply = adapter.validate_python(mcp._reply("Cached scan s.", ok=True))
    assert reply["content"] == [{"type": "text", "text": "Cached scan s."}]
    assert "properties" in adapter.json_schema()
