from __future__ import annotations

import json
import logging

from fastapi.testclient import TestClient

from log_config import JsonFormatter
from settings import get_settings


def test_app_smoke_routes(disk_settings):
    import app as app_module

    client = TestClient(app_module.create_app(disk_settings))

    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["ok"] is True

    # mcp redirect helpers
    r = client.get("/mcp", follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"] == "/mcp/"


def test_create_app_without_disk_persistence(sandbox_project, monkeypatch):
    import app as app_module

    monkeypatch.setenv("PERSIST_TO_DISK", "false")
    client = TestClient(app_module.create_app())
    assert client.get("/healthz").json() == {"ok": True, "persist_to_disk": False}

    client.put("/state/settings", json={"large_text": True})
    assert client.get("/state/settings").json()["settings"]["large_text"] is True
    assert not (sandbox_project / "data" / "accessibility.json").exists()


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("STATE_DATA_DIR", str(tmp_path / "state"))
    monkeypatch.setenv("PERSIST_TO_DISK", "no")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FORMAT", "JSON")
    monkeypatch.setenv("DEBUG_LOG_REQUESTS", "1")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "tauri://localhost, http://localhost:1420,")

    s = get_settings()
    assert s.data_dir == tmp_path / "state"
    assert s.persist_to_disk is False
    assert s.log_level == "DEBUG"
    assert s.log_format == "json"
    assert s.debug_log_requests is True
    assert s.cors_allow_origins == ("tauri://localhost", "http://localhost:1420")


def test_json_formatter_includes_command_extra():
    record = logging.LogRecord("commands", logging.INFO, __file__, 1, "COMMAND %s", ("save_scan",), None)
    record.command = "save_scan"
    payload = json.loads(JsonFormatter().format(record))
    assert payload["message"] == "COMMAND save_scan"
    assert payload["command"] == "save_scan"
    assert payload["level"] == "info"
