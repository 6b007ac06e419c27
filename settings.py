from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    # Persistence
    persist_to_disk: bool
    # None means the project-local ./data directory
    data_dir: Path | None

    # Logging
    log_level: str
    log_format: str
    debug_log_requests: bool

    # HTTP
    cors_allow_origins: tuple[str, ...]


def get_settings() -> Settings:
    raw_dir = os.getenv("STATE_DATA_DIR", "").strip()
    data_dir = Path(raw_dir).expanduser() if raw_dir else None

    # Desktop installs keep state between runs; tests and throwaway runs can opt out.
    persist_to_disk = _env_bool("PERSIST_TO_DISK", True)

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    log_format = os.getenv("LOG_FORMAT", "plain").strip().lower() or "plain"
    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", False)

    cors_allow_origins = _env_list("CORS_ALLOW_ORIGINS", "*")

    return Settings(
        persist_to_disk=persist_to_disk,
        data_dir=data_dir,
        log_level=log_level,
        log_format=log_format,
        debug_log_requests=debug_log_requests,
        cors_allow_origins=cors_allow_origins,
    )
