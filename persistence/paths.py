from __future__ import annotations

from pathlib import Path

ACCESSIBILITY_NAMESPACE = "accessibility"
VOICE_COMMANDS_NAMESPACE = "voice_commands"
DOCUMENT_CACHE_NAMESPACE = "document_cache"


def project_root() -> Path:
    # persistence/paths.py -> persistence -> project root
    return Path(__file__).resolve().parents[1]


def data_dir() -> Path:
    return ensure_dir(project_root() / "data")


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def namespace_path(base: Path, namespace: str) -> Path:
    return base / f"{namespace}.json"
