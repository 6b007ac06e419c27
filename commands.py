from __future__ import annotations

import contextlib
import logging
from typing import Any, Iterator, Literal, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from persistence.accessibility_state import AccessibilitySettings
from persistence.errors import PersistenceError, StoreAccessError
from persistence.handles import PersistentState
from persistence.scan_cache import DocumentScanEntry
from persistence.voice_history import VoiceCommandEntry

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

CommandErrorKind = Literal["invalid_input", "store_access", "persistence"]


class CommandError(Exception):
    """A command failed; `message` is safe to show to the user."""

    def __init__(self, kind: CommandErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


def _validation_summary(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "value"
        parts.append(f"`{loc}` {err.get('msg', 'is invalid')}")
    return "; ".join(parts)


def _coerce(model: type[M], value: Any, what: str) -> M:
    if isinstance(value, model):
        return value
    if not isinstance(value, Mapping):
        raise CommandError("invalid_input", f"Invalid input: `{what}` must be an object.")
    try:
        return model.model_validate(dict(value))
    except ValidationError as e:
        raise CommandError("invalid_input", f"Invalid input: {_validation_summary(e)}.") from e


def _parse_limit(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise CommandError("invalid_input", "Invalid input: `limit` must be an integer >= 0.")
    return value


def _parse_id(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise CommandError("invalid_input", f"Invalid input: `{what}` must be a non-empty string.")
    return value


@contextlib.contextmanager
def _store_errors(command: str, save_failure: str) -> Iterator[None]:
    try:
        yield
    except StoreAccessError as e:
        logger.warning("COMMAND %s: store access failed (%s): %r", command, e.namespace, e)
        raise CommandError("store_access", f"Failed to access store: {e}") from e
    except PersistenceError as e:
        logger.error("COMMAND %s: persistence failed (%s): %r", command, e.namespace, e)
        raise CommandError("persistence", f"{save_failure}: {e}") from e


class StateCommands:
    """
    Externally callable operations over the persisted state.

    Inputs may be model instances or plain mappings from a UI layer. Failures raise
    CommandError; nothing is retried here.
    """

    def __init__(self, state: PersistentState, *, log_requests: bool = False) -> None:
        self._state = state
        self._log_requests = log_requests

    @property
    def state(self) -> PersistentState:
        return self._state

    def _trace(self, command: str, detail: str = "") -> None:
        if self._log_requests:
            logger.info("COMMAND %s %s", command, detail, extra={"command": command})

    async def get_settings(self) -> AccessibilitySettings | None:
        self._trace("get_settings")
        with _store_errors("get_settings", "Failed to load settings"):
            return await self._state.accessibility.get_settings()

    async def save_settings(self, settings: AccessibilitySettings | Mapping[str, Any]) -> None:
        record = _coerce(AccessibilitySettings, settings, "settings")
        self._trace("save_settings")
        with _store_errors("save_settings", "Failed to save settings"):
            await self._state.accessibility.save_settings(record)

    async def get_history(self, limit: int | None = None) -> list[VoiceCommandEntry]:
        parsed = _parse_limit(limit)
        self._trace("get_history", f"limit={parsed}")
        with _store_errors("get_history", "Failed to load history"):
            return await self._state.voice_history.list_commands(parsed)

    async def save_command(self, entry: VoiceCommandEntry | Mapping[str, Any]) -> None:
        record = _coerce(VoiceCommandEntry, entry, "command")
        self._trace("save_command", f"id={record.id}")
        with _store_errors("save_command", "Failed to save command"):
            await self._state.voice_history.add_command(record)

    async def clear_history(self) -> None:
        self._trace("clear_history")
        with _store_errors("clear_history", "Failed to clear history"):
            await self._state.voice_history.clear()

    async def get_scan(self, scan_id: str) -> DocumentScanEntry | None:
        ident = _parse_id(scan_id, "scan_id")
        self._trace("get_scan", f"id={ident}")
        with _store_errors("get_scan", "Failed to load scan"):
            return await self._state.scan_cache.get_scan(ident)

    async def save_scan(self, entry: DocumentScanEntry | Mapping[str, Any]) -> None:
        record = _coerce(DocumentScanEntry, entry, "scan")
        self._trace("save_scan", f"id={record.id}")
        with _store_errors("save_scan", "Failed to save scan"):
            await self._state.scan_cache.put_scan(record)

    async def clear_scans(self) -> None:
        self._trace("clear_scans")
        with _store_errors("clear_scans", "Failed to clear cache"):
            await self._state.scan_cache.clear()
