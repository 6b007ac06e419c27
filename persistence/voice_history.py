from __future__ import annotations

from typing import Protocol

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .bounded import CappedAppendLog
from .codec import IsoTimestamp, RecordId
from .interfaces import KeyValueDocumentStore

COMMAND_HISTORY_KEY = "command_history"
VOICE_HISTORY_CAP = 1000
DEFAULT_HISTORY_LIMIT = 100


class VoiceCommandEntry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: RecordId
    transcript: str
    # Older documents wrote this as "command_matched".
    matched_command: str = Field(validation_alias=AliasChoices("matched_command", "command_matched"))
    confidence: float = Field(ge=0.0, le=1.0)
    timestamp: IsoTimestamp


class VoiceHistoryRepository(Protocol):
    def list_commands(self, limit: int | None = None) -> list[VoiceCommandEntry]:
        ...

    def add_command(self, entry: VoiceCommandEntry) -> None:
        ...

    def clear(self) -> None:
        ...

    def count(self) -> int:
        ...


class DocumentVoiceHistoryRepository(VoiceHistoryRepository):
    """
    voice_commands.json holds { "command_history": [oldest, ..., newest] }.
    """

    def __init__(self, store: KeyValueDocumentStore, *, cap: int = VOICE_HISTORY_CAP):
        self._log = CappedAppendLog(store, COMMAND_HISTORY_KEY, VoiceCommandEntry, cap=cap)

    def list_commands(self, limit: int | None = None) -> list[VoiceCommandEntry]:
        return self._log.read(DEFAULT_HISTORY_LIMIT if limit is None else limit)

    def add_command(self, entry: VoiceCommandEntry) -> None:
        self._log.append(entry)

    def clear(self) -> None:
        self._log.clear()

    def count(self) -> int:
        return self._log.count()
