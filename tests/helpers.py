from __future__ import annotations

from persistence.disk_store import InMemoryDocumentStore
from persistence.errors import PersistenceError
from persistence.scan_cache import DocumentScanEntry
from persistence.voice_history import VoiceCommandEntry


def voice(i: int | str, *, transcript: str | None = None, timestamp: str = "2025-01-01T09:00:00Z") -> VoiceCommandEntry:
    return VoiceCommandEntry(
        id=str(i),
        transcript=transcript or f"open item {i}",
        matched_command="open",
        confidence=0.9,
        timestamp=timestamp,
    )


def scan(ident: str, *, result: str = "ok", file_path: str | None = None) -> DocumentScanEntry:
    return DocumentScanEntry(
        id=ident,
        file_path=file_path or f"/scans/{ident}.pdf",
        result=result,
        cached_at="2025-01-01T09:00:00+00:00",
    )


class FlakyDocumentStore(InMemoryDocumentStore):
    """In-memory document whose next `fail_saves` saves fail."""

    def __init__(self, namespace: str, *, fail_saves: int = 0):
        super().__init__(namespace)
        self.fail_saves = fail_saves
        self.save_calls = 0

    def save(self) -> None:
        self.save_calls += 1
        if self.fail_saves > 0:
            self.fail_saves -= 1
            self.discard()
            raise PersistenceError("disk full", namespace=self.namespace)
        super().save()
