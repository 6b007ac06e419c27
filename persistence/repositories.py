from __future__ import annotations

import asyncio
from typing import Protocol

from .accessibility_state import AccessibilitySettings, AccessibilityStateRepository
from .scan_cache import DocumentScanEntry, ScanCacheRepository
from .voice_history import VoiceCommandEntry, VoiceHistoryRepository


class AsyncAccessibilityRepository(Protocol):
    async def get_settings(self) -> AccessibilitySettings | None: ...
    async def save_settings(self, settings: AccessibilitySettings) -> None: ...


class AsyncVoiceHistoryRepository(Protocol):
    async def list_commands(self, limit: int | None = None) -> list[VoiceCommandEntry]: ...
    async def add_command(self, entry: VoiceCommandEntry) -> None: ...
    async def clear(self) -> None: ...
    async def count(self) -> int: ...


class AsyncScanCacheRepository(Protocol):
    async def get_scan(self, scan_id: str) -> DocumentScanEntry | None: ...
    async def put_scan(self, entry: DocumentScanEntry) -> None: ...
    async def clear(self) -> None: ...
    async def scan_ids(self) -> list[str]: ...


# The wrappers below use asyncio.to_thread so document I/O and lock waits never
# block the event loop. A cancelled awaiter does not stop the worker thread: the
# read-modify-write still finishes and releases the namespace lock.


class AsyncDocumentAccessibilityRepository(AsyncAccessibilityRepository):
    def __init__(self, repo: AccessibilityStateRepository) -> None:
        self._repo = repo

    async def get_settings(self) -> AccessibilitySettings | None:
        return await asyncio.to_thread(self._repo.get_settings)

    async def save_settings(self, settings: AccessibilitySettings) -> None:
        await asyncio.to_thread(self._repo.save_settings, settings)


class AsyncDocumentVoiceHistoryRepository(AsyncVoiceHistoryRepository):
    def __init__(self, repo: VoiceHistoryRepository) -> None:
        self._repo = repo

    async def list_commands(self, limit: int | None = None) -> list[VoiceCommandEntry]:
        return await asyncio.to_thread(self._repo.list_commands, limit)

    async def add_command(self, entry: VoiceCommandEntry) -> None:
        await asyncio.to_thread(self._repo.add_command, entry)

    async def clear(self) -> None:
        await asyncio.to_thread(self._repo.clear)

    async def count(self) -> int:
        return await asyncio.to_thread(self._repo.count)


class AsyncDocumentScanCacheRepository(AsyncScanCacheRepository):
    def __init__(self, repo: ScanCacheRepository) -> None:
        self._repo = repo

    async def get_scan(self, scan_id: str) -> DocumentScanEntry | None:
        return await asyncio.to_thread(self._repo.get_scan, scan_id)

    async def put_scan(self, entry: DocumentScanEntry) -> None:
        await asyncio.to_thread(self._repo.put_scan, entry)

    async def clear(self) -> None:
        await asyncio.to_thread(self._repo.clear)

    async def scan_ids(self) -> list[str]:
        return await asyncio.to_thread(self._repo.scan_ids)
