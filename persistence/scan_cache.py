from __future__ import annotations

from typing import Protocol

from pydantic import BaseModel, ConfigDict

from .bounded import CappedDedupCache
from .codec import IsoTimestamp, RecordId
from .interfaces import KeyValueDocumentStore

SCANS_KEY = "scans"
SCAN_CACHE_CAP = 50


class DocumentScanEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: RecordId
    file_path: str
    result: str
    cached_at: IsoTimestamp


class ScanCacheRepository(Protocol):
    def get_scan(self, scan_id: str) -> DocumentScanEntry | None:
        ...

    def put_scan(self, entry: DocumentScanEntry) -> None:
        ...

    def clear(self) -> None:
        ...

    def scan_ids(self) -> list[str]:
        ...


class DocumentScanCacheRepository(ScanCacheRepository):
    """
    document_cache.json holds { "scans": [oldest, ..., newest] }, unique by id.
    """

    def __init__(self, store: KeyValueDocumentStore, *, cap: int = SCAN_CACHE_CAP):
        self._cache = CappedDedupCache(store, SCANS_KEY, DocumentScanEntry, cap=cap)

    def get_scan(self, scan_id: str) -> DocumentScanEntry | None:
        return self._cache.get(scan_id)

    def put_scan(self, entry: DocumentScanEntry) -> None:
        self._cache.put(entry)

    def clear(self) -> None:
        self._cache.clear()

    def scan_ids(self) -> list[str]:
        return self._cache.ids()
