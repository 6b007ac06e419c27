from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from settings import Settings

from . import paths
from .accessibility_state import DocumentAccessibilityStateRepository
from .disk_store import DiskJsonDocumentStore, InMemoryDocumentStore
from .interfaces import KeyValueDocumentStore
from .repositories import (
    AsyncAccessibilityRepository,
    AsyncDocumentAccessibilityRepository,
    AsyncDocumentScanCacheRepository,
    AsyncDocumentVoiceHistoryRepository,
    AsyncScanCacheRepository,
    AsyncVoiceHistoryRepository,
)
from .scan_cache import DocumentScanCacheRepository
from .voice_history import DocumentVoiceHistoryRepository

logger = logging.getLogger(__name__)

NAMESPACES = (
    paths.ACCESSIBILITY_NAMESPACE,
    paths.VOICE_COMMANDS_NAMESPACE,
    paths.DOCUMENT_CACHE_NAMESPACE,
)


@dataclass
class PersistentState:
    """
    Owns the three namespace documents for the lifetime of the application.

    Created at startup (`open_persistent_state`) and handed to the command surface;
    `close()` at shutdown drops anything staged but not saved.
    """

    stores: dict[str, KeyValueDocumentStore]
    accessibility: AsyncAccessibilityRepository
    voice_history: AsyncVoiceHistoryRepository
    scan_cache: AsyncScanCacheRepository
    data_dir: Path | None = None
    closed: bool = field(default=False, init=False)

    @classmethod
    def from_stores(cls, stores: dict[str, KeyValueDocumentStore], *, data_dir: Path | None = None) -> "PersistentState":
        missing = [ns for ns in NAMESPACES if ns not in stores]
        if missing:
            raise ValueError(f"missing namespace stores: {', '.join(missing)}")
        return cls(
            stores=dict(stores),
            accessibility=AsyncDocumentAccessibilityRepository(
                DocumentAccessibilityStateRepository(stores[paths.ACCESSIBILITY_NAMESPACE])
            ),
            voice_history=AsyncDocumentVoiceHistoryRepository(
                DocumentVoiceHistoryRepository(stores[paths.VOICE_COMMANDS_NAMESPACE])
            ),
            scan_cache=AsyncDocumentScanCacheRepository(
                DocumentScanCacheRepository(stores[paths.DOCUMENT_CACHE_NAMESPACE])
            ),
            data_dir=data_dir,
        )

    def close(self) -> None:
        if self.closed:
            return
        for store in self.stores.values():
            store.discard()
        self.closed = True
        logger.info("STATE CLOSE: released %d namespace documents", len(self.stores))


def open_persistent_state(settings: Settings) -> PersistentState:
    if not settings.persist_to_disk:
        logger.info("STATE OPEN: disk persistence disabled, using in-memory documents")
        return PersistentState.from_stores({ns: InMemoryDocumentStore(ns) for ns in NAMESPACES})

    base = paths.ensure_dir(settings.data_dir) if settings.data_dir is not None else paths.data_dir()
    logger.info("STATE OPEN: namespace documents under %s", base)
    stores: dict[str, KeyValueDocumentStore] = {
        ns: DiskJsonDocumentStore(ns, paths.namespace_path(base, ns)) for ns in NAMESPACES
    }
    return PersistentState.from_stores(stores, data_dir=base)
