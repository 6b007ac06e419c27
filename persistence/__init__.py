from __future__ import annotations

from .accessibility_state import AccessibilitySettings, AccessibilityStateRepository, DocumentAccessibilityStateRepository
from .disk_store import DiskJsonDocumentStore, InMemoryDocumentStore
from .errors import DecodeError, PersistenceError, StateStoreError, StoreAccessError
from .handles import PersistentState, open_persistent_state
from .repositories import (
    AsyncAccessibilityRepository,
    AsyncDocumentAccessibilityRepository,
    AsyncDocumentScanCacheRepository,
    AsyncDocumentVoiceHistoryRepository,
    AsyncScanCacheRepository,
    AsyncVoiceHistoryRepository,
)
from .scan_cache import DocumentScanCacheRepository, DocumentScanEntry, ScanCacheRepository
from .voice_history import DocumentVoiceHistoryRepository, VoiceCommandEntry, VoiceHistoryRepository

__all__ = [
    "AccessibilitySettings",
    "AccessibilityStateRepository",
    "DocumentAccessibilityStateRepository",
    "VoiceCommandEntry",
    "VoiceHistoryRepository",
    "DocumentVoiceHistoryRepository",
    "DocumentScanEntry",
    "ScanCacheRepository",
    "DocumentScanCacheRepository",
    "AsyncAccessibilityRepository",
    "AsyncDocumentAccessibilityRepository",
    "AsyncVoiceHistoryRepository",
    "AsyncDocumentVoiceHistoryRepository",
    "AsyncScanCacheRepository",
    "AsyncDocumentScanCacheRepository",
    "DiskJsonDocumentStore",
    "InMemoryDocumentStore",
    "PersistentState",
    "open_persistent_state",
    "StateStoreError",
    "StoreAccessError",
    "PersistenceError",
    "DecodeError",
]
