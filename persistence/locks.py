from __future__ import annotations

import threading
from pathlib import Path


class DocumentLockRegistry:
    """
    Provides a stable update lock per document so unrelated namespaces never contend.

    Disk documents are keyed by their resolved path, so two handles opened on the
    same file in this process serialize against each other.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def lock_for(self, path: Path) -> threading.RLock:
        return self.lock_for_key(str(path.resolve()))

    def lock_for_key(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock


GLOBAL_DOCUMENT_LOCKS = DocumentLockRegistry()
