from __future__ import annotations

import copy
import logging
import threading
from pathlib import Path
from typing import Any

from json_store import InvalidJsonDocument, atomic_write_json, read_json

from .errors import PersistenceError, StoreAccessError
from .interfaces import KeyValueDocumentStore
from .locks import GLOBAL_DOCUMENT_LOCKS

logger = logging.getLogger(__name__)


class DiskJsonDocumentStore(KeyValueDocumentStore):
    """
    Stores a single namespace document as a JSON object on disk at a fixed path.

    - Missing, empty, unparsable or non-object files read as an empty document.
    - Read I/O failures raise StoreAccessError.
    - Writes are atomic; a failed write raises PersistenceError and leaves the old file.
    - The file is re-read on every access, so every handle on the path sees the same state.
    """

    def __init__(self, namespace: str, path: Path):
        self._namespace = namespace
        self._path = path
        self._lock = GLOBAL_DOCUMENT_LOCKS.lock_for(path)
        self._staged: dict[str, Any] = {}

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def path(self) -> Path:
        return self._path

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def _load(self) -> dict[str, Any]:
        try:
            raw = read_json(self._path)
        except InvalidJsonDocument as e:
            logger.warning("STATE LOAD: %s document is not valid JSON, reading as empty: %r", self._namespace, e)
            return {}
        except OSError as e:
            raise StoreAccessError(
                f"cannot read {self._path.name}: {e.strerror or e}", namespace=self._namespace
            ) from e
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            logger.warning(
                "STATE LOAD: %s document holds %s instead of an object, reading as empty",
                self._namespace,
                type(raw).__name__,
            )
            return {}
        return raw

    def get(self, key: str) -> Any | None:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._staged[key] = copy.deepcopy(value)

    def save(self) -> None:
        with self._lock:
            staged, self._staged = self._staged, {}
            if not staged:
                return
            doc = self._load()
            doc.update(staged)
            try:
                atomic_write_json(self._path, doc)
            except (OSError, TypeError, ValueError) as e:
                logger.error("STATE SAVE: failed to write %s: %r", self._path, e)
                raise PersistenceError(
                    f"cannot write {self._path.name}: {getattr(e, 'strerror', None) or e}",
                    namespace=self._namespace,
                ) from e
            logger.debug("STATE SAVE: wrote %s (%s)", self._path, ", ".join(sorted(staged)))

    def discard(self) -> None:
        with self._lock:
            self._staged = {}


class InMemoryDocumentStore(KeyValueDocumentStore):
    """
    Process-local document with the same staging semantics as the disk store.

    Used when PERSIST_TO_DISK is off; state lives as long as the handle does.
    """

    def __init__(self, namespace: str, initial: dict[str, Any] | None = None):
        self._namespace = namespace
        self._lock = threading.RLock()
        self._doc: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._staged: dict[str, Any] = {}

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._doc.get(key))

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._staged[key] = copy.deepcopy(value)

    def save(self) -> None:
        with self._lock:
            staged, self._staged = self._staged, {}
            if not staged:
                return
            doc = dict(self._doc)
            doc.update(staged)
            # Swap in one assignment so lock-free readers see the old or the new document.
            self._doc = doc

    def discard(self) -> None:
        with self._lock:
            self._staged = {}

    def snapshot(self) -> dict[str, Any]:
        return copy.deepcopy(self._doc)
