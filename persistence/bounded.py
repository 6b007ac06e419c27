from __future__ import annotations

import logging
from operator import attrgetter
from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel

from .codec import decode_record, decode_records, encode_record, encode_records
from .errors import DecodeError
from .interfaces import KeyValueDocumentStore

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class _SlotBinding(Generic[M]):
    """One record type stored under one slot of a namespace document."""

    def __init__(self, store: KeyValueDocumentStore, key: str, model: type[M]):
        self._store = store
        self._key = key
        self._model = model

    @property
    def namespace(self) -> str:
        return self._store.namespace

    def _write(self, value: Any) -> None:
        # Caller holds the store lock.
        try:
            self._store.set(self._key, value)
            self._store.save()
        except BaseException:
            self._store.discard()
            raise


class SingletonSlot(_SlotBinding[M]):
    """
    At most one live record, overwritten wholesale.

    States: absent (never written, or malformed on disk) and present.
    """

    def get(self) -> M | None:
        raw = self._store.get(self._key)
        if raw is None:
            return None
        try:
            return decode_record(self._model, raw)
        except DecodeError as e:
            logger.warning("STATE DECODE: %s/%s is malformed, reading as absent: %s", self.namespace, self._key, e)
            return None

    def set(self, record: M) -> None:
        payload = encode_record(record)
        with self._store.lock:
            self._write(payload)


class _BoundedSequence(_SlotBinding[M]):
    """
    An ordered array of records, oldest first, never longer than `cap`.

    Every mutation runs read-decode-modify-encode-write-save under the namespace lock.
    """

    def __init__(self, store: KeyValueDocumentStore, key: str, model: type[M], *, cap: int):
        if cap < 1:
            raise ValueError("cap must be >= 1")
        super().__init__(store, key, model)
        self._cap = cap

    def _read_all(self) -> list[M]:
        raw = self._store.get(self._key)
        if raw is None:
            return []
        try:
            return decode_records(self._model, raw)
        except DecodeError as e:
            logger.warning("STATE DECODE: %s/%s is malformed, reading as empty: %s", self.namespace, self._key, e)
            return []

    def _update(self, change: Callable[[list[M]], list[M]]) -> list[M]:
        with self._store.lock:
            updated = change(self._read_all())
            overflow = len(updated) - self._cap
            if overflow > 0:
                updated = updated[overflow:]
                logger.debug("STATE EVICT: %s/%s dropped %d oldest", self.namespace, self._key, overflow)
            self._write(encode_records(updated))
            return updated

    def clear(self) -> None:
        with self._store.lock:
            self._write([])
        logger.info("STATE CLEAR: %s/%s", self.namespace, self._key)

    def count(self) -> int:
        return len(self._read_all())


class CappedAppendLog(_BoundedSequence[M]):
    """
    Append-only log; recency is append order, not any timestamp on the record.
    """

    def append(self, entry: M) -> None:
        self._update(lambda entries: [*entries, entry])

    def read(self, limit: int) -> list[M]:
        """Most recent `limit` entries, newest first."""
        if limit < 0:
            raise ValueError("limit must be >= 0")
        if limit == 0:
            return []
        entries = self._read_all()
        return entries[-limit:][::-1]


class CappedDedupCache(_BoundedSequence[M]):
    """
    FIFO cache unique by identity. Re-putting an identity replaces the entry and
    moves it to the newest position.
    """

    def __init__(
        self,
        store: KeyValueDocumentStore,
        key: str,
        model: type[M],
        *,
        cap: int,
        identity: Callable[[M], str] = attrgetter("id"),
    ):
        super().__init__(store, key, model, cap=cap)
        self._identity = identity

    def put(self, entry: M) -> None:
        ident = self._identity(entry)
        self._update(lambda entries: [e for e in entries if self._identity(e) != ident] + [entry])

    def get(self, ident: str) -> M | None:
        return next((e for e in self._read_all() if self._identity(e) == ident), None)

    def ids(self) -> list[str]:
        return [self._identity(e) for e in self._read_all()]
