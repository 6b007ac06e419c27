from __future__ import annotations


class StateStoreError(Exception):
    """Base class for failures raised by the state persistence layer."""

    def __init__(self, message: str, *, namespace: str | None = None):
        super().__init__(message)
        self.namespace = namespace


class StoreAccessError(StateStoreError):
    """The namespace document could not be read."""


class PersistenceError(StateStoreError):
    """Writing or flushing the namespace document failed; the prior document is intact."""


class DecodeError(StateStoreError):
    """
    A stored value does not match its record schema.

    Never surfaced to callers of the collection managers: they treat it as absent/empty.
    """
