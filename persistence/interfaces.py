from __future__ import annotations

from typing import Any, ContextManager, Protocol


class KeyValueDocumentStore(Protocol):
    """
    A single JSON-like document persisted under a namespace, holding values in named slots.

    Reads only ever observe saved state: `set` stages a value and `save` makes every
    staged value visible at once. A failed `save` raises PersistenceError and drops
    the staged values, leaving the previously saved document as it was.
    """

    @property
    def namespace(self) -> str:
        ...

    @property
    def lock(self) -> ContextManager[Any]:
        """Exclusive, re-entrant update lock shared by every handle on this document."""
        ...

    def get(self, key: str) -> Any | None:
        """Return a copy of the saved value under `key`, or None."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Stage `value` under `key` for the next `save`."""
        ...

    def save(self) -> None:
        """Persist staged values atomically."""
        ...

    def discard(self) -> None:
        """Drop staged values without persisting them."""
        ...
