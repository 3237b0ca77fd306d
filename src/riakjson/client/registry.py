# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/riakjson-python/LICENSE
# ==============================================================================

"""Per-connection cache of :class:`~riakjson.collection.Collection` handles.

A connection hands out exactly one handle per collection name, so callers can
compare handles with ``is``.  Entries are created on first reference and kept
for the lifetime of the connection; the key space is the set of collection
names an operator created, so the cache stays small.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import AbstractContextManager
import threading
from typing import TYPE_CHECKING

from ..collection import Collection, validate_collection_name

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .connection import Connection


class CollectionRegistry:
    """Lookup-or-create mapping from collection name to handle.

    Args:
        connection: Connection every created handle is bound to.
        lock: Context manager guarding get-or-create.  Defaults to a
            :class:`threading.Lock`; pass :func:`contextlib.nullcontext` for
            strictly single-threaded use.
    """

    def __init__(self, connection: "Connection", *, lock: AbstractContextManager | None = None) -> None:
        self._connection = connection
        self._lock = lock if lock is not None else threading.Lock()
        self._handles: dict[str, Collection] = {}

    def get_or_create(self, name: str) -> Collection:
        validate_collection_name(name)
        with self._lock:
            handle = self._handles.get(name)
            if handle is None:
                handle = Collection(name, self._connection)
                self._handles[name] = handle
            return handle

    def get(self, name: str) -> Collection | None:
        """Return the cached handle for *name* without creating one."""
        return self._handles.get(name)

    def names(self) -> list[str]:
        with self._lock:
            return list(self._handles)

    def __contains__(self, name: object) -> bool:
        return name in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())


__all__ = ["CollectionRegistry"]
