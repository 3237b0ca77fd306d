# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/riakjson-python/LICENSE
# ==============================================================================

"""Collection handles.

A :class:`Collection` is a named view onto one RiakJson collection.  It holds
no state besides its name and the connection it was created by; every method
forwards to the connection with the name filled in.  Obtain handles through
:meth:`Connection.collection <riakjson.client.connection.Connection.collection>`
rather than constructing them directly, so each name maps to a single object.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import ValidationError

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .client.connection import Connection
    from .client.transports import Body, QueryParams, Response


def validate_collection_name(name: object) -> str:
    if name is None:
        raise ValidationError("A collection cannot have a None name")
    if not isinstance(name, str):
        raise ValidationError(f"Collection name must be a string, got {type(name).__name__}")
    if not name:
        raise ValidationError("A collection cannot have an empty string name")
    return name


class Collection:
    """Handle for a named collection bound to a connection."""

    __slots__ = ("_name", "connection")

    def __init__(self, name: str, connection: "Connection") -> None:
        self._name = validate_collection_name(name)
        # Not owned: the connection outlives and closes independently of handles.
        self.connection = connection

    @property
    def name(self) -> str:
        return self._name

    @property
    def index_name(self) -> str:
        """Name of the search index the service generates for this collection."""
        return self.connection.collection_index_name(self._name)

    def __repr__(self) -> str:
        return f"Collection(name={self._name!r})"

    # Documents

    def get_raw_json(self, key: str) -> "Response":
        return self.connection.get_document(self._name, key)

    def insert_raw_json(self, key: str | None, json: "Body") -> str:
        """Store a document and return its key (generated when *key* is ``None``)."""
        return self.connection.insert_document(self._name, key, json)

    def update_raw_json(self, key: str, json: "Body") -> "Response":
        return self.connection.update_document(self._name, key, json)

    def delete_raw_json(self, key: str) -> "Response":
        return self.connection.delete_document(self._name, key)

    # Schema

    def get_schema(self) -> "Response":
        return self.connection.get_schema(self._name)

    def set_schema(self, json: "Body") -> "Response":
        return self.connection.set_schema(self._name, json)

    def delete_schema(self) -> "Response":
        return self.connection.delete_schema(self._name)

    # Queries

    def query_all(self, query: "Body") -> "Response":
        return self.connection.query_all(self._name, query)

    def query_one(self, query: "Body") -> "Response":
        return self.connection.query_one(self._name, query)

    def raw_search(self, query_params: "QueryParams") -> "Response":
        return self.connection.raw_search(self._name, query_params)


__all__ = ["Collection", "validate_collection_name"]
