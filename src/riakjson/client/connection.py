# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/riakjson-python/LICENSE
# ==============================================================================

"""Connection to a RiakJson service.

:class:`Connection` knows the service's URL layout and routes every operation
through a :class:`~riakjson.client.transports.Transport`.  Resource paths are
fixed by the service::

    GET             /ping
    GET             /document/collection
    GET|PUT|DELETE  /document/collection/{name}/schema
    GET|PUT|DELETE  /document/collection/{name}/{key}
    POST            /document/collection/{name}
    PUT             /document/collection/{name}/query/all
    PUT             /document/collection/{name}/query/one
    GET             /search/query/{name}RJIndex?...

Each public method issues exactly one blocking request.  Nothing is retried;
transport errors reach the caller unchanged.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import AbstractContextManager, contextmanager
import os
from typing import Any, Final
from urllib.parse import quote

import orjson

from ..collection import Collection
from ..config import DEFAULT_HOST, DEFAULT_PORT, ClientConfig, load_config_file
from ..errors import MalformedResponse, ValidationError, WriteFailure
from ..utils import get_logger
from .registry import CollectionRegistry
from .transports import Body, HTTPXTransport, QueryParams, Response, Transport


INDEX_SUFFIX: Final[str] = "RJIndex"
SCHEMA_SEGMENT: Final[str] = "schema"


def _segment(value: str) -> str:
    return quote(value, safe="")


class Connection:
    """Host/port of a RiakJson service plus the transport used to reach it.

    Args:
        host: Service hostname.
        port: Service HTTP port.
        transport: Object implementing ``send``; defaults to
            :class:`~riakjson.client.transports.HTTPXTransport`.
        registry_lock: Lock for the collection registry, see
            :class:`~riakjson.client.registry.CollectionRegistry`.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        *,
        transport: Transport | None = None,
        registry_lock: AbstractContextManager | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.transport: Transport = transport if transport is not None else HTTPXTransport()
        self.registry = CollectionRegistry(self, lock=registry_lock)
        self._logger = get_logger("riakjson.connection")

    @classmethod
    def from_config(cls, config: ClientConfig, *, transport: Transport | None = None) -> "Connection":
        if transport is None:
            transport = HTTPXTransport(timeout=config.timeout, auth=config.credentials)
        return cls(config.host, config.port, transport=transport)

    @staticmethod
    def load_config_file(path: str | os.PathLike[str], *, section: str | None = None) -> ClientConfig:
        return load_config_file(path, section=section)

    def __repr__(self) -> str:
        return f"Connection(host={self.host!r}, port={self.port!r})"

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.transport.close()

    # URLs

    def base_service_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def base_document_api_url(self) -> str:
        return f"{self.base_service_url()}/document"

    def base_collection_api_url(self) -> str:
        return f"{self.base_document_api_url()}/collection"

    def collection_index_name(self, name: str) -> str:
        """Return the identifier of the search index generated for *name*."""
        return f"{name}{INDEX_SUFFIX}"

    def _collection_url(self, collection: str, *segments: str) -> str:
        parts = [self.base_collection_api_url(), _segment(collection), *(_segment(s) for s in segments)]
        return "/".join(parts)

    def _send(self, method: str, url: str, body: Body = None, *, params: QueryParams = None) -> Response:
        return self.transport.send(method, url, body, params=params)

    # Collections

    def collection(self, name: str) -> Collection:
        """Return the handle for *name*, creating it on first use."""
        return self.registry.get_or_create(name)

    def list_collections(self) -> list[Collection]:
        """Return handles for every collection that exists on the service.

        Only collections registered with the service are listed, not every
        bucket in the cluster.  Order follows the service's response.

        Raises:
            MalformedResponse: The body is not JSON or an entry has no name.
        """
        response = self._send("GET", self.base_collection_api_url())
        try:
            payload: Any = response.json()
        except orjson.JSONDecodeError as exc:
            raise MalformedResponse("collection list is not valid JSON", response=response) from exc

        entries = payload.get("collections") if isinstance(payload, dict) else None
        names = []
        for entry in entries or ():
            name = entry.get("name") if isinstance(entry, dict) else None
            if not isinstance(name, str) or not name:
                raise MalformedResponse(f"collection entry without a name: {entry!r}", response=response)
            names.append(name)
        return [self.registry.get_or_create(name) for name in names]

    # Service

    def ping(self) -> Response:
        return self._send("GET", f"{self.base_service_url()}/ping")

    # Documents

    def get_document(self, collection: str, key: str) -> Response:
        return self._send("GET", self._collection_url(collection, key))

    def delete_document(self, collection: str, key: str) -> Response:
        return self._send("DELETE", self._collection_url(collection, key))

    def insert_document(self, collection: str, key: str | None, json: Body) -> str:
        """Store *json* in *collection* and return its key.

        With a key the document is PUT to that key and the key is returned
        unchanged; the service decides between create and replace.  Without
        one it is POSTed to the collection and the key the service generated
        is read from the ``Location`` header.

        Raises:
            WriteFailure: The POST did not answer 201 with a ``Location``.
        """
        if key:
            self._send("PUT", self._collection_url(collection, key), json)
            return key
        return self._post_to_collection(collection, json)

    def _post_to_collection(self, collection: str, json: Body) -> str:
        response = self._send("POST", self._collection_url(collection), json)
        location = response.headers.get("location")
        if response.status_code != 201 or not location:
            self._logger.warning(
                "Insert into %s returned %d without a document key", collection, response.status_code
            )
            raise WriteFailure("document not inserted, no key returned", response=response)
        return location.rstrip("/").rsplit("/", 1)[-1]

    def update_document(self, collection: str, key: str | None, json: Body) -> Response:
        if not key:
            raise ValidationError("Cannot update document, key missing")
        return self._send("PUT", self._collection_url(collection, key), json)

    # Schemas

    def get_schema(self, collection: str) -> Response:
        return self._send("GET", self._collection_url(collection, SCHEMA_SEGMENT))

    def set_schema(self, collection: str, json: Body) -> Response:
        return self._send("PUT", self._collection_url(collection, SCHEMA_SEGMENT), json)

    def delete_schema(self, collection: str) -> Response:
        return self._send("DELETE", self._collection_url(collection, SCHEMA_SEGMENT))

    # Queries

    def query_all(self, collection: str, query_json: Body) -> Response:
        return self._send("PUT", self._collection_url(collection, "query", "all"), query_json)

    def query_one(self, collection: str, query_json: Body) -> Response:
        return self._send("PUT", self._collection_url(collection, "query", "one"), query_json)

    def raw_search(self, collection: str, query_params: QueryParams) -> Response:
        """Query the collection's search index directly, bypassing the document API."""
        url = f"{self.base_service_url()}/search/query/{_segment(self.collection_index_name(collection))}"
        return self._send("GET", url, params=query_params)


@contextmanager
def open_connection(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    *,
    config: ClientConfig | None = None,
    transport: Transport | None = None,
) -> Generator[Connection, None, None]:
    """Open a :class:`Connection` and close its transport on exit.

    When *config* is given its host, port, timeout and credentials take
    precedence over *host* and *port*.
    """
    if config is not None:
        connection = Connection.from_config(config, transport=transport)
    else:
        connection = Connection(host, port, transport=transport)
    try:
        yield connection
    finally:
        connection.close()


__all__ = ["Connection", "INDEX_SUFFIX", "open_connection"]
