# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/riakjson-python/LICENSE
# ==============================================================================

"""Python client for the RiakJson document service."""

from __future__ import annotations

from .client import CollectionRegistry, Connection, HTTPXTransport, Response, Transport, open_connection
from .collection import Collection
from .config import ClientConfig, load_config_file
from .errors import (
    ConfigError,
    MalformedResponse,
    RemoteError,
    RemoteNotFound,
    RiakJsonError,
    TransportError,
    ValidationError,
    WriteFailure,
)


__version__ = "0.1.0"

__all__ = [
    "ClientConfig",
    "Collection",
    "CollectionRegistry",
    "ConfigError",
    "MalformedResponse",
    "Connection",
    "HTTPXTransport",
    "RemoteError",
    "RemoteNotFound",
    "Response",
    "RiakJsonError",
    "Transport",
    "TransportError",
    "ValidationError",
    "WriteFailure",
    "load_config_file",
    "open_connection",
]
