# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/riakjson-python/LICENSE
# ==============================================================================

"""Client-side pieces of riakjson: the connection, its registry and transports."""

from __future__ import annotations

from .connection import Connection, open_connection
from .registry import CollectionRegistry
from .transports import BaseTransport, HTTPXTransport, Response, Transport


__all__ = [
    "BaseTransport",
    "CollectionRegistry",
    "Connection",
    "HTTPXTransport",
    "Response",
    "Transport",
    "open_connection",
]
