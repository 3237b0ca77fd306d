# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/riakjson-python/LICENSE
# ==============================================================================

"""Exception hierarchy for :mod:`riakjson`.

Everything the client raises derives from :class:`RiakJsonError`.  Argument
problems are detected locally and surface as :class:`ValidationError` before a
request is sent; everything that went wrong on the wire is a
:class:`TransportError` (or one of its HTTP status subclasses).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .client.transports import Response


class RiakJsonError(Exception):
    """Base class for all client errors."""


class ValidationError(RiakJsonError, ValueError):
    """Invalid argument (collection name, document key, HTTP method)."""


class ConfigError(RiakJsonError):
    """Configuration file could not be read or did not validate."""


class WriteFailure(RiakJsonError):
    """The service accepted the request but did not confirm the write."""

    def __init__(self, message: str, *, response: "Response | None" = None) -> None:
        super().__init__(message)
        self.response = response


class MalformedResponse(RiakJsonError):
    """The service answered successfully but the body has an unexpected shape."""

    def __init__(self, message: str, *, response: "Response | None" = None) -> None:
        super().__init__(message)
        self.response = response


class TransportError(RiakJsonError):
    """Network-level failure while talking to the service."""


class RemoteError(TransportError):
    """The service answered with a non-success status code."""

    def __init__(self, status_code: int, url: str, *, response: "Response | None" = None) -> None:
        super().__init__(f"{status_code} returned for {url}")
        self.status_code = status_code
        self.url = url
        self.response = response


class RemoteNotFound(RemoteError):
    """The requested document, schema or collection does not exist (HTTP 404)."""


__all__ = [
    "ConfigError",
    "MalformedResponse",
    "RemoteError",
    "RemoteNotFound",
    "RiakJsonError",
    "TransportError",
    "ValidationError",
    "WriteFailure",
]
