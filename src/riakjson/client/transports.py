# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/riakjson-python/LICENSE
# ==============================================================================

"""HTTP transports for :mod:`riakjson.client`.

A transport turns ``(method, url, body)`` into a :class:`Response`.  The
:class:`~riakjson.client.connection.Connection` only relies on the
:class:`Transport` protocol, so tests can hand it any object with a matching
``send`` method.  :class:`BaseTransport` implements the shared policy (method
validation, body encoding, status mapping and request logging) and leaves the
actual I/O to :meth:`BaseTransport._dispatch`; :class:`HTTPXTransport` is the
default implementation on top of :class:`httpx.Client`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
import time
from typing import Any, Final, Protocol, Union, runtime_checkable

import httpx
import orjson

from ..errors import RemoteError, RemoteNotFound, TransportError, ValidationError
from ..utils import get_logger


SUPPORTED_METHODS: Final[frozenset[str]] = frozenset({"GET", "PUT", "POST", "DELETE"})
JSON_CONTENT_TYPE: Final[str] = "application/json"

Body = Union[str, bytes, Mapping[str, Any], list, None]
QueryParams = Union[str, Mapping[str, Any], None]


@dataclass(frozen=True, slots=True)
class Response:
    """Status, headers and raw body of one HTTP exchange."""

    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    content: bytes = b""

    def __post_init__(self) -> None:
        # Accept plain dicts from test doubles; lookups stay case-insensitive.
        if not isinstance(self.headers, httpx.Headers):
            object.__setattr__(self, "headers", httpx.Headers(self.headers or {}))
        if isinstance(self.content, str):
            object.__setattr__(self, "content", self.content.encode("utf-8"))

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "Response":
        return cls(status_code=response.status_code, headers=response.headers, content=response.content)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def json(self) -> Any:
        return orjson.loads(self.content)


@runtime_checkable
class Transport(Protocol):
    """Anything that can send one request and return a :class:`Response`."""

    def send(
        self,
        method: str,
        url: str,
        body: Body = None,
        *,
        params: QueryParams = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:  # pragma: no cover - protocol
        ...

    def close(self) -> None:  # pragma: no cover - protocol
        ...


def encode_body(body: Body) -> bytes | None:
    """Serialize a request body.

    Strings and bytes are assumed to already hold JSON and are sent verbatim;
    other values go through ``orjson``.
    """
    if body is None:
        return None
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return orjson.dumps(body)


def attach_query(url: str, params: QueryParams) -> tuple[str, QueryParams]:
    """Append a pre-encoded query string to *url* untouched.

    Mappings are returned as-is for the HTTP client to encode.
    """
    if not isinstance(params, str):
        return url, params
    query = params.lstrip("?")
    if not query:
        return url, None
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}", None


def raise_for_status(response: Response, url: str) -> Response:
    """Map non-2xx responses onto :class:`RemoteError` subclasses."""
    if response.ok:
        return response
    if response.status_code == 404:
        raise RemoteNotFound(response.status_code, url, response=response)
    raise RemoteError(response.status_code, url, response=response)


class BaseTransport(ABC):
    """Common request policy for concrete transports.

    Subclasses implement :meth:`_dispatch`, which performs the I/O and returns a
    :class:`Response` without judging its status.
    """

    def __init__(self) -> None:
        self._logger = get_logger("riakjson.transport")

    def send(
        self,
        method: str,
        url: str,
        body: Body = None,
        *,
        params: QueryParams = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        verb = method.upper()
        if verb not in SUPPORTED_METHODS:
            raise ValidationError(f"Unsupported HTTP method '{method}'")

        content = encode_body(body)
        request_headers = {"Content-Type": JSON_CONTENT_TYPE} if content is not None else {}
        if headers:
            request_headers.update(headers)
        url, params = attach_query(url, params)

        started = time.perf_counter()
        response = self._dispatch(verb, url, content=content, params=params, headers=request_headers)
        self._logger.debug(
            "%s %s -> %d",
            verb,
            url,
            response.status_code,
            extra={"duration_ms": (time.perf_counter() - started) * 1000},
        )
        return raise_for_status(response, url)

    @abstractmethod
    def _dispatch(
        self,
        method: str,
        url: str,
        *,
        content: bytes | None,
        params: QueryParams,
        headers: Mapping[str, str],
    ) -> Response:
        """Perform the request and return the raw response."""

    def close(self) -> None:
        """Release underlying resources. The base implementation holds none."""


class HTTPXTransport(BaseTransport):
    """Blocking transport backed by :class:`httpx.Client`.

    Args:
        timeout: Total request timeout in seconds.
        auth: Optional ``(username, password)`` pair or any :class:`httpx.Auth`.
        headers: Extra headers sent with every request.
        client: Pre-built client to use instead of creating one.  The caller
            keeps ownership; :meth:`close` leaves it open.
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        auth: httpx.Auth | tuple[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        super().__init__()
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, auth=auth, headers=headers)

    def _dispatch(
        self,
        method: str,
        url: str,
        *,
        content: bytes | None,
        params: QueryParams,
        headers: Mapping[str, str],
    ) -> Response:
        try:
            response = self._client.request(method, url, content=content, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc
        return Response.from_httpx(response)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


__all__ = [
    "BaseTransport",
    "HTTPXTransport",
    "Response",
    "SUPPORTED_METHODS",
    "Transport",
    "attach_query",
    "encode_body",
    "raise_for_status",
]
