# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/riakjson-python/LICENSE
# ==============================================================================

"""Shared test doubles for client tests."""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from riakjson.client.transports import BaseTransport, Response


@dataclass
class RecordedRequest:
    method: str
    url: str
    content: bytes | None
    params: Any
    headers: dict[str, str]


class RecordingTransport(BaseTransport):
    """Transport that records requests and replays canned responses.

    Responses queued with :meth:`respond` are returned in order; once the
    queue is empty every request gets an empty ``200``.
    """

    def __init__(self) -> None:
        super().__init__()
        self.requests: list[RecordedRequest] = []
        self.closed = False
        self._responses: deque[Response] = deque()

    def respond(
        self, status_code: int = 200, *, headers: Mapping[str, str] | None = None, content: bytes | str = b""
    ) -> None:
        self._responses.append(Response(status_code, headers or {}, content))

    def _dispatch(self, method, url, *, content, params, headers) -> Response:
        self.requests.append(RecordedRequest(method, url, content, params, dict(headers)))
        if self._responses:
            return self._responses.popleft()
        return Response(200)

    def close(self) -> None:
        self.closed = True

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]
