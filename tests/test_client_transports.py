# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/riakjson-python/LICENSE
# ==============================================================================

"""HTTPXTransport against an in-process ``httpx.MockTransport``."""

from __future__ import annotations

import logging

import httpx
import pytest

from riakjson import Connection, HTTPXTransport, RemoteError, RemoteNotFound, Response, TransportError


def _transport(handler) -> HTTPXTransport:
    return HTTPXTransport(client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_sends_method_url_body_and_content_type() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    response = _transport(handler).send("put", "http://riak.test:8098/document/collection/c/k", {"a": 1})

    assert response.status_code == 204
    assert seen[0].method == "PUT"
    assert str(seen[0].url) == "http://riak.test:8098/document/collection/c/k"
    assert seen[0].content == b'{"a":1}'
    assert seen[0].headers["content-type"] == "application/json"


def test_get_without_body_has_no_content_type() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="OK")

    response = _transport(handler).send("GET", "http://riak.test:8098/ping")

    assert response.text == "OK"
    assert "content-type" not in seen[0].headers


def test_query_params_forwarded_verbatim() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"response": {"numFound": 0}})

    connection = Connection("riak.test", 8098, transport=_transport(handler))
    response = connection.raw_search("cities", {"q": "city:Paris", "wt": "json"})

    assert seen[0].url.path == "/search/query/citiesRJIndex"
    assert seen[0].url.params["q"] == "city:Paris"
    assert seen[0].url.params["wt"] == "json"
    assert response.json() == {"response": {"numFound": 0}}


@pytest.mark.parametrize(
    "raw",
    [
        "q=a%2Bb&debugQuery",
        "q=*:*&fl=score,name",
        "q=city:Paris&wt=json",
        "q=name:(Paris OR Lyon)".replace(" ", "%20"),
    ],
)
def test_string_query_reaches_the_wire_verbatim(raw: str) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    connection = Connection("riak.test", 8098, transport=_transport(handler))
    connection.raw_search("cities", raw)

    assert seen[0].url.path == "/search/query/citiesRJIndex"
    assert seen[0].url.query == raw.encode("ascii")


def test_caller_headers_reach_the_wire() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    _transport(handler).send("PUT", "http://riak.test:8098/document/collection/c/k", "{}", headers={"X-Trace": "t1"})

    assert seen[0].headers["x-trace"] == "t1"
    assert seen[0].headers["content-type"] == "application/json"


def test_location_header_read_case_insensitively() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, headers={"Location": "/document/collection/cities/k9"})

    connection = Connection("riak.test", 8098, transport=_transport(handler))

    assert connection.insert_document("cities", None, "{}") == "k9"


def test_404_maps_to_remote_not_found() -> None:
    transport = _transport(lambda request: httpx.Response(404, text="not found"))

    with pytest.raises(RemoteNotFound) as excinfo:
        transport.send("GET", "http://riak.test:8098/document/collection/missing/schema")

    assert excinfo.value.response is not None
    assert excinfo.value.response.text == "not found"


def test_other_errors_map_to_remote_error() -> None:
    transport = _transport(lambda request: httpx.Response(500))

    with pytest.raises(RemoteError) as excinfo:
        transport.send("DELETE", "http://riak.test:8098/document/collection/c/k")

    assert not isinstance(excinfo.value, RemoteNotFound)
    assert excinfo.value.status_code == 500


def test_network_failure_wrapped_in_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as excinfo:
        _transport(handler).send("GET", "http://riak.test:8098/ping")

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_close_leaves_injected_client_open() -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))

    HTTPXTransport(client=client).close()

    assert client.is_closed is False
    client.close()


def test_close_releases_owned_client() -> None:
    transport = HTTPXTransport()
    transport.close()

    assert transport._client.is_closed is True  # noqa: SLF001


def test_requests_logged_with_duration(caplog: pytest.LogCaptureFixture) -> None:
    transport = _transport(lambda request: httpx.Response(200))

    with caplog.at_level(logging.DEBUG, logger="riakjson.transport"):
        transport.send("GET", "http://riak.test:8098/ping")

    records = [r for r in caplog.records if r.name == "riakjson.transport"]
    assert records
    assert records[0].getMessage() == "GET http://riak.test:8098/ping -> 200"
    assert records[0].duration_ms >= 0


def test_response_accepts_plain_headers_and_text() -> None:
    response = Response(201, {"Location": "/x/y"}, "body")

    assert response.headers["location"] == "/x/y"
    assert response.content == b"body"
    assert response.ok is True
